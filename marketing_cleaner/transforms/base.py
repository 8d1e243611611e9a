"""Base cleaner class that enforces the clean-table contract."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import polars as pl

from ..cleaning.dedup import ROW_NR
from ..cleaning.fields import Coercion, FieldParseError, FieldStatus, blank_to_null
from ..cleaning.categories import category_matched
from ..cleaning.key_sanitizer import sanitize_key
from ..config.source_mappings import DATASETS

logger = logging.getLogger(__name__)

# Offending rows listed in a FieldParseError
MAX_REPORTED_FAILURES = 5


class BaseCleaner(ABC):
    """
    An abstract base class for the per-dataset cleaners.

    ``clean`` is a Template Method: every subclass goes through the same fixed
    sequence, so the clean-table contract holds for every dataset.

    1. Conform the staging frame to the staging layout (all text).
    2. Sanitize key columns and drop rows missing a required key.
    3. Deduplicate at the group level (``_deduplicate``).
    4. Coerce every field; any parse error aborts the whole table.
    5. Validate/repair (``_repair``) and derive metrics (``_derive``).
    6. Select and cast the output schema.

    Subclasses must implement:
    - dataset: key into ``config.DATASETS``.
    - get_output_schema: the exact output columns and their dtypes.
    - get_coercions(): target column -> Coercion of a staging column.
    - _derive(): derived metric columns.
    """

    dataset: str = ""
    # Raw text columns mapped through category rules; unmapped values are logged
    category_columns: Dict[str, list] = {}

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.spec = DATASETS[self.dataset]
        self.stats: Dict[str, int] = {}

    @property
    @abstractmethod
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        """Return the final schema for the clean table."""
        pass

    @abstractmethod
    def get_coercions(self) -> Dict[str, Coercion]:
        """Return the typed coercion for each target column."""
        pass

    @abstractmethod
    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        """Add derived metric columns."""
        pass

    @property
    def key_columns(self) -> List[str]:
        return list(self.spec.key_columns)

    def _deduplicate(self, df: pl.DataFrame) -> pl.DataFrame:
        return df

    def _repair(self, df: pl.DataFrame) -> pl.DataFrame:
        return df

    def clean(self, df: pl.DataFrame) -> pl.DataFrame:
        """Execute the full cleaning pipeline, enforcing the clean-table contract."""
        name = self.__class__.__name__
        rows_in = df.height
        self.stats = {}

        # 1. Staging is text-only; add absent staging columns as nulls.
        df = self._conform_staging(df)
        df = df.with_row_index(ROW_NR, offset=1)

        # 2. Required keys: a row missing any of them never reaches the output.
        for key in self.key_columns:
            df = sanitize_key(df, key, normalize_unicode=True)
        missing_keys = pl.any_horizontal([pl.col(k).is_null() for k in self.key_columns])
        dropped = df.filter(missing_keys).height
        df = df.filter(~missing_keys)

        # 3. Group-level deduplication happens before row-level cleaning.
        before_dedup = df.height
        df = self._deduplicate(df)
        duplicates = before_dedup - df.height

        # 4. Typed coercion with fail-fast on unparseable cells.
        df = self._coerce(df)

        # 5. Dataset-specific repair rules and derived metrics.
        df = self._repair(df)
        df = self._derive(df)

        # 6. Enforce the final output schema, in staging order.
        df = df.sort(ROW_NR)
        output_expressions = []
        for col_name, col_type in self.get_output_schema.items():
            if col_name in df.columns:
                output_expressions.append(pl.col(col_name).cast(col_type))
            else:
                output_expressions.append(pl.lit(None, dtype=col_type).alias(col_name))
        df = df.select(output_expressions)

        self.stats.update(
            {
                "rows_in": rows_in,
                "missing_key_rows": dropped,
                "duplicates_removed": duplicates,
                "rows_out": df.height,
            }
        )
        logger.info(f"[{name}] {self.stats}")
        return df

    def _conform_staging(self, df: pl.DataFrame) -> pl.DataFrame:
        exprs = []
        for col in self.spec.columns:
            if col in df.columns:
                exprs.append(pl.col(col).cast(pl.Utf8, strict=False).alias(col))
            else:
                exprs.append(pl.lit(None, dtype=pl.Utf8).alias(col))
        return df.select(exprs)

    def _coerce(self, df: pl.DataFrame) -> pl.DataFrame:
        coercions = self.get_coercions()
        status_cols = {target: f"__status_{target}__" for target in coercions}
        checked = df.with_columns(
            [c.status.alias(status_cols[target]) for target, c in coercions.items()]
        )

        failures = []
        for target, coercion in coercions.items():
            bad = checked.filter(pl.col(status_cols[target]) == FieldStatus.PARSE_ERROR.value)
            sample = bad.select(
                pl.col(ROW_NR),
                pl.col(self.key_columns[0]).alias("__key__"),
                pl.col(coercion.source).alias("__raw__"),
            ).head(MAX_REPORTED_FAILURES)
            for row in sample.iter_rows():
                failures.append(
                    {
                        # Helper targets (__name__) report the staging column instead
                        "field": coercion.source if target.startswith("__") else target,
                        "row_key": row[1] if row[1] is not None else f"row {row[0]}",
                        "raw_value": row[2],
                    }
                )
        if failures:
            first = failures[0]
            raise FieldParseError(
                self.dataset,
                first["field"],
                first["row_key"],
                first["raw_value"],
                failures[:MAX_REPORTED_FAILURES],
            )

        for target, coercion in coercions.items():
            if coercion.kind != "date":
                continue
            unrecognized = checked.filter(
                (pl.col(status_cols[target]) == FieldStatus.NULL.value)
                & blank_to_null(pl.col(coercion.source)).is_not_null()
            )
            if unrecognized.height:
                sample = unrecognized.select(coercion.source).unique(maintain_order=True).head(5).to_series().to_list()
                logger.warning(
                    f"[{self.__class__.__name__}] {unrecognized.height} unrecognized '{coercion.source}' values set to null, sample={sample}"
                )

        for column, rules in self.category_columns.items():
            self._warn_unmapped(df, column, rules)

        return df.with_columns([c.value.alias(target) for target, c in coercions.items()])

    def _warn_unmapped(self, df: pl.DataFrame, column: str, rules) -> None:
        """Log raw category values that fall through to the title-case default."""
        unmapped = df.filter(
            blank_to_null(pl.col(column)).is_not_null() & ~category_matched(pl.col(column), rules)
        )
        if unmapped.height:
            sample = unmapped.select(column).unique(maintain_order=True).head(5).to_series().to_list()
            logger.warning(
                f"[{self.__class__.__name__}] {unmapped.height} '{column}' values outside the category map, title-cased: {sample}"
            )


def safe_ratio(num: pl.Expr, den: pl.Expr, decimals: int = 2, scale: float = 1.0) -> pl.Expr:
    """num / den * scale, rounded; 0 when den is null or zero or num is null."""
    return (
        pl.when(den != 0)
        .then(num.cast(pl.Float64) / den.cast(pl.Float64) * scale)
        .otherwise(0.0)
        .fill_null(0.0)
        .round(decimals)
    )
