"""Field normalizer: typed coercion of free-text staging cells.

Each coercion yields a value expression plus a status expression tagging every
cell as a value, a null (blank or explicit-missing input) or a parse error.
The record builder in ``BaseCleaner`` refuses to emit a table while any cell is
tagged as a parse error.
"""

from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Optional

import polars as pl

from ..config.enum_maps import MISSING_TOKENS, TEXT_MISSING_TOKENS, TRUTHY_VALUES


class FieldStatus(str, Enum):
    VALUE = "value"
    NULL = "null"
    PARSE_ERROR = "parse_error"


class FieldParseError(ValueError):
    """Raised when a staging cell cannot be coerced to its declared type."""

    def __init__(
        self,
        dataset: str,
        field: str,
        row_key: Any,
        raw_value: Any,
        failures: Optional[List[dict]] = None,
    ):
        self.dataset = dataset
        self.field = field
        self.row_key = row_key
        self.raw_value = raw_value
        self.failures = failures or [
            {"field": field, "row_key": row_key, "raw_value": raw_value}
        ]
        extra = len(self.failures) - 1
        more = f" (+{extra} more)" if extra > 0 else ""
        super().__init__(
            f"[{dataset}] cannot parse field '{field}' for row {row_key!r}: raw value {raw_value!r}{more}"
        )


class Coercion(NamedTuple):
    """A staging column's coercion: parsed value and per-cell status."""

    source: str
    value: pl.Expr
    status: pl.Expr
    kind: str


def blank_to_null(expr: pl.Expr, tokens: Iterable[str] = MISSING_TOKENS) -> pl.Expr:
    """Trim text; empty, whitespace-only and explicit-missing tokens become null."""
    trimmed = expr.cast(pl.Utf8, strict=False).str.strip_chars()
    return (
        pl.when(trimmed.str.to_lowercase().is_in(list(tokens)))
        .then(None)
        .otherwise(trimmed)
    )


def parse_decimal(
    expr: pl.Expr,
    currency: bool = False,
    percent: bool = False,
    scale: Optional[int] = None,
) -> pl.Expr:
    """Parse text to Float64, optionally stripping a leading '$' or trailing '%'."""
    text = blank_to_null(expr)
    if currency:
        text = text.str.replace(r"^\$\s*", "")
    if percent:
        text = text.str.replace(r"\s*%$", "")
    value = text.cast(pl.Float64, strict=False)
    value = pl.when(value.is_finite()).then(value).otherwise(None)
    if scale is not None:
        value = value.round(scale)
    return value


def parse_integer(expr: pl.Expr) -> pl.Expr:
    """Parse text to Int64, truncating fractional input ("21347.0" -> 21347)."""
    return parse_decimal(expr).floor().cast(pl.Int64, strict=False)


def parse_boolean(expr: pl.Expr) -> pl.Expr:
    """Closed-world boolean: truthy vocabulary is True, everything else False."""
    upper = expr.cast(pl.Utf8, strict=False).str.strip_chars().str.to_uppercase()
    return upper.is_in(list(TRUTHY_VALUES)).fill_null(False)


def status_for(raw: pl.Expr, value: pl.Expr) -> pl.Expr:
    return (
        pl.when(blank_to_null(raw).is_null())
        .then(pl.lit(FieldStatus.NULL.value))
        .when(value.is_null())
        .then(pl.lit(FieldStatus.PARSE_ERROR.value))
        .otherwise(pl.lit(FieldStatus.VALUE.value))
    )


def text_field(source: str, tokens: Iterable[str] = TEXT_MISSING_TOKENS) -> Coercion:
    value = blank_to_null(pl.col(source), tokens)
    status = pl.when(value.is_null()).then(pl.lit(FieldStatus.NULL.value)).otherwise(pl.lit(FieldStatus.VALUE.value))
    return Coercion(source, value, status, "text")


def upper_text_field(source: str, tokens: Iterable[str] = TEXT_MISSING_TOKENS) -> Coercion:
    value = blank_to_null(pl.col(source), tokens).str.to_uppercase()
    status = pl.when(value.is_null()).then(pl.lit(FieldStatus.NULL.value)).otherwise(pl.lit(FieldStatus.VALUE.value))
    return Coercion(source, value, status, "text")


def integer_field(source: str) -> Coercion:
    value = parse_integer(pl.col(source))
    return Coercion(source, value, status_for(pl.col(source), value), "integer")


def currency_field(source: str, scale: Optional[int] = 2) -> Coercion:
    value = parse_decimal(pl.col(source), currency=True, scale=scale)
    return Coercion(source, value, status_for(pl.col(source), value), "currency")


def boolean_field(source: str) -> Coercion:
    return Coercion(source, parse_boolean(pl.col(source)), pl.lit(FieldStatus.VALUE.value), "boolean")
