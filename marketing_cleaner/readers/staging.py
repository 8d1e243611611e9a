"""Locate, read and conform staging files to the staging layouts."""

import logging
import re
import unicodedata
from pathlib import Path
from typing import Dict, Optional, Union

import polars as pl

from ..config.source_mappings import DATASETS
from .base import ReaderRegistry

logger = logging.getLogger(__name__)


class StagingSchemaError(ValueError):
    """A staging input is missing, unreadable or lacks its key column."""


def normalize_header(name: str) -> str:
    """'  Campaign ID ' -> 'campaign_id' (NFKC, trimmed, lower, underscores)."""
    s = unicodedata.normalize("NFKC", str(name or ""))
    s = re.sub(r"[\u200b\u200c\u200d\ufeff]+", "", s).strip().lower()
    return re.sub(r"[\s\-]+", "_", s)


def conform_columns(dataset: str, df: pl.DataFrame) -> pl.DataFrame:
    """Map headers onto the dataset's staging layout, all columns as text."""
    spec = DATASETS[dataset]
    rename_map: Dict[str, str] = {}
    for col in df.columns:
        norm = normalize_header(col)
        if norm in spec.columns and norm not in rename_map.values():
            rename_map[col] = norm

    missing_keys = [k for k in spec.key_columns if k not in rename_map.values()]
    if missing_keys:
        raise StagingSchemaError(
            f"[{spec.staging_table}] key column(s) missing: {missing_keys}. Available: {df.columns}"
        )

    extras = [c for c in df.columns if c not in rename_map]
    if extras:
        logger.warning(f"[{spec.staging_table}] ignoring unexpected columns: {extras}")

    df = df.select(list(rename_map)).rename(rename_map)
    exprs = []
    for col in spec.columns:
        if col in df.columns:
            exprs.append(pl.col(col).cast(pl.Utf8, strict=False))
        else:
            logger.info(f"[{spec.staging_table}] column '{col}' absent; filled with nulls")
            exprs.append(pl.lit(None, dtype=pl.Utf8).alias(col))
    return df.select(exprs)


def find_staging_file(dataset: str, directory: Union[str, Path], registry: ReaderRegistry) -> Path:
    spec = DATASETS[dataset]
    directory = Path(directory)
    for ext in registry.supported_types():
        candidate = directory / f"{spec.staging_table}.{ext}"
        if candidate.is_file():
            return candidate
    raise StagingSchemaError(
        f"[{spec.staging_table}] no staging file in {directory} "
        f"(looked for {spec.staging_table}.{{{','.join(registry.supported_types())}}})"
    )


def load_staging(
    dataset: str,
    directory: Union[str, Path],
    registry: Optional[ReaderRegistry] = None,
) -> pl.DataFrame:
    """Read ``staging_<table>.<ext>`` from ``directory`` as a text-only frame."""
    if registry is None:
        from . import registry as default_registry

        registry = default_registry
    path = find_staging_file(dataset, directory, registry)
    reader_cls = registry.detect_reader(str(path))
    if reader_cls is None:
        raise StagingSchemaError(f"No reader registered for {path}")
    reader = reader_cls()
    if not reader.validate_path(str(path)):
        raise StagingSchemaError(f"{reader_cls.__name__} cannot read {path}")
    try:
        raw = reader.read(str(path))
    except Exception as e:
        raise StagingSchemaError(f"Failed to read {path}: {e}") from e
    logger.info(f"Loaded {path.name}: rows={raw.height}, cols={raw.width}")
    return conform_columns(dataset, raw)
