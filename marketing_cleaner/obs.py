import logging
from typing import Sequence

import polars as pl

logger = logging.getLogger(__name__)


def audit(step: str, before: pl.DataFrame, after: pl.DataFrame, key_cols: Sequence[str]) -> int:
    """Logs key coverage before and after a step; returns the change in unique keys."""
    present = [c for c in key_cols if c in before.columns and c in after.columns]
    if not present:
        return 0
    b = before.select(present).drop_nulls().unique().height
    a = after.select(present).drop_nulls().unique().height
    coverage_delta = a - b
    logger.info(
        f"[audit] {step}: rows {before.height}->{after.height}, uniq_keys_before={b}, uniq_keys_after={a}, coverage_delta={coverage_delta}"
    )
    return coverage_delta
