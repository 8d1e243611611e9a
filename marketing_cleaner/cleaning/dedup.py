"""Deduplicator: keep one survivor per natural key by priority ranking."""

from typing import List, Sequence, Tuple

import polars as pl

ROW_NR = "__row_nr__"


def select_survivors(
    df: pl.DataFrame,
    keys: Sequence[str],
    ranking: List[Tuple[pl.Expr, bool]],
) -> pl.DataFrame:
    """Return one row per ``keys`` group, the best one under ``ranking``.

    ``ranking`` is a list of (expression, descending) pairs compared in order;
    nulls rank last. Remaining ties go to the earliest staging row. Losing rows
    are discarded whole, never merged into the survivor.
    """
    if df.is_empty():
        return df
    if ROW_NR not in df.columns:
        df = df.with_row_index(ROW_NR)

    rank_cols = [f"__rank_{i}__" for i in range(len(ranking))]
    df = df.with_columns([expr.alias(name) for (expr, _), name in zip(ranking, rank_cols)])

    ordered = df.sort(
        rank_cols + [ROW_NR],
        descending=[desc for _, desc in ranking] + [False],
        nulls_last=True,
        maintain_order=True,
    )
    survivors = ordered.unique(subset=list(keys), keep="first", maintain_order=True)
    return survivors.sort(ROW_NR).drop(rank_cols)
