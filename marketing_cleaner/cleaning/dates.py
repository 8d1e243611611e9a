"""Date resolver: recognize a small set of textual layouts, first match wins."""

from typing import Sequence

import polars as pl

from ..config.enum_maps import DATE_PATTERNS, DEFAULT_DATE_FORMATS
from .fields import Coercion, FieldStatus, blank_to_null


def _checked_formats(formats: Sequence[str]) -> Sequence[str]:
    unknown = [f for f in formats if f not in DATE_PATTERNS]
    if unknown:
        raise ValueError(f"Unsupported date formats: {unknown}")
    return formats


def date_pattern_matched(expr: pl.Expr, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> pl.Expr:
    text = blank_to_null(expr)
    matched = pl.lit(False)
    for fmt in _checked_formats(formats):
        matched = matched | text.str.contains(DATE_PATTERNS[fmt]).fill_null(False)
    return matched


def resolve_date(expr: pl.Expr, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> pl.Expr:
    """Parse text to pl.Date using the first layout whose pattern matches.

    Text matching no layout resolves to null. Text matching a layout but not
    forming a real calendar date also comes back null; ``date_field`` tags
    that case as a parse error.
    """
    text = blank_to_null(expr)
    chain = None
    for fmt in _checked_formats(formats):
        cond = text.str.contains(DATE_PATTERNS[fmt]).fill_null(False)
        parsed = text.str.strptime(pl.Date, fmt, strict=False)
        chain = pl.when(cond).then(parsed) if chain is None else chain.when(cond).then(parsed)
    if chain is None:
        return pl.lit(None, dtype=pl.Date)
    return chain.otherwise(pl.lit(None, dtype=pl.Date))


def date_field(source: str, formats: Sequence[str] = DEFAULT_DATE_FORMATS) -> Coercion:
    value = resolve_date(pl.col(source), formats)
    matched = date_pattern_matched(pl.col(source), formats)
    status = (
        pl.when(matched & value.is_null())
        .then(pl.lit(FieldStatus.PARSE_ERROR.value))
        .when(value.is_null())
        .then(pl.lit(FieldStatus.NULL.value))
        .otherwise(pl.lit(FieldStatus.VALUE.value))
    )
    return Coercion(source, value, status, "date")
