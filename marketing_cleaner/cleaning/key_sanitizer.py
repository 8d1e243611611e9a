import polars as pl
import unicodedata as ud
import re

from ..config.enum_maps import MISSING_TOKENS

DEFAULT_BAD_TOKENS = set(MISSING_TOKENS)

_ZW = re.compile(r"[\u200B-\u200D\uFEFF]")
_NBSP = re.compile(r"\u00A0")

def _canon(s: str | None) -> str | None:
    if s is None: return None
    s = ud.normalize("NFKC", str(s))
    s = _ZW.sub("", s)
    s = _NBSP.sub(" ", s)
    return s.strip()

def sanitize_key(
    df: pl.DataFrame | pl.LazyFrame,
    col: str,
    bad_tokens: set[str] = DEFAULT_BAD_TOKENS,
    normalize_unicode: bool = False
) -> pl.DataFrame | pl.LazyFrame:
    """Trim an identifier column and null out placeholder tokens.

    Tokens are compared case-insensitively, so "NULL", "null" and "Null" are
    all treated as missing.
    """
    if col not in df.columns:
        return df

    if normalize_unicode:
        # Spreadsheet exports carry full-width digits and zero-width spaces
        expr = pl.col(col).cast(pl.Utf8).map_elements(_canon, return_dtype=pl.Utf8)
    else:
        expr = pl.col(col).cast(pl.Utf8)

    final_expr = expr.str.strip_chars()
    lowered = {t.lower() for t in bad_tokens}
    final_expr = (
        pl.when(final_expr.str.to_lowercase().is_in(list(lowered)))
        .then(None)
        .otherwise(final_expr)
    )

    return df.with_columns(final_expr.alias(col))
