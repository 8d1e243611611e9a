"""Cell-level cleaning primitives shared by every dataset cleaner."""

from .key_sanitizer import sanitize_key, DEFAULT_BAD_TOKENS
from .fields import (
    Coercion,
    FieldParseError,
    FieldStatus,
    blank_to_null,
    parse_boolean,
    parse_decimal,
    parse_integer,
)
from .dates import resolve_date, date_field
from .categories import map_category, category_matched
from .dedup import select_survivors, ROW_NR

__all__ = [
    "sanitize_key",
    "DEFAULT_BAD_TOKENS",
    "Coercion",
    "FieldParseError",
    "FieldStatus",
    "blank_to_null",
    "parse_boolean",
    "parse_decimal",
    "parse_integer",
    "resolve_date",
    "date_field",
    "map_category",
    "category_matched",
    "select_survivors",
    "ROW_NR",
]
