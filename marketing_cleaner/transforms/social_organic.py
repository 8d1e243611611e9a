"""Organic social posts: engagement blob parsing and engagement rate."""

import polars as pl
from typing import Dict

from .base import BaseCleaner, safe_ratio
from ..cleaning.dates import date_field
from ..cleaning.fields import Coercion, FieldStatus, blank_to_null, integer_field, text_field
from ..config.enum_maps import DEFAULT_DATE_FORMATS

ENGAGEMENT_FIELDS = ["likes", "comments", "shares"]


def _engagement_digits(expr: pl.Expr, label: str) -> pl.Expr:
    return blank_to_null(expr).str.extract(rf"{label}:(\d+)", 1)


def parse_engagement(expr: pl.Expr, label: str) -> pl.Expr:
    """Extract ``label:digits`` from an engagement blob; null when absent."""
    return _engagement_digits(expr, label).cast(pl.Int64, strict=False)


def engagement_field(label: str) -> Coercion:
    """Blob coercion for one label; digits too large for Int64 are a parse error."""
    digits = _engagement_digits(pl.col("engagement_string"), label)
    value = parse_engagement(pl.col("engagement_string"), label)
    status = (
        pl.when(digits.is_not_null() & value.is_null())
        .then(pl.lit(FieldStatus.PARSE_ERROR.value))
        .when(value.is_null())
        .then(pl.lit(FieldStatus.NULL.value))
        .otherwise(pl.lit(FieldStatus.VALUE.value))
    )
    return Coercion("engagement_string", value, status, "integer")


class SocialOrganicCleaner(BaseCleaner):
    """Clean staging_social_media_organic into clean_social_media_organic."""

    dataset = "social_media_organic"

    @property
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        return {
            "post_id": pl.Utf8,
            "post_date": pl.Date,
            "platform": pl.Utf8,
            "post_type": pl.Utf8,
            "impressions": pl.Int64,
            "likes": pl.Int64,
            "comments": pl.Int64,
            "shares": pl.Int64,
            "link_clicks": pl.Int64,
            "total_engagement": pl.Int64,
            "engagement_rate_pct": pl.Float64,
        }

    def get_coercions(self) -> Dict[str, Coercion]:
        platform = blank_to_null(pl.col("platform")).str.to_lowercase().str.to_titlecase()
        coercions = {
            "post_id": text_field("post_id"),
            "post_date": date_field("post_date", DEFAULT_DATE_FORMATS),
            "platform": Coercion("platform", platform, pl.lit(FieldStatus.VALUE.value), "text"),
            "post_type": text_field("post_type"),
            "impressions": integer_field("impressions"),
            "link_clicks": integer_field("link_clicks"),
        }
        for name in ENGAGEMENT_FIELDS:
            coercions[f"__flat_{name}__"] = integer_field(name)
            coercions[f"__blob_{name}__"] = engagement_field(name)
        return coercions

    def _repair(self, df: pl.DataFrame) -> pl.DataFrame:
        # The blob wins over the flat column; a label missing from the blob
        # falls back to the flat value and stays null if both are absent.
        return df.with_columns(
            [
                pl.coalesce([pl.col(f"__blob_{name}__"), pl.col(f"__flat_{name}__")]).alias(name)
                for name in ENGAGEMENT_FIELDS
            ]
        )

    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        total = pl.sum_horizontal([pl.col(name).fill_null(0) for name in ENGAGEMENT_FIELDS])
        df = df.with_columns(total.cast(pl.Int64).alias("total_engagement"))
        return df.with_columns(
            safe_ratio(pl.col("total_engagement"), pl.col("impressions"), scale=100).alias("engagement_rate_pct")
        )
