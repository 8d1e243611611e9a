"""Paid advertising performance: platform names, currency cleanup, ROI metrics."""

import polars as pl
from typing import Dict

from .base import BaseCleaner, safe_ratio
from ..cleaning.categories import map_category
from ..cleaning.dates import date_field
from ..cleaning.fields import Coercion, FieldStatus, currency_field, integer_field, text_field
from ..config.enum_maps import AD_DATE_FORMATS, PLATFORM_RULES


class PaidAdsCleaner(BaseCleaner):
    """Clean staging_paid_ads into clean_paid_ads."""

    dataset = "paid_ads"
    category_columns = {"platform": PLATFORM_RULES}

    @property
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        return {
            "ad_id": pl.Utf8,
            "ad_date": pl.Date,
            "platform": pl.Utf8,
            "ad_type": pl.Utf8,
            "impressions": pl.Int64,
            "clicks": pl.Int64,
            "spend": pl.Float64,
            "revenue": pl.Float64,
            "conversions": pl.Int64,
            "ctr_pct": pl.Float64,
            "cpc": pl.Float64,
            "roas": pl.Float64,
            "roi_pct": pl.Float64,
        }

    def get_coercions(self) -> Dict[str, Coercion]:
        platform = map_category(pl.col("platform"), PLATFORM_RULES)
        return {
            "ad_id": text_field("ad_id"),
            "ad_date": date_field("date", AD_DATE_FORMATS),
            "platform": Coercion("platform", platform, pl.lit(FieldStatus.VALUE.value), "category"),
            "ad_type": text_field("ad_type"),
            "impressions": integer_field("impressions"),
            "clicks": integer_field("clicks"),
            "spend": currency_field("spend"),
            "revenue": currency_field("revenue"),
            "conversions": integer_field("conversions"),
        }

    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        # A missing revenue reads as 0% ROAS/ROI, not as "unknown"
        return df.with_columns(
            safe_ratio(pl.col("clicks"), pl.col("impressions"), scale=100).alias("ctr_pct"),
            safe_ratio(pl.col("spend"), pl.col("clicks")).alias("cpc"),
            safe_ratio(pl.col("revenue"), pl.col("spend")).alias("roas"),
            safe_ratio(pl.col("revenue") - pl.col("spend"), pl.col("spend"), scale=100).alias("roi_pct"),
        )
