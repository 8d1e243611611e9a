"""Email campaign send batches: dedup, funnel clamping, rate metrics."""

import polars as pl
from typing import Dict

from .base import BaseCleaner, safe_ratio
from ..cleaning.dates import date_field, resolve_date
from ..cleaning.dedup import select_survivors
from ..cleaning.fields import Coercion, blank_to_null, currency_field, integer_field, parse_integer, text_field
from ..cleaning.key_sanitizer import sanitize_key
from ..config.enum_maps import CAMPAIGN_DATE_FORMATS, TEXT_MISSING_TOKENS

# Funnel stages, widest first; each is capped by the nearest wider known stage
FUNNEL = ["emails_sent", "delivered", "opens", "clicks"]


class EmailCampaignCleaner(BaseCleaner):
    """Clean staging_email_campaigns into clean_email_campaigns."""

    dataset = "email_campaigns"

    @property
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        return {
            "campaign_id": pl.Utf8,
            "campaign_name": pl.Utf8,
            "send_date": pl.Date,
            "emails_sent": pl.Int64,
            "delivered": pl.Int64,
            "opens": pl.Int64,
            "clicks": pl.Int64,
            "unsubscribes": pl.Int64,
            "cost": pl.Float64,
            "open_rate_pct": pl.Float64,
            "click_through_rate_pct": pl.Float64,
            "cost_per_email": pl.Float64,
        }

    def get_coercions(self) -> Dict[str, Coercion]:
        return {
            "campaign_id": text_field("campaign_id"),
            "campaign_name": text_field("campaign_name"),
            "send_date": date_field("send_date", CAMPAIGN_DATE_FORMATS),
            "emails_sent": integer_field("emails_sent"),
            "delivered": integer_field("delivered"),
            "opens": integer_field("opens"),
            "clicks": integer_field("clicks"),
            "unsubscribes": integer_field("unsubscribes"),
            "cost": currency_field("cost"),
        }

    def _deduplicate(self, df: pl.DataFrame) -> pl.DataFrame:
        # Same id, name and send date: keep the batch with the most sends.
        # Recognized dates compare by value; anything else by its trimmed text.
        df = sanitize_key(df, "campaign_name", bad_tokens=TEXT_MISSING_TOKENS)
        resolved = resolve_date(pl.col("send_date"), CAMPAIGN_DATE_FORMATS)
        df = df.with_columns(
            pl.coalesce([resolved.cast(pl.Utf8), blank_to_null(pl.col("send_date"))]).alias("__send_date_key__")
        )
        df = select_survivors(
            df,
            ["campaign_id", "campaign_name", "__send_date_key__"],
            [(parse_integer(pl.col("emails_sent")), True)],
        )
        return df.drop("__send_date_key__")

    def _repair(self, df: pl.DataFrame) -> pl.DataFrame:
        # Clamp, never reject: an impossible count is replaced by its upper bound.
        # Stages are applied in order so each cap is an already-clamped value.
        flags = []
        for i, stage in enumerate(FUNNEL[1:], start=1):
            cap = pl.coalesce([pl.col(c) for c in reversed(FUNNEL[:i])])
            flag = f"__clamped_{stage}__"
            df = df.with_columns((pl.col(stage) > cap).fill_null(False).alias(flag))
            df = df.with_columns(
                pl.when(pl.col(flag)).then(cap).otherwise(pl.col(stage)).alias(stage)
            )
            flags.append(flag)
        self.stats["clamped_rows"] = df.filter(pl.any_horizontal(flags)).height
        return df.drop(flags)

    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        return df.with_columns(
            safe_ratio(pl.col("opens"), pl.col("delivered"), scale=100).alias("open_rate_pct"),
            safe_ratio(pl.col("clicks"), pl.col("opens"), scale=100).alias("click_through_rate_pct"),
            safe_ratio(pl.col("cost"), pl.col("emails_sent"), decimals=4).alias("cost_per_email"),
        )
