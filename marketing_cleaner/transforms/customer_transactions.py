"""Customer purchases: referral source categories and net revenue."""

import polars as pl
from typing import Dict

from .base import BaseCleaner
from ..cleaning.categories import map_category
from ..cleaning.dates import date_field
from ..cleaning.fields import Coercion, FieldStatus, currency_field, integer_field, text_field
from ..config.enum_maps import DEFAULT_DATE_FORMATS, MISSING_TOKENS, REFERRAL_SOURCE_RULES


class CustomerTransactionCleaner(BaseCleaner):
    """Clean staging_customer_transactions into clean_customer_transactions.

    Rows without a transaction_id or customer_id are excluded.
    """

    dataset = "customer_transactions"
    category_columns = {"referral_source": REFERRAL_SOURCE_RULES}

    @property
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        return {
            "transaction_id": pl.Utf8,
            "customer_id": pl.Utf8,
            "transaction_date": pl.Date,
            "order_value": pl.Float64,
            "items_purchased": pl.Int64,
            "referral_source": pl.Utf8,
            "campaign_reference": pl.Utf8,
            "discount_applied": pl.Float64,
            "net_revenue": pl.Float64,
            "avg_item_value": pl.Float64,
        }

    def get_coercions(self) -> Dict[str, Coercion]:
        referral = map_category(pl.col("referral_source"), REFERRAL_SOURCE_RULES)
        return {
            "transaction_id": text_field("transaction_id"),
            "customer_id": text_field("customer_id"),
            "transaction_date": date_field("transaction_date", DEFAULT_DATE_FORMATS),
            "order_value": currency_field("order_value"),
            "items_purchased": integer_field("items_purchased"),
            "referral_source": Coercion("referral_source", referral, pl.lit(FieldStatus.VALUE.value), "category"),
            "campaign_reference": text_field("campaign_reference", MISSING_TOKENS),
            "discount_applied": currency_field("discount_applied"),
        }

    def _repair(self, df: pl.DataFrame) -> pl.DataFrame:
        return df.with_columns(pl.col("discount_applied").fill_null(0.0))

    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        # avg_item_value stays null when no item count is known
        items = pl.col("items_purchased")
        return df.with_columns(
            (pl.col("order_value") - pl.col("discount_applied")).round(2).alias("net_revenue"),
            pl.when(items != 0)
            .then(pl.col("order_value") / items)
            .otherwise(None)
            .round(2)
            .alias("avg_item_value"),
        )
