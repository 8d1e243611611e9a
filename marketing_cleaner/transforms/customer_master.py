"""Customer master records: survivor selection, age validation, opt-in flags."""

from datetime import date
from typing import Dict

import polars as pl

from .base import BaseCleaner
from ..cleaning.dates import date_field, resolve_date
from ..cleaning.dedup import select_survivors
from ..cleaning.fields import (
    Coercion,
    blank_to_null,
    boolean_field,
    integer_field,
    text_field,
    upper_text_field,
)
from ..config.enum_maps import AGE_GROUPS, DEFAULT_DATE_FORMATS, UNKNOWN_AGE_GROUP, VALID_AGE_RANGE


def tenure_years(signup: pl.Expr, as_of: date) -> pl.Expr:
    """Whole years between signup and ``as_of`` (null when signup is null)."""
    years = pl.lit(as_of.year) - signup.dt.year().cast(pl.Int64)
    not_yet = (signup.dt.month() > as_of.month) | (
        (signup.dt.month() == as_of.month) & (signup.dt.day() > as_of.day)
    )
    return years - not_yet.cast(pl.Int64)


def age_group(age: pl.Expr) -> pl.Expr:
    chain = None
    for low, high, label in AGE_GROUPS:
        cond = age >= low if high is None else age.is_between(low, high)
        chain = pl.when(cond).then(pl.lit(label)) if chain is None else chain.when(cond).then(pl.lit(label))
    return chain.otherwise(pl.lit(UNKNOWN_AGE_GROUP))


class CustomerMasterCleaner(BaseCleaner):
    """Clean staging_customer_master into clean_customer_master.

    Config:
        as_of: reference date for ``customer_tenure_years`` (default today).
    """

    dataset = "customer_master"

    @property
    def get_output_schema(self) -> Dict[str, pl.DataType]:
        return {
            "customer_id": pl.Utf8,
            "signup_date": pl.Date,
            "age": pl.Int64,
            "state": pl.Utf8,
            "customer_segment": pl.Utf8,
            "email_opt_in": pl.Boolean,
            "lifetime_orders": pl.Int64,
            "customer_tenure_years": pl.Int64,
            "age_group": pl.Utf8,
        }

    def get_coercions(self) -> Dict[str, Coercion]:
        return {
            "customer_id": text_field("customer_id"),
            "signup_date": date_field("signup_date", DEFAULT_DATE_FORMATS),
            "age": integer_field("age"),
            "state": upper_text_field("state"),
            "customer_segment": text_field("customer_segment"),
            "email_opt_in": boolean_field("email_opt_in"),
            "lifetime_orders": integer_field("lifetime_orders"),
        }

    def _deduplicate(self, df: pl.DataFrame) -> pl.DataFrame:
        # Prefer a known age, then a known state, then the latest signup
        return select_survivors(
            df,
            ["customer_id"],
            [
                (blank_to_null(pl.col("age")).is_not_null(), True),
                (blank_to_null(pl.col("state")).is_not_null(), True),
                (resolve_date(pl.col("signup_date"), DEFAULT_DATE_FORMATS), True),
            ],
        )

    def _repair(self, df: pl.DataFrame) -> pl.DataFrame:
        low, high = VALID_AGE_RANGE
        invalid = pl.col("age").is_not_null() & ~pl.col("age").is_between(low, high)
        self.stats["invalid_age_rows"] = df.filter(invalid).height
        return df.with_columns(pl.when(invalid).then(None).otherwise(pl.col("age")).alias("age"))

    def _derive(self, df: pl.DataFrame) -> pl.DataFrame:
        as_of = self.config.get("as_of") or date.today()
        return df.with_columns(
            tenure_years(pl.col("signup_date"), as_of).alias("customer_tenure_years"),
            age_group(pl.col("age")).alias("age_group"),
        )
