"""Staging layouts for the five marketing datasets.

Every staging column is free text. The tuples below fix the column order of
each staging table; the clean schemas live with their cleaners.
"""

from typing import Dict, NamedTuple, Tuple


class DatasetSpec(NamedTuple):
    name: str
    staging_table: str
    clean_table: str
    columns: Tuple[str, ...]
    key_columns: Tuple[str, ...]


EMAIL_CAMPAIGNS_COLUMNS = (
    "campaign_id",
    "campaign_name",
    "send_date",
    "emails_sent",
    "delivered",
    "opens",
    "clicks",
    "unsubscribes",
    "cost",
)

PAID_ADS_COLUMNS = (
    "ad_id",
    "date",
    "platform",
    "ad_type",
    "impressions",
    "clicks",
    "spend",
    "revenue",
    "conversions",
)

SOCIAL_ORGANIC_COLUMNS = (
    "post_id",
    "post_date",
    "platform",
    "post_type",
    "impressions",
    "engagement_string",
    "likes",
    "comments",
    "shares",
    "link_clicks",
)

TRANSACTIONS_COLUMNS = (
    "transaction_id",
    "customer_id",
    "transaction_date",
    "order_value",
    "items_purchased",
    "referral_source",
    "campaign_reference",
    "discount_applied",
)

CUSTOMER_MASTER_COLUMNS = (
    "customer_id",
    "signup_date",
    "age",
    "state",
    "customer_segment",
    "email_opt_in",
    "lifetime_orders",
)

DATASETS: Dict[str, DatasetSpec] = {
    "email_campaigns": DatasetSpec(
        "email_campaigns",
        "staging_email_campaigns",
        "clean_email_campaigns",
        EMAIL_CAMPAIGNS_COLUMNS,
        ("campaign_id",),
    ),
    "paid_ads": DatasetSpec(
        "paid_ads",
        "staging_paid_ads",
        "clean_paid_ads",
        PAID_ADS_COLUMNS,
        ("ad_id",),
    ),
    "social_media_organic": DatasetSpec(
        "social_media_organic",
        "staging_social_media_organic",
        "clean_social_media_organic",
        SOCIAL_ORGANIC_COLUMNS,
        ("post_id",),
    ),
    "customer_transactions": DatasetSpec(
        "customer_transactions",
        "staging_customer_transactions",
        "clean_customer_transactions",
        TRANSACTIONS_COLUMNS,
        ("transaction_id", "customer_id"),
    ),
    "customer_master": DatasetSpec(
        "customer_master",
        "staging_customer_master",
        "clean_customer_master",
        CUSTOMER_MASTER_COLUMNS,
        ("customer_id",),
    ),
}

# Run order; stages are also addressed by number (2-6) on the command line
STAGE_ORDER = (
    "email_campaigns",
    "paid_ads",
    "social_media_organic",
    "customer_transactions",
    "customer_master",
)

STAGE_NUMBERS = {
    2: "email_campaigns",
    3: "paid_ads",
    4: "social_media_organic",
    5: "customer_transactions",
    6: "customer_master",
}

# Short names accepted on the command line
STAGE_ALIASES = {
    "campaigns": "email_campaigns",
    "email": "email_campaigns",
    "ads": "paid_ads",
    "social": "social_media_organic",
    "transactions": "customer_transactions",
    "customers": "customer_master",
}
