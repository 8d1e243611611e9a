import sys

import polars as pl

from marketing_cleaner.config import DATASETS
from marketing_cleaner.storage import TableStore
from marketing_cleaner.transforms import output_schema

METRICS = {
    "clean_email_campaigns": ["emails_sent", "delivered", "opens", "clicks", "cost"],
    "clean_paid_ads": ["impressions", "clicks", "spend", "revenue", "conversions"],
    "clean_social_media_organic": ["impressions", "likes", "comments", "shares", "total_engagement"],
    "clean_customer_transactions": ["order_value", "discount_applied", "net_revenue"],
    "clean_customer_master": ["age", "lifetime_orders", "customer_tenure_years"],
}


def run(name: str, df: pl.DataFrame):
    print(f"== {name}: rows={df.height}, cols={df.width}")
    for m in METRICS[name]:
        if m in df.columns:
            nz = df.select(pl.col(m).is_not_null().sum()).item()
            s = df.select(pl.col(m).fill_null(0).sum()).item()
            print(f"{m: <24}  non_null={nz:>6}  sum={s}")
        else:
            print(f"{m: <24}  MISSING")


if __name__ == "__main__":
    # usage: python scripts/smoke_check.py data/clean [parquet|csv]
    store = TableStore(sys.argv[1] if len(sys.argv) > 1 else "data/clean", sys.argv[2] if len(sys.argv) > 2 else "parquet")
    for dataset, spec in DATASETS.items():
        if store.exists(spec.clean_table):
            run(spec.clean_table, store.read(spec.clean_table, output_schema(dataset)))
        else:
            print(f"== {spec.clean_table}: not built")
