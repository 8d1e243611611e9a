"""Schema verifier: post-build sanity counts for each clean table.

Purely observational. Never mutate inputs, never gate the pipeline: failures
are logged as errors and do not raise.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import polars as pl

logger = logging.getLogger(__name__)


def _diag_enabled() -> bool:
    val = os.getenv("PIPELINE_DIAG", "1").strip().lower()
    return val in {"1", "true", "yes", "on"}


@dataclass
class VerificationReport:
    table: str
    row_count: int
    distinct_keys: int
    null_counts: Dict[str, int] = field(default_factory=dict)
    date_column: Optional[str] = None
    date_min: Optional[date] = None
    date_max: Optional[date] = None
    rows_in: Optional[int] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def rows_excluded(self) -> Optional[int]:
        if self.rows_in is None:
            return None
        return self.rows_in - self.row_count

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["rows_excluded"] = self.rows_excluded
        return payload


@dataclass(frozen=True)
class TableCheck:
    table: str
    key: List[str]
    date_column: str
    optional: List[str]
    extras: Callable[[pl.DataFrame], Dict[str, Any]]
    # Only the customer master promises one row per key
    unique_key: bool = False


def _n_unique(df: pl.DataFrame, col: str) -> int:
    return int(df.select(pl.col(col).drop_nulls().n_unique()).item())


def _campaign_extras(df: pl.DataFrame) -> Dict[str, Any]:
    return {"unique_campaign_names": _n_unique(df, "campaign_name")}


def _paid_ads_extras(df: pl.DataFrame) -> Dict[str, Any]:
    return {"unique_platforms": _n_unique(df, "platform")}


def _social_extras(df: pl.DataFrame) -> Dict[str, Any]:
    avg = df.select(pl.col("engagement_rate_pct").mean()).item()
    return {
        "unique_platforms": _n_unique(df, "platform"),
        "avg_engagement_rate": round(float(avg), 2) if avg is not None else None,
    }


def _transaction_extras(df: pl.DataFrame) -> Dict[str, Any]:
    total = df.select(pl.col("net_revenue").sum()).item()
    return {
        "unique_customers": _n_unique(df, "customer_id"),
        "unique_sources": _n_unique(df, "referral_source"),
        "total_revenue": round(float(total or 0.0), 2),
    }


def _customer_extras(df: pl.DataFrame) -> Dict[str, Any]:
    return {"opted_in_count": int(df.select(pl.col("email_opt_in").sum()).item() or 0)}


TABLE_CHECKS: Dict[str, TableCheck] = {
    "email_campaigns": TableCheck(
        "clean_email_campaigns", ["campaign_id"], "send_date",
        ["send_date", "emails_sent", "delivered", "opens", "clicks", "cost"], _campaign_extras,
    ),
    "paid_ads": TableCheck(
        "clean_paid_ads", ["ad_id"], "ad_date",
        ["ad_date", "platform", "spend", "revenue", "conversions"], _paid_ads_extras,
    ),
    "social_media_organic": TableCheck(
        "clean_social_media_organic", ["post_id"], "post_date",
        ["post_date", "impressions", "likes", "comments", "shares"], _social_extras,
    ),
    "customer_transactions": TableCheck(
        "clean_customer_transactions", ["transaction_id"], "transaction_date",
        ["transaction_date", "order_value", "items_purchased", "campaign_reference"], _transaction_extras,
    ),
    "customer_master": TableCheck(
        "clean_customer_master", ["customer_id"], "signup_date",
        ["signup_date", "age", "state", "customer_segment"], _customer_extras, unique_key=True,
    ),
}


def build_report(dataset: str, df: pl.DataFrame, rows_in: Optional[int] = None) -> VerificationReport:
    """Compute the verification report for one clean table (may raise)."""
    check = TABLE_CHECKS[dataset]
    distinct = df.select(check.key).unique().height if df.height else 0
    nulls = {c: int(df[c].null_count()) for c in check.optional if c in df.columns}
    dmin = df.select(pl.col(check.date_column).min()).item() if df.height else None
    dmax = df.select(pl.col(check.date_column).max()).item() if df.height else None
    return VerificationReport(
        table=check.table,
        row_count=df.height,
        distinct_keys=distinct,
        null_counts=nulls,
        date_column=check.date_column,
        date_min=dmin,
        date_max=dmax,
        rows_in=rows_in,
        extras=check.extras(df) if df.height else {},
    )


def verify_table(
    dataset: str,
    df: pl.DataFrame,
    rows_in: Optional[int] = None,
    extras: Optional[Dict[str, Any]] = None,
    log: Optional[bool] = None,
) -> Optional[VerificationReport]:
    """Build and log the report; returns None if the checks themselves fail."""
    try:
        report = build_report(dataset, df, rows_in)
        if extras:
            report.extras.update(extras)
    except Exception:
        logger.error(f"Verification of {dataset} failed", exc_info=True)
        return None

    if log if log is not None else _diag_enabled():
        logger.info(
            f"[verify] {report.table}: rows={report.row_count}, distinct_keys={report.distinct_keys}, "
            f"excluded={report.rows_excluded}, nulls={report.null_counts}, "
            f"{report.date_column}=({report.date_min},{report.date_max}), extras={report.extras}"
        )
        if TABLE_CHECKS[dataset].unique_key and report.distinct_keys != report.row_count:
            logger.warning(
                f"[verify] {report.table}: {report.row_count - report.distinct_keys} rows share a key"
            )
    return report
