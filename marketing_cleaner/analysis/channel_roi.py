"""Channel ROI comparison across email, paid ads and organic social."""

from datetime import timedelta
from typing import Any, Dict, List

import polars as pl

# Days after a post during which Social-referred purchases are credited to it
SOCIAL_ATTRIBUTION_DAYS = 7

CHANNEL_COLUMNS = [
    "channel",
    "total_campaigns",
    "total_reach",
    "total_engagements",
    "total_spend",
    "total_revenue",
    "conversions",
]


def safe_div(num_expr: pl.Expr, den_expr: pl.Expr) -> pl.Expr:
    """Safe division with null handling; null (not 0) when undefined."""
    return (
        pl.when((den_expr != 0) & den_expr.is_not_null() & num_expr.is_not_null())
        .then(num_expr.cast(pl.Float64) / den_expr.cast(pl.Float64))
        .otherwise(None)
    )


def _sum(df: pl.DataFrame, col: str) -> float:
    if df.is_empty() or col not in df.columns:
        return 0.0
    return float(df.select(pl.col(col).sum()).item() or 0.0)


def _distinct(df: pl.DataFrame, col: str) -> int:
    if df.is_empty() or col not in df.columns:
        return 0
    return int(df.select(pl.col(col).drop_nulls().n_unique()).item())


def email_totals(campaigns: pl.DataFrame, transactions: pl.DataFrame) -> Dict[str, Any]:
    ids = campaigns["campaign_id"].drop_nulls().unique().to_list() if not campaigns.is_empty() else []
    attributed = transactions.filter(pl.col("campaign_reference").is_in(ids)) if ids else transactions.clear()
    return {
        "channel": "Email",
        "total_campaigns": _distinct(campaigns, "campaign_id"),
        "total_reach": _sum(campaigns, "emails_sent"),
        "total_engagements": _sum(campaigns, "clicks"),
        "total_spend": _sum(campaigns, "cost"),
        "total_revenue": _sum(attributed, "net_revenue"),
        "conversions": _distinct(attributed, "transaction_id"),
    }


def paid_ads_totals(ads: pl.DataFrame) -> Dict[str, Any]:
    return {
        "channel": "Paid Ads",
        "total_campaigns": _distinct(ads, "ad_id"),
        "total_reach": _sum(ads, "impressions"),
        "total_engagements": _sum(ads, "clicks"),
        "total_spend": _sum(ads, "spend"),
        "total_revenue": _sum(ads, "revenue"),
        "conversions": int(_sum(ads, "conversions")),
    }


def social_totals(posts: pl.DataFrame, transactions: pl.DataFrame) -> Dict[str, Any]:
    social = transactions.filter(pl.col("referral_source") == "Social").drop_nulls("transaction_date")
    dates = posts.select(pl.col("post_date").drop_nulls().unique())
    if social.is_empty() or dates.is_empty():
        attributed = social.clear()
    else:
        # Each purchase is credited once, however many posts precede it
        attributed = (
            social.join(dates, how="cross")
            .filter(
                (pl.col("transaction_date") >= pl.col("post_date"))
                & (pl.col("transaction_date") <= pl.col("post_date") + timedelta(days=SOCIAL_ATTRIBUTION_DAYS))
            )
            .unique(subset=["transaction_id"], keep="first", maintain_order=True)
        )
    return {
        "channel": "Social Organic",
        "total_campaigns": _distinct(posts, "post_id"),
        "total_reach": _sum(posts, "impressions"),
        "total_engagements": _sum(posts, "total_engagement"),
        "total_spend": 0.0,
        "total_revenue": _sum(attributed, "net_revenue"),
        "conversions": _distinct(attributed, "transaction_id"),
    }


def channel_performance(
    campaigns: pl.DataFrame,
    ads: pl.DataFrame,
    posts: pl.DataFrame,
    transactions: pl.DataFrame,
) -> pl.DataFrame:
    """One row per channel with spend, revenue and efficiency metrics, best ROI first."""
    rows: List[Dict[str, Any]] = [
        email_totals(campaigns, transactions),
        paid_ads_totals(ads),
        social_totals(posts, transactions),
    ]
    df = pl.DataFrame(
        rows,
        schema={
            "channel": pl.Utf8,
            "total_campaigns": pl.Int64,
            "total_reach": pl.Float64,
            "total_engagements": pl.Float64,
            "total_spend": pl.Float64,
            "total_revenue": pl.Float64,
            "conversions": pl.Int64,
        },
    )

    spend = pl.col("total_spend")
    revenue = pl.col("total_revenue")
    reach = pl.col("total_reach")
    conversions = pl.col("conversions")
    df = df.with_columns(
        spend.round(2),
        revenue.round(2),
        (safe_div(pl.col("total_engagements"), reach) * 100).round(2).alias("engagement_rate_pct"),
        safe_div(spend, conversions).round(2).alias("cost_per_acquisition"),
        safe_div(revenue, spend).round(2).alias("roas"),
        (safe_div(revenue - spend, spend) * 100).round(2).alias("roi_pct"),
        safe_div(revenue, conversions).round(2).alias("revenue_per_conversion"),
        safe_div(spend, reach).round(4).alias("cost_per_impression"),
    )
    # Composite: higher is better; undefined terms count as 0
    df = df.with_columns(
        (
            safe_div(revenue, spend).fill_null(0.0) * 0.4
            + pl.col("engagement_rate_pct").fill_null(0.0) * 0.3
            + safe_div(revenue - spend, spend).fill_null(0.0) * 0.3
        )
        .round(2)
        .alias("efficiency_score")
    )
    return df.sort("roi_pct", descending=True, nulls_last=True, maintain_order=True)


def recommend_actions(performance: pl.DataFrame) -> pl.DataFrame:
    """Budget recommendation per channel from its ROI ratio."""
    ratio = safe_div(pl.col("total_revenue") - pl.col("total_spend"), pl.col("total_spend"))
    action = (
        pl.when(ratio > 2)
        .then(pl.lit("Increase budget - Strong ROI above 200%"))
        .when(ratio.is_between(1, 2))
        .then(pl.lit("Maintain budget - Healthy ROI (100-200%)"))
        .when(ratio.is_between(0, 1))
        .then(pl.lit("Optimize campaigns - Low ROI (0-100%)"))
        .when((pl.col("total_spend") > 0) & (ratio < 0))
        .then(pl.lit("Reduce spend or pause - Negative ROI"))
        .otherwise(pl.lit("Review attribution - Limited data"))
    )
    return performance.select("channel", action.alias("recommended_action"))
