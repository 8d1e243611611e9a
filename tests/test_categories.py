import polars as pl

from marketing_cleaner.cleaning.categories import category_matched, map_category
from marketing_cleaner.config.enum_maps import PLATFORM_RULES, REFERRAL_SOURCE_RULES


def _map(values, rules):
    df = pl.DataFrame({"raw": values}, schema={"raw": pl.Utf8})
    return df.select(map_category(pl.col("raw"), rules).alias("c"))["c"].to_list()


def test_platform_rules():
    raw = ["google_ads", "GOOGLE", "fb", "Facebook", "instagram", "LinkedIn", "tiktok", None, "  pinterest "]
    assert _map(raw, PLATFORM_RULES) == [
        "Google Ads",
        "Google Ads",
        "Facebook",
        "Facebook",
        "Instagram",
        "LinkedIn",
        "Tiktok",
        None,
        "Pinterest",
    ]


def test_referral_source_rules():
    raw = ["email", "Paid_Search", "paid search ads", "SOCIAL", "organic", "Direct", "", None, "unknown", "referral partner"]
    assert _map(raw, REFERRAL_SOURCE_RULES) == [
        "Email",
        "Paid Search",
        "Paid Search",
        "Social",
        "Organic",
        "Direct",
        "Unknown",
        "Unknown",
        "Unknown",
        "Referral Partner",
    ]


def test_rules_are_evaluated_in_order():
    rules = [("contains", "SEARCH", "Search"), ("regex", r"PAID.*SEARCH", "Paid Search")]
    assert _map(["paid search"], rules) == ["Search"]


def test_category_matched():
    df = pl.DataFrame({"raw": ["fb", "tiktok"]})
    out = df.select(category_matched(pl.col("raw"), PLATFORM_RULES).alias("m"))["m"].to_list()
    assert out == [True, False]
