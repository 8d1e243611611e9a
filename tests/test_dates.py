from datetime import date

import polars as pl
import pytest

from marketing_cleaner.cleaning.dates import date_field, resolve_date
from marketing_cleaner.config.enum_maps import AD_DATE_FORMATS, CAMPAIGN_DATE_FORMATS, DEFAULT_DATE_FORMATS


def _resolve(values, formats):
    df = pl.DataFrame({"raw": values}, schema={"raw": pl.Utf8})
    return df.select(resolve_date(pl.col("raw"), formats).alias("d"))["d"].to_list()


def test_campaign_formats():
    out = _resolve(["2024-01-15", "01/15/2024", "15-01-2024", "Jan 15 2024", "", None], CAMPAIGN_DATE_FORMATS)
    assert out == [date(2024, 1, 15)] * 3 + [None] * 3


def test_ad_formats_read_dashes_month_first():
    assert _resolve(["01-20-2024", "2024-01-20", "01/20/2024"], AD_DATE_FORMATS) == [
        date(2024, 1, 20),
        date(2024, 1, 20),
        None,
    ]


def test_first_matching_format_wins():
    assert _resolve(["03-04-2024"], ("%m-%d-%Y", "%d-%m-%Y")) == [date(2024, 3, 4)]
    assert _resolve(["03-04-2024"], ("%d-%m-%Y", "%m-%d-%Y")) == [date(2024, 4, 3)]


def test_surrounding_whitespace_is_trimmed():
    assert _resolve([" 2024-02-29 "], DEFAULT_DATE_FORMATS) == [date(2024, 2, 29)]


def test_date_field_status():
    coercion = date_field("raw", DEFAULT_DATE_FORMATS)
    df = pl.DataFrame({"raw": ["2024-05-01", "02/30/2024", "someday", None]}, schema={"raw": pl.Utf8})
    out = df.select(coercion.value.alias("v"), coercion.status.alias("s"))
    assert out["v"].to_list() == [date(2024, 5, 1), None, None, None]
    # A recognized layout that is not a real date is an error, not a silent null
    assert out["s"].to_list() == ["value", "parse_error", "null", "null"]


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        resolve_date(pl.col("raw"), ["%d.%m.%Y"])
