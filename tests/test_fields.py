import polars as pl
import pytest

from marketing_cleaner.cleaning.fields import (
    FieldParseError,
    FieldStatus,
    blank_to_null,
    boolean_field,
    currency_field,
    integer_field,
    parse_boolean,
    parse_decimal,
    parse_integer,
    status_for,
    text_field,
)


def _eval(expr, values):
    df = pl.DataFrame({"raw": values}, schema={"raw": pl.Utf8})
    return df.select(expr.alias("out"))["out"].to_list()


def test_blank_to_null():
    out = _eval(blank_to_null(pl.col("raw")), ["  x ", "   ", "null", "NA", "-", None, "value"])
    assert out == ["x", None, None, None, None, None, "value"]


def test_parse_integer_truncates_decimal_text():
    out = _eval(parse_integer(pl.col("raw")), ["21347.0", " 42 ", "", None, "7.9", "N/A"])
    assert out == [21347, 42, None, None, 7, None]


def test_parse_integer_dtype():
    df = pl.DataFrame({"raw": ["1"]}).select(parse_integer(pl.col("raw")))
    assert df.dtypes == [pl.Int64]


def test_currency_stripping():
    out = _eval(parse_decimal(pl.col("raw"), currency=True, scale=2), ["$123.45", "$ 10", "5.5", ""])
    assert out == [123.45, 10.0, 5.5, None]


def test_percentage_stripping():
    out = _eval(parse_decimal(pl.col("raw"), percent=True), ["12.5%", "3", " 40 %"])
    assert out == [12.5, 3.0, 40.0]


def test_decimal_without_currency_flag_keeps_dollar_text_unparsed():
    assert _eval(parse_decimal(pl.col("raw")), ["$5"]) == [None]


def test_decimal_scale_rounds():
    assert _eval(parse_decimal(pl.col("raw"), scale=2), ["10.456"]) == [10.46]


@pytest.mark.parametrize("value", ["YES", "1", "true", "T", "y", " Yes "])
def test_boolean_truthy(value):
    assert _eval(parse_boolean(pl.col("raw")), [value]) == [True]


@pytest.mark.parametrize("value", ["no", "", "0", None, "false", "maybe"])
def test_boolean_everything_else_is_false(value):
    assert _eval(parse_boolean(pl.col("raw")), [value]) == [False]


def test_status_tags_value_null_and_parse_error():
    out = _eval(status_for(pl.col("raw"), parse_integer(pl.col("raw"))), ["12", "", "abc", None, "1,000"])
    assert out == [
        FieldStatus.VALUE.value,
        FieldStatus.NULL.value,
        FieldStatus.PARSE_ERROR.value,
        FieldStatus.NULL.value,
        FieldStatus.PARSE_ERROR.value,
    ]


def test_integer_field_coercion():
    coercion = integer_field("raw")
    df = pl.DataFrame({"raw": ["3.0", "oops"]})
    out = df.select(coercion.value.alias("v"), coercion.status.alias("s"))
    assert out["v"].to_list() == [3, None]
    assert out["s"].to_list() == ["value", "parse_error"]
    assert coercion.kind == "integer"


def test_currency_field_rejects_garbage():
    coercion = currency_field("raw")
    df = pl.DataFrame({"raw": ["$1.005", "$abc"]})
    out = df.select(coercion.status.alias("s"))
    assert out["s"].to_list() == ["value", "parse_error"]


def test_boolean_field_never_fails():
    coercion = boolean_field("raw")
    df = pl.DataFrame({"raw": ["garbage", None]}, schema={"raw": pl.Utf8})
    assert df.with_columns(coercion.status.alias("s"))["s"].to_list() == ["value", "value"]


def test_field_parse_error_message():
    err = FieldParseError("paid_ads", "spend", "A7", "twelve")
    assert isinstance(err, ValueError)
    assert "spend" in str(err) and "'A7'" in str(err) and "'twelve'" in str(err)
    assert err.failures == [{"field": "spend", "row_key": "A7", "raw_value": "twelve"}]


def test_text_field_only_nulls_blanks():
    coercion = text_field("raw")
    df = pl.DataFrame({"raw": ["NA", " none ", "  ", None]}, schema={"raw": pl.Utf8})
    assert df.select(coercion.value.alias("v"))["v"].to_list() == ["NA", "none", None, None]
