from datetime import date

import polars as pl
import pytest
from polars.testing import assert_frame_equal

from marketing_cleaner import storage
from marketing_cleaner.obs import audit
from marketing_cleaner.storage import TableStore
from marketing_cleaner.transforms import CustomerMasterCleaner, output_schema


@pytest.fixture
def frame():
    return pl.DataFrame(
        {
            "customer_id": ["CU1", "CU2"],
            "signup_date": [date(2020, 1, 1), None],
            "email_opt_in": [True, False],
            "age": [34, None],
        }
    )


@pytest.mark.parametrize("fmt", ["parquet", "csv"])
def test_write_then_read(tmp_path, frame, fmt):
    store = TableStore(tmp_path / "clean", fmt)
    path = store.write("clean_customer_master", frame)
    assert path == tmp_path / "clean" / f"clean_customer_master.{fmt}"
    assert store.exists("clean_customer_master")
    assert_frame_equal(store.read("clean_customer_master", dict(frame.schema)), frame)


def test_unknown_format():
    with pytest.raises(ValueError):
        TableStore("out", "xlsx")


def test_read_missing_table(tmp_path):
    with pytest.raises(FileNotFoundError):
        TableStore(tmp_path).read("clean_paid_ads")


def test_failed_swap_keeps_previous_table(tmp_path, frame, monkeypatch):
    store = TableStore(tmp_path, "csv")
    store.write("clean_customer_master", frame)
    before = store.path_for("clean_customer_master").read_bytes()

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", broken_replace)
    with pytest.raises(OSError):
        store.write("clean_customer_master", frame.head(1))

    assert store.path_for("clean_customer_master").read_bytes() == before
    assert not list(tmp_path.glob(".*.tmp"))


def test_audit_reports_key_coverage():
    before = pl.DataFrame({"customer_id": ["a", "a", "b", None]})
    after = pl.DataFrame({"customer_id": ["a", "b"]})
    assert audit("customers", before, after, ["customer_id"]) == 0
    assert audit("customers", before, after.head(1), ["customer_id"]) == -1
    assert audit("customers", before, after, ["missing"]) == 0


def test_csv_read_back_keeps_leading_zero_ids(tmp_path):
    cleaned = CustomerMasterCleaner({"as_of": date(2025, 1, 1)}).clean(
        pl.DataFrame({"customer_id": ["00123"], "signup_date": ["2020-01-01"], "age": ["40"]})
    )
    store = TableStore(tmp_path, "csv")
    store.write("clean_customer_master", cleaned)

    typed = store.read("clean_customer_master", output_schema("customer_master"))
    assert_frame_equal(typed, cleaned)

    untyped = store.read("clean_customer_master")
    assert untyped["customer_id"].to_list() == ["00123"]
    assert all(dtype == pl.Utf8 for dtype in untyped.dtypes)
