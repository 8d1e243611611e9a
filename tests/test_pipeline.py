from datetime import date

import polars as pl
import pytest

from marketing_cleaner import MarketingPipeline, PipelineContext, PipelineSettings, run_pipeline
from marketing_cleaner.config.source_mappings import DATASETS, STAGE_ORDER
from marketing_cleaner.storage import TableStore

STAGING = {
    "email_campaigns": [
        {"campaign_id": "C1", "campaign_name": "Spring", "send_date": "2024-03-01", "emails_sent": "100",
         "delivered": "90", "opens": "40", "clicks": "10", "cost": "$50.00"},
        {"campaign_id": "C1", "campaign_name": "Spring", "send_date": "03/01/2024", "emails_sent": "80"},
    ],
    "paid_ads": [
        {"ad_id": "A1", "date": "2024-03-02", "platform": "google", "impressions": "1000", "clicks": "20",
         "spend": "$100", "revenue": "$120", "conversions": "2"},
    ],
    "social_media_organic": [
        {"post_id": "P1", "post_date": "2024-03-01", "platform": "instagram", "impressions": "500",
         "engagement_string": "likes:30,comments:15,shares:5"},
    ],
    "customer_transactions": [
        {"transaction_id": "T1", "customer_id": "CU1", "transaction_date": "2024-03-03", "order_value": "150",
         "items_purchased": "3", "referral_source": "email", "campaign_reference": "C1"},
        {"transaction_id": "T2", "customer_id": "CU2", "transaction_date": "2024-03-05", "order_value": "40",
         "referral_source": "social"},
        {"transaction_id": "T3", "customer_id": "", "order_value": "10"},
    ],
    "customer_master": [
        {"customer_id": "CU1", "signup_date": "2020-01-01", "age": "30", "state": "ca", "email_opt_in": "yes"},
        {"customer_id": "CU2", "signup_date": "2021-06-01", "age": "", "state": "ny"},
    ],
}


def write_staging(directory, dataset, rows):
    cols = DATASETS[dataset].columns
    df = pl.DataFrame([{c: r.get(c) for c in cols} for r in rows], schema={c: pl.Utf8 for c in cols})
    directory.mkdir(parents=True, exist_ok=True)
    df.write_csv(directory / f"{DATASETS[dataset].staging_table}.csv")


@pytest.fixture
def settings(tmp_path):
    staging_dir = tmp_path / "staging"
    for dataset, rows in STAGING.items():
        write_staging(staging_dir, dataset, rows)
    return PipelineSettings(
        staging_dir=staging_dir,
        output_dir=tmp_path / "clean",
        output_format="csv",
        as_of=date(2025, 6, 15),
    )


def _snapshot(settings):
    store = TableStore(settings.output_dir, settings.output_format)
    return {name: store.path_for(DATASETS[name].clean_table).read_bytes() for name in STAGE_ORDER}


def test_full_run(settings):
    results = run_pipeline(settings)
    assert [r.dataset for r in results] == list(STAGE_ORDER)
    assert all(r.ok for r in results)

    by_name = {r.dataset: r for r in results}
    assert by_name["email_campaigns"].rows_in == 2
    assert by_name["email_campaigns"].rows_out == 1
    assert by_name["email_campaigns"].stats["duplicates_removed"] == 1
    assert by_name["customer_transactions"].rows_out == 2
    assert by_name["customer_transactions"].report.rows_excluded == 1

    for dataset in STAGE_ORDER:
        assert (settings.output_dir / f"{DATASETS[dataset].clean_table}.csv").is_file()


def test_rerun_is_byte_identical(settings):
    run_pipeline(settings)
    first = _snapshot(settings)
    run_pipeline(settings)
    assert _snapshot(settings) == first


def test_failed_stage_keeps_previous_table(settings):
    run_pipeline(settings)
    before = _snapshot(settings)

    bad = STAGING["email_campaigns"] + [{"campaign_id": "C9", "emails_sent": "n/a?"}]
    write_staging(settings.staging_dir, "email_campaigns", bad)
    results = run_pipeline(settings)

    by_name = {r.dataset: r for r in results}
    assert not by_name["email_campaigns"].ok
    assert "emails_sent" in by_name["email_campaigns"].error
    # Other stages do not depend on the failed one
    assert all(r.ok for name, r in by_name.items() if name != "email_campaigns")
    assert _snapshot(settings) == before
    assert not list(settings.output_dir.glob(".*.tmp"))


def test_missing_staging_file_fails_only_that_stage(settings):
    (settings.staging_dir / "staging_paid_ads.csv").unlink()
    results = run_pipeline(settings)
    by_name = {r.dataset: r for r in results}
    assert not by_name["paid_ads"].ok
    assert not (settings.output_dir / "clean_paid_ads.csv").exists()
    assert by_name["customer_master"].ok


def test_run_selected_stages(settings):
    pipeline = MarketingPipeline(PipelineContext(settings))
    results = pipeline.run(["customers", 2])
    assert [r.dataset for r in results] == ["email_campaigns", "customer_master"]
    assert set(pipeline.load_clean_tables()) == {"email_campaigns", "customer_master"}


def test_clean_tables_read_back_typed(settings):
    pipeline = MarketingPipeline(PipelineContext(settings))
    pipeline.run()
    customers = pipeline.load_clean_tables()["customer_master"]
    assert customers["customer_tenure_years"].to_list() == [5, 4]
    assert customers["state"].to_list() == ["CA", "NY"]


def test_cli_exit_codes(settings):
    import main

    argv = [
        "--staging-dir", str(settings.staging_dir),
        "--output-dir", str(settings.output_dir),
        "--format", "csv",
        "--as-of", "2025-06-15",
        "--report",
    ]
    assert main.main(argv) == 0

    write_staging(settings.staging_dir, "paid_ads", [{"ad_id": "A1", "spend": "lots"}])
    assert main.main(argv) == 1
    assert main.main(argv + ["--stage", "99"]) == 2
