#!/usr/bin/env python3
"""
Main entry point for the marketing data cleaning pipeline.

Rebuilds the clean tables from the staging files, one stage per dataset:
  2 email campaigns, 3 paid ads, 4 social organic, 5 transactions, 6 customers.
"""

import argparse
import logging
import platform
import sys
from pathlib import Path

import polars as pl
from pydantic import ValidationError

from marketing_cleaner import MarketingPipeline, PipelineContext, PipelineSettings
from marketing_cleaner.analysis import channel_performance, recommend_actions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

REPORT_INPUTS = ["email_campaigns", "paid_ads", "social_media_organic", "customer_transactions"]


def print_channel_report(pipeline: MarketingPipeline) -> None:
    tables = pipeline.load_clean_tables()
    missing = [name for name in REPORT_INPUTS if name not in tables]
    if missing:
        logger.warning(f"Channel report skipped; clean tables missing: {missing}")
        return
    performance = channel_performance(
        tables["email_campaigns"],
        tables["paid_ads"],
        tables["social_media_organic"],
        tables["customer_transactions"],
    )
    with pl.Config(tbl_cols=-1, tbl_width_chars=200):
        print(performance)
        print(recommend_actions(performance))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Marketing data cleaning pipeline")
    parser.add_argument("--staging-dir", type=str, help="Directory holding staging_<table>.csv/.xlsx files")
    parser.add_argument("--output-dir", type=str, help="Directory for the clean tables")
    parser.add_argument(
        "--stage",
        action="append",
        help="Stage number (2-6) or dataset name; repeatable. Default: all stages",
    )
    parser.add_argument("--as-of", type=str, help="Reference date (YYYY-MM-DD) for customer tenure")
    parser.add_argument("--format", dest="output_format", choices=["parquet", "csv"], help="Clean table file format")
    parser.add_argument("--report", action="store_true", help="Print the channel ROI report after the rebuild")
    parser.add_argument("--no-diag", action="store_true", help="Skip verification logging")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = PipelineSettings.from_env(
            staging_dir=args.staging_dir,
            output_dir=args.output_dir,
            output_format=args.output_format,
            as_of=args.as_of,
            stages=args.stage,
            diagnostics=False if args.no_diag else None,
        )
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Python {platform.python_version()}, cwd={Path.cwd()}")
    logger.info(
        f"staging_dir={settings.staging_dir}, output_dir={settings.output_dir}, "
        f"format={settings.output_format}, as_of={settings.as_of}"
    )

    pipeline = MarketingPipeline(PipelineContext(settings))
    results = pipeline.run()

    for result in results:
        status = "OK" if result.ok else f"FAILED: {result.error}"
        logger.info(f"{result.clean_table}: rows {result.rows_in} -> {result.rows_out} [{status}]")

    if args.report:
        print_channel_report(pipeline)

    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
