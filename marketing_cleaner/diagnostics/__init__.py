"""Diagnostics package: observational checks, opt-in via PIPELINE_DIAG."""

from .verifier import (
    TABLE_CHECKS,
    VerificationReport,
    build_report,
    verify_table,
)

__all__ = [
    "TABLE_CHECKS",
    "VerificationReport",
    "build_report",
    "verify_table",
]
