"""Run configuration, populated from CLI arguments or environment variables."""

import os
from datetime import date
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .source_mappings import STAGE_ALIASES, STAGE_NUMBERS, STAGE_ORDER

_TRUTHY_ENV = {"1", "true", "yes", "on"}


def resolve_stage(token: Union[str, int]) -> str:
    """Map a stage number, alias or dataset name onto a dataset name."""
    text = str(token).strip().lower()
    if text.isdigit():
        number = int(text)
        if number not in STAGE_NUMBERS:
            raise ValueError(f"Unknown stage number {number}; expected one of {sorted(STAGE_NUMBERS)}")
        return STAGE_NUMBERS[number]
    text = STAGE_ALIASES.get(text, text)
    if text not in STAGE_ORDER:
        raise ValueError(f"Unknown stage '{token}'; expected one of {list(STAGE_ORDER)}")
    return text


class PipelineSettings(BaseModel):
    staging_dir: Path
    output_dir: Path
    output_format: Literal["parquet", "csv"] = "parquet"
    # Reference date for customer tenure; pin it for reproducible output
    as_of: date = Field(default_factory=date.today)
    stages: List[str] = Field(default_factory=lambda: list(STAGE_ORDER))
    diagnostics: bool = True

    @field_validator("stages", mode="before")
    @classmethod
    def _resolve_stages(cls, value):
        if value is None:
            return list(STAGE_ORDER)
        if isinstance(value, (str, int)):
            value = [value]
        resolved = {resolve_stage(v) for v in value}
        # Always keep the canonical order regardless of how stages were listed
        return [name for name in STAGE_ORDER if name in resolved]

    @classmethod
    def from_env(cls, **overrides) -> "PipelineSettings":
        """Build settings from PIPELINE_* environment variables plus overrides."""
        values = {
            "staging_dir": os.getenv("PIPELINE_STAGING_DIR", "data/staging"),
            "output_dir": os.getenv("PIPELINE_OUTPUT_DIR", "data/clean"),
            "output_format": os.getenv("PIPELINE_OUTPUT_FORMAT", "parquet").strip().lower(),
            "diagnostics": os.getenv("PIPELINE_DIAG", "1").strip().lower() in _TRUTHY_ENV,
        }
        as_of: Optional[str] = os.getenv("PIPELINE_AS_OF")
        if as_of:
            values["as_of"] = as_of.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
