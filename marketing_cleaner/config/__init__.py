"""Configuration for the marketing cleaning pipeline."""

from .source_mappings import (
    DATASETS,
    STAGE_ORDER,
    STAGE_NUMBERS,
    STAGE_ALIASES,
    DatasetSpec,
)
from .settings import PipelineSettings

__all__ = [
    "DATASETS",
    "STAGE_ORDER",
    "STAGE_NUMBERS",
    "STAGE_ALIASES",
    "DatasetSpec",
    "PipelineSettings",
]
