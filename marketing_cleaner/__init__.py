"""Marketing data cleaning pipeline package."""

from .processor import MarketingPipeline, PipelineContext, StageResult, run_pipeline
from .readers import ReaderRegistry, CSVReader, ExcelReader
from .config import DATASETS, PipelineSettings
from .transforms import CLEANERS

__all__ = [
    "MarketingPipeline",
    "PipelineContext",
    "StageResult",
    "run_pipeline",
    "ReaderRegistry",
    "CSVReader",
    "ExcelReader",
    "DATASETS",
    "PipelineSettings",
    "CLEANERS",
]
