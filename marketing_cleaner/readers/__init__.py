"""Staging readers for different file formats."""

from .base import BaseReader, ReaderRegistry
from .csv_reader import CSVReader
from .excel_reader import ExcelReader
from .staging import StagingSchemaError, conform_columns, load_staging

__all__ = [
    "BaseReader",
    "ReaderRegistry",
    "CSVReader",
    "ExcelReader",
    "StagingSchemaError",
    "conform_columns",
    "load_staging",
    "registry",
]

registry = ReaderRegistry()
registry.register("csv", CSVReader)
registry.register("txt", CSVReader)
registry.register("xlsx", ExcelReader)
