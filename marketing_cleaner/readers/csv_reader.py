"""CSV file reader."""

import polars as pl
from .base import BaseReader


class CSVReader(BaseReader):
    """Reader for CSV files."""

    def read(self, path: str, **kwargs) -> pl.DataFrame:
        """Read a CSV file with every column as text."""
        read_config = {
            # No inference: "21347.0" and "$12" must reach the cleaners untouched
            "infer_schema_length": 0,
            "truncate_ragged_lines": True,
            "encoding": "utf8-lossy",
            **kwargs,
        }

        return pl.read_csv(path, **read_config)

    def validate_path(self, path: str) -> bool:
        """Validate CSV file path."""
        return path.lower().endswith((".csv", ".txt"))
