"""Clean-table storage: one file per table, rebuilt by shadow write and swap."""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

import polars as pl

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("parquet", "csv")


class TableStore:
    """Directory of clean tables.

    ``write`` materializes the new table next to the old one and swaps it in
    with ``os.replace``; a failed write leaves the previous table untouched.
    """

    def __init__(self, directory: Union[str, Path], fmt: str = "parquet"):
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported table format '{fmt}'; expected one of {SUPPORTED_FORMATS}")
        self.directory = Path(directory)
        self.fmt = fmt

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.{self.fmt}"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def write(self, name: str, df: pl.DataFrame) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(name)
        shadow = target.with_name(f".{target.name}.tmp")
        try:
            if self.fmt == "parquet":
                df.write_parquet(shadow, statistics=False)
            else:
                df.write_csv(shadow)
            os.replace(shadow, target)
        finally:
            if shadow.exists():
                shadow.unlink()
        logger.info(f"Wrote {name}: rows={df.height} -> {target}")
        return target

    def read(self, name: str, schema: Optional[Dict[str, pl.DataType]] = None) -> pl.DataFrame:
        """Read a clean table back.

        CSV carries no types: pass the table's schema, otherwise every column
        comes back as text so ids like "00123" survive the round trip.
        """
        path = self.path_for(name)
        if not path.is_file():
            raise FileNotFoundError(f"Clean table '{name}' not found at {path}")
        if self.fmt == "parquet":
            return pl.read_parquet(path)
        if schema is None:
            return pl.read_csv(path, infer_schema_length=0)
        return pl.read_csv(path, schema=schema)
