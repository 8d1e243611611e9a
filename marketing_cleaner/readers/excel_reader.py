"""Excel file reader: keep it simple, always use openpyxl via pandas."""

import polars as pl
from .base import BaseReader


class ExcelReader(BaseReader):
    """Reader for Excel files (openpyxl only)."""

    def read(self, path: str, sheet_name=None, **kwargs) -> pl.DataFrame:
        """Read Excel via pandas/openpyxl as text, then convert to polars."""
        import pandas as pd

        if sheet_name is None:
            sheet_name = self.config.get("sheet", 0)

        df_pd = pd.read_excel(
            path,
            sheet_name=sheet_name,
            engine="openpyxl",
            dtype=str,
            keep_default_na=False,
            **kwargs,
        )
        # Ensure string unique headers
        cols = [str(c) for c in df_pd.columns]
        seen = {}
        uniq = []
        for c in cols:
            if c in seen:
                seen[c] += 1
                uniq.append(f"{c}_{seen[c]}")
            else:
                seen[c] = 0
                uniq.append(c)
        df_pd.columns = uniq

        data = {c: [None if v is None else str(v) for v in df_pd[c].tolist()] for c in df_pd.columns}
        return pl.DataFrame(data, schema={c: pl.Utf8 for c in df_pd.columns})

    def validate_path(self, path: str) -> bool:
        return path.lower().endswith(".xlsx")
