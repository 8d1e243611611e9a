"""Base reader interface and registry."""

import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type
import polars as pl


class BaseReader(ABC):
    """Base interface for all staging readers.

    Readers return every column as text; typing is the cleaners' job.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def read(self, path: str, **kwargs) -> pl.DataFrame:
        """Read data from file and return DataFrame."""
        pass

    def validate_path(self, path: str) -> bool:
        """Validate if reader can handle this path."""
        return True


class ReaderRegistry:
    """Registry for file readers, keyed by file extension."""

    def __init__(self):
        self._readers: Dict[str, Type[BaseReader]] = {}

    def register(self, file_type: str, reader_class: Type[BaseReader]):
        """Register a reader for specific file type."""
        self._readers[file_type.lower().lstrip(".")] = reader_class

    def get_reader(self, file_type: str) -> Optional[Type[BaseReader]]:
        """Get reader for file type."""
        return self._readers.get(file_type.lower().lstrip("."))

    def supported_types(self):
        return list(self._readers)

    def detect_reader(self, path: str) -> Optional[Type[BaseReader]]:
        """Pick a reader from the file extension."""
        _, ext = os.path.splitext(os.path.basename(path))
        if not ext:
            return None
        return self.get_reader(ext)
