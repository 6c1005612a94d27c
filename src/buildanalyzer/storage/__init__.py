"""
Storage module for exported analysis data.

This module provides:
- Parquet (Polars, compressed columnar) and JSON storage backends behind a
  common interface
- A factory selecting the backend from the storage configuration
- An export manager writing module tables, plugin timings and metadata
"""

from .base import DataStorage
from .data_manager import ExportManager, detect_export_format, plugin_timings_to_dataframe
from .factory import create_storage
from .json_storage import JsonStorage
from .parquet_storage import ParquetStorage

__all__ = [
    "DataStorage",
    "ExportManager",
    "JsonStorage",
    "ParquetStorage",
    "create_storage",
    "detect_export_format",
    "plugin_timings_to_dataframe",
]
