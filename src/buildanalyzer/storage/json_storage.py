"""
JSON storage implementation: human-readable tables as lists of records.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl

from .base import DataStorage
from .parquet_storage import read_json_document, write_json_document

logger = logging.getLogger(__name__)


class JsonStorage(DataStorage):
    """
    Store tables as ``{"rows": [...]}`` JSON documents.

    Slower and larger than Parquet, but readable without any tooling.
    """

    table_extension = ".json"

    def save_dataframe(self, df: pl.DataFrame, path: str) -> None:
        write_json_document({"rows": df.to_dicts()}, path)
        logger.debug(f"Saved {len(df)} rows as JSON records to {path}")

    def load_dataframe(self, path: str, columns: Optional[List[str]] = None) -> pl.DataFrame:
        rows = read_json_document(path).get("rows", [])
        df = pl.DataFrame(rows)
        if columns:
            df = df.select(columns)
        logger.debug(f"Loaded {len(df)} JSON records from {path}")
        return df

    def save_dict(self, data: Dict[str, Any], path: str) -> None:
        write_json_document(data, path)

    def load_dict(self, path: str) -> Dict[str, Any]:
        return read_json_document(path)

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()
