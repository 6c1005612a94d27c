"""
Unit tests for the Parquet and JSON storage backends.
"""

from pathlib import Path

import polars as pl
import pytest

from buildanalyzer.storage import JsonStorage, ParquetStorage


def _sample_df():
    return pl.DataFrame(
        {
            "name": ["core", "webapp"],
            "seconds": [4.637, 2.1],
            "pipeline_steps": [["compiler:compile", "surefire:test"], ["war:war"]],
        }
    )


@pytest.mark.unit
class TestParquetStorage:
    """Test cases for ParquetStorage class."""

    def test_initialization(self):
        """Test ParquetStorage initialization."""
        assert ParquetStorage().compression == "snappy"
        assert ParquetStorage(compression="gzip").compression == "gzip"
        assert ParquetStorage.table_extension == ".parquet"

    def test_save_load_dataframe(self, temp_dir):
        """Test saving and loading a DataFrame, nested lists included."""
        storage = ParquetStorage()
        file_path = temp_dir / "nested" / "modules.parquet"

        storage.save_dataframe(_sample_df(), str(file_path))

        assert storage.file_exists(str(file_path))
        loaded = storage.load_dataframe(str(file_path))
        assert loaded.equals(_sample_df())

    def test_column_pruning(self, temp_dir):
        """Test loading a subset of columns."""
        storage = ParquetStorage(compression="zstd")
        file_path = temp_dir / "modules.parquet"
        storage.save_dataframe(_sample_df(), str(file_path))

        loaded = storage.load_dataframe(str(file_path), columns=["name"])

        assert loaded.columns == ["name"]
        assert loaded["name"].to_list() == ["core", "webapp"]

    def test_save_load_dict(self, temp_dir):
        """Test metadata documents are written as JSON."""
        storage = ParquetStorage()
        path = temp_dir / "meta.json"
        data = {"total_seconds": 7.5, "hints": [{"severity": "WARN"}]}

        storage.save_dict(data, str(path))

        assert storage.load_dict(str(path)) == data
        assert path.read_text(encoding="utf-8").startswith("{")

    def test_load_missing_file_raises(self, temp_dir):
        """Test that loading a missing table propagates the error."""
        with pytest.raises(Exception):
            ParquetStorage().load_dataframe(str(temp_dir / "missing.parquet"))


@pytest.mark.unit
class TestJsonStorage:
    """Test cases for JsonStorage class."""

    def test_save_load_dataframe(self, temp_dir):
        """Test tables round-trip through row records."""
        storage = JsonStorage()
        path = temp_dir / "modules.json"

        storage.save_dataframe(_sample_df(), str(path))
        loaded = storage.load_dataframe(str(path))

        assert loaded["name"].to_list() == ["core", "webapp"]
        assert loaded["pipeline_steps"].to_list() == [["compiler:compile", "surefire:test"], ["war:war"]]

    def test_rows_are_readable(self, temp_dir):
        """Test the on-disk layout is a list of records."""
        import json

        path = temp_dir / "modules.json"
        JsonStorage().save_dataframe(_sample_df(), str(path))

        document = json.loads(Path(path).read_text(encoding="utf-8"))
        assert document["rows"][0]["name"] == "core"

    def test_column_selection(self, temp_dir):
        """Test loading a subset of columns."""
        storage = JsonStorage()
        path = temp_dir / "modules.json"
        storage.save_dataframe(_sample_df(), str(path))

        assert storage.load_dataframe(str(path), columns=["seconds"]).columns == ["seconds"]

    def test_file_exists(self, temp_dir):
        """Test existence check."""
        assert not JsonStorage().file_exists(str(temp_dir / "nothing.json"))
