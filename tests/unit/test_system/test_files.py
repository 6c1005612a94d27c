"""
Unit tests for log file discovery and reading.
"""

from pathlib import Path

import pytest

from buildanalyzer.system import (
    list_log_files_by_pattern,
    list_log_files_in_directory,
    read_log_lines,
    split_log_pattern,
)


@pytest.mark.unit
class TestReadLogLines:

    def test_strips_line_terminators(self, temp_dir):
        path = temp_dir / "crlf.log"
        path.write_bytes(b"[INFO] one\r\n[INFO] two\n[INFO] three")

        assert read_log_lines(path) == ["[INFO] one", "[INFO] two", "[INFO] three"]

    def test_undecodable_bytes_are_replaced(self, temp_dir):
        path = temp_dir / "latin1.log"
        path.write_bytes(b"[INFO] caf\xe9\n")

        lines = read_log_lines(path)

        assert len(lines) == 1
        assert lines[0].startswith("[INFO] caf")

    def test_missing_file(self, temp_dir):
        with pytest.raises(OSError):
            read_log_lines(temp_dir / "missing.log")


@pytest.mark.unit
class TestLogDiscovery:

    def test_directory_listing_is_sorted_and_filtered(self, log_dir_factory):
        log_dir = log_dir_factory({"b.log": ["x"], "a.log": ["x"], "notes.txt": ["x"]})
        (log_dir / "nested.log").mkdir()

        files = list_log_files_in_directory(log_dir)

        assert [p.name for p in files] == ["a.log", "b.log"]

    def test_empty_directory(self, temp_dir):
        assert list_log_files_in_directory(temp_dir) == []

    def test_split_pattern(self):
        assert split_log_pattern("logs/build-*.log") == (Path("logs"), "build-*.log")
        assert split_log_pattern("*.log") == (Path("."), "*.log")
        assert split_log_pattern("/build-*.log") == (Path("."), "build-*.log")
        assert split_log_pattern("logs\\run-?.log") == (Path("logs"), "run-?.log")

    def test_pattern_matching(self, log_dir_factory):
        log_dir = log_dir_factory({"build-2.log": ["x"], "build-1.log": ["x"], "other.log": ["x"]})

        files = list_log_files_by_pattern(f"{log_dir}/build-*.log")

        assert [p.name for p in files] == ["build-1.log", "build-2.log"]

    def test_pattern_is_case_sensitive(self, log_dir_factory):
        log_dir = log_dir_factory({"Build-1.log": ["x"]})

        assert list_log_files_by_pattern(f"{log_dir}/build-*.log") == []

    def test_pattern_in_missing_directory(self, temp_dir):
        with pytest.raises(OSError):
            list_log_files_by_pattern(f"{temp_dir}/absent/*.log")
