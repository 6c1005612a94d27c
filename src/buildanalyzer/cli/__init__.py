"""
Command-line interface for the buildanalyzer package.

This module provides the main CLI entry point for the analyzer.
"""

from .main import main, main_cli

__all__ = [
    "main",
    "main_cli",
]
