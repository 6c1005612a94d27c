"""
Cross-build statistics.

This module aggregates the summaries of many builds of the same project.
"""

from .aggregator import aggregate_builds

__all__ = ["aggregate_builds"]
