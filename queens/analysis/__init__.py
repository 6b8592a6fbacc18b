"""
Benchmark and orchestration package for the Queens puzzle.

This package contains:
- settings: global knobs and timeouts
- stats: typed summaries and aggregation helpers
- experiments: generator/solver benchmark runners with result shaping
- reporting: CSV exports and raw-data writers
- plots: visualization utilities (matplotlib)
- cli: command-line entry points and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    StatsSummary,
    SampleEntry,
    GenerationRecord,
    GenerationResultEntry,
    ExperimentResults,
    compute_detailed_statistics,
    compute_grouped_statistics,
    ProgressPrinter,
)

__all__ = [
    # types
    "StatsSummary",
    "SampleEntry",
    "GenerationRecord",
    "GenerationResultEntry",
    "ExperimentResults",
    # utils
    "compute_detailed_statistics",
    "compute_grouped_statistics",
    "ProgressPrinter",
    # settings module
    "settings",
]
