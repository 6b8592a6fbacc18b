"""Typed result shapes and statistics helpers for the benchmark pipeline.

Defines ``TypedDict`` structures for experiment outputs and provides utilities
to compute robust aggregate statistics across heterogeneous result records.
"""
from __future__ import annotations

from time import perf_counter
from typing import Any, Dict, List, Optional, TypedDict

import numpy as np

METRICS: List[str] = [
    "gen_time",
    "solve_time",
    "nodes",
    "boundary_edges",
    "min_region",
    "max_region",
]


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class SampleEntry(TypedDict):
    solution_found: bool
    nodes: int
    time: float
    timeout: bool


class GenerationRecord(TypedDict, total=False):
    success: bool
    generated: bool
    timeout: bool
    gen_time: float
    solve_time: float
    nodes: int
    matches_seed: bool
    boundary_edges: int
    min_region: int
    max_region: int
    seed: Optional[int]


class GenerationResultEntry(TypedDict, total=False):
    success_rate: float
    timeout_rate: float
    failure_rate: float
    seed_match_rate: float
    total_runs: int
    successes: int
    failures: int
    timeouts: int
    all_gen_time: StatsSummary
    all_solve_time: StatsSummary
    all_nodes: StatsSummary
    all_boundary_edges: StatsSummary
    all_min_region: StatsSummary
    all_max_region: StatsSummary
    success_solve_time: StatsSummary
    success_nodes: StatsSummary
    raw_runs: List[GenerationRecord]


class ExperimentResults(TypedDict):
    SAMPLES: Dict[int, SampleEntry]
    GENERATED: Dict[str, Dict[int, GenerationResultEntry]]


class ProgressPrinter:
    """Print one status line per finished step of a long loop.

    ``total`` below 1 is treated as 1. Every line carries the wall time since
    the printer was created.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label
        self.started = perf_counter()

    def update(self, index: int, detail: str = "") -> None:
        elapsed = perf_counter() - self.started
        line = f"[{self.label}] {index}/{self.total} ({100 * index / self.total:.0f}%, {elapsed:.1f}s)"
        print(f"{line} - {detail}" if detail else line)


_EMPTY_SUMMARY: StatsSummary = {
    "count": 0,
    "mean": None,
    "median": None,
    "std": None,
    "min": None,
    "max": None,
    "q25": None,
    "q75": None,
    "range": None,
}


def compute_detailed_statistics(values: List[float], label: str = "") -> StatsSummary:
    """Summarize a list of numbers.

    Quartiles are linear-interpolated percentiles and ``std`` is the
    population standard deviation. An empty list yields ``count`` 0 and None
    everywhere else, so CSV columns stay aligned. ``label`` is unused and only
    eases debugging.
    """
    if not values:
        return dict(_EMPTY_SUMMARY)  # type: ignore[return-value]

    data = np.asarray(values, dtype=float)
    q25, median, q75 = np.percentile(data, [25, 50, 75])
    low, high = float(data.min()), float(data.max())
    return {
        "count": int(data.size),
        "mean": float(data.mean()),
        "median": float(median),
        "std": float(data.std()),
        "min": low,
        "max": high,
        "q25": float(q25),
        "q75": float(q75),
        "range": high - low,
    }


def compute_grouped_statistics(
    results_list: List[Dict[str, Any]], success_key: str = "success"
) -> Dict[str, Any]:
    """Aggregate per-run records into rates, counters and metric summaries.

    Runs are split into three disjoint outcomes: success (``success_key`` is
    true), timeout, and failure (neither; this includes runs where the
    generator produced nothing). Each metric in ``METRICS`` is summarized as
    ``all_<metric>`` and ``<outcome>_<metric>``, but only for groups where at
    least one record carries it.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {"success": [], "timeout": [], "failure": []}
    for record in results_list:
        if record.get(success_key, False):
            groups["success"].append(record)
        elif record.get("timeout", False):
            groups["timeout"].append(record)
        else:
            groups["failure"].append(record)

    total = len(results_list)
    stats: Dict[str, Any] = {"total_runs": total}
    for outcome, plural in (("success", "successes"), ("timeout", "timeouts"), ("failure", "failures")):
        stats[plural] = len(groups[outcome])
        stats[f"{outcome}_rate"] = len(groups[outcome]) / total if total else 0.0

    for group_name, group in [("all", results_list)] + list(groups.items()):
        for metric in METRICS:
            values = [record[metric] for record in group if metric in record]
            if values:
                stats[f"{group_name}_{metric}"] = compute_detailed_statistics(values, f"{group_name}_{metric}")

    return stats
