"""CSV export utilities for benchmark outputs (aggregates and raw runs).

These helpers materialize concise CSV summaries as well as full per-run raw
data for downstream analysis or spreadsheet inspection. Filenames carry the
optional run tag and datestamp configured in ``settings``.
"""
from __future__ import annotations

import csv
import os
from typing import Any, Dict, List

from . import settings
from .stats import ExperimentResults


def _build_suffix() -> str:
    """Build an optional filename suffix from RUN_TAG and RUN_ID.

    Returns an empty string if no suffixing is configured.
    """
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _mean(summary: Dict[str, Any]) -> Any:
    value = summary.get("mean") if summary else None
    return "" if value is None else value


def _median(summary: Dict[str, Any]) -> Any:
    value = summary.get("median") if summary else None
    return "" if value is None else value


def save_results_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write compact per-(difficulty, N) aggregate metrics to CSV.

    Column names follow lowercase snake_case. Returns the written path.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_generator{_build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "difficulty",
            "n",
            "total_runs",
            "successes",
            "failures",
            "timeouts",
            "success_rate",
            "timeout_rate",
            "seed_match_rate",
            "gen_time_mean",
            "gen_time_median",
            "solve_time_mean",
            "solve_time_median",
            "nodes_mean",
            "nodes_median",
            "boundary_edges_mean",
            "min_region_mean",
            "max_region_mean",
        ])
        for difficulty, per_n in results["GENERATED"].items():
            for N in N_values:
                entry: Dict[str, Any] = dict(per_n.get(N, {}))
                if not entry:
                    continue
                writer.writerow([
                    difficulty,
                    N,
                    entry.get("total_runs", 0),
                    entry.get("successes", 0),
                    entry.get("failures", 0),
                    entry.get("timeouts", 0),
                    entry.get("success_rate", 0.0),
                    entry.get("timeout_rate", 0.0),
                    entry.get("seed_match_rate", 0.0),
                    _mean(entry.get("all_gen_time", {})),
                    _median(entry.get("all_gen_time", {})),
                    _mean(entry.get("all_solve_time", {})),
                    _median(entry.get("all_solve_time", {})),
                    _mean(entry.get("all_nodes", {})),
                    _median(entry.get("all_nodes", {})),
                    _mean(entry.get("all_boundary_edges", {})),
                    _mean(entry.get("all_min_region", {})),
                    _mean(entry.get("all_max_region", {})),
                ])

    print(f"Aggregate results saved: {filename}")
    return filename


def save_raw_data_to_csv(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    """Write one CSV row per generation run, across all difficulties."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_data_generator{_build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "difficulty",
            "n",
            "run",
            "seed",
            "generated",
            "success",
            "timeout",
            "gen_time_seconds",
            "solve_time_seconds",
            "nodes_explored",
            "matches_seed",
            "boundary_edges",
            "min_region",
            "max_region",
        ])
        for difficulty, per_n in results["GENERATED"].items():
            for N in N_values:
                entry = per_n.get(N)
                if not entry:
                    continue
                for i, run in enumerate(entry.get("raw_runs", [])):
                    writer.writerow([
                        difficulty,
                        N,
                        i + 1,
                        run.get("seed", ""),
                        run.get("generated", False),
                        run.get("success", False),
                        run.get("timeout", False),
                        run.get("gen_time", ""),
                        run.get("solve_time", ""),
                        run.get("nodes", ""),
                        run.get("matches_seed", ""),
                        run.get("boundary_edges", ""),
                        run.get("min_region", ""),
                        run.get("max_region", ""),
                    ])

    print(f"Raw data saved: {filename}")
    return filename


def save_sample_results(results: ExperimentResults, out_dir: str) -> str:
    """Write the solver's effort on the bundled sample puzzles."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"samples_solver{_build_suffix()}.csv")

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["n", "solution_found", "nodes_explored", "time_seconds", "timeout"])
        for N, entry in sorted(results["SAMPLES"].items()):
            writer.writerow([N, entry["solution_found"], entry["nodes"], entry["time"], entry["timeout"]])

    print(f"Sample solver results saved: {filename}")
    return filename
