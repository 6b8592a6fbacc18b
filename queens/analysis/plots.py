"""Visualization utilities for benchmark outputs.

Overview
--------
This module turns the ``ExperimentResults`` mapping produced by
``queens.analysis.experiments`` into PNG charts. One line is drawn per
difficulty; the x-axis is the board size N.

Chart map
---------
- 01_success_rate_vs_N.png: Fraction of runs where a puzzle was generated and
    then solved within the time limit.
- 02_solve_nodes_vs_N.png: Mean solver nodes explored on generated puzzles
    (log scale). Hardware-independent effort.
- 03_solve_time_vs_N.png: Mean solver wall time (log scale).
- 04_boundary_edges_vs_N.png: Mean number of region boundary edges, ± std.
    Higher means more winding regions; Hard should sit above Easy.
- 05_nodes_vs_time.png: Raw runs, solver nodes against time, with a linear
    trend per difficulty fitted by ``numpy.polyfit``.

Outputs are written into ``out_dir``; filenames carry the suffix configured
in ``queens.analysis.settings`` (run tag and/or datestamp).
"""
from __future__ import annotations

import os
from typing import Any, Dict, List

import matplotlib.pyplot as plt
import numpy as np

from . import settings
from .stats import ExperimentResults

MARKERS = ["o", "s", "^", "D", "v"]


def _date_suffix() -> str:
    """Return a suffix based on RUN_TAG / RUN_ID settings (or empty)."""
    parts: List[str] = []
    run_tag = getattr(settings, "RUN_TAG", None)
    if run_tag:
        parts.append(str(run_tag))
    if getattr(settings, "DATE_IN_FILENAMES", False):
        run_id = getattr(settings, "RUN_ID", None)
        if run_id:
            parts.append(str(run_id))
    return ("_" + "_".join(parts)) if parts else ""


def _series(results: ExperimentResults, difficulty: str, N_values: List[int], key: str, field: str = "mean") -> List[float]:
    """Pull one statistic per N for a difficulty; missing values become NaN."""
    per_n: Dict[int, Any] = results["GENERATED"].get(difficulty, {})
    values: List[float] = []
    for N in N_values:
        entry = per_n.get(N, {})
        if key.endswith("_rate"):
            values.append(float(entry.get(key, np.nan)))
            continue
        summary = entry.get(key, {}) or {}
        value = summary.get(field)
        values.append(float(value) if value is not None else np.nan)
    return values


def _save(fname: str, description: str) -> str:
    plt.savefig(fname, bbox_inches="tight", dpi=150)
    plt.close()
    print(f"Saved {description}: {fname}")
    return fname


def plot_success_rate(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    plt.figure(figsize=(12, 8))
    for i, difficulty in enumerate(results["GENERATED"]):
        plt.plot(N_values, _series(results, difficulty, N_values, "success_rate"),
                 marker=MARKERS[i % len(MARKERS)], linewidth=2, markersize=8, label=difficulty)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Success rate", fontsize=12)
    plt.title("Generated and solved puzzles vs Problem Size", fontsize=14)
    plt.ylim(-0.05, 1.05)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    return _save(os.path.join(out_dir, f"01_success_rate_vs_N{_date_suffix()}.png"), "success-rate chart")


def plot_solve_cost(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Draw solver nodes and solver time against N (both on a log scale)."""
    saved: List[str] = []
    for key, ylabel, stem, description in (
        ("all_nodes", "Mean nodes explored (log scale)", "02_solve_nodes_vs_N", "solver-nodes chart"),
        ("all_solve_time", "Mean solve time [s] (log scale)", "03_solve_time_vs_N", "solver-time chart"),
    ):
        plt.figure(figsize=(12, 8))
        for i, difficulty in enumerate(results["GENERATED"]):
            values = np.array(_series(results, difficulty, N_values, key), dtype=float)
            plt.semilogy(N_values, np.maximum(values, 1e-6), marker=MARKERS[i % len(MARKERS)],
                         linewidth=2, markersize=8, label=difficulty)
        plt.xlabel("N (board size)", fontsize=12)
        plt.ylabel(ylabel, fontsize=12)
        plt.title("Solver effort on generated puzzles", fontsize=14)
        plt.legend(fontsize=11)
        plt.grid(True, alpha=0.7)
        plt.xticks(N_values)
        saved.append(_save(os.path.join(out_dir, f"{stem}{_date_suffix()}.png"), description))
    return saved


def plot_region_shape(results: ExperimentResults, N_values: List[int], out_dir: str) -> str:
    plt.figure(figsize=(12, 8))
    for i, difficulty in enumerate(results["GENERATED"]):
        means = _series(results, difficulty, N_values, "all_boundary_edges", "mean")
        stds = _series(results, difficulty, N_values, "all_boundary_edges", "std")
        plt.errorbar(N_values, means, yerr=np.nan_to_num(stds), marker=MARKERS[i % len(MARKERS)],
                     linewidth=2, markersize=8, capsize=4, label=difficulty)
    plt.xlabel("N (board size)", fontsize=12)
    plt.ylabel("Region boundary edges (mean ± std)", fontsize=12)
    plt.title("Region jaggedness by difficulty", fontsize=14)
    plt.legend(fontsize=11)
    plt.grid(True, alpha=0.7)
    plt.xticks(N_values)
    return _save(os.path.join(out_dir, f"04_boundary_edges_vs_N{_date_suffix()}.png"), "region-shape chart")


def plot_nodes_vs_time(results: ExperimentResults, out_dir: str) -> str:
    """Scatter solver nodes against time for every raw run, with linear trends."""
    plt.figure(figsize=(12, 8))
    for i, (difficulty, per_n) in enumerate(results["GENERATED"].items()):
        runs = [r for entry in per_n.values() for r in entry.get("raw_runs", []) if r.get("generated")]
        nodes = np.array([r["nodes"] for r in runs], dtype=float)
        times = np.array([r["solve_time"] for r in runs], dtype=float)
        if nodes.size == 0:
            continue
        plt.scatter(nodes, times, alpha=0.6, marker=MARKERS[i % len(MARKERS)], label=difficulty)
        if nodes.size >= 2 and np.ptp(nodes) > 0:
            z = np.polyfit(nodes, times, 1)
            p = np.poly1d(z)
            x_trend = np.linspace(nodes.min(), nodes.max(), 100)
            plt.plot(x_trend, p(x_trend), linestyle="--", linewidth=1.5,
                     label=f"{difficulty} trend ({z[0]:.2e} s/node)")
    plt.xlabel("Solver nodes explored", fontsize=12)
    plt.ylabel("Solve time [s]", fontsize=12)
    plt.title("Logical cost vs practical cost (raw runs)", fontsize=14)
    plt.legend(fontsize=10)
    plt.grid(True, alpha=0.3)
    return _save(os.path.join(out_dir, f"05_nodes_vs_time{_date_suffix()}.png"), "nodes-vs-time chart")


def plot_and_save(results: ExperimentResults, N_values: List[int], out_dir: str) -> List[str]:
    """Generate every chart; returns the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    if not results["GENERATED"]:
        print("No generation runs to plot.")
        return []
    saved = [plot_success_rate(results, N_values, out_dir)]
    saved.extend(plot_solve_cost(results, N_values, out_dir))
    saved.append(plot_region_shape(results, N_values, out_dir))
    saved.append(plot_nodes_vs_time(results, out_dir))
    return saved
