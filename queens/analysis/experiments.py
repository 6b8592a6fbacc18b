"""Benchmark runners for the solver and the generator (sequential and parallel).

Two kinds of measurements are produced:

- Sample solves: the deterministic solver on the bundled sample puzzles.
- Generation runs: for every (N, difficulty) pair, ``runs`` puzzles are
  generated, each one is solved again with node counting, and the shape of its
  regions is measured.

Outputs are structured dictionaries suitable for CSV export and plotting.
Validation hooks optionally check solution correctness and region-map
invariants.
"""
from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from time import perf_counter
from typing import Any, Dict, List, Optional, Tuple

from . import settings
from .stats import (
    ExperimentResults,
    GenerationRecord,
    GenerationResultEntry,
    ProgressPrinter,
    SampleEntry,
    compute_grouped_statistics,
)
from queens.backtracking import solve_with_stats
from queens.board import SAMPLE_PUZZLES, Difficulty
from queens.generator import generate
from queens.regions import boundary_edges, region_cells, region_map_problems
from queens.utils import is_valid_solution

GenerationParams = Tuple[int, str, Optional[int], Optional[float], bool, bool]


def run_seed(base_seed: Optional[int], N: int, difficulty_index: int, run_index: int) -> Optional[int]:
    """Derive a reproducible per-run seed (None keeps runs unseeded)."""
    if base_seed is None:
        return None
    return base_seed + N * 100_000 + difficulty_index * 10_000 + run_index


# Reusable workers -----------------------------------------------------------

def run_single_generation(params: GenerationParams) -> GenerationRecord:
    """Worker wrapper to generate and re-solve one puzzle (for parallel mapping).

    ``params`` is ``(N, difficulty, seed, solve_time_limit, verify, validate)``.
    Each call owns its ``random.Random`` so concurrent workers never share
    generator state.
    """
    N, difficulty, seed, solve_time_limit, verify, validate = params
    rng = random.Random(seed)

    start = perf_counter()
    puzzle = generate(N, difficulty, rng=rng, verify=verify)
    gen_time = perf_counter() - start
    if puzzle is None:
        return {"success": False, "generated": False, "timeout": False, "gen_time": gen_time, "seed": seed}

    solution, nodes, solve_time, timeout = solve_with_stats(N, puzzle.regions, time_limit=solve_time_limit)

    if validate:
        problems = region_map_problems(N, puzzle.regions)
        if problems:
            raise AssertionError(f"Generated region map for N={N} ({difficulty}, seed={seed}) is invalid: {problems}")
        if not is_valid_solution(N, puzzle.solution, puzzle.regions):
            raise AssertionError(f"Seed placement for N={N} ({difficulty}, seed={seed}) breaks a rule: {puzzle.solution}")
        if solution is None and not timeout:
            raise AssertionError(f"Solver found no solution for a generated puzzle N={N} ({difficulty}, seed={seed})")
        if solution is not None and not is_valid_solution(N, solution, puzzle.regions):
            raise AssertionError(f"Invalid solver output for N={N} ({difficulty}, seed={seed}): {solution}")

    region_sizes = [len(cells) for cells in region_cells(puzzle.regions).values()]
    return {
        "success": solution is not None,
        "generated": True,
        "timeout": timeout,
        "gen_time": gen_time,
        "solve_time": solve_time,
        "nodes": nodes,
        "matches_seed": solution == puzzle.solution,
        "boundary_edges": boundary_edges(puzzle.regions),
        "min_region": min(region_sizes),
        "max_region": max(region_sizes),
        "seed": seed,
    }


def summarize_generation_runs(runs: List[GenerationRecord]) -> GenerationResultEntry:
    """Collapse raw generation records into a per-(N, difficulty) summary."""
    stats = compute_grouped_statistics([dict(r) for r in runs], "success")
    generated = [r for r in runs if r.get("generated", False)]
    matches = sum(1 for r in generated if r.get("matches_seed", False))
    entry: Dict[str, Any] = dict(stats)
    entry["seed_match_rate"] = matches / len(generated) if generated else 0.0
    entry["raw_runs"] = list(runs)
    return entry  # type: ignore[return-value]


def run_sample_benchmarks(solve_time_limit: Optional[float] = None, validate: bool = False) -> Dict[int, SampleEntry]:
    """Solve each bundled sample puzzle once (the solver is deterministic)."""
    samples: Dict[int, SampleEntry] = {}
    for N, regions in sorted(SAMPLE_PUZZLES.items()):
        solution, nodes, elapsed, timeout = solve_with_stats(N, regions, time_limit=solve_time_limit)
        if validate and solution is not None and not is_valid_solution(N, solution, regions):
            raise AssertionError(f"Invalid solution for sample N={N}: {solution}")
        samples[N] = {"solution_found": solution is not None, "nodes": nodes, "time": elapsed, "timeout": timeout}
    return samples


def _plan(
    N_values: List[int],
    difficulties: List[str],
    runs: int,
    base_seed: Optional[int],
    solve_time_limit: Optional[float],
    verify: bool,
    validate: bool,
) -> List[Tuple[str, int, List[GenerationParams]]]:
    plan: List[Tuple[str, int, List[GenerationParams]]] = []
    for d_index, label in enumerate(difficulties):
        difficulty = Difficulty.parse(label).value
        for N in N_values:
            batch = [
                (N, difficulty, run_seed(base_seed, N, d_index, i), solve_time_limit, verify, validate)
                for i in range(runs)
            ]
            plan.append((difficulty, N, batch))
    return plan


# Sequential runner ----------------------------------------------------------

def run_experiments(
    N_values: List[int],
    difficulties: List[str],
    runs: int,
    solve_time_limit: Optional[float] = None,
    verify: bool = False,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_samples: bool = True,
) -> ExperimentResults:
    """Run generation batches one after another in the current process.

    For each difficulty and each N, ``runs`` puzzles are generated and solved.
    Scheduling stops early once ``settings.EXPERIMENT_TIMEOUT`` is exceeded;
    the partial results gathered so far are returned.
    """
    results: Any = {"SAMPLES": {}, "GENERATED": {}}
    if include_samples:
        results["SAMPLES"] = run_sample_benchmarks(solve_time_limit, validate)

    plan = _plan(N_values, difficulties, runs, base_seed, solve_time_limit, verify, validate)
    progress = ProgressPrinter(len(plan), progress_label) if progress_label else None
    start = perf_counter()

    for index, (difficulty, N, batch) in enumerate(plan, start=1):
        if settings.EXPERIMENT_TIMEOUT is not None and perf_counter() - start > settings.EXPERIMENT_TIMEOUT:
            print(f"Experiment timeout reached after {perf_counter() - start:.1f}s; skipping remaining batches.")
            break
        if progress:
            progress.update(index, f"{difficulty} N={N}")
        records = [run_single_generation(params) for params in batch]
        results["GENERATED"].setdefault(difficulty, {})[N] = summarize_generation_runs(records)

    return results


# Parallel runner ------------------------------------------------------------

def run_experiments_parallel(
    N_values: List[int],
    difficulties: List[str],
    runs: int,
    solve_time_limit: Optional[float] = None,
    verify: bool = False,
    base_seed: Optional[int] = None,
    progress_label: Optional[str] = None,
    validate: bool = False,
    include_samples: bool = True,
    processes: Optional[int] = None,
) -> ExperimentResults:
    """Run generation batches across a process pool.

    Each batch is mapped over ``processes`` workers (``settings.NUM_PROCESSES``
    by default). Results are identical to :func:`run_experiments` for the same
    ``base_seed`` apart from timing metrics.
    """
    results: Any = {"SAMPLES": {}, "GENERATED": {}}
    if include_samples:
        results["SAMPLES"] = run_sample_benchmarks(solve_time_limit, validate)

    plan = _plan(N_values, difficulties, runs, base_seed, solve_time_limit, verify, validate)
    progress = ProgressPrinter(len(plan), progress_label) if progress_label else None
    workers = processes or settings.NUM_PROCESSES
    start = perf_counter()

    with ProcessPoolExecutor(max_workers=workers) as executor:
        for index, (difficulty, N, batch) in enumerate(plan, start=1):
            if settings.EXPERIMENT_TIMEOUT is not None and perf_counter() - start > settings.EXPERIMENT_TIMEOUT:
                print(f"Experiment timeout reached after {perf_counter() - start:.1f}s; skipping remaining batches.")
                break
            if progress:
                progress.update(index, f"{difficulty} N={N} ({workers} workers)")
            records = list(executor.map(run_single_generation, batch))
            results["GENERATED"].setdefault(difficulty, {})[N] = summarize_generation_runs(records)

    return results
