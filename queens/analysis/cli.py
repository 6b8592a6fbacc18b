"""Command-line interface and high-level pipelines for the Queens puzzle.

This module wires together configuration loading, one-off solve/generate
commands and the benchmark pipeline (sequential or parallel). It isolates
I/O, argument parsing, and progress reporting from the core algorithmic
modules so that the rest of the codebase remains easy to test
programmatically.
"""
from __future__ import annotations

import argparse
import json
import random
import tempfile
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Sequence, Tuple

from . import settings
from .experiments import run_experiments, run_experiments_parallel
from .reporting import save_raw_data_to_csv, save_results_to_csv, save_sample_results
from .stats import ExperimentResults, ProgressPrinter
from config_manager import ConfigManager
from queens.backtracking import solve, solve_with_stats
from queens.board import (
    SAMPLE_PUZZLES,
    Difficulty,
    InvalidPuzzleError,
    RegionMap,
    format_positions,
    format_region_map,
    format_solution,
    normalize_region_map,
)
from queens.generator import generate
from queens.regions import region_map_problems
from queens.utils import is_valid_solution

EXIT_UNSOLVED = 2


# ------------- Utils --------------------------------------------------------

def parse_difficulty_filters(difficulty_args: Optional[List[str]]) -> Optional[List[str]]:
    """Normalize difficulty filter CLI inputs into a flat list of labels.

    Accepts repeated flags (e.g., ``-d easy -d hard``) and comma-separated
    lists (e.g., ``-d Easy,Hard``). Returns ``None`` when no filter is provided
    so that callers can fall back to the configured default set.
    """
    if not difficulty_args:
        return None
    selected: List[str] = []
    for entry in difficulty_args:
        for token in entry.split(","):
            token = token.strip()
            if token:
                selected.append(Difficulty.parse(token).value)
    unique = list(dict.fromkeys(selected))  # preserve order, remove dups
    return unique or None


def load_region_file(path: str) -> Tuple[int, RegionMap]:
    """Read a region map from JSON and normalize it.

    Accepts either a bare matrix or an object ``{"gridSize": n, "regions": [...]}``.
    """
    with open(path, "r") as f:
        data: Any = json.load(f)
    declared = None
    if isinstance(data, dict):
        declared = data.get("gridSize")
        data = data.get("regions")
    if not isinstance(data, list):
        raise InvalidPuzzleError(f"No region matrix found in {path}.")
    return normalize_region_map(data, declared)


def apply_configuration(config_path: str, difficulty_filter: Optional[List[str]] = None) -> Tuple[ConfigManager, List[str]]:
    """Load configuration and apply optional difficulty filtering.

    This function updates the global ``settings`` module in-place to reflect
    values from ``config.json`` (or a user-specified path). It returns the
    ``ConfigManager`` used and the list of selected difficulty labels.
    """
    config_mgr = ConfigManager(config_path)

    experiment_settings = config_mgr.get_experiment_settings()
    if experiment_settings:
        settings.N_VALUES = [int(n) for n in experiment_settings.get("N_values", settings.N_VALUES)]
        settings.RUNS_PER_SIZE = int(experiment_settings.get("runs_per_size", settings.RUNS_PER_SIZE))
        settings.SEED = experiment_settings.get("seed", settings.SEED)
        settings.OUT_DIR = experiment_settings.get("output_dir", settings.OUT_DIR)

    timeout_settings = config_mgr.get_timeout_settings()
    if timeout_settings:
        settings.set_timeouts(
            solve_timeout=timeout_settings.get("solve_time_limit", settings.SOLVE_TIME_LIMIT),
            experiment_timeout=timeout_settings.get("experiment_timeout", settings.EXPERIMENT_TIMEOUT),
        )

    generator_settings = config_mgr.get_generator_settings()
    if generator_settings:
        settings.VERIFY_GENERATED = bool(generator_settings.get("verify", settings.VERIFY_GENERATED))

    configured = [Difficulty.parse(label).value for label in config_mgr.get_difficulties()] or ["Medium"]

    if difficulty_filter:
        unknown = set(difficulty_filter).difference(configured)
        if unknown:
            raise ValueError("Difficulties not enabled in configuration: " + ", ".join(sorted(unknown)))
        selected = [label for label in configured if label in difficulty_filter]
    else:
        selected = configured

    if not selected:
        raise ValueError("No difficulties selected after applying filters.")

    settings.DIFFICULTIES = selected
    return config_mgr, selected


def print_puzzle(size: int, regions: RegionMap, solution: Optional[Sequence[Tuple[int, int]]] = None) -> None:
    print(f"Grid Size: {size}x{size}")
    print("\nRegion Map:")
    print(format_region_map(regions))
    if solution is not None:
        print("\nSolution Queens (row, col):")
        print(format_positions(solution))
        print("\nSolution Board:")
        print(format_solution(size, solution))


# ------------- Commands -----------------------------------------------------

def command_solve(args: argparse.Namespace) -> int:
    """Solve a sample or a puzzle read from a JSON file."""
    if args.sample is not None:
        size, regions = args.sample, SAMPLE_PUZZLES[args.sample]
    else:
        size, regions = load_region_file(args.regions_file)

    solution, nodes, elapsed, timed_out = solve_with_stats(size, regions, time_limit=args.time_limit)
    if solution is None:
        print_puzzle(size, regions)
        if timed_out:
            print(f"\nNo solution found within {args.time_limit}s ({nodes} nodes explored).")
        else:
            print("\nNo solution exists (one queen per row, column and region, no touching queens).")
        return EXIT_UNSOLVED

    print_puzzle(size, regions, solution)
    print(f"\nSolve Duration: {elapsed * 1000:.2f} ms ({nodes} nodes explored)")
    return 0


def command_generate(args: argparse.Namespace) -> int:
    """Generate a random puzzle and print it with its seed placement."""
    difficulty = Difficulty.parse(args.difficulty)
    rng = random.Random(args.seed)
    puzzle = generate(args.size, difficulty, rng=rng, verify=args.verify)
    if puzzle is None:
        print(f"Failed to generate a valid {args.size}x{args.size} board. Please try again.")
        return EXIT_UNSOLVED

    print(f"Difficulty: {difficulty.value}")
    print_puzzle(puzzle.size, puzzle.regions, puzzle.solution)
    if args.show_solver:
        solution = solve(puzzle.size, puzzle.regions)
        same = "same as" if solution == puzzle.solution else "differs from"
        print(f"\nSolver witness ({same} the seed placement):")
        print(format_positions(solution or ()))
    return 0


def command_validate(args: argparse.Namespace) -> int:
    """Report region-map problems and solvability for a puzzle file."""
    size, regions = load_region_file(args.regions_file)
    print_puzzle(size, regions)
    problems = region_map_problems(size, regions)
    print()
    if problems:
        print("Region map problems:")
        for problem in problems:
            print(f"  - {problem}")
    else:
        print("Region map is well formed.")

    solvable = solve(size, regions) is not None
    print("Puzzle is solvable." if solvable else "Puzzle has no solution.")
    return 0 if solvable and not problems else EXIT_UNSOLVED


# ------------- Pipeline: benchmark ------------------------------------------

def run_benchmark(
    difficulties: List[str],
    mode: str = "sequential",
    validate: bool = False,
    plots: bool = False,
) -> ExperimentResults:
    """Run the benchmark with the current ``settings`` and export outputs."""
    start = perf_counter()
    print(f"Benchmark ({mode}): N={settings.N_VALUES}, difficulties={difficulties}, runs={settings.RUNS_PER_SIZE}")

    runner = run_experiments_parallel if mode == "parallel" else run_experiments
    results = runner(
        settings.N_VALUES,
        difficulties,
        settings.RUNS_PER_SIZE,
        solve_time_limit=settings.SOLVE_TIME_LIMIT,
        verify=settings.VERIFY_GENERATED,
        base_seed=settings.SEED,
        progress_label="Benchmark",
        validate=validate,
    )

    save_sample_results(results, settings.OUT_DIR)
    save_results_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    save_raw_data_to_csv(results, settings.N_VALUES, settings.OUT_DIR)
    if plots:
        from .plots import plot_and_save

        plot_and_save(results, settings.N_VALUES, settings.OUT_DIR)

    total_time = perf_counter() - start
    print(f"Total time: {total_time:.1f}s ({total_time/60:.1f} minutes)")
    return results


def command_benchmark(args: argparse.Namespace) -> int:
    difficulty_filter = parse_difficulty_filters(args.difficulty)
    _, selected = apply_configuration(args.config, difficulty_filter)
    if args.runs is not None:
        settings.RUNS_PER_SIZE = args.runs
    if args.sizes:
        settings.N_VALUES = sorted({int(n) for n in args.sizes})
    print(f"Selected difficulties: {selected}")
    run_benchmark(selected, mode=args.mode, validate=args.validate, plots=args.plots)
    return 0


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Execute a fast, deterministic smoke test of solver and generator.

    Verifies that:
    - Every bundled sample is solved with a valid placement, and solving twice
      gives the same answer.
    - Seeded generation succeeds for N=4..8 at every difficulty and yields
      well-formed, solvable region maps.
    - The benchmark pipeline produces non-empty CSV files in a temporary folder.
    """
    print("Running quick regression tests...")

    for size, regions in sorted(SAMPLE_PUZZLES.items()):
        solution = solve(size, regions)
        if solution is None or not is_valid_solution(size, solution, regions):
            raise AssertionError(f"Solver failed on the {size}x{size} sample: {solution}.")
        if solve(size, regions) != solution:
            raise AssertionError(f"Solver is not deterministic on the {size}x{size} sample.")
        print(f"  [Solve] sample {size}x{size}: {format_positions(solution)}")

    sizes = list(range(4, 9))
    progress = ProgressPrinter(len(sizes) * len(Difficulty), "Generator")
    step = 0
    for difficulty in Difficulty:
        for size in sizes:
            step += 1
            puzzle = generate(size, difficulty, rng=random.Random(42 + size))
            if puzzle is None:
                raise AssertionError(f"Generator failed for N={size} ({difficulty.value}).")
            problems = region_map_problems(size, puzzle.regions)
            if problems:
                raise AssertionError(f"Generator produced a malformed map for N={size}: {problems}.")
            if solve(size, puzzle.regions) is None:
                raise AssertionError(f"Generated N={size} ({difficulty.value}) puzzle is unsolvable.")
            progress.update(step, f"{difficulty.value} N={size}")

    results = run_experiments([5, 6], ["Easy", "Hard"], runs=3, base_seed=7, validate=True)
    with tempfile.TemporaryDirectory() as tmpdir:
        for path in (
            save_results_to_csv(results, [5, 6], tmpdir),
            save_raw_data_to_csv(results, [5, 6], tmpdir),
            save_sample_results(results, tmpdir),
        ):
            if not Path(path).exists() or Path(path).stat().st_size == 0:
                raise AssertionError(f"CSV {path} was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve, generate and benchmark Queens puzzles.")
    commands = parser.add_subparsers(dest="command", required=True)

    solve_parser = commands.add_parser("solve", help="Solve a sample puzzle or a region map from a JSON file.")
    source = solve_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--sample", type=int, choices=sorted(SAMPLE_PUZZLES), help="Solve a bundled sample puzzle.")
    source.add_argument("--regions-file", help="JSON file with a region matrix or {gridSize, regions}.")
    solve_parser.add_argument("--time-limit", type=float, default=None, help="Give up after this many seconds.")

    gen_parser = commands.add_parser("generate", help="Generate a random solvable puzzle.")
    gen_parser.add_argument("--size", "-n", type=int, default=8, help="Board size N (default: 8).")
    gen_parser.add_argument(
        "--difficulty", "-d", default=Difficulty.MEDIUM.value,
        help="Easy, Medium or Hard (default: Medium).",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible puzzles.")
    gen_parser.add_argument("--verify", action="store_true", help="Re-check the generated puzzle before printing it.")
    gen_parser.add_argument("--show-solver", action="store_true", help="Also print the solver's own witness.")

    validate_parser = commands.add_parser("validate", help="Check a region map file for problems and solvability.")
    validate_parser.add_argument("--regions-file", required=True, help="JSON file with a region matrix or {gridSize, regions}.")

    bench_parser = commands.add_parser("benchmark", help="Benchmark the generator and the solver.")
    bench_parser.add_argument(
        "--mode",
        choices=["sequential", "parallel"],
        default="parallel",
        help="Execution mode: sequential or parallel across processes (default).",
    )
    bench_parser.add_argument(
        "--difficulty",
        "-d",
        action="append",
        help="Filter difficulties (accepts comma-separated values or multiple flags).",
    )
    bench_parser.add_argument("--sizes", nargs="+", type=int, help="Override the configured N values.")
    bench_parser.add_argument("--runs", type=int, default=None, help="Override the configured runs per size.")
    bench_parser.add_argument("--config", default="config.json", help="Path to configuration file (default: config.json).")
    bench_parser.add_argument("--plots", action="store_true", help="Also write PNG charts.")
    bench_parser.add_argument("--validate", action="store_true", help="Validate every generated puzzle and solution (extra assertions).")

    commands.add_parser("quick-test", help="Run quick regression tests and exit.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.command == "quick-test":
        run_quick_regression_tests()
        return

    handlers = {
        "solve": command_solve,
        "generate": command_generate,
        "validate": command_validate,
        "benchmark": command_benchmark,
    }
    try:
        code = handlers[args.command](args)
    except FileNotFoundError as exc:
        print(f"File not found: {exc}")
        raise SystemExit(1) from exc
    except json.JSONDecodeError as exc:
        print(f"Could not parse JSON: {exc}")
        raise SystemExit(1) from exc
    except InvalidPuzzleError as exc:
        print(f"Invalid puzzle: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        print("\nExecution interrupted by user. Cleaning up workers...")
        raise SystemExit(130) from None

    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
