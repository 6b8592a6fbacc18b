"""Global settings and timeouts for the Queens benchmark pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`queens.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

import multiprocessing
from typing import List, Optional
from datetime import datetime

# Board sizes to evaluate (in ascending order) for scalability analysis
N_VALUES: List[int] = [5, 6, 7, 8, 9, 10, 12]

# Difficulty labels to benchmark (see queens.board.Difficulty)
DIFFICULTIES: List[str] = ["Easy", "Medium", "Hard"]

# Generated puzzles per (N, difficulty) pair
RUNS_PER_SIZE: int = 20

# Base seed for reproducible runs (None = fresh entropy every run)
SEED: Optional[int] = 12345

# Solver time limit in seconds when solving generated puzzles (None = no limit)
SOLVE_TIME_LIMIT: Optional[float] = 30.0

# Global timeout per experiment bundle (None = no limit)
EXPERIMENT_TIMEOUT: Optional[float] = 300.0

# Re-run solver and region checks inside the generator
VERIFY_GENERATED: bool = False

# Output directory for CSV and charts
OUT_DIR: str = "results_queens"

# Number of worker processes to use (leave one core for the OS)
NUM_PROCESSES: int = max(1, multiprocessing.cpu_count() - 1)

# Output naming policy --------------------------------------------------------

# When True, results and plots will include a datestamp suffix (e.g., _20251113-142530)
# applied consistently across all artifacts produced within the same run.
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run labeling to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def set_timeouts(
        solve_timeout: Optional[float] = 30.0,
        experiment_timeout: Optional[float] = 300.0,
) -> None:
        """Configure the solver limit and the experiment wrapper limit.

        Parameters
        - solve_timeout: Limit in seconds for each solve of a generated puzzle
            (None disables the limit).
        - experiment_timeout: Hard cap for a whole experiment bundle in seconds
            (None disables). When reached, outer loops stop scheduling new
            work.

        Side effects
        - Updates module-level globals and prints a concise summary to stdout to
            make the active limits explicit at run start.
        """
        global SOLVE_TIME_LIMIT, EXPERIMENT_TIMEOUT
        SOLVE_TIME_LIMIT = solve_timeout
        EXPERIMENT_TIMEOUT = experiment_timeout

        print("Timeout settings configured:")
        print(f"   - Solve: {SOLVE_TIME_LIMIT}s" if SOLVE_TIME_LIMIT else "   - Solve: unlimited")
        print(
                f"   - Experiment: {EXPERIMENT_TIMEOUT}s"
                if EXPERIMENT_TIMEOUT
                else "   - Experiment: unlimited"
        )
