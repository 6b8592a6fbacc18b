"""Queens puzzle solver and generator."""

from .backtracking import generate_placement, solve, solve_with_stats
from .board import (
    Difficulty,
    InvalidPuzzleError,
    Puzzle,
    SAMPLE_PUZZLES,
    normalize_region_map,
)
from .generator import generate
from .hints import Hint, is_solvable, next_hint, solution_markers
from .regions import grow_regions, region_map_problems, validate_region_map
from .utils import find_conflicts, is_valid_placement, is_valid_solution

__version__ = "1.0.0"

__all__ = [
    "solve",
    "solve_with_stats",
    "generate_placement",
    "grow_regions",
    "generate",
    "is_valid_placement",
    "find_conflicts",
    "is_valid_solution",
    "normalize_region_map",
    "region_map_problems",
    "validate_region_map",
    "is_solvable",
    "next_hint",
    "solution_markers",
    "Hint",
    "Difficulty",
    "InvalidPuzzleError",
    "Puzzle",
    "SAMPLE_PUZZLES",
]
