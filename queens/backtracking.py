"""Backtracking search for the Queens puzzle.

This module implements iterative (non-recursive) backtracking over rows and
provides three entry points:

- solve(size, regions): deterministic search that returns the first valid
    placement, trying columns in ascending order on every row.
- solve_with_stats(size, regions, time_limit=None): the same search, also
    reporting explored nodes, elapsed time and whether a time budget ran out.
- generate_placement(size, rng=None): randomized search on an empty grid (no
    region rule) used to seed the puzzle generator.

Implementation overview
-----------------------
- State representation: ``placed`` holds the queens committed so far, the
    r-th entry sitting on row r. It is local to one call.
- Search strategy: depth-first search with an explicit stack of ``_Frame``
    objects, one per row, each holding its ordered candidate columns and the
    index of the next column to try. Descending pushes a frame; exhausting a
    frame pops it and undoes the parent row's queen.
- Ordering injection: a ``column_order(row) -> list[int]`` callback is asked
    for the candidate order every time a row frame is entered, so the
    generator reshuffles on every visit while the solver stays ascending.

Contract (public API)
---------------------
- ``solve`` is a pure function of ``(size, regions)``: repeated calls return
    identical results. The hint feature relies on that.
- Unsatisfiable inputs return ``None``; malformed inputs raise
    ``InvalidPuzzleError``.
- Nodes explored semantics: incremented every time a candidate cell is
    evaluated against the placed queens, accepted or not.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, List, Optional, Sequence, Tuple

from .board import GridPos, InvalidPuzzleError, MAX_GRID_SIZE, Solution, check_square
from .utils import is_valid_placement

SolveResult = Tuple[Optional[Solution], int, float, bool]


@dataclass
class _Frame:
    """Mutable stack frame capturing the state at a decision level."""

    row: int
    candidates: List[int]
    next_index: int = 0


def _iterative_backtracking(
    size: int,
    allowed: Callable[[GridPos, List[GridPos]], bool],
    column_order: Callable[[int], List[int]],
    time_limit: Optional[float] = None,
) -> SolveResult:
    """Generic non-recursive row-by-row backtracking.

    Parameters
    ----------
    size : int
        Number of rows (and queens) to place.
    allowed : callable
        Predicate ``allowed(candidate, placed)`` deciding whether a cell may
        receive the next queen.
    column_order : callable
        Returns the columns to try for a row, in order. Called once per frame.
    time_limit : float | None
        Optional wall-clock budget in seconds.

    Returns
    -------
    (solution, nodes_explored, elapsed_seconds, timed_out)
    """
    placed: List[GridPos] = []
    stack: List[_Frame] = [_Frame(0, column_order(0))]
    explored = 0
    start = perf_counter()

    while stack:
        if time_limit is not None and (perf_counter() - start) > time_limit:
            return None, explored, perf_counter() - start, True

        frame = stack[-1]
        if len(placed) > frame.row:
            # The queen tried on this row led to a dead end; take it back.
            placed.pop()

        if frame.next_index >= len(frame.candidates):
            # All columns failed on this row; report failure to the row above.
            stack.pop()
            continue

        column = frame.candidates[frame.next_index]
        frame.next_index += 1
        explored += 1

        candidate = (frame.row, column)
        if not allowed(candidate, placed):
            continue

        placed.append(candidate)
        if frame.row == size - 1:
            return tuple(placed), explored, perf_counter() - start, False

        stack.append(_Frame(frame.row + 1, column_order(frame.row + 1)))

    return None, explored, perf_counter() - start, False


def solve_with_stats(
    size: int,
    regions: Sequence[Sequence[int]],
    time_limit: Optional[float] = None,
) -> SolveResult:
    """Solve a puzzle and report search effort.

    Parameters
    ----------
    size : int
        Grid dimension N (1 <= N <= MAX_GRID_SIZE).
    regions : sequence of sequences of int
        Region id of every cell; must be N x N. Not modified.
    time_limit : float | None
        Optional wall-clock limit in seconds imposed by the caller.

    Returns
    -------
    (solution, nodes_explored, elapsed_seconds, timed_out)
        - solution: tuple of N ``(row, column)`` positions, or None.
        - nodes_explored: candidate cells evaluated.
        - elapsed_seconds: wall time measured via ``perf_counter()``.
        - timed_out: True when the search stopped because of ``time_limit``;
          a None solution with ``timed_out`` False means unsatisfiable.

    Determinism and ordering
    ------------------------
    Rows are filled top to bottom and columns tried left to right, so the
    lexicographically first valid placement is returned.

    Raises
    ------
    InvalidPuzzleError
        If ``size`` is out of range or ``regions`` is not N x N.
    """
    check_square(size, regions)
    ascending = list(range(size))

    def allowed(candidate: GridPos, placed: List[GridPos]) -> bool:
        return is_valid_placement(candidate, placed, regions)

    return _iterative_backtracking(size, allowed, lambda row: ascending, time_limit)


def solve(size: int, regions: Sequence[Sequence[int]]) -> Optional[Solution]:
    """Return the first valid placement for ``regions`` or None if none exists."""
    solution, _, _, _ = solve_with_stats(size, regions)
    return solution


def generate_placement(size: int, rng: Optional[random.Random] = None) -> Optional[Solution]:
    """Find a random non-touching placement of ``size`` queens on an empty grid.

    Only the row, column and adjacency rules apply. The column order is
    reshuffled every time a row is entered, so repeated calls explore
    different parts of the search space. Returns None when no arrangement
    exists (sizes 2 and 3).

    Determinism
    -----------
    Stochastic. Pass a seeded ``random.Random`` or seed the module-level
    ``random`` generator for reproducible results.
    """
    if size < 1 or size > MAX_GRID_SIZE:
        raise InvalidPuzzleError(f"Grid size {size} is outside the supported range 1-{MAX_GRID_SIZE}.")
    source = rng if rng is not None else random

    def shuffled_columns(row: int) -> List[int]:
        return source.sample(range(size), size)

    def allowed(candidate: GridPos, placed: List[GridPos]) -> bool:
        return is_valid_placement(candidate, placed, None)

    solution, _, _, _ = _iterative_backtracking(size, allowed, shuffled_columns)
    return solution
