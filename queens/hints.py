"""Play helpers built on the deterministic solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .backtracking import solve
from .board import GridPos


@dataclass(frozen=True)
class Hint:
    """Outcome of a hint request.

    ``position`` is None either because the board is unsolvable
    (``solvable`` is False) or because every solver queen is already marked.
    """

    solvable: bool
    position: Optional[GridPos] = None


def is_solvable(size: int, regions: Sequence[Sequence[int]]) -> bool:
    return solve(size, regions) is not None


def next_hint(
    size: int,
    regions: Sequence[Sequence[int]],
    markers: Sequence[Sequence[bool]],
) -> Hint:
    """Reveal the first queen of the solver's witness that is not yet marked.

    The solver is deterministic, so repeated hints on the same board walk the
    same witness row by row.
    """
    solution = solve(size, regions)
    if solution is None:
        return Hint(solvable=False)
    for row, column in solution:
        if not markers[row][column]:
            return Hint(solvable=True, position=(row, column))
    return Hint(solvable=True)


def solution_markers(size: int, solution: Sequence[GridPos]) -> List[List[bool]]:
    """Build a marker board with a queen on every solution cell."""
    markers = [[False] * size for _ in range(size)]
    for row, column in solution:
        markers[row][column] = True
    return markers
