"""Constraint primitives shared by the solver, the generator and live validation.

Four rules apply between any two queens: they may not share a row, a column or
a region, and they may not touch (Chebyshev distance 1, diagonals included).

Representation
--------------
Positions are ``(row, column)`` tuples. Region maps are indexed as
``regions[row][column]``. Marker boards are size x size matrices of booleans
where True means a queen is placed on the cell.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Sequence

from .board import GridPos


def _clash(first: GridPos, second: GridPos, regions: Optional[Sequence[Sequence[int]]]) -> bool:
    """Return True if two distinct positions violate any of the four rules."""
    row_a, col_a = first
    row_b, col_b = second
    if row_a == row_b or col_a == col_b:
        return True
    if regions is not None and regions[row_a][col_a] == regions[row_b][col_b]:
        return True
    return abs(row_a - row_b) <= 1 and abs(col_a - col_b) <= 1


def is_valid_placement(
    candidate: GridPos,
    placed: Sequence[GridPos],
    regions: Optional[Sequence[Sequence[int]]],
) -> bool:
    """Return True if ``candidate`` can join ``placed`` without breaking a rule.

    Passing ``regions=None`` disables the region rule; the placement generator
    searches an empty grid that way.
    """
    for queen in placed:
        if _clash(candidate, queen, regions):
            return False
    return True


def marked_positions(markers: Sequence[Sequence[bool]]) -> List[GridPos]:
    """Collect marked cells in row-major order."""
    return [
        (row, column)
        for row, line in enumerate(markers)
        for column, marked in enumerate(line)
        if marked
    ]


def find_conflicts(
    size: int,
    markers: Sequence[Sequence[bool]],
    regions: Sequence[Sequence[int]],
) -> FrozenSet[GridPos]:
    """Return every marked cell involved in at least one rule violation.

    The board may hold any number of markers. Both members of a conflicting
    pair are reported. O(Q^2) in the number of marked cells ``Q``.
    """
    queens = [(row, column) for row, column in marked_positions(markers) if row < size and column < size]
    errors = set()
    for i, first in enumerate(queens):
        for second in queens[i + 1:]:
            if _clash(first, second, regions):
                errors.add(first)
                errors.add(second)
    return frozenset(errors)


def conflicting_pairs(
    positions: Sequence[GridPos],
    regions: Optional[Sequence[Sequence[int]]] = None,
) -> int:
    """Count pairs of positions that violate a rule (0 for a valid placement)."""
    total = 0
    for i, first in enumerate(positions):
        for second in positions[i + 1:]:
            if _clash(first, second, regions):
                total += 1
    return total


def is_valid_solution(
    size: int,
    solution: Optional[Sequence[GridPos]],
    regions: Optional[Sequence[Sequence[int]]] = None,
) -> bool:
    """Return True if ``solution`` is a complete, rule-abiding placement.

    Contract
    - Exactly ``size`` positions, the r-th one on row r, all inside the grid.
    - Zero conflicting pairs under the four rules (region rule skipped when
      ``regions`` is None).
    """
    if not solution or len(solution) != size:
        return False
    for row, (queen_row, column) in enumerate(solution):
        if queen_row != row or not 0 <= column < size:
            return False
    return conflicting_pairs(solution, regions) == 0
