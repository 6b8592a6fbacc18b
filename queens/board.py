"""Value types and boundary helpers for the Queens puzzle.

Representation
--------------
- A grid position is a ``(row, column)`` tuple, 0-indexed.
- A region map is a size x size matrix of integer region ids. Maps produced
  by this package are tuples of tuples; any sequence of sequences is accepted
  as input.
- A solution is a tuple of ``size`` positions ordered by row, so
  ``solution[r] == (r, c)``.

The module also owns the boundary contract for region maps supplied from
outside (for example by an image-extraction service): see
:func:`normalize_region_map`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

GridPos = Tuple[int, int]
RegionMap = Tuple[Tuple[int, ...], ...]
Solution = Tuple[GridPos, ...]

# Supported range for externally supplied puzzles.
MIN_GRID_SIZE = 4
MAX_GRID_SIZE = 20


class InvalidPuzzleError(ValueError):
    """Raised when a region map or grid size violates the input contract."""


class Difficulty(str, Enum):
    """Generator difficulty; only biases region growth, never the solver."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: Any) -> "Difficulty":
        """Accept an enum member or a case-insensitive label such as ``"hard"``."""
        if isinstance(value, cls):
            return value
        label = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == label:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown difficulty '{value}'. Allowed: {allowed}")


@dataclass(frozen=True)
class Puzzle:
    """A generated instance: the region map plus the placement that seeded it."""

    size: int
    regions: RegionMap
    solution: Solution


SAMPLE_PUZZLE_REGIONS_7X7: RegionMap = (
    (0, 0, 0, 1, 1, 2, 2),
    (0, 0, 1, 1, 2, 2, 2),
    (0, 3, 3, 4, 4, 2, 2),
    (3, 3, 4, 4, 5, 5, 2),
    (3, 6, 6, 4, 5, 5, 5),
    (3, 6, 6, 6, 5, 5, 5),
    (6, 6, 6, 6, 6, 5, 5),
)

SAMPLE_PUZZLE_REGIONS_9X9: RegionMap = (
    (0, 0, 0, 0, 0, 1, 1, 2, 2),
    (0, 3, 3, 3, 0, 1, 4, 4, 2),
    (0, 3, 3, 5, 0, 0, 4, 4, 4),
    (3, 3, 5, 5, 0, 6, 6, 4, 7),
    (3, 8, 8, 5, 5, 6, 6, 7, 7),
    (8, 8, 5, 5, 6, 6, 6, 7, 7),
    (8, 9, 9, 5, 10, 10, 7, 7, 7),
    (8, 9, 9, 10, 10, 10, 10, 7, 7),
    (9, 9, 9, 10, 11, 11, 11, 11, 11),
)

SAMPLE_PUZZLES: Dict[int, RegionMap] = {
    7: SAMPLE_PUZZLE_REGIONS_7X7,
    9: SAMPLE_PUZZLE_REGIONS_9X9,
}


def freeze_region_map(regions: Sequence[Sequence[int]]) -> RegionMap:
    """Return an immutable copy of ``regions``."""
    return tuple(tuple(int(value) for value in row) for row in regions)


def check_square(size: int, regions: Sequence[Sequence[int]]) -> None:
    """Raise ``InvalidPuzzleError`` unless ``regions`` is a size x size matrix.

    Only the shape and ``1 <= size <= MAX_GRID_SIZE`` are checked here; the
    lower bound of the supported range applies to external input and is
    enforced by :func:`normalize_region_map`.
    """
    if size < 1 or size > MAX_GRID_SIZE:
        raise InvalidPuzzleError(f"Grid size {size} is outside the supported range 1-{MAX_GRID_SIZE}.")
    if len(regions) != size:
        raise InvalidPuzzleError(f"Region map has {len(regions)} rows but grid size is {size}.")
    for index, row in enumerate(regions):
        if len(row) != size:
            raise InvalidPuzzleError(
                f"Region map row {index} has {len(row)} entries but grid size is {size}."
            )


def _square_row(row: Any, width: int) -> List[int]:
    # Rows that are not sequences of ids at all are replaced by a row of zeros.
    if isinstance(row, (str, bytes, Mapping, Set)) or not isinstance(row, Iterable):
        return [0] * width
    values = list(row)
    if len(values) > width:
        return values[:width]
    if len(values) < width:
        fill = values[-1] if values else 0
        return values + [fill] * (width - len(values))
    return values


def normalize_region_map(
    regions: Sequence[Any],
    declared_size: Optional[int] = None,
) -> Tuple[int, RegionMap]:
    """Sanitize an externally supplied region map.

    Parameters
    ----------
    regions : sequence of rows
        Raw region ids, possibly ragged. Any hashable value is an id; rows
        may be any iterable except strings, mappings and sets.
    declared_size : int | None
        Size claimed by the supplier. The actual row count always wins.

    Returns
    -------
    (size, regions)
        The effective grid size and a square region map whose ids are the dense
        range ``0..R-1`` assigned in first-seen, row-major order.

    Raises
    ------
    InvalidPuzzleError
        If the map is empty, a region id is unhashable, the size falls outside
        ``[MIN_GRID_SIZE, MAX_GRID_SIZE]``, or the result is not square.
    """
    if not regions:
        raise InvalidPuzzleError("Region map is empty.")

    size = len(regions)
    squared = [_square_row(row, size) for row in regions]

    id_map: Dict[Any, int] = {}
    for index, row in enumerate(squared):
        for value in row:
            try:
                if value not in id_map:
                    id_map[value] = len(id_map)
            except TypeError as exc:
                raise InvalidPuzzleError(f"Unusable region id {value!r} in row {index}.") from exc
    dense = freeze_region_map([[id_map[value] for value in row] for row in squared])

    if size < MIN_GRID_SIZE or size > MAX_GRID_SIZE:
        claimed = f" (declared {declared_size})" if declared_size not in (None, size) else ""
        raise InvalidPuzzleError(
            f"Invalid grid size detected: {size}{claimed}. "
            f"Supported range is {MIN_GRID_SIZE}-{MAX_GRID_SIZE}."
        )
    if any(len(row) != size for row in dense):
        raise InvalidPuzzleError(f"Region map dimensions do not match grid size {size}.")
    return size, dense


def format_region_map(regions: Sequence[Sequence[int]]) -> str:
    """Render region ids right-aligned to width 2, one grid row per line."""
    return "\n".join(" ".join(f"{value:>2}" for value in row) for row in regions)


def format_solution(size: int, solution: Sequence[GridPos]) -> str:
    """Render a placement as a grid of ``Q`` (queen) and ``.`` (empty)."""
    grid = [["."] * size for _ in range(size)]
    for row, column in solution:
        grid[row][column] = "Q"
    return "\n".join(" ".join(line) for line in grid)


def format_positions(solution: Sequence[GridPos]) -> str:
    return ", ".join(f"({row}, {column})" for row, column in solution)
