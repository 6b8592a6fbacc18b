"""Region growth and region-map checks.

Regions are grown from one seed cell per future queen by randomized frontier
expansion. The frontier holds ``(cell, region id)`` entries; popping the
oldest entry grows regions breadth-first (compact shapes), popping a random
entry grows them irregularly (winding shapes). The difficulty setting only
changes how often the oldest entry is preferred.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .board import Difficulty, GridPos, InvalidPuzzleError, RegionMap, freeze_region_map

UNCLAIMED = -1

# Orthogonal neighbours: right, left, down, up.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))

# Probability of popping the oldest frontier entry instead of a random one.
FIFO_BIAS: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.7,
    Difficulty.MEDIUM: 0.4,
    Difficulty.HARD: 0.0,
}

_Entry = Tuple[int, int, int, int]  # (sequence number, row, column, region id)


class _Frontier:
    """Multiset of frontier entries with O(1) oldest and random removal.

    ``_entries`` is a dense list used for uniform picks; removal swaps the
    victim with the last element and pops. ``_order`` remembers insertion
    order and is cleaned lazily, skipping entries already removed.
    """

    def __init__(self) -> None:
        self._entries: List[_Entry] = []
        self._index: Dict[int, int] = {}
        self._order: Deque[int] = deque()
        self._counter = 0

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, row: int, column: int, region_id: int) -> None:
        seq = self._counter
        self._counter += 1
        self._index[seq] = len(self._entries)
        self._entries.append((seq, row, column, region_id))
        self._order.append(seq)

    def _remove_at(self, position: int) -> _Entry:
        entry = self._entries[position]
        last = self._entries.pop()
        if last[0] != entry[0]:
            self._entries[position] = last
            self._index[last[0]] = position
        del self._index[entry[0]]
        return entry

    def pop_oldest(self) -> _Entry:
        while self._order[0] not in self._index:
            self._order.popleft()
        return self._remove_at(self._index[self._order.popleft()])

    def pop_random(self, rng) -> _Entry:
        return self._remove_at(rng.randrange(len(self._entries)))


def _unclaimed_neighbours(size: int, row: int, column: int, grid: List[List[int]]) -> Iterable[GridPos]:
    for d_row, d_col in DIRECTIONS:
        n_row, n_col = row + d_row, column + d_col
        if 0 <= n_row < size and 0 <= n_col < size and grid[n_row][n_col] == UNCLAIMED:
            yield n_row, n_col


def _claimed_neighbour_region(size: int, row: int, column: int, grid: List[List[int]]) -> int:
    for d_row, d_col in DIRECTIONS:
        n_row, n_col = row + d_row, column + d_col
        if 0 <= n_row < size and 0 <= n_col < size and grid[n_row][n_col] != UNCLAIMED:
            return grid[n_row][n_col]
    return UNCLAIMED


def grow_regions(
    size: int,
    seeds: Sequence[GridPos],
    difficulty: Union[Difficulty, str],
    rng: Optional[random.Random] = None,
) -> RegionMap:
    """Partition a size x size grid into one connected region per seed.

    Parameters
    ----------
    size : int
        Grid dimension N.
    seeds : sequence of (row, column)
        Seed cells; seed ``i`` starts region ``i``.
    difficulty : Difficulty | str
        Easy pops the oldest frontier entry 70% of the time, Medium 40%,
        Hard never; otherwise a uniformly random entry is popped.
    rng : random.Random | None
        Source of randomness; the module-level generator when omitted.

    Returns
    -------
    RegionMap
        Every cell labeled with a seed index; each region is 4-connected and
        contains its seed.

    Notes
    -----
    Frontier entries may reference the same cell several times; entries whose
    cell was claimed in the meantime are dropped when popped. Cells left
    unclaimed once the frontier is empty take the id of a claimed orthogonal
    neighbour, or 0 when there is none.
    """
    level = Difficulty.parse(difficulty)
    source = rng if rng is not None else random
    bias = FIFO_BIAS[level]

    grid = [[UNCLAIMED] * size for _ in range(size)]
    frontier = _Frontier()

    for region_id, (row, column) in enumerate(seeds):
        grid[row][column] = region_id
    for region_id, (row, column) in enumerate(seeds):
        for n_row, n_col in _unclaimed_neighbours(size, row, column, grid):
            frontier.push(n_row, n_col, region_id)

    while len(frontier):
        if bias > 0.0 and source.random() < bias:
            _, row, column, region_id = frontier.pop_oldest()
        else:
            _, row, column, region_id = frontier.pop_random(source)

        if grid[row][column] != UNCLAIMED:
            continue
        grid[row][column] = region_id
        for n_row, n_col in _unclaimed_neighbours(size, row, column, grid):
            frontier.push(n_row, n_col, region_id)

    for row in range(size):
        for column in range(size):
            if grid[row][column] == UNCLAIMED:
                neighbour = _claimed_neighbour_region(size, row, column, grid)
                grid[row][column] = neighbour if neighbour != UNCLAIMED else 0

    return freeze_region_map(grid)


def region_cells(regions: Sequence[Sequence[int]]) -> Dict[int, List[GridPos]]:
    """Group cell positions by region id (row-major within each region)."""
    cells: Dict[int, List[GridPos]] = {}
    for row, line in enumerate(regions):
        for column, region_id in enumerate(line):
            cells.setdefault(region_id, []).append((row, column))
    return cells


def is_connected(cells: Sequence[GridPos]) -> bool:
    """Return True if ``cells`` form a single 4-connected component."""
    if not cells:
        return False
    remaining = set(cells)
    queue = deque([cells[0]])
    remaining.discard(cells[0])
    while queue:
        row, column = queue.popleft()
        for d_row, d_col in DIRECTIONS:
            neighbour = (row + d_row, column + d_col)
            if neighbour in remaining:
                remaining.discard(neighbour)
                queue.append(neighbour)
    return not remaining


def region_map_problems(size: int, regions: Sequence[Sequence[int]]) -> List[str]:
    """Describe every way ``regions`` breaks the region-map invariants.

    A well-formed map is size x size, uses exactly the ids ``0..size-1`` and
    every region is 4-connected. Returns an empty list for a well-formed map.
    """
    problems: List[str] = []
    if len(regions) != size or any(len(line) != size for line in regions):
        problems.append(f"region map is not {size}x{size}")
        return problems

    cells = region_cells(regions)
    expected = set(range(size))
    if set(cells) != expected:
        missing = sorted(expected.difference(cells))
        extra = sorted(set(cells).difference(expected))
        if missing:
            problems.append("missing region ids: " + ", ".join(str(i) for i in missing))
        if extra:
            problems.append("unexpected region ids: " + ", ".join(str(i) for i in extra))

    for region_id in sorted(cells):
        if not is_connected(cells[region_id]):
            problems.append(f"region {region_id} is not connected")
    return problems


def validate_region_map(size: int, regions: Sequence[Sequence[int]]) -> None:
    """Raise ``InvalidPuzzleError`` listing all problems found, if any."""
    problems = region_map_problems(size, regions)
    if problems:
        raise InvalidPuzzleError("Invalid region map: " + "; ".join(problems) + ".")


def boundary_edges(regions: Sequence[Sequence[int]]) -> int:
    """Count orthogonally adjacent cell pairs that belong to different regions."""
    total = 0
    for row, line in enumerate(regions):
        for column, region_id in enumerate(line):
            if column + 1 < len(line) and line[column + 1] != region_id:
                total += 1
            if row + 1 < len(regions) and regions[row + 1][column] != region_id:
                total += 1
    return total
