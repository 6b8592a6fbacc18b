"""Random puzzle generation.

A puzzle is built in two steps: a random non-touching queen placement is
found on an empty grid, then one region is grown around each queen. The
placement is therefore a witness that the resulting puzzle is solvable. The
solver may still return a different placement for the same region map.
"""

from __future__ import annotations

import random
from typing import Optional, Union

from .backtracking import generate_placement, solve
from .board import Difficulty, Puzzle
from .regions import grow_regions, region_map_problems


def generate(
    size: int,
    difficulty: Union[Difficulty, str] = Difficulty.MEDIUM,
    rng: Optional[random.Random] = None,
    verify: bool = False,
) -> Optional[Puzzle]:
    """Generate a solvable puzzle of the given size.

    Parameters
    ----------
    size : int
        Grid dimension N.
    difficulty : Difficulty | str
        Region growth policy, see :func:`queens.regions.grow_regions`.
    rng : random.Random | None
        Shared by the placement search and the region growth. The module-level
        generator is used when omitted.
    verify : bool
        Re-run the solver and the region-map checks on the result and return
        None if either fails.

    Returns
    -------
    Puzzle | None
        None when no placement exists for ``size`` (or verification failed).
    """
    level = Difficulty.parse(difficulty)
    solution = generate_placement(size, rng)
    if solution is None:
        return None

    regions = grow_regions(size, solution, level, rng)
    if verify and (region_map_problems(size, regions) or solve(size, regions) is None):
        return None
    return Puzzle(size=size, regions=regions, solution=solution)
