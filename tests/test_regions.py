"""Tests for region growth and region-map checks."""

from pathlib import Path
import random
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from queens.backtracking import generate_placement
from queens.board import Difficulty, InvalidPuzzleError, SAMPLE_PUZZLE_REGIONS_7X7
from queens.regions import (
    FIFO_BIAS,
    _Frontier,
    boundary_edges,
    grow_regions,
    is_connected,
    region_cells,
    region_map_problems,
    validate_region_map,
)

SEEDS_4 = ((0, 1), (1, 3), (2, 0), (3, 2))
# Growth from SEEDS_4 when every pop takes the oldest frontier entry.
BREADTH_FIRST_4 = (
    (0, 0, 0, 1),
    (2, 0, 1, 1),
    (2, 2, 3, 1),
    (2, 3, 3, 3),
)


class _FixedDraw:
    """Stand-in RNG: ``random()`` always returns ``value``, random picks take index 0."""

    def __init__(self, value):
        self.value = value
        self.random_picks = 0

    def random(self):
        return self.value

    def randrange(self, n):
        self.random_picks += 1
        return 0


class FrontierTests(unittest.TestCase):
    def test_oldest_first(self):
        frontier = _Frontier()
        for i in range(4):
            frontier.push(i, i, i)
        popped = [frontier.pop_oldest()[0] for _ in range(4)]
        self.assertEqual(popped, [0, 1, 2, 3])
        self.assertEqual(len(frontier), 0)

    def test_random_removal_swaps_last_entry_in(self):
        frontier = _Frontier()
        for i in range(5):
            frontier.push(i, 0, 0)
        self.assertEqual(frontier.pop_random(_FixedDraw(0.0))[0], 0)
        # Entry 4 was swapped into slot 0; it must not be mistaken for the oldest.
        self.assertEqual(frontier.pop_random(_FixedDraw(0.0))[0], 4)
        self.assertEqual(frontier.pop_oldest()[0], 1)
        self.assertEqual(len(frontier), 2)

    def test_duplicate_cells_allowed(self):
        frontier = _Frontier()
        frontier.push(1, 1, 0)
        frontier.push(1, 1, 2)
        self.assertEqual(len(frontier), 2)
        self.assertEqual(frontier.pop_oldest()[1:], (1, 1, 0))
        self.assertEqual(frontier.pop_oldest()[1:], (1, 1, 2))


class GrowRegionsTests(unittest.TestCase):
    def test_invariants_for_every_difficulty(self):
        for difficulty in Difficulty:
            for size in (4, 6, 9, 12):
                for seed in range(5):
                    with self.subTest(difficulty=difficulty.value, size=size, seed=seed):
                        rng = random.Random(seed)
                        seeds = generate_placement(size, rng)
                        regions = grow_regions(size, seeds, difficulty, rng)
                        self.assertEqual(region_map_problems(size, regions), [])
                        for region_id, (row, column) in enumerate(seeds):
                            self.assertEqual(regions[row][column], region_id)

    def test_reproducible_under_seed(self):
        seeds = generate_placement(10, random.Random(1))
        first = grow_regions(10, seeds, "Hard", random.Random(8))
        second = grow_regions(10, seeds, "Hard", random.Random(8))
        self.assertEqual(first, second)

    def test_accepts_difficulty_labels(self):
        seeds = ((0, 1), (1, 3), (2, 0), (3, 2))
        regions = grow_regions(4, seeds, "easy", random.Random(0))
        self.assertEqual(region_map_problems(4, regions), [])
        with self.assertRaises(ValueError):
            grow_regions(4, seeds, "Extreme")

    def test_stray_cells_fall_back_to_region_zero(self):
        self.assertEqual(grow_regions(3, [], Difficulty.EASY), ((0, 0, 0),) * 3)

    def test_returns_immutable_map(self):
        regions = grow_regions(4, ((0, 1), (1, 3), (2, 0), (3, 2)), Difficulty.MEDIUM, random.Random(3))
        self.assertIsInstance(regions, tuple)
        self.assertIsInstance(regions[0], tuple)

    def test_oldest_first_growth_is_breadth_first(self):
        for difficulty in (Difficulty.EASY, Difficulty.MEDIUM):
            with self.subTest(difficulty=difficulty.value):
                rng = _FixedDraw(0.0)
                self.assertEqual(grow_regions(4, SEEDS_4, difficulty, rng), BREADTH_FIRST_4)
                self.assertEqual(rng.random_picks, 0)

    def test_bias_threshold_per_difficulty(self):
        # A draw of 0.5 is below the Easy bias only.
        easy = _FixedDraw(0.5)
        self.assertEqual(grow_regions(4, SEEDS_4, Difficulty.EASY, easy), BREADTH_FIRST_4)
        self.assertEqual(easy.random_picks, 0)

        with mock.patch.object(_Frontier, "pop_oldest", autospec=True, side_effect=_Frontier.pop_oldest) as spy:
            medium = _FixedDraw(0.5)
            grow_regions(4, SEEDS_4, Difficulty.MEDIUM, medium)
        spy.assert_not_called()
        self.assertGreater(medium.random_picks, 0)

    def test_hard_never_pops_oldest(self):
        for draw in (0.0, 0.99):
            with self.subTest(draw=draw):
                rng = _FixedDraw(draw)
                with mock.patch.object(_Frontier, "pop_oldest", autospec=True, side_effect=_Frontier.pop_oldest) as spy:
                    regions = grow_regions(4, SEEDS_4, Difficulty.HARD, rng)
                spy.assert_not_called()
                self.assertGreater(rng.random_picks, 0)
                self.assertEqual(region_map_problems(4, regions), [])

    def test_random_growth_is_the_same_for_every_difficulty_above_bias(self):
        maps = {grow_regions(4, SEEDS_4, difficulty, _FixedDraw(0.99)) for difficulty in Difficulty}
        self.assertEqual(len(maps), 1)
        self.assertNotEqual(maps.pop(), BREADTH_FIRST_4)

    def test_bias_table(self):
        self.assertEqual(FIFO_BIAS[Difficulty.EASY], 0.7)
        self.assertEqual(FIFO_BIAS[Difficulty.MEDIUM], 0.4)
        self.assertEqual(FIFO_BIAS[Difficulty.HARD], 0.0)


class RegionCheckTests(unittest.TestCase):
    def test_sample_is_well_formed(self):
        self.assertEqual(region_map_problems(7, SAMPLE_PUZZLE_REGIONS_7X7), [])
        validate_region_map(7, SAMPLE_PUZZLE_REGIONS_7X7)

    def test_disconnected_region_reported(self):
        regions = [[0, 1, 0, 2], [3, 1, 1, 2], [3, 3, 2, 2], [3, 3, 2, 2]]
        problems = region_map_problems(4, regions)
        self.assertIn("region 0 is not connected", problems)
        with self.assertRaises(InvalidPuzzleError):
            validate_region_map(4, regions)

    def test_wrong_region_count_reported(self):
        problems = region_map_problems(4, [[0, 0, 1, 1]] * 4)
        self.assertIn("missing region ids: 2, 3", problems)

    def test_unexpected_ids_reported(self):
        problems = region_map_problems(4, [[0, 1, 2, 7]] * 4)
        self.assertIn("missing region ids: 3", problems)
        self.assertIn("unexpected region ids: 7", problems)

    def test_shape_reported(self):
        self.assertEqual(region_map_problems(4, [[0, 1, 2, 3]] * 3), ["region map is not 4x4"])

    def test_region_cells_and_connectivity(self):
        cells = region_cells([[0, 0], [1, 0]])
        self.assertEqual(cells, {0: [(0, 0), (0, 1), (1, 1)], 1: [(1, 0)]})
        self.assertTrue(is_connected(cells[0]))
        self.assertFalse(is_connected([(0, 0), (1, 1)]))
        self.assertFalse(is_connected([]))

    def test_boundary_edges(self):
        self.assertEqual(boundary_edges([[0, 0], [0, 0]]), 0)
        self.assertEqual(boundary_edges([[0, 1], [0, 1]]), 2)
        self.assertEqual(boundary_edges([[0, 1], [2, 3]]), 4)


if __name__ == "__main__":
    unittest.main()
