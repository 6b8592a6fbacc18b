"""Tests for the deterministic solver and the randomized placement search."""

from pathlib import Path
import copy
import itertools
import random
import sys
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from queens.backtracking import generate_placement, solve, solve_with_stats
from queens.board import (
    InvalidPuzzleError,
    SAMPLE_PUZZLE_REGIONS_7X7,
    SAMPLE_PUZZLE_REGIONS_9X9,
)
from queens.utils import is_valid_solution

STRIPES_4 = [[0, 1, 2, 3] for _ in range(4)]


class SolveTests(unittest.TestCase):
    def assert_rules_hold(self, size, solution, regions):
        self.assertIsNotNone(solution)
        self.assertEqual(len(solution), size)
        self.assertEqual([row for row, _ in solution], list(range(size)))
        self.assertEqual(len({column for _, column in solution}), size)
        self.assertEqual(len({regions[row][column] for row, column in solution}), size)
        for (r1, c1), (r2, c2) in itertools.combinations(solution, 2):
            self.assertFalse(abs(r1 - r2) <= 1 and abs(c1 - c2) <= 1)
        self.assertTrue(is_valid_solution(size, solution, regions))

    def test_sample_seven_by_seven(self):
        solution = solve(7, SAMPLE_PUZZLE_REGIONS_7X7)
        self.assert_rules_hold(7, solution, SAMPLE_PUZZLE_REGIONS_7X7)

    def test_sample_nine_by_nine(self):
        solution = solve(9, SAMPLE_PUZZLE_REGIONS_9X9)
        self.assert_rules_hold(9, solution, SAMPLE_PUZZLE_REGIONS_9X9)

    def test_deterministic(self):
        first = solve(9, SAMPLE_PUZZLE_REGIONS_9X9)
        for _ in range(3):
            self.assertEqual(solve(9, SAMPLE_PUZZLE_REGIONS_9X9), first)

    def test_lexicographically_first_witness(self):
        # With one region per column only the touch rule bites.
        self.assertEqual(solve(4, STRIPES_4), ((0, 1), (1, 3), (2, 0), (3, 2)))

    def test_single_region_is_unsatisfiable(self):
        for size in range(2, 9):
            with self.subTest(size=size):
                self.assertIsNone(solve(size, [[0] * size for _ in range(size)]))

    def test_single_cell(self):
        self.assertEqual(solve(1, [[0]]), ((0, 0),))

    def test_input_not_mutated(self):
        regions = [list(row) for row in SAMPLE_PUZZLE_REGIONS_7X7]
        before = copy.deepcopy(regions)
        solve(7, regions)
        self.assertEqual(regions, before)

    def test_malformed_maps_raise(self):
        with self.assertRaises(InvalidPuzzleError):
            solve(4, [[0, 1, 2, 3]] * 3)
        with self.assertRaises(InvalidPuzzleError):
            solve(4, [[0, 1, 2, 3], [0, 1, 2], [0, 1, 2, 3], [0, 1, 2, 3]])
        with self.assertRaises(InvalidPuzzleError):
            solve(0, [])
        with self.assertRaises(InvalidPuzzleError):
            solve(21, [[0] * 21 for _ in range(21)])

    def test_invalid_puzzle_error_is_value_error(self):
        self.assertTrue(issubclass(InvalidPuzzleError, ValueError))


class SolveWithStatsTests(unittest.TestCase):
    def test_matches_solve(self):
        solution, nodes, elapsed, timed_out = solve_with_stats(7, SAMPLE_PUZZLE_REGIONS_7X7)
        self.assertEqual(solution, solve(7, SAMPLE_PUZZLE_REGIONS_7X7))
        self.assertGreater(nodes, 0)
        self.assertGreaterEqual(elapsed, 0.0)
        self.assertFalse(timed_out)

    def test_unsatisfiable_is_not_a_timeout(self):
        solution, nodes, _, timed_out = solve_with_stats(5, [[0] * 5 for _ in range(5)], time_limit=60.0)
        self.assertIsNone(solution)
        self.assertFalse(timed_out)
        self.assertGreater(nodes, 0)

    def test_time_limit_reports_timeout(self):
        clock = itertools.count(0.0, 10.0)
        with mock.patch("queens.backtracking.perf_counter", side_effect=lambda: next(clock)):
            solution, nodes, _, timed_out = solve_with_stats(9, SAMPLE_PUZZLE_REGIONS_9X9, time_limit=5.0)
        self.assertIsNone(solution)
        self.assertTrue(timed_out)
        self.assertEqual(nodes, 0)


class GeneratePlacementTests(unittest.TestCase):
    def test_valid_placements(self):
        for size in [1] + list(range(4, 13)):
            with self.subTest(size=size):
                placement = generate_placement(size, random.Random(size))
                self.assertTrue(is_valid_solution(size, placement))

    def test_sizes_without_arrangement(self):
        self.assertIsNone(generate_placement(2))
        self.assertIsNone(generate_placement(3))

    def test_seeded_rng_is_reproducible(self):
        self.assertEqual(generate_placement(10, random.Random(5)), generate_placement(10, random.Random(5)))

    def test_module_seed_is_reproducible(self):
        random.seed(99)
        first = generate_placement(8)
        random.seed(99)
        self.assertEqual(generate_placement(8), first)

    def test_placements_vary(self):
        rng = random.Random(2024)
        seen = {generate_placement(8, rng) for _ in range(30)}
        self.assertGreater(len(seen), 1)

    def test_out_of_range_size_raises(self):
        with self.assertRaises(InvalidPuzzleError):
            generate_placement(0)


if __name__ == "__main__":
    unittest.main()
