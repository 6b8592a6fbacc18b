"""Quick regression tests for the Queens benchmark orchestrator."""

from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from queens.analysis import cli


class QuickRegressionTests(unittest.TestCase):
    """Verify that the lightweight regression checks pass."""

    def test_solver_generator_and_csv_generation(self):
        """Ensure samples solve, seeded generation succeeds, and CSV export works."""
        cli.run_quick_regression_tests()


if __name__ == "__main__":
    unittest.main()
