import random
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domino_dp import (
    brute_force_max_sum,
    build_carry_table,
    build_vertical_table,
    column_cell_weights,
    column_pair_weights,
    horizontal_carries,
    max_domino_sum,
    solve,
    vertical_placements,
)
from grid_helpers import Grid

RANDOM_SEED = 1337


def random_grid(rng: random.Random, rows: int, cols: int, low: int = -9, high: int = 9) -> Grid:
    return Grid.from_rows([[rng.randint(low, high) for _ in range(cols)] for _ in range(rows)])


def single_row_best(values) -> int:
    """Independent 1-D interval DP over adjacent pairs."""
    best = [0] * (len(values) + 1)
    for i in range(2, len(values) + 1):
        best[i] = max(best[i - 1], best[i - 2] + values[i - 2] + values[i - 1])
    return best[len(values)] if values else 0


class VerticalPlacementTests(unittest.TestCase):
    def test_empty_base_enumerates_all_path_tilings(self) -> None:
        self.assertEqual(sorted(vertical_placements(0, 3)), [0, 0b011, 0b110])
        self.assertEqual(sorted(vertical_placements(0, 4)), [0, 0b0011, 0b0110, 0b1100, 0b1111])

    def test_occupied_rows_block_pairs(self) -> None:
        self.assertEqual(sorted(vertical_placements(0b0010, 4)), [0, 0b1100])
        self.assertEqual(vertical_placements(0b111, 3), (0,))

    def test_results_never_overlap_base_mask(self) -> None:
        for rows in range(1, 7):
            for base_mask, placements in enumerate(build_vertical_table(rows)):
                for mask in placements:
                    self.assertEqual(mask & base_mask, 0)
                self.assertIn(0, placements)
                self.assertEqual(len(set(placements)), len(placements))

    def test_placements_are_not_cached_between_calls(self) -> None:
        self.assertFalse(hasattr(vertical_placements, "cache_info"))
        self.assertFalse(hasattr(horizontal_carries, "cache_info"))
        first = build_carry_table(4)
        second = build_carry_table(4)
        self.assertEqual(first, second)
        self.assertIsNot(first[0], second[0])

    def test_degenerate_widths(self) -> None:
        self.assertEqual(vertical_placements(0, 0), (0,))
        self.assertEqual(vertical_placements(0, 1), (0,))


class HorizontalCarryTests(unittest.TestCase):
    def test_powerset_of_free_rows(self) -> None:
        self.assertEqual(sorted(horizontal_carries(0b101, 3)), [0, 0b010])
        self.assertEqual(sorted(horizontal_carries(0, 3)), list(range(8)))
        self.assertEqual(horizontal_carries(0b11, 2), (0,))

    def test_table_sizes(self) -> None:
        rows = 5
        table = build_carry_table(rows)
        self.assertEqual(len(table), 1 << rows)
        for base_mask, carries in enumerate(table):
            free = rows - bin(base_mask).count("1")
            self.assertEqual(len(carries), 1 << free)
            self.assertTrue(all(mask & base_mask == 0 for mask in carries))
        self.assertEqual(sum(len(carries) for carries in table), 3 ** rows)


class WeightTableTests(unittest.TestCase):
    def test_pair_weights_sum_flagged_rows(self) -> None:
        grid = Grid.from_rows([[1, 2, 3], [4, 5, 6]])
        table = column_pair_weights(grid)
        self.assertEqual(table.shape, (4, 2))
        self.assertEqual(table[0].tolist(), [0, 0])
        self.assertEqual(table[0b01].tolist(), [3, 5])
        self.assertEqual(table[0b10].tolist(), [9, 11])
        self.assertEqual(table[0b11].tolist(), [12, 16])

    def test_pair_weights_are_additive(self) -> None:
        rng = random.Random(RANDOM_SEED)
        grid = random_grid(rng, 4, 5)
        table = column_pair_weights(grid)
        for mask in range(16):
            for col in range(4):
                expected = sum(
                    grid.value(row, col) + grid.value(row, col + 1)
                    for row in range(4)
                    if mask & (1 << row)
                )
                self.assertEqual(int(table[mask, col]), expected)

    def test_single_column_has_no_pairs(self) -> None:
        grid = Grid.from_rows([[1], [2]])
        self.assertEqual(column_pair_weights(grid).shape, (4, 0))

    def test_cell_weights(self) -> None:
        grid = Grid.from_rows([[1, 2], [3, 4]])
        self.assertEqual(column_cell_weights(grid)[0b11].tolist(), [4, 6])


class MaxDominoSumTests(unittest.TestCase):
    def test_golden_two_by_two(self) -> None:
        grid = Grid.from_rows([[1, 2], [3, 4]])
        self.assertEqual(brute_force_max_sum(grid), 10)
        self.assertEqual(max_domino_sum(grid), 10)

    def test_one_by_one_is_zero(self) -> None:
        for value in (-5, 0, 7):
            self.assertEqual(max_domino_sum(Grid.from_rows([[value]])), 0)

    def test_degenerate_dimensions(self) -> None:
        self.assertEqual(max_domino_sum(Grid(())), 0)
        self.assertEqual(max_domino_sum(Grid.from_rows([[], []])), 0)
        self.assertEqual(max_domino_sum(Grid.empty(0, 5)), 0)

    def test_prefers_leaving_negative_cells_uncovered(self) -> None:
        grid = Grid.from_rows([[5, -100, 5], [-100, -100, -100]])
        self.assertEqual(max_domino_sum(grid), 0)
        grid = Grid.from_rows([[5, -6, 5, 5]])
        self.assertEqual(max_domino_sum(grid), 10)

    def test_vertical_and_horizontal_mix(self) -> None:
        grid = Grid.from_rows([[9, 1, 1], [9, 1, 1], [0, 5, 5]])
        # Every cell but the bottom-left zero is covered.
        self.assertEqual(max_domino_sum(grid), 32)

    def test_single_row_matches_interval_dp(self) -> None:
        rng = random.Random(RANDOM_SEED)
        for cols in range(1, 13):
            values = [rng.randint(-9, 9) for _ in range(cols)]
            grid = Grid.from_rows([values])
            with self.subTest(values=values):
                self.assertEqual(max_domino_sum(grid), single_row_best(values))
                self.assertEqual(max_domino_sum(grid.transposed()), single_row_best(values))

    def test_non_negative_bounds(self) -> None:
        rng = random.Random(RANDOM_SEED)
        for _ in range(20):
            grid = random_grid(rng, rng.randint(1, 4), rng.randint(1, 6), low=0)
            best = max_domino_sum(grid)
            self.assertGreaterEqual(best, 0)
            self.assertLessEqual(best, grid.total())

    def test_all_even_non_negative_board_is_fully_covered(self) -> None:
        grid = Grid.from_rows([[1] * 4 for _ in range(3)])
        self.assertEqual(max_domino_sum(grid), 12)

    def test_idempotent(self) -> None:
        grid = random_grid(random.Random(RANDOM_SEED), 3, 5)
        self.assertEqual(max_domino_sum(grid), max_domino_sum(grid))

    def test_monotone_in_each_cell(self) -> None:
        rng = random.Random(RANDOM_SEED)
        for _ in range(15):
            grid = random_grid(rng, rng.randint(1, 3), rng.randint(1, 4))
            base = max_domino_sum(grid)
            row = rng.randrange(grid.rows)
            col = rng.randrange(grid.cols)
            bumped = grid.with_value(row, col, grid.value(row, col) + rng.randint(1, 10))
            self.assertGreaterEqual(max_domino_sum(bumped), base)

    def test_matches_brute_force_on_small_grids(self) -> None:
        rng = random.Random(RANDOM_SEED)
        # Tall shapes run the engine with masks up to 10 rows wide.
        shapes = [(rows, cols) for rows in range(1, 11) for cols in range(1, 21) if rows * cols <= 20]
        for rows, cols in shapes:
            for _ in range(3):
                grid = random_grid(rng, rows, cols)
                expected = brute_force_max_sum(grid)
                with self.subTest(grid=grid.values):
                    self.assertEqual(max_domino_sum(grid), expected)
                    self.assertEqual(max_domino_sum(grid, clamp_negative_carry=False), expected)
                    self.assertEqual(solve(grid), expected)

    def test_negative_carry_clamp_does_not_change_optimum(self) -> None:
        rng = random.Random(RANDOM_SEED)
        for _ in range(25):
            grid = random_grid(rng, rng.randint(1, 4), rng.randint(1, 5), low=-20, high=5)
            self.assertEqual(
                max_domino_sum(grid, clamp_negative_carry=False),
                max_domino_sum(grid),
            )


class SolveTests(unittest.TestCase):
    def test_transpose_keeps_optimum(self) -> None:
        rng = random.Random(RANDOM_SEED)
        grid = random_grid(rng, 5, 2)
        self.assertEqual(solve(grid), max_domino_sum(grid))
        self.assertEqual(solve(grid, allow_transpose=False), max_domino_sum(grid.transposed()))

    def test_returns_python_int(self) -> None:
        self.assertIsInstance(solve(Grid.from_rows([[1, 2]])), int)


if __name__ == "__main__":
    unittest.main()
