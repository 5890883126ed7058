"""Profile DP for the maximum-weight partial domino covering of a grid."""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from grid_helpers import Grid, full_row_mask, iter_set_bits, row_to_bit

# Mask widths above this make the carry tables (3^rows entries) too slow in practice.
PRACTICAL_ROW_LIMIT = 12

LOGGER = logging.getLogger(__name__)

# =========================
# Vertical placements
# =========================
def vertical_placements(base_mask: int, rows: int) -> Tuple[int, ...]:
    """
    Return every mask of vertical dominoes that fits in the free rows of base_mask.

    Rows are scanned top to bottom; whenever a row and the one below it are both
    free we either skip the row or cover the pair. The empty placement is always
    included and no result shares a bit with base_mask.
    """
    results: List[int] = []

    def descend(index: int, current_mask: int) -> None:
        if index >= rows - 1:
            results.append(current_mask)
            return

        pair_mask = row_to_bit(index) | row_to_bit(index + 1)
        if base_mask & pair_mask == 0:
            descend(index + 1, current_mask)
            descend(index + 2, current_mask | pair_mask)
        else:
            descend(index + 1, current_mask)

    descend(0, 0)
    return tuple(results)


def build_vertical_table(rows: int) -> List[Tuple[int, ...]]:
    """Vertical placements for every base mask of the given width."""
    return [vertical_placements(base_mask, rows) for base_mask in range(1 << rows)]

# =========================
# Horizontal carries
# =========================
def horizontal_carries(base_mask: int, rows: int) -> Tuple[int, ...]:
    """Return the full powerset of the rows left free by base_mask."""
    free_rows = list(iter_set_bits(full_row_mask(rows) & ~base_mask))
    carries: List[int] = []
    for assign in range(1 << len(free_rows)):
        new_mask = 0
        for bit, row in enumerate(free_rows):
            if assign & (1 << bit):
                new_mask |= row_to_bit(row)
        carries.append(new_mask)
    return tuple(carries)


def build_carry_table(rows: int) -> List[Tuple[int, ...]]:
    """Horizontal carries for every base mask of the given width."""
    return [horizontal_carries(base_mask, rows) for base_mask in range(1 << rows)]

# =========================
# Weight tables
# =========================
def _mask_sums(weights: np.ndarray) -> np.ndarray:
    """
    Expand per-row weights of shape (rows, n) into per-mask sums of shape (2^rows, n).

    Each row's weights are added to every mask containing that row's bit.
    """
    rows = weights.shape[0]
    masks = np.arange(1 << rows)
    table = np.zeros((1 << rows, weights.shape[1]), dtype=np.int64)
    for row in range(rows):
        has_row = (masks & row_to_bit(row)) != 0
        table[has_row] += weights[row]
    return table


def column_pair_weights(grid: Grid) -> np.ndarray:
    """
    table[mask][col] = sum of grid[row][col] + grid[row][col + 1] over rows in mask.

    There is no entry for the last column, so the shape is (2^rows, cols - 1).
    """
    values = grid.to_array()
    if grid.cols < 2:
        return np.zeros((1 << grid.rows, 0), dtype=np.int64)
    return _mask_sums(values[:, :-1] + values[:, 1:])


def column_cell_weights(grid: Grid) -> np.ndarray:
    """table[mask][col] = sum of grid[row][col] over rows in mask."""
    return _mask_sums(grid.to_array())

# =========================
# Profile DP
# =========================
def max_domino_sum(grid: Grid, clamp_negative_carry: bool = True) -> int:
    """
    Return the best total of cells covered by non-overlapping 1x2 dominoes.

    dp[mask][col] is the best sum over columns 0..col with the rows in mask
    occupied in column col once its vertical dominoes are placed. Each column
    runs a vertical phase in place, then carries horizontal dominoes into the
    next column.
    """
    rows, cols = grid.rows, grid.cols
    if rows == 0 or cols == 0:
        return 0

    total_masks = 1 << rows
    vertical_table = [np.array(masks, dtype=np.int64) for masks in build_vertical_table(rows)]
    carry_table = [np.array(masks, dtype=np.int64) for masks in build_carry_table(rows)]
    pair_weights = column_pair_weights(grid)
    cell_weights = column_cell_weights(grid)
    LOGGER.debug(
        "precomputed %s vertical and %s carry masks for %sx%s grid",
        f"{sum(len(masks) for masks in vertical_table):,}",
        f"{sum(len(masks) for masks in carry_table):,}",
        rows,
        cols,
    )

    dp = np.zeros((total_masks, cols), dtype=np.int64)

    for col in range(cols):
        # Nothing can be carried into the first column.
        vertical_bases = range(1) if col == 0 else range(total_masks)
        for horizontal_mask in vertical_bases:
            vertical_masks = vertical_table[horizontal_mask]
            combined = vertical_masks | horizontal_mask
            candidates = dp[horizontal_mask, col] + cell_weights[vertical_masks, col]
            dp[combined, col] = np.maximum(dp[combined, col], candidates)

        if col == cols - 1:
            break

        for horizontal_mask in range(total_masks):
            new_masks = carry_table[horizontal_mask]
            gains = pair_weights[new_masks, col]
            if clamp_negative_carry:
                gains = np.maximum(gains, 0)
            candidates = dp[horizontal_mask, col] + gains
            dp[new_masks, col + 1] = np.maximum(dp[new_masks, col + 1], candidates)

    return int(dp[:, cols - 1].max())


def solve(grid: Grid, allow_transpose: bool = True) -> int:
    """Solve a grid, sweeping along the longer side so masks stay narrow."""
    if allow_transpose and grid.rows > grid.cols:
        LOGGER.debug("transposing %sx%s grid", grid.rows, grid.cols)
        grid = grid.transposed()
    if grid.rows > PRACTICAL_ROW_LIMIT:
        LOGGER.warning(
            "mask width %s exceeds practical limit %s; expect a slow solve",
            grid.rows,
            PRACTICAL_ROW_LIMIT,
        )
    return max_domino_sum(grid)

# =========================
# Brute-force reference
# =========================
def brute_force_max_sum(grid: Grid) -> int:
    """Exhaustively try every set of non-overlapping dominoes (small grids only)."""
    rows, cols = grid.rows, grid.cols
    num_cells = rows * cols
    values = [value for row in grid.values for value in row]
    best = 0

    def dfs(index: int, occupied: int, total: int) -> None:
        nonlocal best
        while index < num_cells and (occupied >> index) & 1:
            index += 1
        if index >= num_cells:
            best = max(best, total)
            return

        row, col = divmod(index, cols)
        dfs(index + 1, occupied, total)

        right = index + 1
        if col + 1 < cols and not (occupied >> right) & 1:
            dfs(
                index + 1,
                occupied | (1 << index) | (1 << right),
                total + values[index] + values[right],
            )

        below = index + cols
        if row + 1 < rows and not (occupied >> below) & 1:
            dfs(
                index + 1,
                occupied | (1 << index) | (1 << below),
                total + values[index] + values[below],
            )

    dfs(0, 0, 0)
    return best
