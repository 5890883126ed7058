"""Grid model, text codec and bit helpers for the domino covering problem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

# =========================
# Bit helpers
# =========================
def iter_set_bits(mask: int) -> Iterator[int]:
    """Yield set bit positions from a bitmask, lowest first."""
    while mask:
        least_significant_bit = mask & -mask
        yield least_significant_bit.bit_length() - 1
        mask ^= least_significant_bit


def full_row_mask(rows: int) -> int:
    """Return a mask with one bit set per row."""
    return (1 << rows) - 1


def row_to_bit(row: int) -> int:
    """Bit representing a logical row in a row-mask."""
    return 1 << row

# =========================
# Grid
# =========================
@dataclass(frozen=True)
class Grid:
    """
    Immutable rows x cols table of integer weights.

    A grid with no rows keeps its column count in empty_cols, so zero-sized
    grids still report the dimensions they were declared with.
    """

    values: Tuple[Tuple[int, ...], ...]
    empty_cols: int = 0

    def __post_init__(self) -> None:
        if self.values and self.empty_cols:
            raise ValueError("empty_cols only applies to a grid with no rows")
        if self.empty_cols < 0:
            raise ValueError(f"column count must be non-negative, got {self.empty_cols}")
        width = len(self.values[0]) if self.values else 0
        for row_index, cells in enumerate(self.values):
            if len(cells) != width:
                raise ValueError(
                    f"row {row_index} has {len(cells)} values, expected {width}"
                )
            for cell in cells:
                if isinstance(cell, bool) or not isinstance(cell, int):
                    raise ValueError(f"non-integer cell value in row {row_index}: {cell!r}")

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> "Grid":
        """Build a grid from row sequences, rejecting ragged or non-integer input."""
        table: List[Tuple[int, ...]] = []
        for row in rows:
            # numpy scalars are accepted and stored as plain ints
            table.append(tuple(int(cell) if isinstance(cell, np.integer) else cell for cell in row))
        return cls(tuple(table))

    @classmethod
    def empty(cls, rows: int, cols: int) -> "Grid":
        """Return a grid where rows or cols is zero."""
        if rows and cols:
            raise ValueError(f"{rows}x{cols} grid is not empty")
        return cls(((),) * rows, empty_cols=0 if rows else cols)

    @property
    def rows(self) -> int:
        return len(self.values)

    @property
    def cols(self) -> int:
        return len(self.values[0]) if self.values else self.empty_cols

    def value(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise ValueError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return self.values[row][col]

    def total(self) -> int:
        """Sum of every cell value."""
        return sum(sum(row) for row in self.values)

    def transposed(self) -> "Grid":
        """Return the grid with rows and columns swapped."""
        if self.rows == 0 or self.cols == 0:
            return Grid.empty(self.cols, self.rows)
        return Grid(tuple(zip(*self.values)))

    def with_value(self, row: int, col: int, value: int) -> "Grid":
        """Return a copy of the grid with one cell replaced."""
        self.value(row, col)
        table = [list(cells) for cells in self.values]
        table[row][col] = value
        return Grid.from_rows(table)

    def to_array(self) -> np.ndarray:
        """Return the weights as an int64 array of shape (rows, cols)."""
        return np.array(self.values, dtype=np.int64).reshape(self.rows, self.cols)

# =========================
# Text codec
# =========================
def _parse_int_token(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"invalid {what}: {token!r}") from None


def parse_flat_values(rows: int, cols: int, text: str) -> Grid:
    """Build a grid from a whitespace-separated row-major list of values."""
    if rows < 0 or cols < 0:
        raise ValueError(f"grid dimensions must be non-negative, got {rows}x{cols}")
    tokens = text.split()
    if len(tokens) != rows * cols:
        raise ValueError(
            f"expected {rows * cols} values for a {rows}x{cols} grid, got {len(tokens)}"
        )
    values = [_parse_int_token(token, "cell value") for token in tokens]
    if rows == 0 or cols == 0:
        return Grid.empty(rows, cols)
    return Grid.from_rows(values[row * cols:(row + 1) * cols] for row in range(rows))


def parse_grid_text(text: str) -> Grid:
    """
    Parse a grid from text.

    The format is whitespace-separated integers: the column count, the row
    count, then rows * cols values in row-major order.
    """
    tokens = text.split()
    if len(tokens) < 2:
        raise ValueError("missing grid header (expected: cols rows)")
    cols = _parse_int_token(tokens[0], "column count")
    rows = _parse_int_token(tokens[1], "row count")
    return parse_flat_values(rows, cols, " ".join(tokens[2:]))


def format_flat_values(grid: Grid) -> str:
    return " ".join(str(value) for row in grid.values for value in row)


def format_grid_text(grid: Grid) -> str:
    """Format a grid in the same layout parse_grid_text reads."""
    lines = [f"{grid.cols} {grid.rows}"]
    if grid.cols:
        lines.extend(" ".join(str(value) for value in row) for row in grid.values)
    return "\n".join(lines) + "\n"
