import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from domino_dp import solve
from grid_helpers import Grid, parse_grid_text
from path_helpers import IMAGES_DIR, ensure_parent_dir

LOGGER = logging.getLogger(__name__)

POSITIVE_COLOR = (113, 204, 46)  # BGR green
NEGATIVE_COLOR = (60, 76, 231)  # BGR red
FOOTER_HEIGHT = 40


def cell_color(value: int, largest: int) -> Tuple[int, int, int]:
    """Blend from white towards green/red in proportion to |value|."""
    if value == 0 or largest == 0:
        return (255, 255, 255)
    target = POSITIVE_COLOR if value > 0 else NEGATIVE_COLOR
    strength = min(abs(value) / largest, 1.0)
    return tuple(int(round(255 + (channel - 255) * strength)) for channel in target)


def render_grid_image(grid: Grid, best: Optional[int] = None, cell_size: int = 60, margin: int = 20) -> np.ndarray:
    """Draw the grid weights, and optionally the best covering sum, into a BGR image."""
    width = cell_size * grid.cols + margin * 2
    height = cell_size * grid.rows + margin * 2 + (FOOTER_HEIGHT if best is not None else 0)
    img = np.full((height, width, 3), 255, dtype=np.uint8)

    largest = int(np.abs(grid.to_array()).max()) if grid.rows and grid.cols else 0

    for row in range(grid.rows):
        for col in range(grid.cols):
            value = grid.value(row, col)
            x1 = margin + col * cell_size
            y1 = margin + row * cell_size
            cv2.rectangle(img, (x1, y1), (x1 + cell_size, y1 + cell_size), cell_color(value, largest), -1)

            text = str(value)
            (text_w, text_h), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
            origin = (x1 + (cell_size - text_w) // 2, y1 + (cell_size + text_h) // 2)
            cv2.putText(img, text, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.5, (0, 0, 0), 1, cv2.LINE_AA)

    # Grid lines
    for i in range(grid.cols + 1):
        x = margin + i * cell_size
        cv2.line(img, (x, margin), (x, margin + grid.rows * cell_size), (0, 0, 0), 2)
    for i in range(grid.rows + 1):
        y = margin + i * cell_size
        cv2.line(img, (margin, y), (margin + grid.cols * cell_size, y), (0, 0, 0), 2)

    if best is not None:
        baseline = margin + grid.rows * cell_size + FOOTER_HEIGHT - 10
        cv2.putText(
            img, f"max sum: {best}", (margin, baseline), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 0), 1, cv2.LINE_AA
        )

    return img


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a grid and its best covering sum to a PNG.")
    parser.add_argument("--input", required=True, help="grid text file (cols rows, then values)")
    parser.add_argument(
        "--output",
        default=None,
        help="PNG output path (default: output/images/<input stem>.png)",
    )
    parser.add_argument("--cell-size", type=int, default=60, help="cell size in pixels")
    parser.add_argument("--skip-solve", action="store_true", help="do not print the optimum in the footer")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        input_path = Path(args.input)
        grid = parse_grid_text(input_path.read_text())
        best = None if args.skip_solve else solve(grid)

        output_path = Path(args.output) if args.output else IMAGES_DIR / f"{input_path.stem}.png"
        ensure_parent_dir(output_path)

        img = render_grid_image(grid, best, cell_size=max(args.cell_size, 10))
        if not cv2.imwrite(str(output_path), img):
            raise OSError(f"could not write image: {output_path}")
        LOGGER.info("wrote: %s", output_path)
    except Exception:
        LOGGER.exception("Failed to render grid")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
