import argparse
import csv
import logging
import random
from pathlib import Path

from grid_helpers import Grid, format_flat_values, format_grid_text
from path_helpers import OUTPUT_DIR, ensure_parent_dir

LOGGER = logging.getLogger(__name__)

FIELDNAMES = ["grid_id", "rows", "cols", "values"]


def random_grid(rng: random.Random, rows: int, cols: int, min_value: int, max_value: int) -> Grid:
    """Return a grid with cells drawn uniformly from [min_value, max_value]."""
    return Grid.from_rows(
        [rng.randint(min_value, max_value) for _ in range(cols)] for _ in range(rows)
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Write a CSV of random grids for batch solving.")
    parser.add_argument(
        "--output",
        default=str(OUTPUT_DIR / "02_grids.csv"),
        help="grids CSV output",
    )
    parser.add_argument("--count", type=int, default=100, help="number of grids")
    parser.add_argument("--rows", type=int, default=4, help="rows per grid")
    parser.add_argument("--cols", type=int, default=8, help="columns per grid")
    parser.add_argument("--min-value", type=int, default=-10, help="smallest cell value")
    parser.add_argument("--max-value", type=int, default=10, help="largest cell value")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--text-dir",
        default=None,
        help="also write each grid as <grid_id>.txt in the solver input format",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        if args.rows < 1 or args.cols < 1:
            raise ValueError("--rows and --cols must be positive")
        if args.min_value > args.max_value:
            raise ValueError("--min-value must not exceed --max-value")

        rng = random.Random(args.seed)
        output_path = ensure_parent_dir(Path(args.output))
        text_dir = Path(args.text_dir) if args.text_dir else None
        if text_dir is not None:
            text_dir.mkdir(parents=True, exist_ok=True)

        with output_path.open("w", newline="") as output_file:
            writer = csv.DictWriter(output_file, fieldnames=FIELDNAMES)
            writer.writeheader()
            for grid_id in range(args.count):
                grid = random_grid(rng, args.rows, args.cols, args.min_value, args.max_value)
                writer.writerow(
                    {
                        "grid_id": str(grid_id),
                        "rows": str(grid.rows),
                        "cols": str(grid.cols),
                        "values": format_flat_values(grid),
                    }
                )
                if text_dir is not None:
                    (text_dir / f"{grid_id}.txt").write_text(format_grid_text(grid))

        LOGGER.info("wrote %s grids to %s", f"{args.count:,}", output_path)
    except Exception:
        LOGGER.exception("Failed to generate grids")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
