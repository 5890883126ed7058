import argparse
import logging
import sys
import time
from pathlib import Path

from domino_dp import brute_force_max_sum, solve
from grid_helpers import parse_grid_text

LOGGER = logging.getLogger(__name__)

# Brute force is exponential in the cell count.
VERIFY_CELL_LIMIT = 24


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Read a grid (cols rows, then values) and print the best domino covering sum."
    )
    parser.add_argument(
        "--input",
        default=None,
        help="grid text file (default: read stdin)",
    )
    parser.add_argument(
        "--no-transpose",
        action="store_true",
        help="sweep columns as given instead of along the longer side",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="cross-check the result against exhaustive search (small grids only)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="logging level",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level, format="%(levelname)s: %(message)s")

    try:
        if args.input:
            text = Path(args.input).read_text()
        else:
            text = sys.stdin.read()

        grid = parse_grid_text(text)
        LOGGER.info("read %sx%s grid", grid.rows, grid.cols)

        start_time = time.time()
        best = solve(grid, allow_transpose=not args.no_transpose)
        LOGGER.info("solved in %.3fs", time.time() - start_time)

        if args.verify:
            if grid.rows * grid.cols > VERIFY_CELL_LIMIT:
                raise ValueError(
                    f"--verify supports at most {VERIFY_CELL_LIMIT} cells, grid has {grid.rows * grid.cols}"
                )
            expected = brute_force_max_sum(grid)
            if expected != best:
                raise RuntimeError(f"verification failed: dp={best} brute_force={expected}")
            LOGGER.info("verified against exhaustive search")

        print(best)
    except Exception:
        LOGGER.exception("Failed to solve grid")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
