import argparse
import csv
import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path

from domino_dp import solve
from grid_helpers import parse_flat_values
from path_helpers import OUTPUT_DIR, ensure_parent_dir

LOGGER = logging.getLogger(__name__)


def solve_row_values(rows: int, cols: int, values: str) -> int:
    """Parse one CSV grid and return its best covering sum."""
    return solve(parse_flat_values(rows, cols, values))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Solve every grid in a CSV and write the best covering sums."
    )
    parser.add_argument(
        "--input",
        default=str(OUTPUT_DIR / "02_grids.csv"),
        help="grids CSV path",
    )
    parser.add_argument(
        "--output",
        default=str(OUTPUT_DIR / "03_solved_grids.csv"),
        help="solved CSV output",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=0,
        help="number of worker processes (0 = cpu count, 1 = no multiprocessing)",
    )
    parser.add_argument(
        "--chunksize",
        type=int,
        default=20,
        help="task chunksize for multiprocessing",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=1000,
        help="rows to buffer per batch (limits memory usage)",
    )
    parser.add_argument("--progress-every", type=int, default=1_000, help="progress interval")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        start_time = time.time()
        processed = 0
        best_total = 0

        input_path = Path(args.input)
        output_path = ensure_parent_dir(Path(args.output))

        worker_count = args.workers if args.workers >= 0 else 0
        if worker_count == 0:
            worker_count = os.cpu_count() or 1
        use_multiprocessing = worker_count > 1

        with open(input_path, "r", newline="") as input_file:
            total = sum(1 for _ in input_file) - 1

        with (
            open(input_path, "r", newline="") as input_file,
            open(output_path, "w", newline="") as output_file,
        ):
            reader = csv.DictReader(input_file)
            fields = list(reader.fieldnames or [])
            if "max_sum" not in fields:
                fields.append("max_sum")

            writer = csv.DictWriter(output_file, fieldnames=fields)
            writer.writeheader()

            def iter_batches():
                batch = []
                for row in reader:
                    batch.append(row)
                    if len(batch) >= args.batch_size:
                        yield batch
                        batch = []
                if batch:
                    yield batch

            def record(row, max_sum: int) -> None:
                nonlocal processed, best_total
                processed += 1
                best_total += max_sum
                row["max_sum"] = str(max_sum)
                writer.writerow(row)

                if processed % args.progress_every == 0:
                    elapsed = time.time() - start_time
                    rate = processed / elapsed if elapsed > 0 else 0.0
                    eta = (total - processed) / rate if rate else 0
                    LOGGER.info(
                        "[%s/%s] %.2f%% | %.2f grids/s | ETA %.1f min",
                        f"{processed:,}",
                        f"{total:,}",
                        (processed / total) * 100 if total > 0 else 0.0,
                        rate,
                        eta / 60,
                    )

            if use_multiprocessing:
                with ProcessPoolExecutor(max_workers=worker_count) as executor:
                    for batch in iter_batches():
                        results = executor.map(
                            solve_row_values,
                            [int(row["rows"]) for row in batch],
                            [int(row["cols"]) for row in batch],
                            [row["values"] for row in batch],
                            chunksize=max(args.chunksize, 1),
                        )
                        for row, max_sum in zip(batch, results):
                            record(row, max_sum)
            else:
                for batch in iter_batches():
                    for row in batch:
                        max_sum = solve_row_values(int(row["rows"]), int(row["cols"]), row["values"])
                        record(row, max_sum)

        elapsed = time.time() - start_time
        LOGGER.info("=== DONE ===")
        LOGGER.info("solved: %s", f"{processed:,}")
        LOGGER.info("sum of optima: %s", f"{best_total:,}")
        LOGGER.info("time: %.1fs", elapsed)
        LOGGER.info("wrote: %s", output_path)
    except Exception:
        LOGGER.exception("Failed to solve grids")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
