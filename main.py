import sys
import argparse
import logging

from gridpath.app import App
from gridpath.grid import Grid
from gridpath.config import GRID_ROWS, GRID_COLS, ALLOW_DIAGONAL


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Visualize A* search on a grid.")
    parser.add_argument("--rows", type=int, default=GRID_ROWS)
    parser.add_argument("--cols", type=int, default=GRID_COLS)
    parser.add_argument("--seed", type=int, default=None, help="seed for obstacle generation")
    parser.add_argument(
        "--grid-file",
        default=None,
        help="load obstacles and start/end from a JSON grid file instead of generating them",
    )
    parser.add_argument(
        "--diagonal",
        action="store_true",
        default=ALLOW_DIAGONAL,
        help="allow diagonal moves (switches the metric to Euclidean)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    if args.grid_file:
        grid = Grid.from_file(args.grid_file, rng=args.seed)
    else:
        grid = Grid.generate(args.rows, args.cols, rng=args.seed)
    app = App(grid=grid, allow_diagonal=args.diagonal)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
