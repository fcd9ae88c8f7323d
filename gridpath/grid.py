from __future__ import annotations
import os
import json
import logging
from typing import Optional, List, Sequence, Tuple, Union
import numpy as np
from .config import GRID_FILE, GRID_ROWS, GRID_COLS, OBSTACLE_CHANCE
from .pathfinding import Cell

logger = logging.getLogger(__name__)

SeedLike = Union[None, int, np.random.Generator]


class Grid:
    """
    Obstacle grid with start/end markers. Answers walkability queries for the
    path search; obstacle layout is held in a boolean numpy array indexed
    [row, col] (True = obstacle).
    """

    def __init__(
        self,
        obstacles: Union[Sequence[Sequence[int]], np.ndarray],
        start: Optional[Cell] = None,
        end: Optional[Cell] = None,
        rng: SeedLike = None,
        obstacle_chance: float = OBSTACLE_CHANCE,
    ) -> None:
        self.obstacles = np.asarray(obstacles, dtype=bool)
        if self.obstacles.ndim != 2:
            raise ValueError(
                f"Obstacle layout must be 2-dimensional, got shape {self.obstacles.shape}"
            )
        self.rows, self.cols = self.obstacles.shape
        self.obstacle_chance = obstacle_chance
        self.rng = np.random.default_rng(rng)
        self.start: Optional[Cell] = None
        self.end: Optional[Cell] = None
        if start is not None:
            self.set_start(*start)
        if end is not None:
            self.set_end(*end)

    @classmethod
    def generate(
        cls,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        obstacle_chance: float = OBSTACLE_CHANCE,
        rng: SeedLike = None,
    ) -> Grid:
        """Create a random grid and place start/end on two walkable cells."""
        grid = cls(np.zeros((rows, cols), dtype=bool), rng=rng,
                   obstacle_chance=obstacle_chance)
        grid.regenerate()
        return grid

    @classmethod
    def from_file(cls, path: Optional[str] = None, rng: SeedLike = None) -> Grid:
        """
        Load a grid from JSON: {"obstacles": [[0, 1, ...], ...],
        "start": [row, col], "end": [row, col]}. start/end are optional and
        picked at random when missing.
        """
        if path is None:
            path = os.path.join(os.path.dirname(__file__), GRID_FILE)
        try:
            with open(path, "r") as f:
                data = json.load(f)
            obstacles = data["obstacles"]
            start = data.get("start")
            end = data.get("end")
            grid = cls(
                obstacles,
                start=tuple(start) if start is not None else None,
                end=tuple(end) if end is not None else None,
                rng=rng,
            )
        except Exception as e:
            raise RuntimeError(f"Failed to load grid from {path}: {e}")
        if grid.start is None or grid.end is None:
            grid.select_random_start_end()
        logger.info("Loaded %dx%d grid from %s", grid.rows, grid.cols, path)
        return grid

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_walkable(self, row: int, col: int) -> bool:
        """Return False for obstacles and out-of-bounds cells."""
        if not self.in_bounds(row, col):
            return False
        return not self.obstacles[row, col]

    def bounds(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def walkable_cells(self) -> List[Cell]:
        """All walkable cells in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(~self.obstacles)]

    def regenerate(self) -> None:
        """Re-roll obstacles with the current size and pick new start/end cells."""
        self.obstacles = self.rng.random((self.rows, self.cols)) < self.obstacle_chance
        self.start = None
        self.end = None
        logger.info(
            "Generated %dx%d grid with %d obstacles",
            self.rows,
            self.cols,
            int(self.obstacles.sum()),
        )
        self.select_random_start_end()

    def resize(self, rows: int, cols: int) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid size must be positive, got {rows}x{cols}")
        self.rows, self.cols = rows, cols
        self.regenerate()

    def select_random_start_end(self) -> bool:
        """
        Place start and end on two distinct random walkable cells.
        Returns False (leaving both unset) when fewer than two cells are walkable.
        """
        cells = self.walkable_cells()
        if len(cells) < 2:
            logger.warning(
                "Not enough walkable positions to place start and end points!"
            )
            self.start = None
            self.end = None
            return False
        start_idx, end_idx = self.rng.choice(len(cells), size=2, replace=False)
        self.start = cells[int(start_idx)]
        self.end = cells[int(end_idx)]
        logger.info("Start position: %s, end position: %s", self.start, self.end)
        return True

    def set_start(self, row: int, col: int) -> bool:
        """Move the start marker; ignored unless the cell is walkable."""
        if not self.is_walkable(row, col):
            return False
        self.start = (int(row), int(col))
        return True

    def set_end(self, row: int, col: int) -> bool:
        """Move the end marker; ignored unless the cell is walkable."""
        if not self.is_walkable(row, col):
            return False
        self.end = (int(row), int(col))
        return True
