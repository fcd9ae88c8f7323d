from __future__ import annotations
import time
import logging
import pygame
from typing import Iterator, List, Optional, Tuple

from .grid import Grid
from .renderer import Renderer
from .pathfinding import (
    Cell,
    PathResult,
    PathSearch,
    PathStatus,
    SearchConfig,
    SearchSnapshot,
)
from .query import endpoint_problem, find_path_between
from .config import (
    SCREEN_WIDTH,
    SCREEN_HEIGHT,
    FPS,
    ALLOW_DIAGONAL,
    SHOW_SEARCH_PROCESS,
    VISUALIZATION_DELAY,
    MIN_VISUALIZATION_DELAY,
    MAX_VISUALIZATION_DELAY,
    VISUALIZATION_DELAY_STEP,
)
from .input_handler import InputHandler

logger = logging.getLogger(__name__)


class App:
    """Main app class: owns the grid and search engine, runs the frame loop."""

    def __init__(
        self,
        grid: Optional[Grid] = None,
        clock: Optional[pygame.time.Clock] = None,
        allow_diagonal: bool = ALLOW_DIAGONAL,
    ) -> None:
        pygame.init()
        self.screen_width = SCREEN_WIDTH
        self.screen_height = SCREEN_HEIGHT
        self.screen = pygame.display.set_mode(
            (self.screen_width, self.screen_height)
        )
        pygame.display.set_caption("A* Pathfinding")
        # Clock for frame rate (injectable for testing)
        self.clock = clock or pygame.time.Clock()
        self.fps = FPS
        self.grid = grid or Grid.generate()
        self.search = PathSearch(
            self.grid, SearchConfig(allow_diagonal=allow_diagonal)
        )
        self.renderer = Renderer(self.screen_width, self.screen_height)
        self.input = InputHandler()
        self.show_search_process = SHOW_SEARCH_PROCESS
        self.visualization_delay = VISUALIZATION_DELAY
        # Stepwise search in progress, pulled once per elapsed delay
        self._steps: Optional[Iterator[SearchSnapshot]] = None
        self._step_timer = 0.0
        self.snapshot: Optional[SearchSnapshot] = None
        self.path: Tuple[Cell, ...] = ()
        # Statistics shown in the status panel
        self.result_text = ""
        self.path_length = 0
        self.nodes_explored = 0
        self.search_time_ms = 0.0
        self.running = True

    @property
    def is_searching(self) -> bool:
        return self._steps is not None

    def find_path(self) -> None:
        """Start a search between the grid's start and end markers."""
        self.clear_path()
        start, end = self.grid.start, self.grid.end
        if start is None or end is None:
            self.result_text = "No start/end position set!"
            logger.warning(self.result_text)
            return
        logger.info("Finding path from %s to %s", start, end)
        if self.show_search_process:
            if any(endpoint_problem(self.grid, c) for c in (start, end)):
                self._finish(PathResult.invalid_endpoint())
                return
            self._steps = self.search.find_path_stepwise(start, end)
            # First expansion is shown immediately
            self._step_timer = self.visualization_delay
        else:
            t0 = time.perf_counter()
            result = find_path_between(self.search, start, end)
            self.search_time_ms = (time.perf_counter() - t0) * 1000.0
            self._finish(result)

    def clear_path(self) -> None:
        """Abandon any running search and drop overlays and statistics."""
        if self._steps is not None:
            self._steps.close()
        self._steps = None
        self._step_timer = 0.0
        self.snapshot = None
        self.path = ()
        self.result_text = ""
        self.path_length = 0
        self.nodes_explored = 0
        self.search_time_ms = 0.0

    def regenerate_grid(self, rows: Optional[int] = None, cols: Optional[int] = None) -> None:
        self.clear_path()
        if rows is not None and cols is not None:
            self.grid.resize(rows, cols)
        else:
            self.grid.regenerate()

    def toggle_diagonal(self) -> None:
        """Flip diagonal movement; a search already running keeps its setting."""
        self.search.set_allow_diagonal(not self.search.allow_diagonal)

    def change_delay(self, direction: int) -> None:
        delay = self.visualization_delay + direction * VISUALIZATION_DELAY_STEP
        self.visualization_delay = max(
            MIN_VISUALIZATION_DELAY, min(MAX_VISUALIZATION_DELAY, delay)
        )

    def advance(self) -> Optional[SearchSnapshot]:
        """Pull one snapshot from the running search."""
        if self._steps is None:
            return None
        t0 = time.perf_counter()
        snapshot = next(self._steps, None)
        self.search_time_ms += (time.perf_counter() - t0) * 1000.0
        if snapshot is None:
            self._steps = None
            return None
        self.snapshot = snapshot
        self.nodes_explored = len(snapshot.closed_cells)
        if snapshot.result is not None:
            self._steps = None
            self._finish(snapshot.result)
        return snapshot

    def _finish(self, result: PathResult) -> None:
        self.nodes_explored = result.expanded
        if result.status is PathStatus.INVALID_ENDPOINT:
            self.path = ()
            self.path_length = 0
            self.result_text = "Start or end position is not walkable!"
        elif result.found:
            self.path = result.path
            self.path_length = len(result)
            self.result_text = f"Path found! Length: {self.path_length}"
        else:
            self.path = ()
            self.path_length = 0
            self.result_text = "No path found!"
        logger.info(self.result_text)

    def status_lines(self) -> List[str]:
        length = (
            f"Path Length: {self.path_length}"
            if self.path_length > 0
            else "Path Length: No Path"
        )
        return [
            self.result_text,
            length,
            f"Nodes Explored: {self.nodes_explored}",
            f"Search Time: {self.search_time_ms:.2f} ms",
            "Diagonal: {}  Show search: {}  Delay: {:.2f}s".format(
                "on" if self.search.allow_diagonal else "off",
                "on" if self.show_search_process else "off",
                self.visualization_delay,
            ),
        ]

    def handle_events(self) -> None:
        """Process input events via InputHandler and apply the requested actions."""
        self.input.process_events()
        if self.input.should_quit():
            self.running = False
        if self.input.toggle_diagonal_pressed():
            self.toggle_diagonal()
        if self.input.toggle_show_search_pressed():
            self.show_search_process = not self.show_search_process
        if self.input.delay_change():
            self.change_delay(self.input.delay_change())
        if self.input.clear_path_pressed():
            self.clear_path()
        if self.input.regenerate_pressed():
            self.regenerate_grid()
        if self.input.find_path_pressed():
            self.find_path()

    def update(self, dt: float) -> None:
        """Advance the running search by one expansion per elapsed delay."""
        if self._steps is None:
            return
        self._step_timer += dt
        while self._steps is not None and self._step_timer >= self.visualization_delay:
            self._step_timer -= self.visualization_delay
            self.advance()

    def render(self) -> None:
        self.renderer.render(
            self.screen, self.grid, self.snapshot, self.path, self.status_lines()
        )

    def run(self) -> None:
        """Main loop: handle events, update, and render."""
        while self.running:
            dt = self.clock.tick(self.fps) / 1000.0
            self.handle_events()
            self.update(dt)
            self.render()
        self.clear_path()
        pygame.quit()
        return
