"""
Pygame renderer: draws the grid, the search overlays and a statistics panel.
"""

from __future__ import annotations
import logging
import pygame
from typing import TYPE_CHECKING, Collection, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .grid import Grid
    from .pathfinding import Cell, SearchSnapshot

from .config import (
    BACKGROUND_COLOR,
    WALKABLE_COLOR,
    OBSTACLE_COLOR,
    START_COLOR,
    END_COLOR,
    PATH_COLOR,
    OPEN_SET_COLOR,
    CLOSED_SET_COLOR,
    TEXT_COLOR,
    CELL_SPACING,
    STATUS_PANEL_HEIGHT,
    STATUS_FONT_SIZE,
)

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class Renderer:
    """Software renderer for the grid view."""

    def __init__(
        self,
        screen_width: int,
        screen_height: int,
        spacing: int = CELL_SPACING,
        panel_height: int = STATUS_PANEL_HEIGHT,
    ) -> None:
        self.w = screen_width
        self.h = screen_height
        self.spacing = spacing
        self.panel_height = panel_height
        # Created on first render so the renderer can be built before pygame.font.init()
        self._font: Optional[pygame.font.Font] = None

    def cell_size(self, grid: Grid) -> int:
        """Largest square cell size that fits the grid above the status panel."""
        avail_w = self.w - self.spacing * (grid.cols - 1)
        avail_h = self.h - self.panel_height - self.spacing * (grid.rows - 1)
        return max(1, min(avail_w // grid.cols, avail_h // grid.rows))

    def cell_rect(self, grid: Grid, row: int, col: int) -> pygame.Rect:
        """Screen rectangle for a cell; the grid is centered horizontally."""
        size = self.cell_size(grid)
        pitch = size + self.spacing
        grid_w = grid.cols * pitch - self.spacing
        origin_x = (self.w - grid_w) // 2
        return pygame.Rect(origin_x + col * pitch, row * pitch, size, size)

    def cell_color(
        self,
        grid: Grid,
        cell: Cell,
        open_cells: Collection[Cell] = (),
        closed_cells: Collection[Cell] = (),
        path: Collection[Cell] = (),
    ) -> Color:
        """
        Pick the fill color for one cell. Start/end markers win over the path,
        the path wins over search overlays, overlays only tint walkable cells.
        """
        if cell == grid.start:
            return START_COLOR
        if cell == grid.end:
            return END_COLOR
        if not grid.is_walkable(*cell):
            return OBSTACLE_COLOR
        if cell in path:
            return PATH_COLOR
        if cell in closed_cells:
            return CLOSED_SET_COLOR
        if cell in open_cells:
            return OPEN_SET_COLOR
        return WALKABLE_COLOR

    def render(
        self,
        screen: pygame.Surface,
        grid: Grid,
        snapshot: Optional[SearchSnapshot] = None,
        path: Sequence[Cell] = (),
        status_lines: Sequence[str] = (),
    ) -> None:
        """Draw one frame and flip the display."""
        screen.fill(BACKGROUND_COLOR)
        # Sets give O(1) membership while coloring every cell
        path_cells = set(path)
        open_cells = set(snapshot.open_cells) if snapshot else set()
        closed_cells = set(snapshot.closed_cells) if snapshot else set()
        for row in range(grid.rows):
            for col in range(grid.cols):
                color = self.cell_color(
                    grid, (row, col), open_cells, closed_cells, path_cells
                )
                pygame.draw.rect(screen, color, self.cell_rect(grid, row, col))
        self._draw_status(screen, status_lines)
        pygame.display.flip()

    def _draw_status(self, screen: pygame.Surface, lines: Sequence[str]) -> None:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, STATUS_FONT_SIZE)
            logger.debug("Status font loaded at size %d", STATUS_FONT_SIZE)
        line_h = self._font.get_linesize()
        y = self.h - self.panel_height + 8
        for line in lines:
            surf = self._font.render(line, True, TEXT_COLOR)
            screen.blit(surf, (8, y))
            y += line_h
