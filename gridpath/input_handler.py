"""
Input handling abstraction to decouple Pygame input from app logic.
"""

from __future__ import annotations
import pygame


class InputHandler:
    """
    Abstraction for gathering input state. Processes Pygame events and
    exposes one-shot action queries for the current frame.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._quit = False
        self._find_path = False
        self._clear_path = False
        self._regenerate = False
        self._toggle_diagonal = False
        self._toggle_show_search = False
        # -1 = faster (shorter delay), +1 = slower, 0 = unchanged
        self._delay_change = 0

    def process_events(self) -> None:
        """Poll Pygame events and update the per-frame action flags."""
        self._reset()
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self._quit = True
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_x:
                self._quit = True
            elif event.key == pygame.K_SPACE:
                self._find_path = True
            elif event.key == pygame.K_c:
                self._clear_path = True
            elif event.key == pygame.K_r:
                self._regenerate = True
            elif event.key == pygame.K_g:
                # Toggle diagonal movement for the next search
                self._toggle_diagonal = True
            elif event.key == pygame.K_v:
                self._toggle_show_search = True
            elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                self._delay_change = -1
            elif event.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                self._delay_change = 1

    def should_quit(self) -> bool:
        """Return True if a quit command was issued this frame."""
        return self._quit

    def find_path_pressed(self) -> bool:
        """Return True if Space was pressed this frame to start a search."""
        return self._find_path

    def clear_path_pressed(self) -> bool:
        return self._clear_path

    def regenerate_pressed(self) -> bool:
        return self._regenerate

    def toggle_diagonal_pressed(self) -> bool:
        return self._toggle_diagonal

    def toggle_show_search_pressed(self) -> bool:
        """Return True if V was pressed this frame to toggle search animation."""
        return self._toggle_show_search

    def delay_change(self) -> int:
        """Return -1, 0 or +1 for the requested visualization delay change."""
        return self._delay_change
