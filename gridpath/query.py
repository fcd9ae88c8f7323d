"""
Request-level wrapper around the path search: rejects endpoints that are out
of bounds or blocked before any search runs.
"""

from __future__ import annotations
import logging
from typing import Optional
from .pathfinding import Cell, PathResult, PathSearch, SearchConfig, WalkabilityOracle

logger = logging.getLogger(__name__)


def endpoint_problem(oracle: WalkabilityOracle, cell: Cell) -> Optional[str]:
    """Return why ``cell`` cannot be a path endpoint, or None if it can."""
    rows, cols = oracle.bounds()
    row, col = cell
    if not (0 <= row < rows and 0 <= col < cols):
        return f"{cell} is outside the {rows}x{cols} grid"
    if not oracle.is_walkable(row, col):
        return f"{cell} is not walkable"
    return None


def find_path_between(
    search: PathSearch,
    start: Cell,
    end: Cell,
    config: Optional[SearchConfig] = None,
) -> PathResult:
    """
    Validate both endpoints against the search's oracle, then run the search.
    Invalid endpoints produce ``PathStatus.INVALID_ENDPOINT`` instead of the
    ``NOT_FOUND`` an unreachable goal gives.
    """
    for label, cell in (("Start", start), ("End", end)):
        problem = endpoint_problem(search.oracle, cell)
        if problem is not None:
            logger.warning("%s position rejected: %s", label, problem)
            return PathResult.invalid_endpoint()
    return search.find_path_sync(start, end, config)
