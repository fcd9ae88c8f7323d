"""
Pathfinding utilities: implements grid-based A* search.

The search can run to completion in one call (``find_path_sync``) or be
driven one node expansion at a time (``find_path_stepwise``) so a host can
render the open/closed sets between steps at whatever pace it likes.
"""

from __future__ import annotations
import enum
import heapq
import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (row, col)

# Up, down, left, right
ORTHOGONAL_DIRECTIONS: Tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
# Up-left, up-right, down-left, down-right
DIAGONAL_DIRECTIONS: Tuple[Cell, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class WalkabilityOracle(Protocol):
    """Grid query surface the search depends on."""

    def is_walkable(self, row: int, col: int) -> bool:
        """Return False for out-of-bounds or obstacle cells."""
        ...

    def bounds(self) -> Tuple[int, int]:
        """Return (row_count, col_count)."""
        ...


class HeuristicMode(enum.Enum):
    """Metric used for both step cost and goal estimate."""

    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"


def heuristic_for(allow_diagonal: bool) -> HeuristicMode:
    return HeuristicMode.EUCLIDEAN if allow_diagonal else HeuristicMode.MANHATTAN


@dataclass(frozen=True)
class SearchConfig:
    """
    Settings captured by a search run when it starts.

    allow_diagonal: add the four diagonal directions and switch the metric
        from Manhattan to Euclidean distance.
    corner_cutting: when True a diagonal move is legal even if both flanking
        orthogonal cells are obstacles. Set to False to require both flanking
        cells to be walkable.
    """

    allow_diagonal: bool = False
    corner_cutting: bool = True

    @property
    def heuristic_mode(self) -> HeuristicMode:
        return heuristic_for(self.allow_diagonal)


class PathStatus(enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    # Only produced by the validating query wrapper, never by the engine
    INVALID_ENDPOINT = "invalid_endpoint"


@dataclass(frozen=True)
class PathResult:
    """Outcome of one search invocation."""

    status: PathStatus
    path: Tuple[Cell, ...] = ()
    # Number of nodes moved to the closed set during the run
    expanded: int = 0

    @classmethod
    def from_path(cls, path: List[Cell], expanded: int = 0) -> PathResult:
        return cls(PathStatus.FOUND, tuple(path), expanded)

    @classmethod
    def not_found(cls, expanded: int = 0) -> PathResult:
        return cls(PathStatus.NOT_FOUND, (), expanded)

    @classmethod
    def invalid_endpoint(cls) -> PathResult:
        return cls(PathStatus.INVALID_ENDPOINT)

    @property
    def found(self) -> bool:
        return self.status is PathStatus.FOUND

    def __len__(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class SearchSnapshot:
    """
    One stepwise observation, taken right after a node is moved to the
    closed set. ``result`` is None until the final snapshot of the run.
    """

    current: Optional[Cell]
    open_cells: List[Cell]
    closed_cells: List[Cell]
    result: Optional[PathResult] = None


@dataclass
class SearchNode:
    """Arena record for one explored cell; ``parent`` is an arena index."""

    position: Cell
    parent: Optional[int]
    g_cost: float
    h_cost: float

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost


def distance(a: Cell, b: Cell, allow_diagonal: bool = False) -> float:
    """Manhattan distance on a 4-neighbour grid, Euclidean on an 8-neighbour one."""
    dr = a[0] - b[0]
    dc = a[1] - b[1]
    if allow_diagonal:
        return math.sqrt(dr * dr + dc * dc)
    return float(abs(dr) + abs(dc))


def heuristic(a: Cell, b: Cell, allow_diagonal: bool = False) -> float:
    """Goal estimate; uses the same metric as the per-step move cost."""
    return distance(a, b, allow_diagonal)


def neighbors(
    cell: Cell, oracle: WalkabilityOracle, config: SearchConfig
) -> List[Cell]:
    """Return walkable neighbours of ``cell`` in direction order."""
    row, col = cell
    directions = ORTHOGONAL_DIRECTIONS
    if config.allow_diagonal:
        directions = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS
    out: List[Cell] = []
    for dr, dc in directions:
        nr, nc = row + dr, col + dc
        if not oracle.is_walkable(nr, nc):
            continue
        if dr and dc and not config.corner_cutting:
            if not (
                oracle.is_walkable(row + dr, col)
                and oracle.is_walkable(row, col + dc)
            ):
                continue
        out.append((nr, nc))
    return out


class OpenSet:
    """
    Frontier keyed by cell, popped by ascending (f_cost, h_cost).

    Remaining ties go to the node inserted first. Heap entries carry the arena
    index, which grows with insertion order. An improved path pushes a fresh
    entry for the same index; outdated entries are dropped when popped.
    """

    def __init__(self, arena: List[SearchNode]) -> None:
        self._arena = arena
        self._heap: List[Tuple[float, float, int]] = []
        self._index: Dict[Cell, int] = {}

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._index

    def get(self, cell: Cell) -> int:
        return self._index[cell]

    def push(self, index: int) -> None:
        node = self._arena[index]
        self._index[node.position] = index
        heapq.heappush(self._heap, (node.f_cost, node.h_cost, index))

    def update(self, index: int, parent: int, g_cost: float) -> None:
        """Re-parent an open node in place after a cheaper path was found."""
        node = self._arena[index]
        node.parent = parent
        node.g_cost = g_cost
        heapq.heappush(self._heap, (node.f_cost, node.h_cost, index))

    def pop(self) -> int:
        while self._heap:
            f_cost, _, index = heapq.heappop(self._heap)
            node = self._arena[index]
            if self._index.get(node.position) != index:
                continue
            if f_cost != node.f_cost:
                continue
            del self._index[node.position]
            return index
        raise IndexError("pop from empty open set")

    def cells(self) -> List[Cell]:
        """Open positions in insertion order."""
        return list(self._index)


class _SearchRun:
    """State of a single search invocation. Discarded when the run ends."""

    def __init__(
        self,
        oracle: WalkabilityOracle,
        start: Cell,
        end: Cell,
        config: SearchConfig,
    ) -> None:
        self.oracle = oracle
        self.end = end
        self.config = config
        self.arena: List[SearchNode] = []
        self.open = OpenSet(self.arena)
        # Finalized cells; a dict keeps expansion order for snapshots
        self.closed: Dict[Cell, None] = {}
        self.result: Optional[PathResult] = None
        self._add_node(start, None, 0.0)

    @property
    def done(self) -> bool:
        return self.result is not None

    def _add_node(self, position: Cell, parent: Optional[int], g_cost: float) -> None:
        h_cost = heuristic(position, self.end, self.config.allow_diagonal)
        self.arena.append(SearchNode(position, parent, g_cost, h_cost))
        self.open.push(len(self.arena) - 1)

    def select(self) -> Optional[int]:
        """
        Pop the best open node and close it. Sets ``result`` when the goal is
        reached or the open set is exhausted.
        """
        if not self.open:
            self.result = PathResult.not_found(len(self.closed))
            return None
        index = self.open.pop()
        node = self.arena[index]
        self.closed[node.position] = None
        if node.position == self.end:
            self.result = PathResult.from_path(
                self.reconstruct(index), len(self.closed)
            )
        return index

    def relax(self, index: int) -> None:
        current = self.arena[index]
        allow_diagonal = self.config.allow_diagonal
        for cell in neighbors(current.position, self.oracle, self.config):
            if cell in self.closed:
                continue
            tentative_g = current.g_cost + distance(
                current.position, cell, allow_diagonal
            )
            if cell not in self.open:
                self._add_node(cell, index, tentative_g)
                continue
            existing = self.open.get(cell)
            if tentative_g < self.arena[existing].g_cost:
                self.open.update(existing, index, tentative_g)

    def reconstruct(self, index: Optional[int]) -> List[Cell]:
        path: List[Cell] = []
        while index is not None:
            node = self.arena[index]
            path.append(node.position)
            index = node.parent
        path.reverse()
        return path

    def snapshot(self, index: Optional[int]) -> SearchSnapshot:
        current = self.arena[index].position if index is not None else None
        return SearchSnapshot(
            current=current,
            open_cells=self.open.cells(),
            closed_cells=list(self.closed),
            result=self.result,
        )


class PathSearch:
    """
    A* search engine bound to one walkability oracle.

    Holds no per-run state between calls; every invocation builds its own
    arena, open set and closed set. Changing the configuration replaces the
    frozen config object, so a stepwise run already in progress keeps the
    settings it started with.
    """

    def __init__(
        self, oracle: WalkabilityOracle, config: Optional[SearchConfig] = None
    ) -> None:
        self.oracle = oracle
        self._config = config or SearchConfig()

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def allow_diagonal(self) -> bool:
        return self._config.allow_diagonal

    def set_allow_diagonal(self, allow: bool) -> None:
        self._config = replace(self._config, allow_diagonal=bool(allow))

    def set_heuristic_mode(self, mode: Union[HeuristicMode, str]) -> None:
        """
        Select the metric. The metric is tied to diagonal movement, so this
        toggles the diagonal flag as well.
        """
        try:
            mode = HeuristicMode(mode)
        except ValueError:
            raise ValueError(f"Unknown heuristic mode: {mode!r}") from None
        self.set_allow_diagonal(mode is HeuristicMode.EUCLIDEAN)

    def set_corner_cutting(self, allow: bool) -> None:
        self._config = replace(self._config, corner_cutting=bool(allow))

    def find_path_sync(
        self, start: Cell, end: Cell, config: Optional[SearchConfig] = None
    ) -> PathResult:
        """Run the search to completion and return its result."""
        run = _SearchRun(self.oracle, start, end, config or self._config)
        logger.debug("Finding path from %s to %s", start, end)
        while not run.done:
            index = run.select()
            if not run.done:
                run.relax(index)
        self._log_result(run.result)
        return run.result

    def find_path_stepwise(
        self, start: Cell, end: Cell, config: Optional[SearchConfig] = None
    ) -> Iterator[SearchSnapshot]:
        """
        Yield one snapshot per node expansion. The last snapshot carries the
        terminal result. Each pull performs exactly one more loop iteration;
        stop pulling to abandon the run.
        """
        # Built eagerly: the run keeps the config in effect at call time
        run = _SearchRun(self.oracle, start, end, config or self._config)
        logger.debug("Stepping path search from %s to %s", start, end)
        return self._step(run)

    def _step(self, run: _SearchRun) -> Iterator[SearchSnapshot]:
        while not run.done:
            index = run.select()
            yield run.snapshot(index)
            if not run.done:
                run.relax(index)
        self._log_result(run.result)

    @staticmethod
    def _log_result(result: PathResult) -> None:
        if result.found:
            logger.debug(
                "Path found: %d cells, %d nodes expanded",
                len(result),
                result.expanded,
            )
        else:
            logger.debug("No path found after %d expansions", result.expanded)


def find_path(
    start: Cell, goal: Cell, oracle: WalkabilityOracle, allow_diagonal: bool = False
) -> List[Cell]:
    """
    Find a path on a grid from start to goal using A*.
    start, goal: (row, col) tuples of integer grid coordinates.
    oracle: object with is_walkable(row, col) -> bool.
    Returns list of cells from start to goal inclusive, or empty list if no path.
    """
    start = (int(start[0]), int(start[1]))
    goal = (int(goal[0]), int(goal[1]))
    search = PathSearch(oracle, SearchConfig(allow_diagonal=allow_diagonal))
    return list(search.find_path_sync(start, goal).path)
