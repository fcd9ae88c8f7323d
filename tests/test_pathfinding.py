import math

import pytest

from gridpath.grid import Grid
from gridpath.pathfinding import (
    HeuristicMode,
    OpenSet,
    PathResult,
    PathSearch,
    PathStatus,
    SearchConfig,
    SearchNode,
    distance,
    find_path,
    heuristic,
    neighbors,
)


class DummyGrid:
    """Simple stub for a grid with optional walls and bounds."""

    def __init__(self, rows=5, cols=5, walls=None):
        self.rows = rows
        self.cols = cols
        self._walls = set(walls or [])
        self.calls = 0

    def is_walkable(self, row, col):
        self.calls += 1
        if row < 0 or col < 0 or row >= self.rows or col >= self.cols:
            return False
        return (row, col) not in self._walls

    def bounds(self):
        return self.rows, self.cols


def ring(center):
    """All eight cells around ``center``."""
    r, c = center
    return {
        (r + dr, c + dc)
        for dr in (-1, 0, 1)
        for dc in (-1, 0, 1)
        if (dr, dc) != (0, 0)
    }


def path_cost(path, allow_diagonal):
    return sum(
        distance(a, b, allow_diagonal) for a, b in zip(path, path[1:])
    )


def test_heuristic_manhattan():
    # Manhattan distance heuristic
    assert heuristic((0, 0), (2, 3)) == 5


def test_heuristic_euclidean_when_diagonal():
    assert heuristic((0, 0), (3, 4), allow_diagonal=True) == pytest.approx(5.0)


def test_distance_is_float():
    assert isinstance(distance((0, 0), (1, 1)), float)
    assert distance((1, 1), (2, 2), True) == pytest.approx(math.sqrt(2))


def test_neighbors_orthogonal_order():
    grid = DummyGrid()
    cells = neighbors((2, 2), grid, SearchConfig())
    assert cells == [(1, 2), (3, 2), (2, 1), (2, 3)]


def test_neighbors_adds_diagonals():
    grid = DummyGrid()
    cells = neighbors((2, 2), grid, SearchConfig(allow_diagonal=True))
    assert cells == [
        (1, 2), (3, 2), (2, 1), (2, 3),
        (1, 1), (1, 3), (3, 1), (3, 3),
    ]


def test_neighbors_filters_bounds_and_walls():
    grid = DummyGrid(walls={(1, 0)})
    assert neighbors((0, 0), grid, SearchConfig()) == [(0, 1)]


def test_neighbors_corner_cutting_policy():
    # Both flanking cells of the (0,0)->(1,1) diagonal are walls
    grid = DummyGrid(rows=2, cols=2, walls={(0, 1), (1, 0)})
    loose = SearchConfig(allow_diagonal=True)
    strict = SearchConfig(allow_diagonal=True, corner_cutting=False)
    assert neighbors((0, 0), grid, loose) == [(1, 1)]
    assert neighbors((0, 0), grid, strict) == []


def test_find_path_simple():
    grid = DummyGrid(rows=11, cols=11)
    path = find_path((0, 0), (0, 2), grid)
    assert path == [(0, 0), (0, 1), (0, 2)]


def test_find_path_blocked_goal():
    # If goal cell is a wall, path should be empty
    grid = DummyGrid(walls={(0, 2)})
    assert find_path((0, 0), (0, 2), grid) == []


def test_start_equals_end_returns_single_cell():
    search = PathSearch(DummyGrid())
    result = search.find_path_sync((3, 1), (3, 1))
    assert result.status is PathStatus.FOUND
    assert result.path == ((3, 1),)
    assert result.expanded == 1


def test_corner_to_corner_lengths_depend_on_diagonal_flag():
    search = PathSearch(DummyGrid())
    straight = search.find_path_sync((0, 0), (4, 4))
    assert len(straight) == 9
    search.set_allow_diagonal(True)
    diagonal = search.find_path_sync((0, 0), (4, 4))
    assert diagonal.path == ((0, 0), (1, 1), (2, 2), (3, 3), (4, 4))


@pytest.mark.parametrize(
    "start,end",
    [
        ((0, 0), (5, 5)),
        ((5, 0), (0, 3)),
        ((2, 4), (2, 0)),
        ((1, 1), (4, 2)),
    ],
)
def test_optimal_on_empty_grid(start, end):
    grid = DummyGrid(rows=6, cols=6)
    dr = abs(start[0] - end[0])
    dc = abs(start[1] - end[1])

    result = PathSearch(grid).find_path_sync(start, end)
    assert len(result) == dr + dc + 1

    result = PathSearch(grid, SearchConfig(allow_diagonal=True)).find_path_sync(
        start, end
    )
    assert len(result) == max(dr, dc) + 1
    octile = abs(dr - dc) + math.sqrt(2) * min(dr, dc)
    assert path_cost(result.path, True) == pytest.approx(octile)


@pytest.mark.parametrize("allow_diagonal", [False, True])
@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_path_steps_are_valid_moves(seed, allow_diagonal):
    grid = Grid.generate(12, 12, obstacle_chance=0.25, rng=seed)
    result = PathSearch(
        grid, SearchConfig(allow_diagonal=allow_diagonal)
    ).find_path_sync(grid.start, grid.end)
    if not result.found:
        return
    assert result.path[0] == grid.start
    assert result.path[-1] == grid.end
    for a, b in zip(result.path, result.path[1:]):
        dr, dc = abs(a[0] - b[0]), abs(a[1] - b[1])
        if allow_diagonal:
            assert max(dr, dc) == 1
        else:
            assert dr + dc == 1
        assert grid.is_walkable(*b)


@pytest.mark.parametrize("allow_diagonal", [False, True])
def test_walled_in_goal_is_not_found(allow_diagonal):
    grid = DummyGrid(walls=ring((2, 2)))
    search = PathSearch(grid, SearchConfig(allow_diagonal=allow_diagonal))
    result = search.find_path_sync((0, 0), (2, 2))
    assert result.status is PathStatus.NOT_FOUND
    assert result.path == ()

    snapshots = list(search.find_path_stepwise((0, 0), (2, 2)))
    last = snapshots[-1]
    assert last.result == result
    assert last.current is None
    assert last.open_cells == []
    # Every walkable cell outside the ring was expanded
    assert len(last.closed_cells) == 25 - 8 - 1


def test_unwalkable_end_resolves_to_not_found():
    grid = DummyGrid(walls={(4, 4)})
    result = PathSearch(grid).find_path_sync((0, 0), (4, 4))
    assert result == PathResult.not_found(24)


@pytest.mark.parametrize("allow_diagonal", [False, True])
@pytest.mark.parametrize("seed", [7, 8, 9, 10])
def test_stepwise_matches_sync(seed, allow_diagonal):
    grid = Grid.generate(10, 10, rng=seed)
    search = PathSearch(grid, SearchConfig(allow_diagonal=allow_diagonal))
    expected = search.find_path_sync(grid.start, grid.end)
    snapshots = list(search.find_path_stepwise(grid.start, grid.end))
    assert snapshots[-1].result == expected
    # Only the final snapshot carries a result
    assert all(s.result is None for s in snapshots[:-1])


def test_snapshots_track_one_expansion_each():
    grid = DummyGrid(walls={(1, 1), (2, 1), (3, 1)})
    search = PathSearch(grid)
    previous_closed = []
    for snap in search.find_path_stepwise((2, 0), (2, 4)):
        assert not set(snap.open_cells) & set(snap.closed_cells)
        assert snap.closed_cells[:-1] == previous_closed
        assert snap.closed_cells[-1] == snap.current
        previous_closed = snap.closed_cells
    assert snap.result.found
    assert snap.current == (2, 4)


def test_stepwise_is_lazy():
    grid = DummyGrid()
    steps = PathSearch(grid).find_path_stepwise((0, 0), (4, 4))
    assert grid.calls == 0
    first = next(steps)
    # Yield happens before the start node's neighbours are examined
    assert first.current == (0, 0)
    assert first.open_cells == []
    assert first.closed_cells == [(0, 0)]
    assert grid.calls == 0
    second = next(steps)
    assert grid.calls == 4
    assert second.current in {(1, 0), (0, 1)}
    steps.close()


def test_sync_is_idempotent():
    grid = Grid.generate(9, 9, rng=42)
    search = PathSearch(grid, SearchConfig(allow_diagonal=True))
    first = search.find_path_sync(grid.start, grid.end)
    second = search.find_path_sync(grid.start, grid.end)
    assert first == second


def test_reconfiguring_does_not_affect_running_search():
    search = PathSearch(DummyGrid())
    steps = search.find_path_stepwise((0, 0), (4, 4))
    next(steps)
    search.set_allow_diagonal(True)
    last = None
    for last in steps:
        pass
    assert len(last.result) == 9
    assert len(search.find_path_sync((0, 0), (4, 4))) == 5


def test_per_call_config_override():
    search = PathSearch(DummyGrid())
    result = search.find_path_sync(
        (0, 0), (4, 4), SearchConfig(allow_diagonal=True)
    )
    assert len(result) == 5
    assert not search.allow_diagonal


def test_set_heuristic_mode_toggles_diagonal():
    search = PathSearch(DummyGrid())
    search.set_heuristic_mode("euclidean")
    assert search.allow_diagonal
    assert search.config.heuristic_mode is HeuristicMode.EUCLIDEAN
    search.set_heuristic_mode(HeuristicMode.MANHATTAN)
    assert not search.allow_diagonal
    with pytest.raises(ValueError):
        search.set_heuristic_mode("chebyshev")


def test_set_corner_cutting_keeps_diagonal_flag():
    search = PathSearch(DummyGrid(), SearchConfig(allow_diagonal=True))
    search.set_corner_cutting(False)
    assert search.config == SearchConfig(allow_diagonal=True, corner_cutting=False)


def test_open_set_breaks_f_ties_by_h():
    arena = [
        SearchNode((0, 0), None, 2.0, 3.0),
        SearchNode((0, 1), None, 4.0, 1.0),
        SearchNode((0, 2), None, 1.0, 4.0),
    ]
    open_set = OpenSet(arena)
    for i in range(3):
        open_set.push(i)
    assert [arena[open_set.pop()].position for _ in range(3)] == [
        (0, 1),
        (0, 0),
        (0, 2),
    ]


def test_open_set_full_ties_pop_in_insertion_order():
    arena = [SearchNode((0, c), None, 1.0, 1.0) for c in range(4)]
    open_set = OpenSet(arena)
    for i in (2, 0, 3, 1):
        open_set.push(i)
    assert [open_set.pop() for _ in range(4)] == [0, 1, 2, 3]


def test_open_set_update_in_place():
    arena = [
        SearchNode((0, 0), None, 0.0, 2.0),
        SearchNode((1, 1), 0, 5.0, 1.0),
        SearchNode((2, 2), None, 3.0, 2.0),
    ]
    open_set = OpenSet(arena)
    open_set.push(1)
    open_set.push(2)
    open_set.update(1, 2, 1.0)
    # Still one entry per cell
    assert len(open_set) == 2
    assert open_set.cells() == [(1, 1), (2, 2)]
    index = open_set.pop()
    assert index == 1
    assert arena[1].parent == 2 and arena[1].g_cost == 1.0
    assert open_set.pop() == 2
    # The outdated heap entry for (1, 1) is discarded
    with pytest.raises(IndexError):
        open_set.pop()


def test_path_result_helpers():
    found = PathResult.from_path([(0, 0), (0, 1)], expanded=2)
    assert found.found and len(found) == 2
    missing = PathResult.not_found()
    assert not missing.found and len(missing) == 0
    assert PathResult.invalid_endpoint().status is PathStatus.INVALID_ENDPOINT
