import random
from pathlib import Path

import pytest

from gridkeeper.core.types import Cell, Grid

MAPS_DIR = Path(__file__).resolve().parents[1] / "maps"


def assert_valid_path(grid: Grid, path, start: Cell, goal: Cell) -> None:
    assert path, "path must not be empty"
    assert path[0] == start and path[-1] == goal
    assert path.count(start) == 1 and path.count(goal) == 1
    for c in path:
        assert grid.in_bounds(c) and not grid.is_block(c)
    for (ax, ay), (bx, by) in zip(path, path[1:]):
        assert abs(ax - bx) + abs(ay - by) == 1


def random_grid(rng: random.Random, width: int, height: int, p: float) -> Grid:
    return Grid(width, height, [1 if rng.random() < p else 0 for _ in range(width * height)])


@pytest.fixture
def scenario_a_grid() -> Grid:
    grid = Grid.empty(5, 5)
    for c in [(1, 0), (1, 1), (3, 1), (1, 3), (2, 3), (3, 3)]:
        grid.set_block(c, True)
    return grid


@pytest.fixture
def corridor_grid() -> Grid:
    # single route (0,0) -> (2,0) -> (2,2) -> (0,2)
    return Grid.from_rows([
        [0, 0, 0],
        [1, 1, 0],
        [0, 0, 0],
    ])
