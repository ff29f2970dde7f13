from gridkeeper.core.bfs import BFSAlgo, bfs, is_solvable
from gridkeeper.core.types import Grid

from conftest import assert_valid_path


def test_shortest_hop_count(corridor_grid):
    res = bfs(corridor_grid, (0, 0), (0, 2))
    assert res.found
    assert res.path == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2), (1, 2), (0, 2)]
    assert res.metrics["path_len"] == 7


def test_five_by_five_scenario(scenario_a_grid):
    res = bfs(scenario_a_grid, (0, 1), (4, 4))
    assert_valid_path(scenario_a_grid, res.path, (0, 1), (4, 4))
    assert len(res.path) == 8


def test_not_found_and_solvability():
    g = Grid.from_rows([
        [0, 1, 0],
        [1, 1, 0],
        [0, 0, 0],
    ])
    res = bfs(g, (0, 0), (2, 2))
    assert res.status == "not_found" and res.path is None
    assert not is_solvable(g, (0, 0), (2, 2))
    assert is_solvable(g, (2, 0), (0, 2))


def test_blocked_goal_is_unreachable():
    g = Grid.empty(3, 3)
    g.set_block((2, 2), True)
    assert not is_solvable(g, (0, 0), (2, 2))


def test_each_cell_enqueued_once():
    g = Grid.empty(6, 6)
    algo = BFSAlgo()
    algo.init(g, (0, 0), (5, 5))
    opened = []
    while True:
        step = algo.step()
        opened.extend(step.opened)
        if step.status != "running":
            break
    assert step.status == "done"
    assert len(opened) == len(set(opened))
    assert (0, 0) not in opened


def test_idempotent(corridor_grid):
    assert bfs(corridor_grid, (0, 0), (0, 2)).path == bfs(corridor_grid, (0, 0), (0, 2)).path
