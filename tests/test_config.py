import json
from pathlib import Path

import pytest

from gridkeeper.core.config import GridConfig, load_map, resolve_config
from gridkeeper.core.mutator import GridMutator

from conftest import MAPS_DIR


def test_defaults():
    cfg = resolve_config(argv=[], environ={})
    assert cfg == GridConfig()
    assert (cfg.width, cfg.height) == (10, 10)
    assert cfg.search == "bfs" and cfg.seed is None


def test_env_then_cli_override():
    env = {"GRIDKEEPER_WIDTH": "20", "GRIDKEEPER_SEARCH": "astar", "GRIDKEEPER_SEED": "4"}
    cfg = resolve_config(argv=["--width=12", "--goal=5,6", "--randomize-endpoints=yes"], environ=env)
    assert cfg.width == 12
    assert cfg.search == "astar"
    assert cfg.seed == 4
    assert cfg.goal == (5, 6)
    assert cfg.randomize_endpoints is True


def test_unrelated_args_are_ignored():
    cfg = resolve_config(argv=["--verbose", "--colour=red", "positional"], environ={})
    assert cfg == GridConfig()


def test_search_alias():
    assert resolve_config(argv=["--search=A*"], environ={}).search == "astar"


@pytest.mark.parametrize("arg", [
    "--width=ten",
    "--start=1",
    "--search=dfs",
    "--obstacle_probability=2",
    "--randomize_endpoints=maybe",
])
def test_bad_values_raise(arg):
    with pytest.raises(ValueError):
        resolve_config(argv=[arg], environ={})


def test_map_path_is_a_path():
    cfg = resolve_config(argv=["--map_path=maps/five_by_five.json"], environ={})
    assert cfg.map_path == Path("maps/five_by_five.json")


def test_load_shipped_map():
    grid, start, goal = load_map(MAPS_DIR / "five_by_five.json")
    assert (grid.width, grid.height) == (5, 5)
    assert start == (0, 1) and goal == (4, 4)
    assert grid.is_block((1, 0)) and grid.is_block((3, 2))
    m = GridMutator(start, goal)
    assert m.load_grid(grid, start, goal).ok
    assert len(m.path) == 8


def test_load_map_size_mismatch(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"width": 3, "height": 2, "start": [0, 0], "goal": [2, 1],
                             "cells": [[0, 0, 0], [0, 0]]}))
    with pytest.raises(ValueError):
        load_map(p)


def test_load_map_missing_key(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"width": 1, "height": 1}))
    with pytest.raises(ValueError):
        load_map(p)


def test_load_map_goal_out_of_bounds(tmp_path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"width": 2, "height": 1, "start": [0, 0], "goal": [2, 0],
                             "cells": [[0, 0]]}))
    with pytest.raises(ValueError):
        load_map(p)


@pytest.mark.parametrize("patch", [
    {"start": "ab"},
    {"goal": [1]},
    {"start": [0, "1"]},
    {"cells": [[0, 0], 7]},
    {"cells": "0000"},
    {"cells": [[0, "x"], [0, 0]]},
])
def test_load_map_wrong_types_raise_value_error(tmp_path, patch):
    data = {"width": 2, "height": 2, "start": [0, 0], "goal": [1, 1],
            "cells": [[0, 0], [0, 0]]}
    data.update(patch)
    p = tmp_path / "bad.json"
    p.write_text(json.dumps(data))
    with pytest.raises(ValueError):
        load_map(p)
