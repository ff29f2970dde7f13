# src/gridkeeper/core/config.py
#!/usr/bin/env python3
"""
Session configuration and map loading.

Resolution order (later wins):
- dataclass defaults
- ENV:  GRIDKEEPER_<FIELD>=value      e.g. GRIDKEEPER_WIDTH=20
- CLI:  --<field>=value               e.g. --search=astar --start=2,3

Map files are JSON:
    {"width": 5, "height": 5, "start": [0, 1], "goal": [4, 4],
     "cells": [[0,1,0,0,0], ...]}        # [row][col], 1 = blocked
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple
import json
import os
import sys

from gridkeeper.core.types import Cell, Grid

ENV_PREFIX = "GRIDKEEPER_"
SEARCH_NAMES = ("bfs", "astar")


@dataclass
class GridConfig:
    """Everything the driver needs to start a session."""
    width: int = 10
    height: int = 10
    obstacle_probability: float = 0.2
    start: Cell = (0, 0)
    goal: Cell = (9, 9)
    randomize_endpoints: bool = False
    max_generation_attempts: int = 100
    max_relocation_attempts: int = 100
    seed: Optional[int] = None
    search: str = "bfs"
    map_path: Optional[Path] = None


def _parse_bool(raw: str) -> bool:
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_cell(raw: str) -> Cell:
    parts = raw.replace("(", "").replace(")", "").split(",")
    if len(parts) != 2:
        raise ValueError(f"expected x,y but got {raw!r}")
    return (int(parts[0]), int(parts[1]))


def _parse_optional_int(raw: str) -> Optional[int]:
    return None if raw.strip().lower() in ("", "none") else int(raw)


def _parse_search(raw: str) -> str:
    v = raw.strip().lower()
    if v in ("a*", "a_star"):
        v = "astar"
    if v not in SEARCH_NAMES:
        raise ValueError(f"unknown search {raw!r}; expected one of {SEARCH_NAMES}")
    return v


_PARSERS = {
    "width": int,
    "height": int,
    "obstacle_probability": float,
    "start": _parse_cell,
    "goal": _parse_cell,
    "randomize_endpoints": _parse_bool,
    "max_generation_attempts": int,
    "max_relocation_attempts": int,
    "seed": _parse_optional_int,
    "search": _parse_search,
    "map_path": Path,
}


def _overrides(pairs: Mapping[str, str]) -> Dict[str, object]:
    out: Dict[str, object] = {}
    for key, raw in pairs.items():
        try:
            out[key] = _PARSERS[key](raw)
        except ValueError as ex:
            raise ValueError(f"bad value for {key}: {ex}") from ex
    return out


def resolve_config(argv: Optional[List[str]] = None,
                   environ: Optional[Mapping[str, str]] = None) -> GridConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    names = [f.name for f in fields(GridConfig)]

    env_pairs = {n: environ[ENV_PREFIX + n.upper()] for n in names if ENV_PREFIX + n.upper() in environ}

    cli_pairs: Dict[str, str] = {}
    for arg in argv:
        if arg.startswith("--") and "=" in arg:
            key, raw = arg[2:].split("=", 1)
            key = key.replace("-", "_")
            if key in names:
                cli_pairs[key] = raw

    cfg = replace(GridConfig(), **_overrides(env_pairs))
    cfg = replace(cfg, **_overrides(cli_pairs))

    if not 0.0 <= cfg.obstacle_probability <= 1.0:
        raise ValueError("obstacle_probability must be in [0, 1]")
    if cfg.width < 1 or cfg.height < 1:
        raise ValueError("width and height must be positive")
    return cfg


def _map_cell(raw, name: str) -> Cell:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2 \
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw):
        raise ValueError(f"{name} must be a pair of integers, got {raw!r}")
    return (raw[0], raw[1])


# ---------- Loader ----------
def load_map(path: Path) -> Tuple[Grid, Cell, Cell]:
    with open(path, "r") as f:
        data = json.load(f)
    try:
        width = int(data["width"])
        height = int(data["height"])
        start = _map_cell(data["start"], "start")
        goal = _map_cell(data["goal"], "goal")
        cells = data["cells"]
    except (KeyError, TypeError) as ex:
        raise ValueError(f"malformed map {path}: {ex}") from ex
    if not isinstance(cells, list) or not all(isinstance(r, list) for r in cells):
        raise ValueError("cells must be a list of rows")
    if len(cells) != height or any(len(r) != width for r in cells):
        raise ValueError("cells size mismatch")
    try:
        grid = Grid.from_rows(cells)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"malformed cells in {path}: {ex}") from ex
    if not grid.in_bounds(start):
        raise ValueError("start out of bounds")
    if not grid.in_bounds(goal):
        raise ValueError("goal out of bounds")
    return grid, start, goal
