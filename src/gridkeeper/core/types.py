# src/gridkeeper/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any, Iterator

Cell = Tuple[int, int]  # (col, row)

OPEN = 0
BLOCK = 1


@dataclass
class Grid:
    width: int
    height: int
    cells: List[int]             # row-major, index = y * width + x

    @classmethod
    def empty(cls, width: int, height: int) -> "Grid":
        return cls(width, height, [OPEN] * (width * height))

    @classmethod
    def from_rows(cls, rows: List[List[int]]) -> "Grid":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        if height == 0 or width == 0:
            raise ValueError("grid must have at least one row and one column")
        if any(len(r) != width for r in rows):
            raise ValueError("cells size mismatch")
        return cls(width, height, [BLOCK if int(v) else OPEN for r in rows for v in r])

    def _index(self, c: Cell) -> int:
        x, y = c
        return y * self.width + x

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_block(self, c: Cell) -> bool:
        return self.cells[self._index(c)] == BLOCK

    def set_block(self, c: Cell, blocked: bool) -> None:
        self.cells[self._index(c)] = BLOCK if blocked else OPEN

    def neighbors(self, c: Cell) -> Iterator[Cell]:
        """In-bounds 4-connected neighbors of c. Blocked cells are NOT filtered."""
        x, y = c
        for n in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if self.in_bounds(n):
                yield n

    def open_cells(self) -> List[Cell]:
        return [(i % self.width, i // self.width)
                for i, v in enumerate(self.cells) if v == OPEN]

    def rows(self) -> List[List[int]]:
        w = self.width
        return [self.cells[y * w:(y + 1) * w] for y in range(self.height)]

    def copy(self) -> "Grid":
        return Grid(self.width, self.height, list(self.cells))


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    status: str                   # "found" | "not_found"
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.status == "found"
