# src/gridkeeper/core/frontier.py
#!/usr/bin/env python3
"""
Min-priority frontier for informed search.

Binary min-heap over a dense list (heapq does the sift-up on push and the
sift-down on pop). Entries are (priority, seq, item): seq is a monotonic
counter so items never have to be comparable. Ties are NOT guaranteed to
come out in insertion order to callers.

There is no decrease-key. The same item may sit in the heap several times
with different priorities; A* recognises the stale copies when it pops them.
"""

from typing import Any, Generic, List, Tuple, TypeVar
import heapq

T = TypeVar("T")


class EmptyQueueError(IndexError):
    """pop/peek on an empty frontier; the search loop guards against it."""


class PriorityFrontier(Generic[T]):
    def __init__(self) -> None:
        self._heap: List[Tuple[int, int, Any]] = []
        self._seq = 0

    def push(self, item: T, priority: int) -> None:
        self._seq += 1
        heapq.heappush(self._heap, (priority, self._seq, item))

    def pop_entry(self) -> Tuple[T, int]:
        if not self._heap:
            raise EmptyQueueError("PriorityFrontier is empty")
        priority, _, item = heapq.heappop(self._heap)
        return item, priority

    def pop(self) -> T:
        return self.pop_entry()[0]

    def peek_priority(self) -> int:
        if not self._heap:
            raise EmptyQueueError("PriorityFrontier is empty")
        return self._heap[0][0]

    def size(self) -> int:
        return len(self._heap)

    def clear(self) -> None:
        self._heap.clear()
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
