import random

import pytest

from gridkeeper.core.frontier import EmptyQueueError, PriorityFrontier


def test_pops_in_priority_order():
    pq = PriorityFrontier()
    pq.push("A", 5)
    pq.push("B", 1)
    pq.push("C", 3)
    assert [pq.pop(), pq.pop(), pq.pop()] == ["B", "C", "A"]


def test_pop_on_empty_raises():
    pq = PriorityFrontier()
    with pytest.raises(EmptyQueueError):
        pq.pop()
    with pytest.raises(IndexError):
        pq.peek_priority()


def test_interleaved_push_pop_always_returns_current_minimum():
    rng = random.Random(7)
    pq = PriorityFrontier()
    live = {}
    popped = []
    for i in range(500):
        p = rng.randint(0, 50)
        pq.push(i, p)
        live[i] = p
        if rng.random() < 0.3:
            item, prio = pq.pop_entry()
            assert prio == min(live.values())
            assert live.pop(item) == prio
            popped.append(item)
    last = None
    while pq:
        item, prio = pq.pop_entry()
        if last is not None:
            assert prio >= last
        last = prio
        popped.append(item)
    assert sorted(popped) == list(range(500))


def test_n_pushes_then_n_pops_sorted():
    rng = random.Random(3)
    prios = [rng.randint(-20, 20) for _ in range(200)]
    pq = PriorityFrontier()
    for i, p in enumerate(prios):
        pq.push(i, p)
    assert pq.size() == 200
    out = [pq.pop_entry() for _ in range(200)]
    assert [p for _, p in out] == sorted(prios)
    assert sorted(i for i, _ in out) == list(range(200))
    assert len(pq) == 0 and not pq


def test_duplicates_are_kept():
    pq = PriorityFrontier()
    pq.push((1, 1), 4)
    pq.push((1, 1), 2)
    assert pq.size() == 2
    assert pq.pop_entry() == ((1, 1), 2)
    assert pq.pop_entry() == ((1, 1), 4)


def test_items_need_not_be_comparable():
    pq = PriorityFrontier()
    pq.push({"a": 1}, 1)
    pq.push({"b": 2}, 1)
    assert pq.peek_priority() == 1
    pq.pop()
    pq.pop()
    pq.clear()
    assert pq.size() == 0
