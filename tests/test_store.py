import random

import pytest

from models import InvalidPatientError


def assert_consistent(store):
    queue_ids, name_ids = store.index_ids()
    assert queue_ids == name_ids


def test_add_keeps_both_indexes_in_sync(store):
    rng = random.Random(7)
    names = ["Alice", "alice", "Bob", "Carol", "BOB", "dave"]
    for _ in range(40):
        store.add_patient(rng.choice(names), rng.randint(0, 90), rng.randint(1, 10), "555")
        assert_consistent(store)
    assert store.waiting_count == 40


def test_invalid_priority_leaves_state_untouched(store):
    store.add_patient("Ann", 30, 4)
    before = store.next_arrival

    with pytest.raises(InvalidPatientError, match="priority"):
        store.add_patient("Bob", 40, 11)
    with pytest.raises(InvalidPatientError):
        store.add_patient("Bob", 40, 0)

    assert store.waiting_count == 1
    assert store.next_arrival == before
    assert_consistent(store)


def test_serve_order_example(store):
    a = store.add_patient("A", 20, 5)
    b = store.add_patient("B", 20, 9)
    c = store.add_patient("C", 20, 5)

    assert store.serve_next() == b
    assert store.serve_next() == a
    assert store.serve_next() == c
    assert store.serve_next() is None


def test_serving_drains_in_priority_then_arrival_order(store):
    rng = random.Random(3)
    for i in range(50):
        store.add_patient(f"p{i % 7}", 30, rng.randint(1, 10))

    served = []
    while True:
        record = store.serve_next()
        if record is None:
            break
        served.append(record)
        assert_consistent(store)

    assert len(served) == 50
    for prev, cur in zip(served, served[1:]):
        assert prev.priority >= cur.priority
        if prev.priority == cur.priority:
            assert prev.arrival_order < cur.arrival_order


def test_served_patients_move_to_history(store):
    first = store.add_patient("First", 50, 2)
    second = store.add_patient("Second", 50, 8)
    store.serve_next()
    store.serve_next()

    assert store.served() == [first, second]
    assert store.search_by_name("First") == []
    assert store.list_waiting() == []


def test_list_waiting_does_not_mutate(store):
    store.add_patient("Low", 10, 1)
    store.add_patient("High", 10, 10)

    listed = store.list_waiting()
    assert [r.name for r in listed] == ["High", "Low"]
    assert store.waiting_count == 2
    assert store.peek_next().name == "High"


def test_search_case_insensitive_in_priority_order(store):
    low = store.add_patient("Alice", 30, 3)
    high = store.add_patient("alice", 31, 7)
    store.add_patient("Alicia", 32, 10)

    assert store.search_by_name("ALICE") == [high, low]
    assert store.search_by_name("  alice ") == [high, low]


def test_search_no_match_returns_empty(store):
    store.add_patient("Alice", 30, 3)
    assert store.search_by_name("Bob") == []
    assert store.search_by_name("   ") == []


def test_arrival_orders_strictly_increase(store):
    arrivals = [store.add_patient(f"n{i}", 1, 1).arrival_order for i in range(10)]
    assert arrivals == sorted(set(arrivals))
