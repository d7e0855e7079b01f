import random
from threading import Event, Thread

import pytest

from timers.storage import CapacityExceeded, TimerNotFound, TimerRecord, TimerStore


def _record(timer_id: int, seconds: int, now: float = 1000.0) -> TimerRecord:
    return TimerRecord.create(timer_id, seconds, f"t{timer_id}", now=now)


def test_record_expiry_and_remaining():
    record = _record(1, 90)
    assert record.expires_at == record.created_at + 90
    assert record.remaining_seconds(1030.0) == 60
    assert not record.timer_ran_out(1089.0)
    assert record.timer_ran_out(1090.0)


def test_zero_duration_record_runs_out_at_creation():
    record = _record(1, 0)
    assert record.expires_at == record.created_at
    assert record.timer_ran_out(record.created_at)


def test_insert_beyond_capacity_is_rejected():
    store = TimerStore(capacity=16)
    for i in range(16):
        store.insert(_record(i + 1, 60))
    with pytest.raises(CapacityExceeded):
        store.insert(_record(17, 1))
    assert len(store) == 16
    assert store.is_full()
    assert 17 not in [r.id for r in store.list()]


def test_list_is_sorted_by_expiry():
    store = TimerStore(capacity=16)
    durations = random.sample(range(1, 10000), 16)
    for i, seconds in enumerate(durations):
        store.insert(_record(i + 1, seconds))
    expiries = [r.expires_at for r in store.list()]
    assert expiries == sorted(expiries)


def test_equal_deadlines_keep_insertion_order():
    store = TimerStore()
    store.insert(_record(1, 30))
    store.insert(_record(2, 10))
    store.insert(_record(3, 30))
    store.insert(_record(4, 10))
    assert [r.id for r in store.list()] == [2, 4, 1, 3]


def test_remove_present_id():
    store = TimerStore()
    for i in range(3):
        store.insert(_record(i + 1, (i + 1) * 10))
    removed = store.remove_by_id(2)
    assert removed.id == 2
    assert len(store) == 2
    assert [r.id for r in store.list()] == [1, 3]


def test_remove_absent_id_leaves_store_unchanged():
    store = TimerStore()
    store.insert(_record(1, 10))
    before = store.list()
    with pytest.raises(TimerNotFound) as excinfo:
        store.remove_by_id(42)
    assert excinfo.value.timer_id == 42
    assert store.list() == before
    with pytest.raises(TimerNotFound):
        store.remove_by_id(None)


def test_peek_does_not_remove():
    store = TimerStore()
    assert store.peek_earliest() is None
    store.insert(_record(1, 20))
    store.insert(_record(2, 5))
    assert store.peek_earliest().id == 2
    assert len(store) == 2


def test_pop_if_expired_only_pops_due_head():
    store = TimerStore()
    store.insert(_record(1, 5))
    store.insert(_record(2, 20))
    assert store.pop_if_expired(1004.0) is None
    assert store.pop_if_expired(1005.0).id == 1
    assert store.pop_if_expired(1010.0) is None
    assert [r.id for r in store.list()] == [2]


def test_list_returns_a_copy():
    store = TimerStore()
    store.insert(_record(1, 5))
    snapshot = store.list()
    snapshot.clear()
    assert len(store) == 1


def test_insert_wakes_waiter():
    store = TimerStore()
    ready = Event()
    woken = Event()

    def waiter():
        with store.condition:
            ready.set()
            store.condition.wait(timeout=5)
            woken.set()

    thread = Thread(target=waiter)
    thread.start()
    assert ready.wait(timeout=1)
    store.insert(_record(1, 60))
    assert woken.wait(timeout=1)
    thread.join(timeout=1)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        TimerStore(capacity=0)
