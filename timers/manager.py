from __future__ import annotations

import itertools
import logging
import time
from enum import Enum
from threading import Condition, Thread
from typing import Callable, List, Optional

from .parser import DEFAULT_LABEL_MAX_LENGTH, DEFAULT_LABEL_OFFSET, parse_timer_request
from .sink import NotificationSink
from .storage import DEFAULT_MAX_TIMERS, CapacityExceeded, SchedulerStopped, TimerRecord, TimerStore

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    WAITING = "waiting"
    STOPPED = "stopped"


class TimerScheduler:
    """Single background waiter for every registered timer.

    The loop sleeps on one condition until the earliest deadline, or until a
    store mutation or shutdown wakes it, and then re-reads the store from
    scratch. At most one expiry is emitted per iteration; overdue timers are
    drained by looping again without sleeping.
    """

    def __init__(
        self,
        sink: NotificationSink,
        max_timers: int = DEFAULT_MAX_TIMERS,
        id_seed: int = 1,
        label_offset: int = DEFAULT_LABEL_OFFSET,
        label_max_length: int = DEFAULT_LABEL_MAX_LENGTH,
        label_strategy: str = "offset",
        clock: Callable[[], float] = time.time,
    ):
        if id_seed < 1:
            raise ValueError("Timer ids start at 1 or above")
        self.sink = sink
        self.label_offset = label_offset
        self.label_max_length = label_max_length
        self.label_strategy = label_strategy
        self.clock = clock

        self._cond = Condition()
        self._store = TimerStore(capacity=max_timers, condition=self._cond)
        self._ids = itertools.count(id_seed)
        self._stopping = False
        self._state = SchedulerState.IDLE
        self._thread: Optional[Thread] = None

    @classmethod
    def from_config(cls, config, sink: NotificationSink, **kwargs) -> "TimerScheduler":
        return cls(
            sink,
            max_timers=config.max_timers,
            id_seed=config.id_seed,
            label_offset=config.label_offset,
            label_max_length=config.label_max_length,
            label_strategy=config.label_strategy,
            **kwargs,
        )

    @property
    def capacity(self) -> int:
        return self._store.capacity

    @property
    def state(self) -> SchedulerState:
        with self._cond:
            return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        with self._cond:
            if self._state is SchedulerState.STOPPED:
                raise RuntimeError("Timer scheduler was shut down and cannot be restarted")
            self._stopping = False
            self._state = SchedulerState.WAITING if len(self._store) else SchedulerState.IDLE
        # non-daemon: shutdown() must join it
        self._thread = Thread(target=self._loop, name="timer-scheduler")
        self._thread.start()
        logger.info("Timer scheduler started (capacity=%s)", self.capacity)

    def shutdown(self) -> None:
        # set before taking the lock so a loop busy emitting sees it on its next check
        self._stopping = True
        with self._cond:
            self._cond.notify_all()
        if self._thread:
            self._thread.join()
            self._thread = None
            logger.info("Timer scheduler stopped")
        with self._cond:
            self._state = SchedulerState.STOPPED
            self._store.clear()

    def __enter__(self) -> "TimerScheduler":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def add(self, text: str) -> TimerRecord:
        request = parse_timer_request(
            text,
            offset=self.label_offset,
            max_length=self.label_max_length,
            strategy=self.label_strategy,
        )
        with self._cond:
            if self._stopping or self._state is SchedulerState.STOPPED:
                logger.warning("Rejected timer %r: scheduler is shut down", request.label)
                raise SchedulerStopped()
            if self._store.is_full():
                logger.warning("Rejected timer %r: %s timers already running", request.label, self.capacity)
                raise CapacityExceeded(self.capacity)
            record = TimerRecord.create(next(self._ids), request.seconds, request.label, now=self.clock())
            self._store.insert(record)
        logger.info("Timer %s added (seconds=%s, label=%s)", record.id, request.seconds, record.label)
        return record

    def remove(self, timer_id: Optional[int]) -> TimerRecord:
        record = self._store.remove_by_id(timer_id)
        logger.info("Timer %s removed", record.id)
        return record

    def list_timers(self) -> List[TimerRecord]:
        return self._store.list()

    def __len__(self) -> int:
        return len(self._store)

    def _loop(self) -> None:
        while True:
            expired = None
            with self._cond:
                if self._stopping:
                    self._state = SchedulerState.STOPPED
                    break
                earliest = self._store.peek_earliest()
                if earliest is None:
                    self._state = SchedulerState.IDLE
                    self._cond.wait()
                    continue
                self._state = SchedulerState.WAITING
                now = self.clock()
                if earliest.timer_ran_out(now):
                    expired = self._store.pop_if_expired(now)
                else:
                    # timeout is derived fresh on every pass, never a fixed poll interval
                    self._cond.wait(timeout=max(0.0, earliest.expires_at - now))
                    continue
            if expired is not None and not self._stopping:
                self._emit_expired(expired)

    def _emit_expired(self, record: TimerRecord) -> None:
        logger.info("Timer %s expired (label=%s)", record.id, record.label)
        try:
            self.sink.put(f"Timer expired: {record.label}")
        except Exception:  # pragma: no cover - sink safety
            logger.error("Failed to deliver expiry of timer %s", record.id, exc_info=True)
