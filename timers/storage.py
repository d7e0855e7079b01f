from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Condition
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_TIMERS = 16


class TimerError(Exception):
    """Base class for rejected timer operations."""


class CapacityExceeded(TimerError):
    def __init__(self, capacity: int):
        super().__init__(f"Timer store is full ({capacity} timers)")
        self.capacity = capacity


class TimerNotFound(TimerError):
    def __init__(self, timer_id: Optional[int]):
        super().__init__(f"Timer {timer_id} does not exist")
        self.timer_id = timer_id


class SchedulerStopped(TimerError):
    def __init__(self) -> None:
        super().__init__("Timer scheduler has been shut down")


@dataclass(frozen=True)
class TimerRecord:
    id: int
    created_at: float
    expires_at: float
    label: str

    @classmethod
    def create(cls, timer_id: int, seconds: int, label: str, now: float) -> "TimerRecord":
        if seconds < 0:
            raise ValueError("Timer duration must not be negative")
        return cls(id=timer_id, created_at=now, expires_at=now + seconds, label=label)

    def timer_ran_out(self, now: float) -> bool:
        return now >= self.expires_at

    def remaining_seconds(self, now: float) -> float:
        return self.expires_at - now


class TimerStore:
    """Bounded list of timers kept sorted by expiry.

    The store shares its condition with the scheduler loop: every mutation
    notifies it so a sleeping loop re-reads the earliest deadline. The
    condition's lock is reentrant, so callers already holding it may use the
    store's methods directly.
    """

    def __init__(self, capacity: int = DEFAULT_MAX_TIMERS, condition: Optional[Condition] = None):
        if capacity < 1:
            raise ValueError("Timer store capacity must be at least 1")
        self.capacity = capacity
        self.condition = condition or Condition()
        self._timers: List[TimerRecord] = []

    def __len__(self) -> int:
        with self.condition:
            return len(self._timers)

    def is_full(self) -> bool:
        with self.condition:
            return len(self._timers) >= self.capacity

    def insert(self, record: TimerRecord) -> None:
        with self.condition:
            if len(self._timers) >= self.capacity:
                raise CapacityExceeded(self.capacity)
            self._timers.append(record)
            # stable: equal deadlines keep insertion order
            self._timers.sort(key=lambda t: t.expires_at)
            self.condition.notify_all()

    def remove_by_id(self, timer_id: Optional[int]) -> TimerRecord:
        with self.condition:
            for index, record in enumerate(self._timers):
                if record.id == timer_id:
                    del self._timers[index]
                    self.condition.notify_all()
                    return record
        raise TimerNotFound(timer_id)

    def peek_earliest(self) -> Optional[TimerRecord]:
        with self.condition:
            if not self._timers:
                return None
            return self._timers[0]

    def pop_if_expired(self, now: float) -> Optional[TimerRecord]:
        with self.condition:
            if self._timers and self._timers[0].timer_ran_out(now):
                return self._timers.pop(0)
        return None

    def list(self) -> List[TimerRecord]:
        with self.condition:
            return list(self._timers)

    def clear(self) -> None:
        with self.condition:
            if self._timers:
                logger.debug("Dropping %s timers", len(self._timers))
            self._timers = []
            self.condition.notify_all()
