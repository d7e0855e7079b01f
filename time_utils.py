from __future__ import annotations

import math
import time
from typing import Callable, Optional

Clock = Callable[[], float]


def now_ts(clock: Optional[Clock] = None) -> float:
    if clock:
        return clock()
    return time.time()


def format_remaining(seconds: float) -> str:
    """Render a duration as H:MM:SS.

    Hours are total hours (may exceed 24); minutes and seconds get a leading
    zero below 10. Negative input is not special-cased: each component
    truncates toward zero and is padded by the same rule, so five seconds
    overdue renders as 0:00:0-5.
    """
    rest = int(round(seconds))
    hours = math.trunc(rest / 3600)
    rest -= hours * 3600
    minutes = math.trunc(rest / 60)
    rest -= minutes * 60
    return f"{hours}:{_pad(minutes)}:{_pad(rest)}"


def _pad(value: int) -> str:
    return f"0{value}" if value < 10 else str(value)


def format_time_left(expires_at: float, clock: Optional[Clock] = None) -> str:
    return format_remaining(expires_at - now_ts(clock))
