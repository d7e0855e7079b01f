from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# unit -> (pattern, factor); widths are fixed, longer numbers only match their trailing digits
DURATION_UNITS = {
    "seconds": (re.compile(r"([0-9]{1,2})s"), 1),
    "minutes": (re.compile(r"([0-9]{1,2})m"), 60),
    "hours": (re.compile(r"([0-9]{1,2})h"), 3600),
    "days": (re.compile(r"([0-9]{1,3})d"), 86400),
}

TIMER_ID_RE = re.compile(r"([0-9]{1,5})")

DEFAULT_LABEL_OFFSET = 4
DEFAULT_LABEL_MAX_LENGTH = 512


@dataclass
class TimerRequest:
    seconds: int
    label: str
    raw_text: str = ""


def parse_duration(text: str) -> int:
    """Sum every recognised ``<n>s``/``<n>m``/``<n>h``/``<n>d`` token in ``text``.

    Each unit is searched independently and only its first match counts, so
    token order does not matter. Text without any token yields 0 seconds.
    """
    seconds = 0
    for pattern, factor in DURATION_UNITS.values():
        match = pattern.search(text)
        if match:
            seconds += int(match.group(1)) * factor
    return seconds


def extract_label(
    text: str,
    offset: int = DEFAULT_LABEL_OFFSET,
    max_length: int = DEFAULT_LABEL_MAX_LENGTH,
) -> str:
    """Positional label: skip the command token (``add ``) and keep at most ``max_length`` chars."""
    return text[offset : offset + max_length]


def strip_label(text: str, max_length: int = DEFAULT_LABEL_MAX_LENGTH) -> str:
    """Label with the leading command word and the duration tokens removed."""
    words = text.split(None, 1)
    remainder = words[1] if len(words) > 1 else ""
    for pattern, _ in DURATION_UNITS.values():
        remainder = pattern.sub("", remainder, count=1)
    return " ".join(remainder.split())[:max_length]


def parse_timer_request(
    text: str,
    offset: int = DEFAULT_LABEL_OFFSET,
    max_length: int = DEFAULT_LABEL_MAX_LENGTH,
    strategy: str = "offset",
) -> TimerRequest:
    if strategy == "strip":
        label = strip_label(text, max_length=max_length)
    elif strategy == "offset":
        label = extract_label(text, offset=offset, max_length=max_length)
    else:
        raise ValueError(f"Unknown label strategy: {strategy}")
    return TimerRequest(seconds=parse_duration(text), label=label, raw_text=text)


def parse_timer_id(text: str, default: Optional[int] = None) -> Optional[int]:
    """First run of up to five digits in ``text``, or ``default`` when there is none."""
    match = TIMER_ID_RE.search(text)
    if match:
        return int(match.group(1))
    return default
