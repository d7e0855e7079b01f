from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from time_utils import format_time_left

from .manager import TimerScheduler
from .parser import parse_timer_id
from .storage import CapacityExceeded, SchedulerStopped, TimerNotFound

logger = logging.getLogger(__name__)

TIMER_ADDED = "Timer added."
TOO_MANY_TIMERS = "Too many timers running, can't create a new one."
TIMER_REMOVED = "Removed the timer."
TIMER_MISSING = "Timer doesn't exist."
NO_TIMERS = "There are no timers running at the moment."
SCHEDULER_STOPPED = "Timers are shut down, can't create a new one."

# command -> (argument hint, description)
COMMANDS = {
    "add": ("reason", "Add a timer with <reason>"),
    "remove": ("timer id", "Remove a timer"),
    "list": ("", "List all timers"),
    "help": ("", "Show this help"),
}


@dataclass
class CommandResult:
    handled: bool
    lines: List[str] = field(default_factory=list)
    action: Optional[str] = None


class TimerCommands:
    """Turns host command lines into scheduler calls and text responses.

    ``add`` and ``remove`` receive the whole command line, command word
    included; the positional label offset relies on that.
    """

    def __init__(self, scheduler: TimerScheduler):
        self.scheduler = scheduler

    def handle_line(self, line: str) -> CommandResult:
        words = line.split(None, 1)
        if not words:
            return CommandResult(handled=False)
        command = words[0].lower()
        if command == "add":
            return self.add(line)
        if command == "remove":
            return self.remove(line)
        if command == "list":
            return self.list()
        if command == "help":
            return self.help()
        logger.debug("Unknown command: %s", command)
        return CommandResult(handled=False, lines=[f"Unknown command: {words[0]}"])

    def add(self, text: str) -> CommandResult:
        try:
            self.scheduler.add(text)
        except CapacityExceeded:
            return CommandResult(handled=True, lines=[TOO_MANY_TIMERS], action="add")
        except SchedulerStopped:
            return CommandResult(handled=True, lines=[SCHEDULER_STOPPED], action="add")
        return CommandResult(handled=True, lines=[TIMER_ADDED], action="add")

    def remove(self, text: str) -> CommandResult:
        # text without digits targets the id equal to the capacity
        timer_id = parse_timer_id(text, default=self.scheduler.capacity)
        try:
            self.scheduler.remove(timer_id)
        except TimerNotFound:
            logger.warning("Remove requested for unknown timer %s", timer_id)
            return CommandResult(handled=True, lines=[TIMER_MISSING], action="remove")
        return CommandResult(handled=True, lines=[TIMER_REMOVED], action="remove")

    def list(self) -> CommandResult:
        timers = self.scheduler.list_timers()
        if not timers:
            return CommandResult(handled=True, lines=[NO_TIMERS], action="list")
        lines = []
        for timer in timers:
            lines.append(f"Timer: {timer.label}. Timer id: {timer.id}")
            lines.append(f"Expires in: {format_time_left(timer.expires_at, self.scheduler.clock)}")
        return CommandResult(handled=True, lines=lines, action="list")

    def help(self) -> CommandResult:
        lines = []
        for name, (args, description) in COMMANDS.items():
            usage = f"{name} <{args}>" if args else name
            lines.append(f"{usage}: {description}")
        return CommandResult(handled=True, lines=lines, action="help")
