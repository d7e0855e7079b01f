"""In-process timer scheduler."""

from .commands import CommandResult, TimerCommands
from .manager import SchedulerState, TimerScheduler
from .parser import TimerRequest, parse_duration, parse_timer_request
from .sink import ConsoleSink, MemorySink, NotificationSink
from .storage import CapacityExceeded, TimerError, TimerNotFound, TimerRecord, TimerStore
