import logging
import signal
import sys
from typing import Optional, TextIO

from config import Config, load_config, setup_logging
from timers import ConsoleSink, TimerCommands, TimerScheduler
from timers.sink import NotificationSink

logger = logging.getLogger("timers.shell")

QUIT_WORDS = {"quit", "exit"}


def graceful_exit(signum, frame) -> None:  # pragma: no cover - signal handler
    logger.info("Shutting down (signal %s)", signum)
    raise KeyboardInterrupt()


class TimerShell:
    def __init__(self, config: Config, sink: NotificationSink):
        self.config = config
        self.sink = sink
        self.scheduler = TimerScheduler.from_config(config, sink)
        self.commands = TimerCommands(self.scheduler)

    def start(self) -> None:
        self.scheduler.start()

    def shutdown(self) -> None:
        self.scheduler.shutdown()

    def handle(self, line: str) -> bool:
        """Run one command line; returns False when the shell should stop."""
        line = line.strip()
        if not line:
            return True
        if line.lower() in QUIT_WORDS:
            return False
        result = self.commands.handle_line(line)
        for text in result.lines:
            self.sink.put(text)
        return True

    def run(self, stream: Optional[TextIO] = None) -> None:
        stream = stream or sys.stdin
        for line in stream:
            if not self.handle(line):
                break


def main() -> None:
    config = load_config()
    setup_logging(config.log_level, config.log_dir)
    signal.signal(signal.SIGINT, graceful_exit)
    logger.info("Starting timer shell (max_timers=%s)", config.max_timers)

    shell = TimerShell(config, ConsoleSink())
    shell.start()
    try:
        shell.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        shell.shutdown()


if __name__ == "__main__":
    main()
