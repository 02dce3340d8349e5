"""
Logging Configuration Module

Every thread logs through a queue and a single listener thread writes the
records out, so lines from concurrent requests never interleave. Each record is
stamped with the user the request runs for.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from queue import Queue
from typing import Iterable, List, Optional

from flask import g, has_request_context

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(actor)s] - %(message)s"

DEFAULT_QUIET_LOGGERS = ("werkzeug", "urllib3", "asyncio", "MARKDOWN")

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


class ActorFilter(logging.Filter):
    """Adds the acting user id (or '-') to every record as `actor`."""

    def filter(self, record: logging.LogRecord) -> bool:
        actor = "-"
        if has_request_context():
            scope = g.get("request_scope")
            if scope is not None and scope.actor_id:
                actor = scope.actor_id
        record.actor = actor
        return True


class QueueLogging:
    """Owns the queue handler on the root logger and the listener draining it."""

    def __init__(self):
        self._listener: Optional[logging.handlers.QueueListener] = None
        self._queue_handler: Optional[logging.handlers.QueueHandler] = None

    @property
    def running(self) -> bool:
        return self._listener is not None

    def start(
        self,
        debug: bool = False,
        log_file: Optional[str] = None,
        quiet_loggers: Iterable[str] = DEFAULT_QUIET_LOGGERS,
    ) -> None:
        """
        Route all logging through the queue.

        Args:
            debug: Log at DEBUG instead of INFO and keep library loggers verbose
            log_file: Optional path of a size-rotated log file written next to stdout
            quiet_loggers: Library loggers limited to WARNING unless debugging
        """
        self.stop()

        log_queue: Queue = Queue()
        self._queue_handler = logging.handlers.QueueHandler(log_queue)
        # Filters run in the emitting thread before the record is queued, so the request context is available
        self._queue_handler.addFilter(ActorFilter())

        formatter = logging.Formatter(LOG_FORMAT)
        self._listener = logging.handlers.QueueListener(
            log_queue, *self._output_handlers(formatter, log_file), respect_handler_level=True
        )
        self._listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(self._queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        if not debug:
            for name in quiet_loggers:
                logging.getLogger(name).setLevel(logging.WARNING)

    def _output_handlers(self, formatter: logging.Formatter, log_file: Optional[str]) -> List[logging.Handler]:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        handlers: List[logging.Handler] = [console_handler]

        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

        return handlers

    def stop(self) -> None:
        """Flush pending records, stop the listener and detach from the root logger."""
        if self._listener:
            self._listener.stop()
            for handler in self._listener.handlers:
                handler.close()
            self._listener = None
        if self._queue_handler:
            logging.getLogger().removeHandler(self._queue_handler)
            self._queue_handler = None


# Global logging configuration instance
queue_logging = QueueLogging()


def setup_logging(
    debug: bool = False,
    log_file: Optional[str] = None,
    quiet_loggers: Iterable[str] = DEFAULT_QUIET_LOGGERS,
) -> None:
    """Start queue-based logging for the process."""
    queue_logging.start(debug=debug, log_file=log_file, quiet_loggers=quiet_loggers)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    queue_logging.stop()
