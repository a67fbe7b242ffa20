# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Console logging for applications built on this package.

The parser and the adapters log through :func:`get_logger` and never touch
handlers. An application which wants to see those records calls
:func:`setup_logging` once at startup.
"""

from __future__ import annotations

import atexit
import datetime
import logging
import os
import sys
import traceback
from enum import Enum, IntEnum, unique
from logging.handlers import QueueHandler, QueueListener
from queue import Queue
from typing import Any, TextIO

LOGLEVEL_ENV = "CMDLINE_HELPERS_LOGLEVEL"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


@unique
class ColorMode(Enum):
    """ColorMode is used as an argument to :func:`setup_logging`."""

    #: Always emit ANSI escape codes.
    ALWAYS = "always"
    #: Emit colors only if the stream is a tty and ``NO_COLOR`` is unset.
    AUTO = "auto"
    #: Plain text.
    NEVER = "never"


def resolve_color_mode(mode: ColorMode, stream: TextIO = sys.stderr) -> bool:
    """Decides whether the console handler colors its output.

    :param mode: The available options are described in :class:`ColorMode`.
    :param stream: Checked for a tty under :attr:`ColorMode.AUTO`.
    """
    if sys.platform == "win32":
        return False

    match mode:
        case ColorMode.ALWAYS:
            return True
        case ColorMode.AUTO:
            return os.getenv("NO_COLOR") is None and stream.isatty()
        case ColorMode.NEVER:
            return False


@unique
class Loglevel(IntEnum):
    """The ``logging`` levels, plus ``TRACE`` below ``DEBUG`` for the
    parser's per-token records.
    """

    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    TRACE = 5

    @classmethod
    def from_str(cls, string: str) -> Loglevel:
        """Accepts a numeric level (``"10"``) or a case insensitive
        level name (``"debug"``).
        """
        if string.isnumeric():
            return cls(int(string, 10))

        try:
            return cls[string.upper()]
        except KeyError:
            raise ValueError(f"{string} not a valid loglevel") from None


# One running listener per configured logger.
_listeners: dict[str, QueueListener] = {}


def setup_logging(
    level: Loglevel | None = None,
    color_mode: ColorMode = ColorMode.AUTO,
    logger_name: str = "cmdline_helpers",
) -> None:
    """Sends the records of ``logger_name`` to stderr.

    Records pass through a QueueHandler, so logging never blocks on the
    terminal. Calling this again replaces the previous configuration.

    :param level: Console level. Defaults to ``CMDLINE_HELPERS_LOGLEVEL``
                  and then to ``WARNING``.
    :param color_mode: See :class:`ColorMode`.
    :param logger_name: The logger which receives the handler.
    """
    if level is None:
        raw = os.getenv(LOGLEVEL_ENV)
        level = Loglevel.WARNING if raw is None else Loglevel.from_str(raw)

    logger = logging.getLogger(logger_name)
    # NOTSET would defer to the root logger's level.
    logger.setLevel(1)

    _stop_listener(logger_name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    add_stderr_log_handler(logger_name, level, resolve_color_mode(color_mode))


def _stop_listener(logger_name: str) -> None:
    listener = _listeners.pop(logger_name, None)
    if listener is not None:
        atexit.unregister(listener.stop)
        listener.stop()


def add_stderr_log_handler(logger_name: str, level: Loglevel, colored: bool) -> None:
    queue: Queue[Any] = Queue()
    logging.getLogger(logger_name).addHandler(QueueHandler(queue))

    formatter = _ConsoleFormatter()
    formatter.colored = colored
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    # The formatter appends the newline itself.
    stderr_handler.terminator = ""
    stderr_handler.setFormatter(formatter)

    listener = QueueListener(queue, stderr_handler, respect_handler_level=True)
    listener.start()
    atexit.register(listener.stop)
    _listeners[logger_name] = listener


class _Color(Enum):
    NOP = ""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    GRAY = "\033[0;38;5;245m"


_STYLES = {
    Loglevel.TRACE: _Color.GRAY.value,
    Loglevel.DEBUG: _Color.GRAY.value,
    Loglevel.WARNING: _Color.YELLOW.value,
    Loglevel.ERROR: _Color.RED.value,
    Loglevel.CRITICAL: _Color.RED.value + _Color.BOLD.value,
}


def _format_record(
    dt: datetime.datetime,
    name: str,
    data: str,
    levelno: int,
    stacktrace: str | None,
    colored: bool = False,
) -> str:
    if colored:
        data = _STYLES.get(levelno, _Color.NOP.value) + data + _Color.RESET.value

    msg = f"{dt.strftime('%b %d %H:%M:%S.%f')[:-3]} {name}: {data}\n"
    if stacktrace is not None:
        msg += "\n" + stacktrace
    return msg


class _ConsoleFormatter(logging.Formatter):
    colored: bool = False

    def format(self, record: logging.LogRecord) -> str:
        stacktrace = None
        if record.exc_info:
            stacktrace = "".join(traceback.format_exception(*record.exc_info))

        return _format_record(
            dt=datetime.datetime.fromtimestamp(record.created),
            name=record.name,
            data=record.getMessage(),
            levelno=record.levelno,
            stacktrace=stacktrace,
            colored=self.colored,
        )


class Logger(logging.LoggerAdapter[logging.Logger]):
    """A plain :class:`logging.Logger` with an added :meth:`trace`.

    Wrapping keeps the process wide logger class untouched.
    """

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(TRACE, msg, *args, **kwargs)


def get_logger(name: str) -> Logger:
    return Logger(logging.getLogger(name), {})
