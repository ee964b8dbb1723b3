"""Colored logging formatter for console output."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any


class ColoredFormatter(logging.Formatter):
    """Logging formatter that colors level names and HTTP status codes.

    uvicorn access records carry ``(client, method, path, http_version,
    status)`` as their args; the status code is colored by its class.

    Colors are disabled when ``use_colors`` is False, when the ``NO_COLOR``
    environment variable is set, or when the output stream is not a TTY.
    """

    LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    STATUS_COLORS: dict[int, str] = {
        1: "\033[37m",
        2: "\033[32m",
        3: "\033[36m",
        4: "\033[33m",
        5: "\033[31m",
    }
    RESET = "\033[0m"
    ACCESS_LOGGER = "uvicorn.access"
    ACCESS_FORMAT = '%s - "%s %s HTTP/%s" %s'

    def __init__(
        self,
        *args: Any,
        use_colors: bool | None = None,
        stream: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._use_colors = use_colors
        self._stream = stream

    def _use_color(self) -> bool:
        if self._use_colors is False or os.environ.get("NO_COLOR") is not None:
            return False
        if self._use_colors:
            return True
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def _color_status(self, status: int) -> str:
        color = self.STATUS_COLORS.get(status // 100, "")
        return f"{color}{status}{self.RESET}" if color else str(status)

    def format(self, record: logging.LogRecord) -> str:
        if not self._use_color():
            return super().format(record)

        # Work on a copy so other handlers see the plain record.
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{record.levelname}{self.RESET}"

        args = record.args
        if record.name == self.ACCESS_LOGGER and isinstance(args, tuple) and len(args) == 5:
            record.msg = self.ACCESS_FORMAT
            record.args = (*args[:4], self._color_status(int(args[4])))
        return super().format(record)
