"""Logger construction and HTTP round-trip logging."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Callable, Iterable

LOG_LEVEL_DEBUG = "debug"
LOG_LEVEL_INFO = "info"
LOG_LEVEL_WARN = "warn"
LOG_LEVEL_ERROR = "error"

DEFAULT_LOGGER_NAME = "actions-runner-controller"

HEADER_FROM_CACHE = "X-From-Cache"
HEADER_RATE_LIMIT_REMAINING = "X-RateLimit-Remaining"

_NAMED_LEVELS = {
    LOG_LEVEL_DEBUG: logging.DEBUG,
    LOG_LEVEL_INFO: logging.INFO,
    LOG_LEVEL_WARN: logging.WARNING,
    LOG_LEVEL_ERROR: logging.ERROR,
}

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _numeric_to_level(value: int) -> int:
    """Map a signed verbosity number (-1 debug, 0 info, 1 warn, 2 error) to a level.

    Numbers below -1 give levels below DEBUG, one step per number, so that
    ``-n`` enables messages logged at verbosity ``n``.
    """
    if value >= -1:
        return min(logging.DEBUG + 10 * (value + 1), logging.CRITICAL)
    return max(1, logging.DEBUG + 1 + value)


def verbosity(v: int) -> int:
    """Return the logging level used for messages of verbosity ``v``."""
    if v <= 0:
        return logging.INFO
    return _numeric_to_level(-v)


def parse_log_level(level: str) -> int:
    """Turn a log level name or a signed 8-bit number into a logging level."""
    if level in _NAMED_LEVELS:
        return _NAMED_LEVELS[level]
    if not _INTEGER.fullmatch(level):
        raise ValueError(f"Failed to parse --log-level={level}: invalid syntax")
    value = int(level)
    if not -128 <= value <= 127:
        raise ValueError(f"Failed to parse --log-level={level}: value out of range")
    return _numeric_to_level(value)


class _RFC3339Formatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created).astimezone()
        return moment.isoformat(timespec="seconds")


def new_logger(level: str, name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Return the named logger set to ``level`` and writing RFC 3339 timestamps."""
    logger = logging.getLogger(name)
    logger.setLevel(parse_log_level(level))
    if not any(isinstance(h.formatter, _RFC3339Formatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            _RFC3339Formatter("%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s")
        )
        logger.addHandler(handler)
    return logger


def _format(message: str, pairs: Iterable[tuple[str, Any]]) -> str:
    fields = " ".join(f"{key}={value}" for key, value in pairs)
    return f"{message} {fields}" if fields else message


class LoggingTransport:
    """Wraps a transport and logs every response it returns."""

    def __init__(
        self,
        transport: Callable[[Any], Any],
        log: logging.Logger | None = None,
    ) -> None:
        self.transport = transport
        self.log = log

    def round_trip(self, request: Any) -> Any:
        """Send ``request`` through the wrapped transport and log the response."""
        response = self.transport(request)
        if response is not None:
            self._log(request, response)
        return response

    def _log(self, request: Any, response: Any) -> None:
        if self.log is None:
            return

        marked = response.headers.get(HEADER_FROM_CACHE) == "1"
        pairs: list[tuple[str, Any]] = [
            ("from_cache", marked),
            ("method", request.method),
            ("url", request.url),
        ]
        if not marked:
            # A cached response carries an outdated remaining count.
            remaining = response.headers.get(HEADER_RATE_LIMIT_REMAINING) or ""
            pairs.append(("ratelimit_remaining", remaining))

        if self.log.isEnabledFor(verbosity(4)):
            body = ""
            try:
                content = response.content
                if isinstance(content, (bytes, bytearray)):
                    body = bytes(content).decode("utf-8", errors="replace")
                elif content is not None:
                    body = str(content)
            except Exception as exc:  # the body stream may be unreadable
                self.log.log(
                    verbosity(3),
                    _format("unable to copy http response", [("error", exc)]),
                )
            self.log.log(
                verbosity(4),
                _format(
                    "Logging HTTP round-trip",
                    [
                        ("method", request.method),
                        ("requestHeader", dict(request.headers or {})),
                        ("statusCode", response.status_code),
                        ("responseHeader", dict(response.headers or {})),
                        ("responseBody", body),
                    ],
                ),
            )

        self.log.log(verbosity(3), _format("Seen HTTP response", pairs))