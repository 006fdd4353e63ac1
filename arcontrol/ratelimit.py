"""Rate-limit gauges fed from GitHub API response headers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

HEADER_RATE_LIMIT = "X-RateLimit-Limit"
HEADER_RATE_LIMIT_REMAINING = "X-RateLimit-Remaining"

METRIC_RATE_LIMIT = "github_rate_limit"
METRIC_RATE_LIMIT_HELP = "The maximum number of requests you're permitted to make per hour"
METRIC_RATE_LIMIT_REMAINING = "github_rate_limit_remaining"
METRIC_RATE_LIMIT_REMAINING_HELP = (
    "The number of requests remaining in the current rate limit window"
)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _header(headers: Mapping[str, str], name: str) -> str:
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
        return ""
    return value


def _parse_int(text: str) -> int | None:
    return int(text) if _INTEGER.fullmatch(text) else None


@dataclass
class RateLimitMetrics:
    """Gauges holding the last seen rate limit and remaining request count."""

    rate_limit: float | None = None
    rate_limit_remaining: float | None = None

    def parse_response(self, headers: Mapping[str, str]) -> None:
        """Update the gauges from response headers; unparsable values are ignored."""
        limit = _parse_int(_header(headers, HEADER_RATE_LIMIT))
        if limit is not None:
            self.rate_limit = float(limit)
        remaining = _parse_int(_header(headers, HEADER_RATE_LIMIT_REMAINING))
        if remaining is not None:
            self.rate_limit_remaining = float(remaining)


DEFAULT_METRICS = RateLimitMetrics()


class MetricsTransport:
    """Wraps a transport and records rate-limit headers of its responses."""

    def __init__(
        self,
        transport: Callable[[Any], Any],
        metrics: RateLimitMetrics | None = None,
    ) -> None:
        self.transport = transport
        self.metrics = DEFAULT_METRICS if metrics is None else metrics

    def round_trip(self, request: Any) -> Any:
        """Send ``request`` through the wrapped transport and record its headers."""
        response = self.transport(request)
        if response is not None:
            self.metrics.parse_response(response.headers)
        return response