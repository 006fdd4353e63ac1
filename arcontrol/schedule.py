"""Recurring schedule matching for time-boxed overrides."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil import rrule

_ONE_TICK = timedelta(microseconds=1)

# frequency name -> (rrule frequency, years, months, days) of one period
_FREQUENCIES = {
    "Daily": (rrule.DAILY, 0, 0, 1),
    "Weekly": (rrule.WEEKLY, 0, 0, 7),
    "Monthly": (rrule.MONTHLY, 0, 1, 0),
    "Yearly": (rrule.YEARLY, 1, 0, 0),
}


class ScheduleError(ValueError):
    """Raised when a schedule cannot be evaluated."""


@dataclass(frozen=True)
class RecurrenceRule:
    """How often a period repeats, and until when."""

    frequency: str = ""
    until_time: datetime | None = None


def _format_rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass(frozen=True)
class Period:
    """A span of time from start_time up to end_time."""

    start_time: datetime
    end_time: datetime

    def __str__(self) -> str:
        return f"{_format_rfc3339(self.start_time)}-{_format_rfc3339(self.end_time)}"


def _add_calendar(now: datetime, years: int, months: int, days: int) -> datetime:
    """Add a calendar offset, normalising overflowing days into the next month."""
    month_index = now.month - 1 + months
    year = now.year + years + month_index // 12
    month = month_index % 12 + 1
    first_of_month = now.replace(year=year, month=month, day=1)
    return first_of_month + timedelta(days=now.day - 1 + days)


def match_schedule(
    now: datetime,
    start_time: datetime,
    end_time: datetime,
    recurrence_rule: RecurrenceRule,
) -> tuple[Period | None, Period | None]:
    """Return the period active at ``now`` and the next upcoming one.

    Either element is None when there is no such period.
    """
    frequency = recurrence_rule.frequency

    if frequency == "":
        period = Period(start_time, end_time)
        if now < start_time:
            return None, period
        if now < end_time:
            return period, None
        return None, None

    try:
        freq_value, years, months, days = _FREQUENCIES[frequency]
    except KeyError:
        raise ScheduleError(
            f'invalid freq "{frequency}": It must be one of '
            '"Daily", "Weekly", "Monthly", and "Yearly"'
        ) from None

    freq_later = _add_calendar(now, years, months, days)
    freq_duration = freq_later - now

    override_duration = end_time - start_time
    if override_duration > freq_duration:
        raise ScheduleError(
            f"override's duration {override_duration} must be equal to or shorter "
            f'than the duration implied by freq "{frequency}" ({freq_duration})'
        )

    try:
        rule = rrule.rrule(
            freq_value, dtstart=start_time, until=recurrence_rule.until_time
        )
        active_starts = rule.between(
            now - override_duration + _ONE_TICK, now, inc=True
        )
        upcoming_starts = rule.between(now + _ONE_TICK, freq_later, inc=True)
    except (TypeError, ValueError) as exc:
        raise ScheduleError(str(exc)) from exc

    if len(active_starts) > 1:
        raise ScheduleError(
            f"[bug] unexpected number of active overrides found: {active_starts}"
        )

    active = None
    if active_starts:
        begin = active_starts[0]
        active = Period(begin, begin + override_duration)

    upcoming = None
    if upcoming_starts:
        begin = upcoming_starts[0]
        upcoming = Period(begin, begin + override_duration)

    return active, upcoming