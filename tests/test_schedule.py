from datetime import datetime, timedelta, timezone

import pytest

from arcontrol.schedule import Period, RecurrenceRule, ScheduleError, match_schedule

START = "2021-05-01T00:00:00+09:00"
END = "2021-05-03T00:00:00+09:00"


def _parse(text):
    return datetime.fromisoformat(text)


def _match(now, start, end, freq="", until=""):
    until_time = _parse(until) if until else None
    return match_schedule(
        _parse(now), _parse(start), _parse(end), RecurrenceRule(freq, until_time)
    )


def _text(period):
    return "" if period is None else str(period)


CASES = [
    # one-time
    ("", "", "2021-04-30T23:59:59+09:00", "", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00"),
    ("", "", "2021-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", ""),
    ("", "", "2021-05-02T23:59:59+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", ""),
    ("", "", "2021-05-03T00:00:00+09:00", "", ""),
    # weekly
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-04-30T23:59:59+09:00", "", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-02T23:59:59+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-03T00:00:00+09:00", "", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-07T23:59:59+09:00", "", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-08T00:00:00+09:00", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00", "2021-05-15T00:00:00+09:00-2021-05-17T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-09T23:59:59+09:00", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00", "2021-05-15T00:00:00+09:00-2021-05-17T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2021-05-10T00:00:00+09:00", "", "2021-05-15T00:00:00+09:00-2021-05-17T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2022-04-29T23:59:59+09:00", "", "2022-04-30T00:00:00+09:00-2022-05-02T00:00:00+09:00"),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2022-04-30T00:00:00+09:00", "2022-04-30T00:00:00+09:00-2022-05-02T00:00:00+09:00", ""),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2022-05-01T23:59:59+09:00", "2022-04-30T00:00:00+09:00-2022-05-02T00:00:00+09:00", ""),
    ("Weekly", "2022-05-01T00:00:00+09:00", "2022-05-02T00:00:00+09:00", "", ""),
    ("Weekly", "", "2021-05-08T00:00:00+09:00", "2021-05-08T00:00:00+09:00-2021-05-10T00:00:00+09:00", "2021-05-15T00:00:00+09:00-2021-05-17T00:00:00+09:00"),
    # monthly
    ("Monthly", "2022-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", "2021-06-01T00:00:00+09:00-2021-06-03T00:00:00+09:00"),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2021-06-01T00:00:00+09:00", "2021-06-01T00:00:00+09:00-2021-06-03T00:00:00+09:00", "2021-07-01T00:00:00+09:00-2021-07-03T00:00:00+09:00"),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2022-04-30T23:59:59+09:00", "", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00"),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2022-05-01T00:00:00+09:00", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00", ""),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2022-05-01T00:00:01+09:00", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00", ""),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2022-05-02T23:59:59+09:00", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00", ""),
    ("Monthly", "2022-05-01T00:00:00+09:00", "2022-05-03T00:00:00+09:00", "", ""),
    # yearly
    ("Yearly", "2022-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00", "2021-05-01T00:00:00+09:00-2021-05-03T00:00:00+09:00", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00"),
    ("Yearly", "2023-05-01T00:00:00+09:00", "2022-05-01T00:00:00+09:00", "2022-05-01T00:00:00+09:00-2022-05-03T00:00:00+09:00", "2023-05-01T00:00:00+09:00-2023-05-03T00:00:00+09:00"),
    ("Yearly", "2023-05-01T00:00:00+09:00", "2023-04-30T23:59:59+09:00", "", "2023-05-01T00:00:00+09:00-2023-05-03T00:00:00+09:00"),
    ("Yearly", "2023-05-01T00:00:00+09:00", "2023-05-01T00:00:00+09:00", "2023-05-01T00:00:00+09:00-2023-05-03T00:00:00+09:00", ""),
    ("Yearly", "2023-05-01T00:00:00+09:00", "2023-05-02T23:23:59+09:00", "2023-05-01T00:00:00+09:00-2023-05-03T00:00:00+09:00", ""),
    ("Yearly", "2023-05-01T00:00:00+09:00", "2023-05-03T00:00:00+09:00", "", ""),
]


@pytest.mark.parametrize("freq, until, now, want_active, want_upcoming", CASES)
def test_active_and_upcoming_periods(freq, until, now, want_active, want_upcoming):
    active, upcoming = _match(now, START, END, freq, until)
    assert _text(active) == want_active
    assert _text(upcoming) == want_upcoming


@pytest.mark.parametrize("freq", ["daily", "Hourly", "x", "\x00"])
def test_invalid_frequency_raises(freq):
    with pytest.raises(ScheduleError, match="invalid freq"):
        _match("2021-05-01T00:00:00+09:00", START, END, freq)


def test_override_longer_than_frequency_raises():
    with pytest.raises(ScheduleError, match="must be equal to or shorter"):
        _match("2021-05-01T00:00:00+09:00", START, END, "Daily")


def test_daily_override_fitting_in_a_day():
    active, upcoming = _match(
        "2021-05-02T10:00:00+09:00",
        "2021-05-01T09:00:00+09:00",
        "2021-05-01T17:00:00+09:00",
        "Daily",
    )
    assert str(active) == "2021-05-02T09:00:00+09:00-2021-05-02T17:00:00+09:00"
    assert str(upcoming) == "2021-05-03T09:00:00+09:00-2021-05-03T17:00:00+09:00"


def test_period_string_uses_z_for_utc():
    start = datetime(2021, 5, 1, tzinfo=timezone.utc)
    period = Period(start, start + timedelta(days=2))
    assert str(period) == "2021-05-01T00:00:00Z-2021-05-03T00:00:00Z"


def test_zero_length_window_is_never_active():
    now = "2021-05-01T00:00:00+09:00"
    active, upcoming = _match(now, START, START, "Weekly")
    assert active is None
    assert str(upcoming) == "2021-05-08T00:00:00+09:00-2021-05-08T00:00:00+09:00"