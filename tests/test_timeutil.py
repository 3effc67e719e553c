"""Tests for time expressions and snooze durations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from linear_cli.timeutil import parse_snooze_duration, parse_time_expression

NOW = datetime(2024, 3, 31, 15, 30, 45, 123456, tzinfo=timezone.utc)


class TestParseTimeExpression:
    """Test ``--newer-than`` values."""

    def test_empty_defaults_to_six_months(self) -> None:
        assert parse_time_expression("", now=NOW) == "2023-09-30T15:30:45+00:00"
        assert parse_time_expression(None, now=NOW) == parse_time_expression("6_months_ago", now=NOW)

    def test_all_time_disables_filter(self) -> None:
        assert parse_time_expression("all_time", now=NOW) is None

    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("30_minutes_ago", "2024-03-31T15:00:45+00:00"),
            ("1_hour_ago", "2024-03-31T14:30:45+00:00"),
            ("2_days_ago", "2024-03-29T15:30:45+00:00"),
            ("1_week_ago", "2024-03-24T15:30:45+00:00"),
            ("1_year_ago", "2023-03-31T15:30:45+00:00"),
        ],
    )
    def test_relative_units(self, expression: str, expected: str) -> None:
        assert parse_time_expression(expression, now=NOW) == expected

    def test_month_subtraction_clamps_day(self) -> None:
        """Test March 31st minus one month lands on the last day of February."""
        assert parse_time_expression("1_month_ago", now=NOW) == "2024-02-29T15:30:45+00:00"

    def test_plain_date_becomes_midnight_utc(self) -> None:
        assert parse_time_expression("2024-01-15") == "2024-01-15T00:00:00Z"

    def test_rfc3339_passes_through(self) -> None:
        assert parse_time_expression("2024-01-15T10:00:00Z") == "2024-01-15T10:00:00Z"

    @pytest.mark.parametrize(
        "expression, message",
        [
            ("yesterday", "invalid time expression"),
            ("three_days_ago", "invalid number in time expression"),
            ("3_fortnights_ago", "invalid time unit: fortnights"),
            ("2024-02-30", "invalid date"),
        ],
    )
    def test_invalid_expressions(self, expression: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            parse_time_expression(expression, now=NOW)


class TestParseSnoozeDuration:
    """Test inbox snooze durations."""

    def test_tomorrow_is_nine_am_next_day(self) -> None:
        until = parse_snooze_duration("tomorrow", now=NOW)
        assert until == datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)

    def test_tomorrow_keeps_local_offset(self) -> None:
        eastern = timezone(timedelta(hours=-4))
        now = datetime(2024, 3, 31, 22, 15, tzinfo=eastern)

        until = parse_snooze_duration("tomorrow", now=now)

        assert until == datetime(2024, 4, 1, 9, 0, tzinfo=eastern)
        assert until.utcoffset() == timedelta(hours=-4)

    def test_default_now_is_timezone_aware(self) -> None:
        assert parse_snooze_duration("tomorrow").tzinfo is not None

    @pytest.mark.parametrize(
        "value, delta",
        [
            ("2w", timedelta(weeks=2)),
            ("3d", timedelta(days=3)),
            ("4h", timedelta(hours=4)),
            ("15m", timedelta(minutes=15)),
            (" 1D ", timedelta(days=1)),
        ],
    )
    def test_relative_durations(self, value: str, delta: timedelta) -> None:
        assert parse_snooze_duration(value, now=NOW) == NOW + delta

    @pytest.mark.parametrize("value", ["", "soon", "1y", "-1d", "1.5h"])
    def test_invalid_durations(self, value: str) -> None:
        with pytest.raises(ValueError, match="invalid duration"):
            parse_snooze_duration(value, now=NOW)
