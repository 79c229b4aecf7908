"""Tests for the English description generator."""

import pytest

from cronops.engine import describe, parse_expression
from cronops.engine.describe import PREFIX, ordinal_suffix


def describe_text(expression: str) -> str:
    """Description without the fixed prefix and trailing period."""
    text = describe(parse_expression(expression))
    assert text.startswith(PREFIX)
    assert text.endswith(".")
    return text[len(PREFIX):-1]


class TestOverrides:
    """Tests for whole-expression phrasings."""

    def test_daily_midnight(self):
        assert describe(parse_expression("0 0 * * *")) == (
            "This cron expression will run once per day at midnight."
        )

    def test_sunday_midnight(self):
        assert describe_text("0 0 * * 0") == "at midnight on Sundays"

    def test_sunday_as_seven_is_not_overridden(self):
        """Only the literal 0 token takes the Sunday override."""
        assert describe_text("0 0 * * 7") == "at the start of each hour at midnight on Sundays"

    def test_start_of_every_hour(self):
        assert describe_text("0 * * * *") == "at the start of every hour"

    @pytest.mark.parametrize("expression,expected", [
        ("00 0 * * *", "at the start of each hour at midnight"),
        ("0 00 * * *", "at the start of each hour at midnight"),
        ("00 * * * *", "at the start of each hour of every hour"),
        ("0 00 * * 0", "at the start of each hour at midnight on Sundays"),
    ])
    def test_overrides_need_literal_zero_tokens(self, expression, expected):
        """Zero-padded tokens describe field by field."""
        assert describe_text(expression) == expected

    def test_override_needs_wildcard_month(self):
        assert describe_text("0 0 * 6 *") == "at the start of each hour at midnight in June"


class TestMinuteAndHour:
    """Tests for minute and hour clauses and their combination."""

    @pytest.mark.parametrize("expression,expected", [
        ("* * * * *", "every minute every hour"),
        ("*/1 * * * *", "every minute of every hour"),
        ("*/15 * * * *", "every 15 minutes of every hour"),
        ("*/7 * * * *", "every 7 minute(s) of every hour"),
        ("0,30 * * * *", "at minutes 0,30 of every hour"),
        ("0-10 * * * *", "every minute from 0-10 of every hour"),
        ("10-30/5 * * * *", "every 5 minute(s) of every hour"),
        ("17 * * * *", "at minute 17 of every hour"),
    ])
    def test_minute_with_any_hour(self, expression, expected):
        assert describe_text(expression) == expected

    @pytest.mark.parametrize("expression,expected", [
        ("* 12 * * *", "every minute at noon"),
        ("* 0 * * *", "every minute at midnight"),
        ("30 14 * * *", "at minute 30 at 14:00"),
        ("0 9-17 * * *", "at the start of each hour every hour from 9-17"),
        ("0 */2 * * *", "at the start of each hour every 2 hour(s)"),
        ("0 */1 * * *", "at the start of each hour every hour"),
        ("0 8,20 * * *", "at the start of each hour at hours 8,20"),
    ])
    def test_hour_clauses(self, expression, expected):
        assert describe_text(expression) == expected


class TestDayOfMonth:
    """Tests for day-of-month clauses."""

    @pytest.mark.parametrize("day,expected", [
        (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
        (11, "11th"), (12, "12th"), (13, "13th"),
        (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st"),
    ])
    def test_ordinal(self, day, expected):
        assert f"{day}{ordinal_suffix(day)}" == expected

    def test_single_day(self):
        assert describe_text("0 0 1 * *") == (
            "at the start of each hour at midnight on the 1st of the month"
        )

    def test_last_day(self):
        assert describe_text("0 0 L * *").endswith("on the last day of the month")

    def test_list_of_days(self):
        assert describe_text("0 0 1,15 * *").endswith("on days 1,15 of the month")

    def test_range_of_days(self):
        assert describe_text("0 0 1-7 * *").endswith("on days 1-7 of the month")

    def test_step_of_days(self):
        assert describe_text("0 0 */2 * *").endswith("every 2 day(s) of the month")


class TestMonth:
    """Tests for month clauses."""

    @pytest.mark.parametrize("token,expected", [
        ("7", "in July"),
        ("1,6,12", "in January, June, December"),
        ("3-5", "from March to May"),
        ("1-3,12", "in 1-3, December"),
        ("*/3", "in month */3"),
    ])
    def test_month(self, token, expected):
        assert describe_text(f"0 0 1 {token} *").endswith(expected)


class TestDayOfWeek:
    """Tests for day-of-week clauses."""

    @pytest.mark.parametrize("token,expected", [
        ("1", "on Mondays"),
        ("6", "on Saturdays"),
        ("1-5", "on weekdays"),
        ("0,6", "on weekends"),
        ("6,0", "on weekends"),
        ("6,7", "on weekends"),
        ("1,3,5", "on Monday, Wednesday, Friday"),
        ("0,7", "on Sunday, Sunday"),
        ("2-4", "from Tuesday to Thursday"),
        ("5-7", "from Friday to Sunday"),
        ("*/2", "on day */2 of the week"),
    ])
    def test_day_of_week(self, token, expected):
        assert describe_text(f"0 9 * * {token}").endswith(expected)

    def test_reversed_seven_six_is_a_plain_list(self):
        """Only the 0,6 / 6,0 / 6,7 literals read as weekends."""
        text = describe_text("0 9 * * 7,6")
        assert "weekends" not in text
        assert "Saturday" in text and "Sunday" in text

    def test_clauses_join_in_field_order(self):
        assert describe_text("0 0 13 * 5") == (
            "at the start of each hour at midnight on the 13th of the month on Fridays"
        )

    def test_weekdays_at_nine(self):
        assert describe(parse_expression("0 9 * * 1-5")) == (
            "This cron expression will run at the start of each hour at 9:00 on weekdays."
        )


class TestTotality:
    """Every valid schedule gets a description."""

    @pytest.mark.parametrize("expression", [
        "5-10/2 1-23/3 2-30/7 2-11/2 1-6/2",
        "59 23 31 12 6",
        "0-59 0-23 1-31 1-12 0-7",
        "1,2 3,4 L 5,6 0,1",
    ])
    def test_description_is_a_sentence(self, expression):
        text = describe(parse_expression(expression))

        assert text.startswith(PREFIX)
        assert text.endswith(".")
        assert "None" not in text
