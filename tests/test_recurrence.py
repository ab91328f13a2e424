from __future__ import annotations

from datetime import date

from core.models import IntervalUnit, Recurrence, RecurrenceKind
from core.domain.recurrence import MONTHLY, add_months, advance_date
from core.services.recurrence import expand_occurrences


def test_named_rules_advance_by_their_period():
    start = date(2024, 1, 1)
    assert Recurrence.parse("weekly").advance(start) == date(2024, 1, 8)
    assert Recurrence.parse("biweekly").advance(start) == date(2024, 1, 15)
    assert Recurrence.parse("monthly").advance(start) == date(2024, 2, 1)
    assert Recurrence.parse("quarterly").advance(start) == date(2024, 4, 1)
    assert Recurrence.parse("annual").advance(start) == date(2025, 1, 1)


def test_month_end_is_clamped_to_shorter_months():
    assert Recurrence.parse("monthly").advance(date(2024, 1, 31)) == date(2024, 2, 29)
    assert Recurrence.parse("monthly").advance(date(2023, 1, 31)) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
    assert Recurrence.parse("annual").advance(date(2024, 2, 29)) == date(2025, 2, 28)


def test_every_n_rules_parse_days_and_weeks():
    every_six = Recurrence.parse("every_6_days")
    assert every_six == Recurrence(RecurrenceKind.EVERY_N, 6, IntervalUnit.DAYS)
    assert every_six.advance(date(2024, 1, 1)) == date(2024, 1, 7)
    assert every_six.to_rule() == "every_6_days"

    every_three_weeks = Recurrence.parse("EVERY_3_WEEKS")
    assert every_three_weeks.advance(date(2024, 1, 1)) == date(2024, 1, 22)


def test_unknown_or_malformed_rules_fall_back_to_monthly():
    assert Recurrence.parse("fortnightly-ish") == MONTHLY
    assert Recurrence.parse("every_0_days") == MONTHLY
    assert Recurrence.parse("every_x_weeks") == MONTHLY


def test_blank_rule_means_one_time():
    assert Recurrence.parse(None) is None
    assert Recurrence.parse("  ") is None
    assert advance_date(date(2024, 3, 5), None) == date(2024, 3, 5)


def test_expand_walks_anchor_forward_into_window():
    weekly = Recurrence.parse("weekly")
    dates = expand_occurrences(date(2024, 1, 1), weekly, date(2024, 1, 10), date(2024, 1, 31))
    assert dates == [date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]


def test_expand_window_end_is_inclusive():
    weekly = Recurrence.parse("weekly")
    dates = expand_occurrences(date(2024, 1, 1), weekly, date(2024, 1, 1), date(2024, 1, 8))
    assert dates == [date(2024, 1, 1), date(2024, 1, 8)]


def test_expand_one_time_only_inside_window():
    start, end = date(2024, 1, 1), date(2024, 1, 28)
    assert expand_occurrences(date(2024, 1, 6), None, start, end) == [date(2024, 1, 6)]
    assert expand_occurrences(date(2023, 12, 31), None, start, end) == []
    assert expand_occurrences(date(2024, 2, 1), None, start, end) == []


def test_expand_empty_window():
    assert expand_occurrences(date(2024, 1, 1), MONTHLY, date(2024, 2, 1), date(2024, 1, 1)) == []
