"""Payday date arithmetic - pay cycle boundaries from a monthly payday rule"""

from datetime import date, timedelta
from typing import Tuple

from budget_engine.domain.models import PaydaySettings, PayPeriod
from budget_engine.utils.date_utils import inclusive_days, last_day_of_month, shift_month

SATURDAY = 5
SUNDAY = 6


def adjust_for_weekends(day: date) -> date:
    """Saturday → Friday, Sunday → Friday. Never moves a date forward."""
    weekday = day.weekday()
    if weekday == SATURDAY:
        return day - timedelta(days=1)
    if weekday == SUNDAY:
        return day - timedelta(days=2)
    return day


def get_payday(year: int, month: int, payday_day: int, adjust: bool = True) -> date:
    """
    Payday for a 1-indexed (year, month).

    payday_day is clamped to the month length, so day 30 in February lands on
    the 28th (or 29th). With adjust=True a weekend payday moves back to the
    preceding Friday, which for day 1 can fall in the previous month.
    """
    raw = date(year, month, min(payday_day, last_day_of_month(year, month)))
    return adjust_for_weekends(raw) if adjust else raw


def _payday(year: int, month: int, settings: PaydaySettings) -> date:
    return get_payday(year, month, settings.payday_day, settings.adjust_for_weekends)


def generate_period(year: int, month: int, settings: PaydaySettings) -> PayPeriod:
    """Period running from the payday of (year, month) to the day before next month's payday"""
    start = _payday(year, month, settings)
    next_year, next_month = shift_month(year, month, 1)
    end = _payday(next_year, next_month, settings) - timedelta(days=1)
    return PayPeriod(start_date=start, end_date=end, days_in_period=inclusive_days(start, end))


def _containing_month(reference_date: date, settings: PaydaySettings) -> Tuple[int, int]:
    # Next month's payday is checked too: a weekend payday on the 1st is pulled
    # back into the reference month.
    for delta in (1, 0):
        year, month = shift_month(reference_date.year, reference_date.month, delta)
        if _payday(year, month, settings) <= reference_date:
            return year, month
    # Last month's payday is never later than its final day
    return shift_month(reference_date.year, reference_date.month, -1)


def calculate_budget_period(settings: PaydaySettings, reference_date: date) -> PayPeriod:
    """
    Pay period containing reference_date.

    Starts at the most recent adjusted payday on or before reference_date and
    ends the day before the following adjusted payday.
    """
    year, month = _containing_month(reference_date, settings)
    return generate_period(year, month, settings)


def find_payday_on_or_before(reference_date: date, settings: PaydaySettings) -> date:
    return calculate_budget_period(settings, reference_date).start_date


def find_next_payday(from_date: date, settings: PaydaySettings) -> date:
    """Next adjusted payday strictly after from_date"""
    return calculate_budget_period(settings, from_date).end_date + timedelta(days=1)


def is_payday(day: date, settings: PaydaySettings) -> bool:
    return find_payday_on_or_before(day, settings) == day


def get_days_until_payday(settings: PaydaySettings, today: date | None = None) -> int:
    """Calendar days until the next payday, 0 when today is payday"""
    if today is None:
        today = date.today()
    if is_payday(today, settings):
        return 0
    return (find_next_payday(today, settings) - today).days
