"""Date manipulation utilities"""

import calendar
import math
from datetime import date
from typing import Tuple


def days_between(start: date, end: date) -> int:
    """Signed number of calendar days from start to end"""
    return (end - start).days


def inclusive_days(start: date, end: date) -> int:
    """Inclusive day count of [start, end]"""
    return days_between(start, end) + 1


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move a 1-indexed (year, month) pair by delta months"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity (Python's round() is banker's rounding)"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
