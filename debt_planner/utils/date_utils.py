"""Date manipulation utilities"""

import calendar
from datetime import date


def add_months(from_date: date, months: int) -> date:
    """Move a date by whole calendar months, clamping the day to the month length"""
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def first_of_next_month(from_date: date) -> date:
    """First calendar day of the month after from_date"""
    return add_months(from_date.replace(day=1), 1)
