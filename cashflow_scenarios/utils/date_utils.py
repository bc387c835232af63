"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Optional


def week_index_for(day: date, start: date) -> int:
    """Week number of `day` in a scenario starting at `start` (week 1 = first 7 days)"""
    if day < start:
        return 1
    return (day - start).days // 7 + 1


def week_start_date(week_index: int, start: date) -> Optional[date]:
    """Start date of a week; week 0 (Initial Balance) has none"""
    if week_index == 0:
        return None
    return start + timedelta(days=(week_index - 1) * 7)


def week_label(week_index: int, start: date) -> str:
    """Display label: "Initial Balance" for week 0, "W<n> <year>" otherwise"""
    if week_index == 0:
        return "Initial Balance"
    return f"W{week_index} {week_start_date(week_index, start).year}"
