"""
Calendar Window for Team Capacity Planner

Enumerates the days of a month and classifies working days (Monday-Friday).
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .models import DateLike, parse_date, month_key


@dataclass(frozen=True)
class CalendarDay:
    """A single day within a month window."""
    date: date
    is_weekend: bool
    is_today: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "is_weekend": self.is_weekend,
            "is_today": self.is_today
        }


@dataclass(frozen=True)
class CalendarWindow:
    """All days of one calendar month with weekend flags."""
    year: int
    month: int  # 1-12
    all_days: tuple[CalendarDay, ...] = field(default_factory=tuple)

    @property
    def month_key(self) -> str:
        """Month key, e.g. ``2024-12``."""
        return f"{self.year}-{self.month:02d}"

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def working_days(self) -> list[date]:
        """Working days in calendar order."""
        return [d.date for d in self.all_days if not d.is_weekend]

    @property
    def working_day_count(self) -> int:
        return len(self.working_days)

    @property
    def weekend_count(self) -> int:
        return len([d for d in self.all_days if d.is_weekend])

    def contains(self, day: date) -> bool:
        """True when ``day`` falls inside this month."""
        return month_key(day) == self.month_key

    def is_working_day(self, day: date) -> bool:
        return self.contains(day) and day.weekday() < 5

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "year": self.year,
            "month_key": self.month_key,
            "working_days": [d.isoformat() for d in self.working_days],
            "all_days": [d.to_dict() for d in self.all_days]
        }


def compute_month_window(reference: DateLike, today: Optional[DateLike] = None) -> CalendarWindow:
    """
    Build the window for the month containing ``reference``.

    Uses the date's own calendar fields; callers own timezone consistency.

    Args:
        reference: Any day within the target month
        today: Day flagged as ``is_today`` (defaults to ``date.today()``)

    Returns:
        CalendarWindow for that month
    """
    ref = parse_date(reference)
    today_date = parse_date(today) if today is not None else date.today()

    _, days_in_month = calendar.monthrange(ref.year, ref.month)

    days = []
    for day_number in range(1, days_in_month + 1):
        current = date(ref.year, ref.month, day_number)
        days.append(CalendarDay(
            date=current,
            is_weekend=current.weekday() >= 5,  # Saturday = 5, Sunday = 6
            is_today=current == today_date
        ))

    return CalendarWindow(year=ref.year, month=ref.month, all_days=tuple(days))
