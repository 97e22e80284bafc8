"""
Leave Conflicts for Team Capacity Planner

Finds dates in a month where more than one team member is on leave.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import Config
from .models import TeamMember


@dataclass(frozen=True)
class ConflictEntry:
    """One member's leave day, flagged when others are out the same day."""
    member_id: str
    member_name: str
    date: date
    has_conflict: bool

    def to_dict(self) -> dict:
        return {
            "member_id": self.member_id,
            "name": self.member_name,
            "date": self.date.isoformat(),
            "has_conflict": self.has_conflict
        }


DEFAULT_MIN_ABSENT = 2


def _min_absent(min_absent: Optional[int], config: Optional[Config]) -> int:
    if min_absent is not None:
        return min_absent
    if config is not None:
        return config.conflict_min_absent
    return DEFAULT_MIN_ABSENT


def detect_leave_conflicts(
    team: list[TeamMember],
    month_key: str,
    min_absent: Optional[int] = None,
    config: Optional[Config] = None
) -> list[ConflictEntry]:
    """
    List every leave day in the month, ordered by date.

    A date is a conflict when at least ``min_absent`` members are on leave
    that day. The threshold falls back to ``config.conflict_min_absent``,
    then to 2. Entries on the same date keep team order.

    Args:
        team: Team members with their leave dates
        month_key: Month as ``YYYY-MM``
        min_absent: Absences on one date that make it a conflict
        config: Settings to read the threshold from when min_absent is None

    Returns:
        List of ConflictEntry
    """
    threshold = _min_absent(min_absent, config)

    leaves = [
        (member, day)
        for member in team
        for day in member.leave_in_month(month_key)
    ]

    # Count leaves per date to find conflicts
    counts = Counter(day for _, day in leaves)

    entries = [
        ConflictEntry(
            member_id=member.id,
            member_name=member.name,
            date=day,
            has_conflict=counts[day] >= threshold
        )
        for member, day in leaves
    ]
    # sort() is stable, so ties stay in team order
    entries.sort(key=lambda e: e.date)
    return entries


def conflict_dates(
    team: list[TeamMember],
    month_key: str,
    min_absent: Optional[int] = None,
    config: Optional[Config] = None
) -> list[dict]:
    """
    Summarize conflicting dates.

    Returns:
        List of conflict dates with who is out and how many remain
    """
    by_date: dict[date, list[str]] = {}
    for entry in detect_leave_conflicts(team, month_key, min_absent, config):
        if entry.has_conflict:
            by_date.setdefault(entry.date, []).append(entry.member_name)

    conflicts = []
    for day, people_out in by_date.items():
        available = len(team) - len(people_out)
        conflicts.append({
            "date": day.isoformat(),
            "people_out": people_out,
            "available_count": available,
            "severity": "critical" if available == 0 else "warning"
        })
    return conflicts
