"""
Data Model for Team Capacity Planner

Team members with leave calendars and the two-level work task tree.
"""

import math
import numbers
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union
from enum import Enum

from .errors import ValidationError


DateLike = Union[date, datetime, str]


ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: DateLike) -> date:
    """
    Coerce a date, datetime or ISO string into a date.

    Strings must be a bare ``YYYY-MM-DD`` or a full ISO datetime
    (``2024-12-25T09:30:00Z``); anything else is rejected.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if ISO_DATE.match(text):
                return date.fromisoformat(text)
            if "T" in text:
                # fromisoformat() only learned the Z suffix in 3.11
                if text.endswith("Z"):
                    text = text[:-1] + "+00:00"
                return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        raise ValidationError(f"Invalid ISO date: {value!r}")
    raise ValidationError(f"Expected a date, got {type(value).__name__}")


def round_half_up(value: float) -> int:
    """Round halves up (2.5 -> 3), unlike round() which rounds halves to even."""
    return math.floor(value + 0.5)


def month_key(day: date) -> str:
    """``YYYY-MM`` key for the month containing ``day``."""
    return f"{day.year}-{day.month:02d}"


def coerce_enum(enum_cls, value, field_name: str):
    """Accept an enum member or its value, rejecting anything else."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} {value!r}, expected one of: {allowed}",
            field=field_name
        ) from None


class TaskCategory(Enum):
    """Work category, also the prefix of main-task IDs."""
    CTB = "CTB"      # Change the business
    RTB = "RTB"      # Run the business
    SSP = "SSP"      # Single service project
    BAU = "BAU"      # Business as usual
    OTHER = "Other"


class TaskStatus(Enum):
    """Task lifecycle status."""
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.DONE, TaskStatus.CANCELLED)


class TaskRecurrence(Enum):
    """Recurrence hint. Informational only, never expanded."""
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


@dataclass
class TeamMember:
    """A team member with a weekly-hours contract and single leave days."""
    id: str
    name: str
    weekly_hours: float = 40.0
    leave_dates: set[date] = field(default_factory=set)
    role: str = ""
    email: Optional[str] = None
    skills: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.weekly_hours < 0:
            raise ValidationError(
                f"weekly_hours must be >= 0, got {self.weekly_hours}",
                field="weekly_hours"
            )
        self.leave_dates = {parse_date(d) for d in self.leave_dates}

    def leave_in_month(self, key: str) -> list[date]:
        """Leave dates falling in the ``YYYY-MM`` month, sorted."""
        return sorted(d for d in self.leave_dates if month_key(d) == key)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "email": self.email,
            "skills": list(self.skills),
            "weekly_hours": self.weekly_hours,
            "leave_dates": [d.isoformat() for d in sorted(self.leave_dates)]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TeamMember":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            weekly_hours=data.get("weekly_hours", 40.0),
            leave_dates=set(data.get("leave_dates", [])),
            role=data.get("role", ""),
            email=data.get("email"),
            skills=list(data.get("skills", []))
        )


@dataclass
class WorkTask:
    """
    A unit of committed work.

    Tasks form a two-level tree: ``parent_id`` is None for main tasks and
    names a main task for subtasks. Only the child -> parent reference is
    stored; parent-side views are computed from the flat task list.
    """
    id: str
    title: str
    category: TaskCategory
    assigned_to: str
    effort_hours: float
    start_date: date
    end_date: date
    status: TaskStatus = TaskStatus.TODO
    recurrence: TaskRecurrence = TaskRecurrence.NONE
    parent_id: Optional[str] = None

    def __post_init__(self):
        self.category = coerce_enum(TaskCategory, self.category, "category")
        self.status = coerce_enum(TaskStatus, self.status, "status")
        self.recurrence = coerce_enum(TaskRecurrence, self.recurrence, "recurrence")
        self.start_date = parse_date(self.start_date)
        self.end_date = parse_date(self.end_date)
        validate_task_fields(self.effort_hours, self.start_date, self.end_date)

    @property
    def is_main_task(self) -> bool:
        return self.parent_id is None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def stored_effort(self) -> float:
        """The task's own effort field, regardless of subtasks."""
        return self.effort_hours

    def touches_month(self, key: str) -> bool:
        """True when the start or end date falls in the ``YYYY-MM`` month."""
        return month_key(self.start_date) == key or month_key(self.end_date) == key

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "title": self.title,
            "category": self.category.value,
            "assigned_to": self.assigned_to,
            "effort_hours": self.effort_hours,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status.value,
            "recurrence": self.recurrence.value
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkTask":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            category=data["category"],
            assigned_to=data["assigned_to"],
            effort_hours=data.get("effort_hours", 0),
            start_date=data["start_date"],
            end_date=data["end_date"],
            status=data.get("status", TaskStatus.TODO.value),
            recurrence=data.get("recurrence", TaskRecurrence.NONE.value),
            parent_id=data.get("parent_id")
        )


def validate_task_fields(effort_hours: float, start_date: date, end_date: date) -> None:
    """Reject non-numeric or negative effort and inverted date ranges."""
    if isinstance(effort_hours, bool) or not isinstance(effort_hours, numbers.Real):
        raise ValidationError(
            f"effort_hours must be a number, got {effort_hours!r}",
            field="effort_hours"
        )
    if effort_hours < 0:
        raise ValidationError(
            f"effort_hours must be >= 0, got {effort_hours}",
            field="effort_hours"
        )
    if end_date < start_date:
        raise ValidationError(
            f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}",
            field="end_date"
        )
