"""
Shared fixtures.
"""

import pytest
from datetime import date

from capacity_planner.calendar_window import compute_month_window
from capacity_planner.models import TeamMember, WorkTask


@pytest.fixture
def november_2024():
    """21 working days: Friday 1st to Saturday 30th."""
    return compute_month_window(date(2024, 11, 15), today=date(2024, 11, 15))


@pytest.fixture
def sarah():
    return TeamMember(
        id="m1",
        name="Sarah Chen",
        weekly_hours=40,
        leave_dates={"2024-11-04", "2024-11-05", "2024-12-24", "2024-12-25"}
    )


@pytest.fixture
def marcus():
    return TeamMember(id="m2", name="Marcus Thorne", weekly_hours=35)


def make_task(task_id, assigned_to="m1", effort=8, start="2024-11-04",
              end="2024-11-08", status="To Do", category="CTB", parent_id=None):
    """Build a WorkTask with sensible defaults."""
    return WorkTask(
        id=task_id,
        title=f"Task {task_id}",
        category=category,
        assigned_to=assigned_to,
        effort_hours=effort,
        start_date=start,
        end_date=end,
        status=status,
        parent_id=parent_id
    )


@pytest.fixture
def task_factory():
    return make_task
