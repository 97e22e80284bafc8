"""
Tests for the data model helpers.
"""

import pytest
from datetime import date, datetime

from capacity_planner.errors import ValidationError
from capacity_planner.models import (
    TaskStatus,
    TeamMember,
    WorkTask,
    parse_date,
    round_half_up
)


def task_record(**overrides):
    record = {
        "id": "CTB-2024-12-0001",
        "title": "Quarterly audit",
        "category": "CTB",
        "assigned_to": "m1",
        "effort_hours": 8,
        "start_date": "2024-12-02",
        "end_date": "2024-12-06"
    }
    record.update(overrides)
    return record


class TestParseDate:
    """Tests for parse_date."""

    def test_bare_date(self):
        """Test a YYYY-MM-DD string."""
        assert parse_date("2024-12-25") == date(2024, 12, 25)
        assert parse_date(" 2024-12-25 ") == date(2024, 12, 25)

    def test_full_iso_datetime(self):
        """Test full ISO datetimes keep their calendar date."""
        assert parse_date("2024-12-25T09:30:00") == date(2024, 12, 25)
        assert parse_date("2024-12-25T23:59:59.123Z") == date(2024, 12, 25)
        assert parse_date("2024-12-25T09:30:00+02:00") == date(2024, 12, 25)

    def test_date_and_datetime_objects(self):
        """Test date and datetime values pass through."""
        assert parse_date(date(2024, 12, 25)) == date(2024, 12, 25)
        assert parse_date(datetime(2024, 12, 25, 18, 0)) == date(2024, 12, 25)

    @pytest.mark.parametrize("text", [
        "2024-12-2599",
        "2024-12-25garbage",
        "2024-12-25 junk",
        "2024-13-01",
        "2024-02-30",
        "25/12/2024",
        "20241225",
        "",
    ])
    def test_rejects_malformed_strings(self, text):
        """Test anything other than an ISO date or datetime is rejected."""
        with pytest.raises(ValidationError):
            parse_date(text)

    def test_rejects_other_types(self):
        """Test non-date values are rejected."""
        with pytest.raises(ValidationError):
            parse_date(20241225)


class TestRoundHalfUp:
    """Tests for round_half_up."""

    def test_halves_round_up(self):
        """Test .5 always rounds toward the larger integer."""
        assert round_half_up(2.5) == 3
        assert round_half_up(12.5) == 13
        assert round_half_up(30.5) == 31
        assert round_half_up(2.4) == 2


class TestWorkTaskRecords:
    """Tests for WorkTask construction from stored records."""

    def test_from_dict(self):
        """Test a stored record is parsed into typed fields."""
        task = WorkTask.from_dict(task_record(status="In Progress"))

        assert task.start_date == date(2024, 12, 2)
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.is_main_task

    @pytest.mark.parametrize("effort", ["abc", None, [8], False])
    def test_non_numeric_effort(self, effort):
        """Test a non-numeric effort is a validation error, not a TypeError."""
        with pytest.raises(ValidationError) as exc_info:
            WorkTask.from_dict(task_record(effort_hours=effort))

        assert exc_info.value.field == "effort_hours"

    def test_trailing_garbage_in_dates(self):
        """Test a date with trailing characters is rejected."""
        with pytest.raises(ValidationError):
            WorkTask.from_dict(task_record(end_date="2024-12-2599"))

    def test_float_effort_accepted(self):
        """Test fractional hours are kept."""
        assert WorkTask.from_dict(task_record(effort_hours=2.5)).effort_hours == 2.5


class TestTeamMemberLeave:
    """Tests for member leave parsing."""

    def test_leave_dates_parsed(self):
        """Test leave strings become dates and group by month."""
        member = TeamMember(id="m1", name="A", leave_dates={"2024-12-26", "2024-12-24", "2025-01-02"})

        assert member.leave_in_month("2024-12") == [date(2024, 12, 24), date(2024, 12, 26)]

    def test_malformed_leave_date(self):
        """Test a malformed leave date is rejected."""
        with pytest.raises(ValidationError):
            TeamMember(id="m1", name="A", leave_dates={"2024-12-2599"})
