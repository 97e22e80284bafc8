"""
Tests for leave conflict detection.
"""

import pytest
from datetime import date

from capacity_planner.config import Config
from capacity_planner.leave import ConflictEntry, detect_leave_conflicts, conflict_dates
from capacity_planner.models import TeamMember


@pytest.fixture
def team():
    return [
        TeamMember(id="m1", name="Sarah", leave_dates={"2024-12-24", "2024-12-25", "2024-12-26"}),
        TeamMember(id="m2", name="Marcus", leave_dates={"2024-12-25", "2025-01-02"}),
        TeamMember(id="m3", name="Elena", leave_dates={"2024-07-01"}),
    ]


class TestDetectLeaveConflicts:
    """Tests for detect_leave_conflicts."""

    def test_shared_day_is_conflict(self, team):
        """Test two members out on 2024-12-25 both get flagged."""
        entries = detect_leave_conflicts(team, "2024-12")
        christmas = [e for e in entries if e.date == date(2024, 12, 25)]

        assert len(christmas) == 2
        assert all(e.has_conflict for e in christmas)
        assert [e.member_id for e in christmas] == ["m1", "m2"]

    def test_single_absence_not_conflict(self, team):
        """Test a day with one absence is listed without a conflict."""
        entries = detect_leave_conflicts(team, "2024-12")
        by_date = {(e.member_id, e.date): e for e in entries}

        assert by_date[("m1", date(2024, 12, 24))].has_conflict is False
        assert by_date[("m1", date(2024, 12, 26))].has_conflict is False

    def test_ordered_by_date(self, team):
        """Test entries are sorted by date."""
        entries = detect_leave_conflicts(team, "2024-12")

        assert [e.date.day for e in entries] == [24, 25, 25, 26]

    def test_only_requested_month(self, team):
        """Test leave outside the month is ignored."""
        entries = detect_leave_conflicts(team, "2025-01")

        assert entries == [
            ConflictEntry(member_id="m2", member_name="Marcus", date=date(2025, 1, 2), has_conflict=False)
        ]

    def test_empty(self):
        """Test no team means no entries."""
        assert detect_leave_conflicts([], "2024-12") == []

    def test_custom_threshold(self, team):
        """Test a higher threshold clears two-person overlaps."""
        entries = detect_leave_conflicts(team, "2024-12", min_absent=3)
        assert not any(e.has_conflict for e in entries)

    def test_default_threshold_ignores_environment(self, team, monkeypatch, tmp_path):
        """Test the default of two applies without reading settings."""
        monkeypatch.setenv("CAPACITY_CONFLICT_MIN_ABSENT", "5")
        monkeypatch.chdir(tmp_path)

        entries = detect_leave_conflicts(team, "2024-12")
        assert [e.member_id for e in entries if e.has_conflict] == ["m1", "m2"]

    def test_threshold_from_config(self, team):
        """Test a passed config supplies the threshold."""
        config = Config(data={"leave": {"conflict_min_absent": 3}})

        assert not any(e.has_conflict for e in detect_leave_conflicts(team, "2024-12", config=config))
        assert conflict_dates(team, "2024-12", config=config) == []

    def test_explicit_threshold_wins_over_config(self, team):
        """Test min_absent overrides the config value."""
        config = Config(data={"leave": {"conflict_min_absent": 3}})
        entries = detect_leave_conflicts(team, "2024-12", min_absent=2, config=config)

        assert len([e for e in entries if e.has_conflict]) == 2

    def test_does_not_mutate(self, team):
        """Test detection leaves the team untouched."""
        before = [m.to_dict() for m in team]
        detect_leave_conflicts(team, "2024-12")
        assert [m.to_dict() for m in team] == before

    def test_entry_to_dict(self):
        """Test entry serialization."""
        entry = ConflictEntry(member_id="m1", member_name="Sarah", date=date(2024, 12, 25), has_conflict=True)
        assert entry.to_dict() == {
            "member_id": "m1",
            "name": "Sarah",
            "date": "2024-12-25",
            "has_conflict": True
        }


class TestConflictDates:
    """Tests for the per-date summary."""

    def test_summary(self, team):
        """Test conflicting dates list who is out."""
        conflicts = conflict_dates(team, "2024-12")

        assert conflicts == [{
            "date": "2024-12-25",
            "people_out": ["Sarah", "Marcus"],
            "available_count": 1,
            "severity": "warning"
        }]

    def test_critical_when_nobody_left(self):
        """Test severity is critical when the whole team is out."""
        team = [
            TeamMember(id="a", name="A", leave_dates={"2024-12-25"}),
            TeamMember(id="b", name="B", leave_dates={"2024-12-25"}),
        ]
        assert conflict_dates(team, "2024-12")[0]["severity"] == "critical"
