"""
Team Capacity Analyzer

Calculates monthly capacity, committed effort and availability per team
member, and rolls them up into workspace-wide utilization.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from enum import Enum

from .calendar_window import CalendarWindow
from .config import Config
from .models import TeamMember, WorkTask, round_half_up
from .tasks import children_index, effective_effort


logger = logging.getLogger(__name__)


class AvailabilityBand(Enum):
    """Availability health band."""
    HEALTHY = "healthy"    # above 60%
    LIMITED = "limited"    # above 20%
    AT_RISK = "at_risk"    # 20% or less


@dataclass
class MemberCapacity:
    """Working time a member has in a month after leave."""
    member_id: str
    leave_days_in_month: int
    net_working_days: int
    hours_per_day: float
    total_capacity_hours: float


@dataclass
class MemberMonthlyMetrics:
    """Capacity, commitment and availability for one member in one month."""
    member_id: str
    name: str
    month_key: str

    # Calendar
    leave_days_in_month: int = 0
    net_working_days: int = 0

    # Hours
    hours_per_day: float = 0.0
    total_capacity_hours: float = 0.0
    active_effort_hours: float = 0.0

    # Reduced
    availability_pct: int = 0
    is_overloaded: bool = False
    band: AvailabilityBand = AvailabilityBand.AT_RISK
    consumed_days: float = 0.0

    @property
    def remaining_hours(self) -> float:
        return max(0.0, self.total_capacity_hours - self.active_effort_hours)

    @property
    def status_emoji(self) -> str:
        """Get emoji for availability band."""
        return {
            AvailabilityBand.HEALTHY: "🟢",
            AvailabilityBand.LIMITED: "🟡",
            AvailabilityBand.AT_RISK: "🔴"
        }[self.band]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "member_id": self.member_id,
            "name": self.name,
            "month": self.month_key,
            "calendar": {
                "leave_days": self.leave_days_in_month,
                "net_working_days": self.net_working_days
            },
            "hours": {
                "per_day": self.hours_per_day,
                "capacity": round(self.total_capacity_hours, 1),
                "committed": round(self.active_effort_hours, 1),
                "remaining": round(self.remaining_hours, 1)
            },
            "availability": {
                "percentage": self.availability_pct,
                "overloaded": self.is_overloaded,
                "band": self.band.value,
                "emoji": self.status_emoji,
                "consumed_days": round(self.consumed_days, 1),
                "available_days": self.net_working_days
            }
        }


@dataclass
class WorkspaceAggregate:
    """Workspace-wide utilization for one month."""
    month_key: str
    working_days: int
    members: list[MemberMonthlyMetrics] = field(default_factory=list)
    calculated_at: datetime = field(default_factory=datetime.now)

    @property
    def team_size(self) -> int:
        return len(self.members)

    @property
    def total_working_member_days(self) -> int:
        """Potential person-days: every member on every working day."""
        return self.team_size * self.working_days

    @property
    def net_available_days(self) -> int:
        """Deliverable person-days after leave."""
        return sum(m.net_working_days for m in self.members)

    @property
    def capacity_percentage(self) -> int:
        if self.total_working_member_days <= 0:
            return 0
        return round_half_up(self.net_available_days / self.total_working_member_days * 100)

    @property
    def avg_availability(self) -> int:
        if not self.members:
            return 0
        return round_half_up(sum(m.availability_pct for m in self.members) / len(self.members))

    @property
    def overloaded_count(self) -> int:
        return len([m for m in self.members if m.is_overloaded])

    def band_count(self, band: AvailabilityBand) -> int:
        return len([m for m in self.members if m.band == band])

    def get_overloaded(self) -> list[MemberMonthlyMetrics]:
        """Members whose committed effort exceeds their capacity."""
        return [m for m in self.members if m.is_overloaded]

    def get_most_available(self, n: int = 3) -> list[MemberMonthlyMetrics]:
        """Get team members with the highest availability."""
        sorted_members = sorted(self.members, key=lambda m: m.availability_pct, reverse=True)
        return sorted_members[:n]

    def get_member(self, member_id: str) -> Optional[MemberMonthlyMetrics]:
        for member in self.members:
            if member.member_id == member_id:
                return member
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "calculated_at": self.calculated_at.isoformat(),
            "month": self.month_key,
            "summary": {
                "team_size": self.team_size,
                "working_days": self.working_days,
                "total_working_member_days": self.total_working_member_days,
                "net_available_days": self.net_available_days,
                "capacity_percentage": self.capacity_percentage,
                "avg_availability": self.avg_availability,
                "overloaded": self.overloaded_count,
                "healthy": self.band_count(AvailabilityBand.HEALTHY),
                "limited": self.band_count(AvailabilityBand.LIMITED),
                "at_risk": self.band_count(AvailabilityBand.AT_RISK)
            },
            "members": [m.to_dict() for m in self.members]
        }


class CapacityAnalyzer:
    """
    Computes member and workspace metrics from a snapshot of team, tasks
    and month window. Nothing is cached; every call recomputes.

    Usage:
        analyzer = CapacityAnalyzer()
        window = compute_month_window(date(2024, 12, 1))
        aggregate = analyzer.analyze(team, tasks, window)
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def member_capacity(self, member: TeamMember, window: CalendarWindow) -> MemberCapacity:
        """
        Net working days and capacity hours for a member.

        Leave on a weekend does not consume capacity. Hours per day are
        always weekly hours over the configured work week, independent of
        how many working days the month has.
        """
        working_days = set(window.working_days)
        leave_days = len([
            d for d in member.leave_in_month(window.month_key)
            if d in working_days
        ])

        net_working_days = max(0, len(working_days) - leave_days)
        hours_per_day = member.weekly_hours / self.config.days_per_week

        return MemberCapacity(
            member_id=member.id,
            leave_days_in_month=leave_days,
            net_working_days=net_working_days,
            hours_per_day=hours_per_day,
            total_capacity_hours=net_working_days * hours_per_day
        )

    def active_tasks(
        self,
        tasks: list[WorkTask],
        member_id: str,
        window: CalendarWindow
    ) -> list[WorkTask]:
        """
        Open tasks assigned to the member whose start or end date is in the
        window's month.

        A task that spans the whole month without either endpoint inside it
        is not counted.
        """
        return [
            t for t in tasks
            if t.assigned_to == member_id
            and not t.is_terminal
            and t.touches_month(window.month_key)
        ]

    def active_effort_hours(
        self,
        tasks: list[WorkTask],
        member_id: str,
        window: CalendarWindow
    ) -> float:
        """Sum of effective effort over the member's active tasks."""
        index = children_index(tasks)
        return sum(
            effective_effort(t, tasks, index)
            for t in self.active_tasks(tasks, member_id, window)
        )

    def availability_band(self, availability_pct: float) -> AvailabilityBand:
        if availability_pct > self.config.healthy_threshold:
            return AvailabilityBand.HEALTHY
        elif availability_pct > self.config.at_risk_threshold:
            return AvailabilityBand.LIMITED
        return AvailabilityBand.AT_RISK

    def member_metrics(
        self,
        member: TeamMember,
        tasks: list[WorkTask],
        window: CalendarWindow
    ) -> MemberMonthlyMetrics:
        """
        Analyze availability for a single team member.

        Args:
            member: Team member
            tasks: All work tasks
            window: Month to analyze

        Returns:
            MemberMonthlyMetrics for the month
        """
        capacity = self.member_capacity(member, window)
        effort = self.active_effort_hours(tasks, member.id, window)

        remaining = max(0.0, capacity.total_capacity_hours - effort)
        if capacity.total_capacity_hours > 0:
            availability_pct = round_half_up(remaining / capacity.total_capacity_hours * 100)
        else:
            availability_pct = 0

        metrics = MemberMonthlyMetrics(
            member_id=member.id,
            name=member.name,
            month_key=window.month_key,
            leave_days_in_month=capacity.leave_days_in_month,
            net_working_days=capacity.net_working_days,
            hours_per_day=capacity.hours_per_day,
            total_capacity_hours=capacity.total_capacity_hours,
            active_effort_hours=effort,
            availability_pct=availability_pct,
            is_overloaded=effort > capacity.total_capacity_hours,
            band=self.availability_band(availability_pct),
            consumed_days=effort / self.config.standard_day_hours
        )

        logger.debug(
            "%s %s: capacity=%.1fh effort=%.1fh availability=%d%%",
            member.id, window.month_key, metrics.total_capacity_hours,
            effort, availability_pct
        )
        return metrics

    def analyze(
        self,
        team: list[TeamMember],
        tasks: list[WorkTask],
        window: CalendarWindow
    ) -> WorkspaceAggregate:
        """
        Analyze availability for the entire team, in team order.
        """
        members = [self.member_metrics(m, tasks, window) for m in team]
        return WorkspaceAggregate(
            month_key=window.month_key,
            working_days=window.working_day_count,
            members=members
        )


# Convenience functions
def compute_member_metrics(
    member: TeamMember,
    tasks: list[WorkTask],
    window: CalendarWindow,
    config: Optional[Config] = None
) -> MemberMonthlyMetrics:
    """Metrics for one member in the window's month."""
    return CapacityAnalyzer(config=config).member_metrics(member, tasks, window)


def compute_workspace_aggregate(
    team: list[TeamMember],
    tasks: list[WorkTask],
    window: CalendarWindow,
    config: Optional[Config] = None
) -> WorkspaceAggregate:
    """
    Quick function to analyze a month for the whole team.

    Example:
        window = compute_month_window(date(2024, 12, 1))
        aggregate = compute_workspace_aggregate(team, tasks, window)

        print(f"Net utilization: {aggregate.capacity_percentage}%")
        for member in aggregate.get_overloaded():
            print(f"  {member.name}: {member.active_effort_hours}h committed")
    """
    return CapacityAnalyzer(config=config).analyze(team, tasks, window)
