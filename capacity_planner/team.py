"""
Team Roster for Team Capacity Planner

Member mutations on a caller-owned list: onboarding, edits, removal and
leave-day toggling.
"""

import dataclasses
import logging

from .errors import NotFoundError, ValidationError
from .models import DateLike, TeamMember, parse_date


logger = logging.getLogger(__name__)


def get_member(team: list[TeamMember], member_id: str) -> TeamMember:
    """Get a team member by ID."""
    for member in team:
        if member.id == member_id:
            return member
    raise NotFoundError("TeamMember", member_id)


def add_member(team: list[TeamMember], member: TeamMember) -> TeamMember:
    """Add a member. IDs are unique within the team."""
    if any(m.id == member.id for m in team):
        raise ValidationError(f"Member {member.id} already exists", field="id")
    team.append(member)
    logger.info("Added member %s", member.id)
    return member


def update_member(team: list[TeamMember], member_id: str, **changes) -> TeamMember:
    """Edit member fields in place. The ID never changes."""
    member = get_member(team, member_id)
    if "id" in changes:
        raise ValidationError("Member ID cannot be changed", field="id")

    # replace() re-runs validation (weekly_hours >= 0, leave date parsing)
    try:
        candidate = dataclasses.replace(member, **changes)
    except TypeError as e:
        raise ValidationError(str(e)) from e

    for name in changes:
        setattr(member, name, getattr(candidate, name))

    logger.info("Updated member %s: %s", member_id, ", ".join(sorted(changes)))
    return member


def remove_member(team: list[TeamMember], member_id: str) -> TeamMember:
    """
    Remove a member.

    Tasks assigned to the member are left as they are.
    """
    member = get_member(team, member_id)
    team.remove(member)
    logger.info("Removed member %s", member_id)
    return member


def toggle_leave_day(team: list[TeamMember], member_id: str, day: DateLike) -> bool:
    """
    Add the day to the member's leave if absent, remove it if present.

    Returns:
        True when the member is now on leave that day
    """
    member = get_member(team, member_id)
    leave_day = parse_date(day)

    if leave_day in member.leave_dates:
        member.leave_dates.discard(leave_day)
        on_leave = False
    else:
        member.leave_dates.add(leave_day)
        on_leave = True

    logger.info(
        "Leave %s for %s on %s",
        "added" if on_leave else "removed", member_id, leave_day.isoformat()
    )
    return on_leave
