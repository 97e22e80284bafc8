"""
Inbound Records for Team Capacity Planner

Pydantic schemas for task input. Records proposed by the assistant
collaborator are untrusted and go through the same validation as manual
entries.
"""

import logging
from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError
from .models import TaskCategory, TaskRecurrence, TaskStatus, TeamMember


logger = logging.getLogger(__name__)


class TaskInput(BaseModel):
    """Fields supplied when creating a task. The ID is always generated."""
    title: str = Field(min_length=1)
    category: TaskCategory = TaskCategory.CTB
    assigned_to: str = Field(min_length=1)
    effort_hours: float = Field(default=4, ge=0)
    start_date: date
    end_date: date
    status: TaskStatus = TaskStatus.TODO
    recurrence: TaskRecurrence = TaskRecurrence.NONE

    @model_validator(mode="after")
    def check_date_order(self) -> "TaskInput":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TaskProposal(BaseModel):
    """
    A structured work order proposed from free text.

    Only the shape is trusted; values are checked like any other input.
    """
    title: str = Field(min_length=1)
    description: str = ""
    priority: str = "Medium"
    tags: list[str] = Field(default_factory=list)
    suggested_assignee: Optional[str] = None


def _first_error(exc: PydanticValidationError) -> ValidationError:
    """Re-raise pydantic's error as the planner's ValidationError."""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ())) or None
    message = f"{location}: {error['msg']}" if location else error["msg"]
    return ValidationError(message, field=location)


def parse_task_input(data: Union[TaskInput, dict[str, Any]]) -> TaskInput:
    """Validate raw task fields."""
    if isinstance(data, TaskInput):
        return data
    try:
        return TaskInput.model_validate(data)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def parse_task_proposal(data: dict[str, Any]) -> TaskProposal:
    """Validate a proposed work order record."""
    try:
        return TaskProposal.model_validate(data)
    except PydanticValidationError as e:
        raise _first_error(e) from e


def resolve_suggested_assignee(team: list[TeamMember], suggested_id: Optional[str]) -> str:
    """
    Return ``suggested_id`` when it names a team member, else the first member.

    Raises:
        NotFoundError: the team is empty
    """
    if not team:
        raise NotFoundError("TeamMember", suggested_id or "<any>")

    cleaned = (suggested_id or "").strip()
    for member in team:
        if member.id == cleaned:
            return member.id

    logger.warning(
        "Suggested assignee %r is not a team member, falling back to %s",
        suggested_id, team[0].id
    )
    return team[0].id


def task_input_from_proposal(
    proposal: Union[TaskProposal, dict[str, Any]],
    team: list[TeamMember],
    start_date: date,
    end_date: date,
    category: TaskCategory = TaskCategory.CTB,
    effort_hours: float = 4
) -> TaskInput:
    """
    Turn an assistant proposal into a validated TaskInput.

    Scheduling fields are not part of a proposal and come from the caller.
    """
    if not isinstance(proposal, TaskProposal):
        proposal = parse_task_proposal(proposal)

    assignee = resolve_suggested_assignee(team, proposal.suggested_assignee)
    return parse_task_input({
        "title": proposal.title,
        "category": category,
        "assigned_to": assignee,
        "effort_hours": effort_hours,
        "start_date": start_date,
        "end_date": end_date,
    })
