"""
Errors for Team Capacity Planner

Every rejection is deterministic and raised synchronously; nothing is retried.
"""

from typing import Optional


class PlannerError(Exception):
    """Base class for planner errors."""


class ValidationError(PlannerError):
    """Input rejected before any state change."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class NotFoundError(PlannerError):
    """A referenced member or task does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class ClosureBlockedError(PlannerError):
    """A main task cannot be closed while it has open subtasks."""

    def __init__(self, task_id: str, open_children: list[str]):
        self.task_id = task_id
        self.open_children = open_children
        super().__init__(
            f"Task {task_id} has {len(open_children)} open subtask(s): "
            f"{', '.join(open_children)}"
        )
