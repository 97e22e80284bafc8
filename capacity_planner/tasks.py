"""
Task Hierarchy for Team Capacity Planner

Maintains the main task / subtask tree: ID sequencing, effort rollup,
closure blocking and cascading deletes over a flat list of WorkTasks.
"""

import dataclasses
import logging
from datetime import date
from typing import Any, Optional, Union

from .errors import ClosureBlockedError, NotFoundError, ValidationError
from .intake import TaskInput, parse_task_input
from .models import (
    DateLike,
    TaskCategory,
    TaskStatus,
    TeamMember,
    WorkTask,
    coerce_enum,
    parse_date,
    round_half_up,
)


logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {
    "title",
    "category",
    "assigned_to",
    "effort_hours",
    "start_date",
    "end_date",
    "status",
    "recurrence",
}


def children_index(tasks: list[WorkTask]) -> dict[str, list[WorkTask]]:
    """Map each parent ID to its direct subtasks, in list order."""
    index: dict[str, list[WorkTask]] = {}
    for task in tasks:
        if task.parent_id is not None:
            index.setdefault(task.parent_id, []).append(task)
    return index


def effective_effort(
    task: WorkTask,
    tasks: list[WorkTask],
    index: Optional[dict[str, list[WorkTask]]] = None
) -> float:
    """
    Effort used for aggregation.

    The sum of direct subtasks' stored effort when the task has any,
    otherwise the task's own stored effort.
    """
    if index is None:
        index = children_index(tasks)
    children = index.get(task.id)
    if children:
        return sum(child.effort_hours for child in children)
    return task.effort_hours


class TaskHierarchy:
    """
    Operations on a caller-owned list of tasks.

    Mutations validate fully before touching the list, so a rejected call
    leaves the tasks unchanged. Callers serialize writes.

    Usage:
        hierarchy = TaskHierarchy(tasks)
        parent = hierarchy.create(TaskInput(...))
        child = hierarchy.create(TaskInput(...), parent_id=parent.id)
        hierarchy.set_status(parent.id, TaskStatus.DONE)  # ClosureBlockedError
    """

    def __init__(self, tasks: list[WorkTask]):
        self.tasks = tasks

    def get(self, task_id: str) -> WorkTask:
        """Get a task by ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise NotFoundError("WorkTask", task_id)

    def main_tasks(self) -> list[WorkTask]:
        return [t for t in self.tasks if t.is_main_task]

    def subtasks(self, parent_id: str) -> list[WorkTask]:
        """Direct subtasks of a task."""
        return [t for t in self.tasks if t.parent_id == parent_id]

    def open_subtasks(self, parent_id: str) -> list[WorkTask]:
        """Subtasks that are neither Done nor Cancelled."""
        return [t for t in self.subtasks(parent_id) if not t.is_terminal]

    def is_blocked_from_closing(self, task_id: str) -> bool:
        """True when a main task still has open subtasks."""
        task = self.get(task_id)
        return task.is_main_task and bool(self.open_subtasks(task_id))

    def stored_effort(self, task_id: str) -> float:
        return self.get(task_id).stored_effort

    def effective_effort(self, task_id: str) -> float:
        return effective_effort(self.get(task_id), self.tasks)

    def subtask_counts(self) -> dict[str, int]:
        """Number of subtasks per parent ID."""
        return {parent: len(children) for parent, children in children_index(self.tasks).items()}

    # ID generation

    def next_main_task_id(self, category: TaskCategory, created_on: date) -> str:
        """
        ``{category}-{YYYY}-{MM}-{NNNN}`` where NNNN is one more than the
        current number of main tasks in the category.

        A sequence already taken by a surviving task is skipped.
        """
        existing = {t.id for t in self.tasks}
        sequence = len([
            t for t in self.tasks
            if t.is_main_task and t.category == category
        ]) + 1

        prefix = f"{category.value}-{created_on.year}-{created_on.month:02d}"
        candidate = f"{prefix}-{sequence:04d}"
        while candidate in existing:
            sequence += 1
            candidate = f"{prefix}-{sequence:04d}"
        return candidate

    def next_subtask_id(self, parent_id: str) -> str:
        """``{parent_id}-{n}`` where n is one more than the parent's subtask count."""
        existing = {t.id for t in self.tasks}
        number = len(self.subtasks(parent_id)) + 1
        candidate = f"{parent_id}-{number}"
        while candidate in existing:
            number += 1
            candidate = f"{parent_id}-{number}"
        return candidate

    # Mutations

    def create(
        self,
        task_input: Union[TaskInput, dict[str, Any]],
        parent_id: Optional[str] = None,
        created_on: Optional[DateLike] = None,
        team: Optional[list[TeamMember]] = None
    ) -> WorkTask:
        """
        Create a main task, or a subtask when ``parent_id`` is given.

        Args:
            task_input: Task fields (validated)
            parent_id: ID of an existing main task
            created_on: Date used for the main-task ID (defaults to today)
            team: When given, the assignee must be one of its members

        Returns:
            The new WorkTask, appended to the task list
        """
        data = parse_task_input(task_input)
        category = data.category

        if parent_id is not None:
            parent = self.get(parent_id)
            if not parent.is_main_task:
                raise ValidationError(
                    f"Task {parent_id} is a subtask and cannot have children",
                    field="parent_id"
                )
            # Subtasks share their parent's category
            category = parent.category
            task_id = self.next_subtask_id(parent_id)
        else:
            created = parse_date(created_on) if created_on is not None else date.today()
            task_id = self.next_main_task_id(category, created)

        if team is not None and data.assigned_to not in {m.id for m in team}:
            raise NotFoundError("TeamMember", data.assigned_to)

        task = WorkTask(
            id=task_id,
            title=data.title,
            category=category,
            assigned_to=data.assigned_to,
            effort_hours=data.effort_hours,
            start_date=data.start_date,
            end_date=data.end_date,
            status=data.status,
            recurrence=data.recurrence,
            parent_id=parent_id
        )
        self.tasks.append(task)

        logger.info("Created task %s (%s)", task.id, "subtask" if parent_id else "main task")
        return task

    def _check_closure(self, task: WorkTask, new_status: TaskStatus) -> None:
        if not (task.is_main_task and new_status.is_terminal):
            return
        open_children = self.open_subtasks(task.id)
        if open_children:
            raise ClosureBlockedError(task.id, [c.id for c in open_children])

    def set_status(self, task_id: str, new_status: Union[TaskStatus, str]) -> WorkTask:
        """
        Change a task's status.

        Raises:
            ClosureBlockedError: closing a main task that has open subtasks
        """
        task = self.get(task_id)
        status = coerce_enum(TaskStatus, new_status, "status")
        self._check_closure(task, status)

        previous = task.status
        task.status = status
        logger.info("Task %s status %s -> %s", task.id, previous.value, status.value)
        return task

    def update(self, task_id: str, **changes) -> WorkTask:
        """
        Edit task fields in place. The ID and parent link never change.

        Status changes follow the same closure rule as ``set_status``.
        """
        task = self.get(task_id)

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be edited: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0]
            )

        if not task.is_main_task and "category" in changes:
            parent = self.get(task.parent_id)
            if coerce_enum(TaskCategory, changes["category"], "category") != parent.category:
                raise ValidationError(
                    "A subtask's category follows its parent",
                    field="category"
                )

        # replace() re-runs field validation on a copy
        candidate = dataclasses.replace(task, **changes)
        if "status" in changes:
            self._check_closure(task, candidate.status)

        for name in changes:
            setattr(task, name, getattr(candidate, name))

        if task.is_main_task and "category" in changes:
            for child in self.subtasks(task.id):
                child.category = task.category

        logger.info("Updated task %s: %s", task.id, ", ".join(sorted(changes)))
        return task

    def delete(self, task_id: str) -> list[WorkTask]:
        """
        Delete a task. Deleting a main task also deletes its subtasks.

        Returns:
            The removed tasks
        """
        task = self.get(task_id)

        if task.is_main_task:
            doomed = {task.id} | {t.id for t in self.subtasks(task.id)}
        else:
            doomed = {task.id}

        removed = [t for t in self.tasks if t.id in doomed]
        self.tasks[:] = [t for t in self.tasks if t.id not in doomed]

        logger.info("Deleted task %s (%d record(s))", task_id, len(removed))
        return removed


def filter_tasks(
    tasks: list[WorkTask],
    task_id: Optional[str] = None,
    assignee: Optional[str] = None,
    status: Optional[Union[TaskStatus, str]] = None
) -> list[WorkTask]:
    """
    Flat filter: case-insensitive ID substring, exact assignee, exact status.
    """
    wanted_status = coerce_enum(TaskStatus, status, "status") if status else None
    needle = task_id.lower() if task_id else None

    return [
        t for t in tasks
        if (needle is None or needle in t.id.lower())
        and (assignee is None or t.assigned_to == assignee)
        and (wanted_status is None or t.status == wanted_status)
    ]


def tree_order(tasks: list[WorkTask], expanded: Optional[set[str]] = None) -> list[WorkTask]:
    """
    Main tasks in list order, each followed by its subtasks.

    When ``expanded`` is given, only those main tasks show their subtasks.
    """
    index = children_index(tasks)
    ordered = []
    for task in tasks:
        if not task.is_main_task:
            continue
        ordered.append(task)
        if expanded is None or task.id in expanded:
            ordered.extend(index.get(task.id, []))
    return ordered


def task_completion(tasks: list[WorkTask]) -> dict:
    """Queue completion: total tasks, Done tasks and the rounded percentage."""
    total = len(tasks)
    done = len([t for t in tasks if t.status == TaskStatus.DONE])
    return {
        "total": total,
        "done": done,
        "pct": round_half_up(done / total * 100) if total > 0 else 0
    }


# Convenience functions
def create_task(
    tasks: list[WorkTask],
    task_input: Union[TaskInput, dict[str, Any]],
    parent_id: Optional[str] = None,
    created_on: Optional[DateLike] = None,
    team: Optional[list[TeamMember]] = None
) -> WorkTask:
    """
    Create a task and append it to ``tasks``.

    Example:
        task = create_task(tasks, {
            "title": "Quarterly audit",
            "category": "CTB",
            "assigned_to": "m1",
            "effort_hours": 16,
            "start_date": "2024-12-02",
            "end_date": "2024-12-20"
        })
        print(task.id)  # CTB-2024-12-0001 when created in December 2024
    """
    return TaskHierarchy(tasks).create(task_input, parent_id, created_on, team)


def update_task_status(
    tasks: list[WorkTask],
    task_id: str,
    new_status: Union[TaskStatus, str]
) -> WorkTask:
    """Change a task's status, raising ClosureBlockedError when blocked."""
    return TaskHierarchy(tasks).set_status(task_id, new_status)


def update_task(tasks: list[WorkTask], task_id: str, **changes) -> WorkTask:
    """Edit task fields in place."""
    return TaskHierarchy(tasks).update(task_id, **changes)


def delete_task(tasks: list[WorkTask], task_id: str) -> list[WorkTask]:
    """Delete a task (cascading to subtasks) and return the remaining list."""
    TaskHierarchy(tasks).delete(task_id)
    return tasks
