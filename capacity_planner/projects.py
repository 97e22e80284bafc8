"""
Project Order Book for Team Capacity Planner

Registry of team initiatives: projects moving from wishlist to confirmed,
projects stamped out of reusable templates, and the order counters shown
on the workspace overview.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Union

from .errors import NotFoundError, ValidationError
from .models import DateLike, TaskCategory, TeamMember, coerce_enum, parse_date


logger = logging.getLogger(__name__)


class ProjectStatus(Enum):
    """Order book pipeline: Wishlist -> Pending Confirmation -> Confirmed."""
    WISHLIST = "Wishlist"
    PENDING = "Pending Confirmation"
    CONFIRMED = "Confirmed"


class ProjectTaskStatus(Enum):
    TODO = "Todo"
    DOING = "Doing"
    DONE = "Done"


class OrderStatus(Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class OrderPriority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass
class ProjectTask:
    """A planned step of a project, sized in person-days."""
    id: str
    project_id: str
    title: str
    effort_days: float
    status: ProjectTaskStatus = ProjectTaskStatus.TODO
    assigned_to: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        self.status = coerce_enum(ProjectTaskStatus, self.status, "status")
        if isinstance(self.effort_days, bool) or not isinstance(self.effort_days, (int, float)):
            raise ValidationError(
                f"effort_days must be a number, got {self.effort_days!r}",
                field="effort_days"
            )
        if self.effort_days < 0:
            raise ValidationError(
                f"effort_days must be >= 0, got {self.effort_days}",
                field="effort_days"
            )
        if self.start_date is not None:
            self.start_date = parse_date(self.start_date)
        if self.end_date is not None:
            self.end_date = parse_date(self.end_date)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "title": self.title,
            "effort_days": self.effort_days,
            "status": self.status.value,
            "assigned_to": self.assigned_to,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None
        }


@dataclass
class Project:
    """An initiative registered in the order book."""
    id: str
    name: str
    owner_id: str
    start_date: date
    end_date: date
    category: TaskCategory = TaskCategory.CTB
    status: ProjectStatus = ProjectStatus.PENDING
    description: str = ""
    tasks: list[ProjectTask] = field(default_factory=list)
    created_at: Optional[date] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("Project name is required", field="name")
        self.category = coerce_enum(TaskCategory, self.category, "category")
        self.status = coerce_enum(ProjectStatus, self.status, "status")
        self.start_date = parse_date(self.start_date)
        self.end_date = parse_date(self.end_date)
        if self.created_at is not None:
            self.created_at = parse_date(self.created_at)
        if self.end_date < self.start_date:
            raise ValidationError(
                f"end_date {self.end_date.isoformat()} is before start_date {self.start_date.isoformat()}",
                field="end_date"
            )

    @property
    def total_effort_days(self) -> float:
        return sum(t.effort_days for t in self.tasks)

    def matches(self, search: str) -> bool:
        """Case-insensitive substring match on name or description."""
        needle = search.lower()
        return needle in self.name.lower() or needle in self.description.lower()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "owner_id": self.owner_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "category": self.category.value,
            "status": self.status.value,
            "description": self.description,
            "tasks": [t.to_dict() for t in self.tasks],
            "total_effort_days": self.total_effort_days,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


@dataclass(frozen=True)
class TemplateTask:
    """A default task, offset in calendar days from the project start."""
    title: str
    relative_start_day: int
    duration_days: int
    effort_estimate: float


@dataclass(frozen=True)
class ProjectTemplate:
    id: str
    name: str
    category: TaskCategory
    default_tasks: tuple[TemplateTask, ...]

    @property
    def span_days(self) -> int:
        """Calendar days from the first task start to the last task end."""
        if not self.default_tasks:
            return 0
        return max(t.relative_start_day + t.duration_days for t in self.default_tasks)


PROJECT_TEMPLATES = (
    ProjectTemplate(
        id="tpl-1",
        name="Standard Software Release",
        category=TaskCategory.CTB,
        default_tasks=(
            TemplateTask("Requirements Gathering", 0, 5, 3),
            TemplateTask("UI/UX Design Mockups", 5, 10, 8),
            TemplateTask("Frontend Development", 15, 20, 15),
            TemplateTask("Backend Integration", 20, 15, 12),
            TemplateTask("QA & Bug Fixing", 35, 7, 5),
        )
    ),
    ProjectTemplate(
        id="tpl-2",
        name="Infrastructure Upgrade",
        category=TaskCategory.RTB,
        default_tasks=(
            TemplateTask("Environment Audit", 0, 3, 2),
            TemplateTask("System Architecture Prep", 3, 5, 4),
            TemplateTask("Data Migration", 8, 4, 8),
            TemplateTask("Post-Migration Monitoring", 12, 5, 2),
        )
    ),
    ProjectTemplate(
        id="tpl-3",
        name="Monthly Compliance Review",
        category=TaskCategory.BAU,
        default_tasks=(
            TemplateTask("Data Collection", 0, 2, 1),
            TemplateTask("Risk Assessment", 2, 3, 3),
            TemplateTask("Final Reporting", 5, 2, 2),
        )
    ),
)


def get_template(template_id: str, templates=PROJECT_TEMPLATES) -> ProjectTemplate:
    """Get a project template by ID."""
    for template in templates:
        if template.id == template_id:
            return template
    raise NotFoundError("ProjectTemplate", template_id)


@dataclass
class Order:
    """A work request tracked on the workspace overview."""
    id: str
    title: str
    description: str = ""
    status: OrderStatus = OrderStatus.PENDING
    priority: OrderPriority = OrderPriority.MEDIUM
    assigned_to: Optional[str] = None
    owner_id: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    created_at: Optional[date] = None

    def __post_init__(self):
        self.status = coerce_enum(OrderStatus, self.status, "status")
        self.priority = coerce_enum(OrderPriority, self.priority, "priority")
        if self.created_at is not None:
            self.created_at = parse_date(self.created_at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "assigned_to": self.assigned_to,
            "owner_id": self.owner_id,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat() if self.created_at else None
        }


EDITABLE_PROJECT_FIELDS = {
    "name",
    "owner_id",
    "start_date",
    "end_date",
    "category",
    "status",
    "description",
}


class OrderBook:
    """
    Operations on a caller-owned list of projects.

    Usage:
        book = OrderBook(projects)
        project = book.register("Q1 release", owner_id="m1",
                                start_date="2025-01-06", template_id="tpl-1")
        book.update(project.id, status=ProjectStatus.CONFIRMED)
    """

    def __init__(self, projects: list[Project], team: Optional[list[TeamMember]] = None):
        self.projects = projects
        self.team = team

    def get(self, project_id: str) -> Project:
        """Get a project by ID."""
        for project in self.projects:
            if project.id == project_id:
                return project
        raise NotFoundError("Project", project_id)

    def next_project_id(self) -> str:
        """``PRJ-NNNN``, one more than the project count, skipping taken IDs."""
        existing = {p.id for p in self.projects}
        sequence = len(self.projects) + 1
        candidate = f"PRJ-{sequence:04d}"
        while candidate in existing:
            sequence += 1
            candidate = f"PRJ-{sequence:04d}"
        return candidate

    def _check_owner(self, owner_id: str) -> None:
        if not owner_id:
            raise ValidationError("Project owner is required", field="owner_id")
        if self.team is not None and owner_id not in {m.id for m in self.team}:
            raise NotFoundError("TeamMember", owner_id)

    def register(
        self,
        name: str,
        owner_id: str,
        start_date: DateLike,
        category: Union[TaskCategory, str, None] = None,
        description: str = "",
        status: Union[ProjectStatus, str] = ProjectStatus.PENDING,
        template_id: Optional[str] = None,
        created_on: Optional[DateLike] = None
    ) -> Project:
        """
        Register a project, optionally stamped from a template.

        A template contributes its category (unless one is given) and one
        task per default task, dated from ``start_date``. The project ends
        with its last template task, or on its start date without one.

        Returns:
            The new Project, appended to the list
        """
        self._check_owner(owner_id)
        start = parse_date(start_date)
        project_id = self.next_project_id()

        tasks = []
        if template_id is not None:
            template = get_template(template_id)
            if category is None:
                category = template.category
            tasks = instantiate_template(template, project_id, start)

        end = max((t.end_date for t in tasks), default=start)

        project = Project(
            id=project_id,
            name=name,
            owner_id=owner_id,
            start_date=start,
            end_date=end,
            category=category if category is not None else TaskCategory.CTB,
            status=status,
            description=description,
            tasks=tasks,
            created_at=parse_date(created_on) if created_on is not None else date.today()
        )
        self.projects.append(project)

        logger.info("Registered project %s with %d task(s)", project.id, len(tasks))
        return project

    def update(self, project_id: str, **changes) -> Project:
        """Edit project fields in place. The ID and task list never change."""
        project = self.get(project_id)

        unknown = set(changes) - EDITABLE_PROJECT_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be edited: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0]
            )
        if "owner_id" in changes:
            self._check_owner(changes["owner_id"])

        # replace() re-runs field validation on a copy
        try:
            candidate = dataclasses.replace(project, **changes)
        except TypeError as e:
            raise ValidationError(str(e)) from None

        for name in changes:
            setattr(project, name, getattr(candidate, name))

        logger.info("Updated project %s: %s", project.id, ", ".join(sorted(changes)))
        return project

    def remove(self, project_id: str) -> Project:
        project = self.get(project_id)
        self.projects.remove(project)
        logger.info("Removed project %s", project_id)
        return project


def instantiate_template(
    template: ProjectTemplate,
    project_id: str,
    start_date: DateLike
) -> list[ProjectTask]:
    """
    Expand a template's default tasks for a project starting on ``start_date``.

    Each task starts ``relative_start_day`` calendar days after the project
    start and runs for ``duration_days`` days, inclusive of its first day.
    Its effort is the template's estimate.
    """
    start = parse_date(start_date)
    tasks = []
    for number, default in enumerate(template.default_tasks, start=1):
        task_start = start + timedelta(days=default.relative_start_day)
        tasks.append(ProjectTask(
            id=f"{project_id}-T{number}",
            project_id=project_id,
            title=default.title,
            effort_days=default.effort_estimate,
            start_date=task_start,
            end_date=task_start + timedelta(days=max(default.duration_days - 1, 0))
        ))
    return tasks


def filter_projects(
    projects: list[Project],
    search: Optional[str] = None,
    owner_id: Optional[str] = None,
    category: Union[TaskCategory, str, None] = None,
    status: Union[ProjectStatus, str, None] = None
) -> list[Project]:
    """
    Order book filter. Empty criteria match everything.

    ``search`` is a case-insensitive substring of the name or description;
    owner, category and status must match exactly.
    """
    wanted_category = coerce_enum(TaskCategory, category, "category") if category else None
    wanted_status = coerce_enum(ProjectStatus, status, "status") if status else None

    return [
        p for p in projects
        if (not search or p.matches(search))
        and (not owner_id or p.owner_id == owner_id)
        and (wanted_category is None or p.category == wanted_category)
        and (wanted_status is None or p.status == wanted_status)
    ]


def order_stats(orders: list[Order]) -> dict:
    """Order counters: total, completed and in progress."""
    return {
        "total": len(orders),
        "completed": len([o for o in orders if o.status == OrderStatus.COMPLETED]),
        "in_progress": len([o for o in orders if o.status == OrderStatus.IN_PROGRESS])
    }


# Convenience functions
def register_project(
    projects: list[Project],
    name: str,
    owner_id: str,
    start_date: DateLike,
    team: Optional[list[TeamMember]] = None,
    **options
) -> Project:
    """
    Register a project and append it to ``projects``.

    Example:
        project = register_project(projects, "Q1 release", "m1", "2025-01-06",
                                   template_id="tpl-1")
        print(project.end_date)  # 2025-02-16, the last day of QA
    """
    return OrderBook(projects, team).register(name, owner_id, start_date, **options)


def update_project(
    projects: list[Project],
    project_id: str,
    team: Optional[list[TeamMember]] = None,
    **changes
) -> Project:
    """Edit owner, category, status or other project fields in place."""
    return OrderBook(projects, team).update(project_id, **changes)
