"""
Team Capacity Planner

Monthly capacity, committed effort and availability for a small team, plus
the main task / subtask model that feeds it.
"""

__version__ = "1.0.0"

from .errors import (
    PlannerError,
    ValidationError,
    NotFoundError,
    ClosureBlockedError
)

from .models import (
    TeamMember,
    WorkTask,
    TaskCategory,
    TaskStatus,
    TaskRecurrence
)

from .config import Config

from .calendar_window import (
    CalendarWindow,
    CalendarDay,
    compute_month_window
)

from .analyzer import (
    CapacityAnalyzer,
    MemberCapacity,
    MemberMonthlyMetrics,
    WorkspaceAggregate,
    AvailabilityBand,
    compute_member_metrics,
    compute_workspace_aggregate
)

from .tasks import (
    TaskHierarchy,
    children_index,
    effective_effort,
    filter_tasks,
    tree_order,
    task_completion,
    create_task,
    update_task,
    update_task_status,
    delete_task
)

from .team import (
    get_member,
    add_member,
    update_member,
    remove_member,
    toggle_leave_day
)

from .leave import (
    ConflictEntry,
    detect_leave_conflicts,
    conflict_dates
)

from .intake import (
    TaskInput,
    TaskProposal,
    parse_task_input,
    resolve_suggested_assignee,
    task_input_from_proposal
)

from .projects import (
    Project,
    ProjectTask,
    ProjectStatus,
    ProjectTaskStatus,
    ProjectTemplate,
    TemplateTask,
    Order,
    OrderStatus,
    OrderPriority,
    OrderBook,
    PROJECT_TEMPLATES,
    get_template,
    instantiate_template,
    filter_projects,
    order_stats,
    register_project,
    update_project
)

__all__ = [
    # Version
    "__version__",

    # Errors
    "PlannerError",
    "ValidationError",
    "NotFoundError",
    "ClosureBlockedError",

    # Models
    "TeamMember",
    "WorkTask",
    "TaskCategory",
    "TaskStatus",
    "TaskRecurrence",
    "Config",

    # Calendar
    "CalendarWindow",
    "CalendarDay",
    "compute_month_window",

    # Analyzer
    "CapacityAnalyzer",
    "MemberCapacity",
    "MemberMonthlyMetrics",
    "WorkspaceAggregate",
    "AvailabilityBand",
    "compute_member_metrics",
    "compute_workspace_aggregate",

    # Tasks
    "TaskHierarchy",
    "children_index",
    "effective_effort",
    "filter_tasks",
    "tree_order",
    "task_completion",
    "create_task",
    "update_task",
    "update_task_status",
    "delete_task",

    # Team
    "get_member",
    "add_member",
    "update_member",
    "remove_member",
    "toggle_leave_day",

    # Leave
    "ConflictEntry",
    "detect_leave_conflicts",
    "conflict_dates",

    # Intake
    "TaskInput",
    "TaskProposal",
    "parse_task_input",
    "resolve_suggested_assignee",
    "task_input_from_proposal",

    # Order book
    "Project",
    "ProjectTask",
    "ProjectStatus",
    "ProjectTaskStatus",
    "ProjectTemplate",
    "TemplateTask",
    "Order",
    "OrderStatus",
    "OrderPriority",
    "OrderBook",
    "PROJECT_TEMPLATES",
    "get_template",
    "instantiate_template",
    "filter_projects",
    "order_stats",
    "register_project",
    "update_project",
]
