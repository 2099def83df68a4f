# loandesk/utils/task_validation.py
"""
Assignment rules for tasks.

``validate_assignment`` is a pure check: it looks only at the task fields and
at the reporting-line handle passed in, so callers decide which snapshot of
the hierarchy it runs against (the task service passes the live graph inside
the same transaction as the task write).
"""

from typing import Optional, Protocol

from loandesk.models.task import TaskDirection, TaskType
from loandesk.utils.errors import AssignmentErrorKind, InvalidAssignment


class ReportingLines(Protocol):
    def has_edge(self, manager_id: int, subordinate_id: int) -> bool:
        ...


class TaskAssignment(Protocol):
    assigned_to: int
    assigned_by: int
    task_type: TaskType
    direction: Optional[TaskDirection]


def validate_assignment(task: TaskAssignment, graph: ReportingLines) -> None:
    """Raise InvalidAssignment if the task breaks its type or hierarchy rules"""
    task_type = TaskType(task.task_type)
    direction = TaskDirection(task.direction) if task.direction is not None else None

    if task_type != TaskType.HIERARCHICAL:
        if direction is not None:
            raise InvalidAssignment(
                AssignmentErrorKind.WRONG_DIRECTION,
                f"{task_type.value} tasks cannot have a direction",
            )
        if task_type == TaskType.PERSONAL and task.assigned_to != task.assigned_by:
            raise InvalidAssignment(
                AssignmentErrorKind.NOT_SELF,
                "PERSONAL tasks must be assigned to the creator",
            )
        return

    if direction is None:
        raise InvalidAssignment(
            AssignmentErrorKind.WRONG_DIRECTION,
            "HIERARCHICAL tasks must have a direction",
        )

    if direction == TaskDirection.DOWNWARD:
        if not graph.has_edge(task.assigned_by, task.assigned_to):
            raise InvalidAssignment(
                AssignmentErrorKind.NOT_SUBORDINATE,
                "DOWNWARD tasks can only be assigned to direct subordinates",
            )
    elif not graph.has_edge(task.assigned_to, task.assigned_by):
        raise InvalidAssignment(
            AssignmentErrorKind.NOT_MANAGER,
            "UPWARD tasks can only be raised to direct manager",
        )
