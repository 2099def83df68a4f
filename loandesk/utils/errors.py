# loandesk/utils/errors.py
"""Typed failures raised by the hierarchy and task services.

Routers never catch these; the handler registered in main.py turns each one
into an HTTP response using ``status_code`` and ``code``.
"""
from enum import Enum
from typing import Optional


class LoanDeskError(Exception):
    """Base class for errors surfaced to the caller"""

    status_code = 400
    code = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CycleDetected(LoanDeskError):
    """Assigning the manager would create a reporting cycle."""

    code = "CYCLE_DETECTED"

    def __init__(self, subordinate_id: int, manager_id: int, path: Optional[list] = None):
        self.subordinate_id = subordinate_id
        self.manager_id = manager_id
        self.path = path or []
        super().__init__("This assignment would create a circular hierarchy")


class SelfReference(LoanDeskError):
    code = "SELF_REFERENCE"

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("User cannot be their own manager")


class UnknownUser(LoanDeskError):
    status_code = 404
    code = "UNKNOWN_USER"

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} does not exist or is inactive")


class AssignmentErrorKind(str, Enum):
    WRONG_DIRECTION = "WRONG_DIRECTION"
    NOT_SUBORDINATE = "NOT_SUBORDINATE"
    NOT_MANAGER = "NOT_MANAGER"
    NOT_SELF = "NOT_SELF"


class InvalidAssignment(LoanDeskError):
    """Task violates the task-type or reporting-line rules."""

    code = "INVALID_ASSIGNMENT"

    def __init__(self, kind: AssignmentErrorKind, message: str):
        self.kind = kind
        super().__init__(message)


class TaskNotFound(LoanDeskError):
    status_code = 404
    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__("Task not found or access denied")


class PermissionDenied(LoanDeskError):
    status_code = 403
    code = "PERMISSION_DENIED"
