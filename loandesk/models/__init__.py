from .user import User
from .hierarchy import HierarchyEdge
from .task import Task, TaskComment, TaskType, TaskDirection, TaskStatus, TaskPriority
from .audit_log import AuditLog
