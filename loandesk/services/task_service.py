# loandesk/services/task_service.py
"""
Task lifecycle: creation, edits, status changes, comments and listings.

Every write that touches who a task is assigned to (and every status change)
re-runs validate_assignment against the live reporting lines inside the same
transaction as the write.
"""

import logging
from typing import List, Optional

from fastapi import Request
from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from loandesk.models.task import Task, TaskComment, TaskPriority, TaskStatus, TaskType
from loandesk.models.user import User
from loandesk.schemas.task import TaskCreate, TaskUpdate
from loandesk.services.audit import record_audit
from loandesk.utils.errors import PermissionDenied, TaskNotFound, UnknownUser
from loandesk.utils.hierarchy import HierarchyManager, hierarchy_transaction
from loandesk.utils.permissions import TASK_CREATE_COMMON, ensure_permission, is_admin
from loandesk.utils.task_validation import validate_assignment

logger = logging.getLogger(__name__)

_PRIORITY_RANK = case(
    (Task.priority == TaskPriority.HIGH, 1),
    (Task.priority == TaskPriority.MEDIUM, 2),
    else_=3,
)


class TaskService:
    def __init__(self, db: Session):
        self.db = db
        self.hierarchy = HierarchyManager(db)

    def _query(self):
        return self.db.query(Task).options(
            joinedload(Task.assignee),
            joinedload(Task.assigner),
        )

    def _ensure_active_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id, User.is_active == True).first()
        if not user:
            raise UnknownUser(user_id)
        return user

    def _validate(self, task: Task) -> None:
        validate_assignment(task, self.hierarchy)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_task(self, task_id: int, user: User) -> Task:
        """Task visible to `user` (assignee, assigner or admin)"""
        task = self._query().filter(Task.id == task_id).first()
        if not task:
            raise TaskNotFound(task_id)
        if not is_admin(user) and user.id not in (task.assigned_to, task.assigned_by):
            raise TaskNotFound(task_id)
        return task

    def list_my_tasks(
        self,
        user_id: int,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        task_type: Optional[TaskType] = None,
    ) -> List[Task]:
        query = self._query().filter(Task.assigned_to == user_id)
        if status:
            query = query.filter(Task.status == status)
        if priority:
            query = query.filter(Task.priority == priority)
        if task_type:
            query = query.filter(Task.task_type == task_type)
        return query.order_by(
            _PRIORITY_RANK,
            Task.due_date.is_(None),
            Task.due_date,
            Task.created_at.desc(),
            Task.id.desc(),
        ).all()

    def list_assigned_by(self, user_id: int, status: Optional[TaskStatus] = None) -> List[Task]:
        query = self._query().filter(Task.assigned_by == user_id)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def list_subordinate_tasks(
        self,
        manager_id: int,
        status: Optional[TaskStatus] = None,
        subordinate_id: Optional[int] = None,
    ) -> List[Task]:
        """Tasks assigned to anyone below the manager in the reporting tree.

        With `subordinate_id`, only that user's tasks; the user must report
        to the manager directly or indirectly.
        """
        if subordinate_id is not None:
            if not self.hierarchy.is_subordinate_of(subordinate_id, manager_id):
                logger.warning("User %s asked for tasks of non-subordinate %s", manager_id, subordinate_id)
                raise PermissionDenied("User is not in your reporting line")
            subordinate_ids = [subordinate_id]
        else:
            subordinate_ids = [user.id for user in self.hierarchy.get_all_subordinates(manager_id)]
        if not subordinate_ids:
            return []
        query = self._query().filter(Task.assigned_to.in_(subordinate_ids))
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def list_comments(self, task_id: int, user: User) -> List[TaskComment]:
        self.get_task(task_id, user)
        return self.db.query(TaskComment).options(
            joinedload(TaskComment.creator)
        ).filter(TaskComment.task_id == task_id).order_by(
            TaskComment.created_at, TaskComment.id
        ).all()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_task(self, actor: User, data: TaskCreate, request: Optional[Request] = None) -> Task:
        with hierarchy_transaction(self.db, exclusive=False):
            self._ensure_active_user(data.assigned_to)
            if data.task_type == TaskType.COMMON:
                ensure_permission(actor, TASK_CREATE_COMMON)

            task = Task(
                title=data.title,
                description=data.description,
                assigned_to=data.assigned_to,
                assigned_by=actor.id,
                task_type=data.task_type,
                direction=data.direction,
                priority=data.priority,
                linked_case_id=data.linked_case_id,
                status=TaskStatus.OPEN,
                due_date=data.due_date,
            )
            self._validate(task)

            self.db.add(task)
            self.db.flush()
            record_audit(
                self.db,
                actor.id,
                "task.create",
                "task",
                task.id,
                {
                    "title": task.title,
                    "task_type": task.task_type.value,
                    "assigned_to": task.assigned_to,
                    "direction": task.direction.value if task.direction else None,
                    "priority": task.priority.value,
                    "linked_case_id": task.linked_case_id,
                },
                request,
            )

        logger.info("User %s created %s task %s for user %s", actor.id, task.task_type.value, task.id, task.assigned_to)
        return self.get_task(task.id, actor)

    def update_task(self, task_id: int, actor: User, changes: TaskUpdate, request: Optional[Request] = None) -> Task:
        """Edit task fields; the result must still satisfy the assignment rules"""
        update_data = changes.model_dump(exclude_unset=True)

        with hierarchy_transaction(self.db, exclusive=False):
            task = self.get_task(task_id, actor)
            if task.assigned_by != actor.id and not is_admin(actor):
                raise PermissionDenied("Only the task creator can edit the task")

            if "assigned_to" in update_data and update_data["assigned_to"] != task.assigned_to:
                self._ensure_active_user(update_data["assigned_to"])
            if update_data.get("task_type") == TaskType.COMMON and task.task_type != TaskType.COMMON:
                ensure_permission(actor, TASK_CREATE_COMMON)

            for field, value in update_data.items():
                setattr(task, field, value)

            self._validate(task)
            self.db.flush()
            record_audit(self.db, actor.id, "task.update", "task", task.id, update_data, request)

        self.db.refresh(task)
        return task

    def update_status(self, task_id: int, actor: User, status: TaskStatus, request: Optional[Request] = None) -> Task:
        with hierarchy_transaction(self.db, exclusive=False):
            task = self.get_task(task_id, actor)
            if actor.id not in (task.assigned_to, task.assigned_by):
                raise PermissionDenied("Only the assignee or the creator can update task status")

            previous = task.status
            task.status = status
            # Status writes re-check the assignment like any other task update
            self._validate(task)
            self.db.flush()
            record_audit(
                self.db, actor.id, "task.status.update", "task", task.id,
                {"from": previous.value, "to": status.value}, request,
            )

        if previous == TaskStatus.COMPLETED and status != TaskStatus.COMPLETED:
            logger.info("Task %s reopened by user %s", task.id, actor.id)
        self.db.refresh(task)
        return task

    def add_comment(self, task_id: int, actor: User, comment: str, request: Optional[Request] = None) -> TaskComment:
        task = self.get_task(task_id, actor)
        try:
            task_comment = TaskComment(task_id=task.id, comment=comment, created_by=actor.id)
            self.db.add(task_comment)
            self.db.flush()
            record_audit(
                self.db, actor.id, "task.comment.add", "task", task.id,
                {"comment_id": task_comment.id}, request,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(task_comment)
        return task_comment

    def delete_task(self, task_id: int, actor: User, request: Optional[Request] = None) -> None:
        task = self.get_task(task_id, actor)
        if task.assigned_by != actor.id and not is_admin(actor):
            raise PermissionDenied("Only the task creator can delete the task")
        try:
            record_audit(self.db, actor.id, "task.delete", "task", task.id, {"title": task.title}, request)
            self.db.delete(task)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Task %s deleted by user %s", task_id, actor.id)
