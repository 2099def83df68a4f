# loandesk/routers/task.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional

from loandesk.database import get_db
from loandesk.models.task import TaskPriority, TaskStatus, TaskType
from loandesk.models.user import User
from loandesk.schemas.task import (
    TaskCommentCreate,
    TaskCommentOut,
    TaskCreate,
    TaskOut,
    TaskStatusUpdate,
    TaskUpdate,
)
from loandesk.services.task_service import TaskService
from loandesk.utils.auth import get_current_user
from loandesk.utils.permissions import TASK_VIEW_SUBORDINATES, require_permission

router = APIRouter()

@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a task assigned by the current user"""
    return TaskService(db).create_task(current_user, task, request)

@router.get("/my", response_model=List[TaskOut])
def get_my_tasks(
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    task_type: Optional[TaskType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Tasks assigned to the current user"""
    return TaskService(db).list_my_tasks(current_user.id, status, priority, task_type)

@router.get("/assigned-by-me", response_model=List[TaskOut])
def get_tasks_assigned_by_me(
    status: Optional[TaskStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Tasks created by the current user"""
    return TaskService(db).list_assigned_by(current_user.id, status)

@router.get("/subordinates", response_model=List[TaskOut])
def get_subordinate_tasks(
    status: Optional[TaskStatus] = None,
    subordinate_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(TASK_VIEW_SUBORDINATES))
):
    """Tasks assigned to anyone reporting (directly or not) to the current user"""
    return TaskService(db).list_subordinate_tasks(current_user.id, status, subordinate_id)

@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).get_task(task_id, current_user)

@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    changes: TaskUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Edit a task (creator or admin)"""
    return TaskService(db).update_task(task_id, current_user, changes, request)

@router.put("/{task_id}/status", response_model=TaskOut)
def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Move a task between OPEN, IN_PROGRESS and COMPLETED"""
    return TaskService(db).update_status(task_id, current_user, payload.status, request)

@router.post("/{task_id}/comments", response_model=TaskCommentOut, status_code=status.HTTP_201_CREATED)
def add_task_comment(
    task_id: int,
    payload: TaskCommentCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).add_comment(task_id, current_user, payload.comment, request)

@router.get("/{task_id}/comments", response_model=List[TaskCommentOut])
def get_task_comments(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return TaskService(db).list_comments(task_id, current_user)

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a task and its comments (creator or admin)"""
    TaskService(db).delete_task(task_id, current_user, request)
