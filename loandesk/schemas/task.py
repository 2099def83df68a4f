# loandesk/schemas/task.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from loandesk.models.task import TaskDirection, TaskPriority, TaskStatus, TaskType
from loandesk.schemas.user import UserBasic

class TaskBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    assigned_to: int
    task_type: TaskType
    direction: Optional[TaskDirection] = None
    priority: TaskPriority = TaskPriority.MEDIUM
    linked_case_id: Optional[str] = Field(None, max_length=64)
    due_date: Optional[datetime] = None

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Title is required')
        return v.strip()

class TaskCreate(TaskBase):
    pass

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    task_type: Optional[TaskType] = None
    direction: Optional[TaskDirection] = None
    priority: Optional[TaskPriority] = None
    linked_case_id: Optional[str] = Field(None, max_length=64)
    due_date: Optional[datetime] = None

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v is not None else v

    @field_validator('assigned_to', 'task_type', 'priority')
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError('Field cannot be null')
        return v

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    assigned_to: int
    assigned_by: int
    task_type: TaskType
    direction: Optional[TaskDirection] = None
    priority: TaskPriority
    status: TaskStatus
    linked_case_id: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    assignee: Optional[UserBasic] = None
    assigner: Optional[UserBasic] = None

    model_config = {
        "from_attributes": True
    }

class TaskCommentCreate(BaseModel):
    comment: str

    @field_validator('comment')
    @classmethod
    def comment_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Comment is required')
        return v.strip()

class TaskCommentOut(BaseModel):
    id: int
    task_id: int
    comment: str
    created_by: int
    created_at: datetime
    creator: Optional[UserBasic] = None

    model_config = {
        "from_attributes": True
    }
