# loandesk/models/task.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from loandesk.database import Base
import enum


class TaskType(str, enum.Enum):
    PERSONAL = "PERSONAL"
    COMMON = "COMMON"
    HIERARCHICAL = "HIERARCHICAL"


class TaskDirection(str, enum.Enum):
    DOWNWARD = "DOWNWARD"
    UPWARD = "UPWARD"


class TaskStatus(str, enum.Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "(task_type = 'HIERARCHICAL' AND direction IS NOT NULL) OR "
            "(task_type != 'HIERARCHICAL' AND direction IS NULL)",
            name="tasks_direction_check",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    assigned_to = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Routing
    task_type = Column(Enum(TaskType), nullable=False, default=TaskType.HIERARCHICAL, index=True)
    direction = Column(Enum(TaskDirection), nullable=True)

    # Opaque reference into the CRM case service
    linked_case_id = Column(String(64), nullable=True, index=True)

    priority = Column(Enum(TaskPriority), nullable=False, default=TaskPriority.MEDIUM, index=True)
    status = Column(Enum(TaskStatus), nullable=False, default=TaskStatus.OPEN, index=True)
    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    assignee = relationship("User", foreign_keys=[assigned_to], back_populates="assigned_tasks")
    assigner = relationship("User", foreign_keys=[assigned_by], back_populates="created_tasks")
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskComment.created_at",
    )

    def __repr__(self):
        return f"<Task(id={self.id}, type='{self.task_type}', status='{self.status}')>"


class TaskComment(Base):
    __tablename__ = "task_comments"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    comment = Column(Text, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    task = relationship("Task", back_populates="comments")
    creator = relationship("User", foreign_keys=[created_by])
