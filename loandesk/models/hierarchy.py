# loandesk/models/hierarchy.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from loandesk.database import Base


class HierarchyEdge(Base):
    """Reporting line: subordinate reports to manager"""
    __tablename__ = "user_hierarchy"
    __table_args__ = (
        # A user has at most one direct manager
        UniqueConstraint("subordinate_id", name="uq_user_hierarchy_subordinate"),
        CheckConstraint("manager_id != subordinate_id", name="check_no_self_reference"),
    )

    id = Column(Integer, primary_key=True, index=True)
    manager_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subordinate_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    manager = relationship("User", foreign_keys=[manager_id])
    subordinate = relationship("User", foreign_keys=[subordinate_id])

    def __repr__(self):
        return f"<HierarchyEdge(manager_id={self.manager_id}, subordinate_id={self.subordinate_id})>"
