import enum
import uuid

from sqlalchemy import (
    Column, Text, Boolean, Integer, TIMESTAMP, ForeignKey, Index, Enum,
    CheckConstraint, Uuid,
)
from sqlalchemy.orm import relationship

from .base import Base, JsonType, utcnow


class TaskStatus(str, enum.Enum):
    """Forward-only: ASSIGNED -> IN_PROGRESS -> COMPLETED."""
    ASSIGNED = 'ASSIGNED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'


class Task(Base):
    """
    Unit of work assigned to an employee.

    Read-only to the scoring engine. Status transitions and the server-stamped
    completed_at are owned by the task CRUD layer.
    """
    __tablename__ = 'task'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True), ForeignKey('organization.id', ondelete='CASCADE'), nullable=False)
    assigned_to = Column(Uuid(as_uuid=True), ForeignKey('employee.id', ondelete='SET NULL'), nullable=True)

    title = Column(Text, nullable=False)
    status = Column(Enum(TaskStatus, name='task_status'), nullable=False, default=TaskStatus.ASSIGNED)
    complexity_score = Column(Integer, nullable=False, default=3)  # 1-5
    required_skills = Column(JsonType, nullable=False, default=list)

    due_date = Column(TIMESTAMP(timezone=True), nullable=True)
    completed_at = Column(TIMESTAMP(timezone=True), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)  # Soft-delete flag
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    assignee = relationship("Employee", back_populates="tasks")

    __table_args__ = (
        CheckConstraint('complexity_score BETWEEN 1 AND 5', name='ck_task_complexity_range'),
        Index('idx_task_org_assignee', 'org_id', 'assigned_to'),
        Index('idx_task_org_status', 'org_id', 'status'),
    )
