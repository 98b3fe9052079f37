import uuid

from sqlalchemy import Column, Text, Boolean, TIMESTAMP, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship

from .base import Base, JsonType, utcnow


class Employee(Base):
    """
    Employee profile as consumed by the scoring engine.

    Only the fields the engine reads are modelled here; the wider HR
    profile lives with the CRUD layer.
    """
    __tablename__ = 'employee'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True), ForeignKey('organization.id', ondelete='CASCADE'), nullable=False)

    name = Column(Text, nullable=False)
    skills = Column(JsonType, nullable=False, default=list)  # Ordered list of skill strings
    job_title = Column(Text, nullable=True)  # Free text, not the RBAC role
    department = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    tasks = relationship("Task", back_populates="assignee")

    __table_args__ = (
        Index('idx_employee_org', 'org_id'),
        Index('idx_employee_org_title', 'org_id', 'job_title'),
        Index('idx_employee_org_department', 'org_id', 'department'),
    )
