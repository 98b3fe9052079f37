import uuid

from sqlalchemy import Column, Numeric, TIMESTAMP, ForeignKey, Index, Uuid

from .base import Base, JsonType, utcnow


class ScoreLog(Base):
    """
    Append-only history of productivity score computations.

    Rows are inserted once per computation and never updated or deleted.
    The current score for an employee is the row with the greatest
    computed_at. A NULL score/breakdown pair records that the employee had
    no assigned tasks at computation time.
    """
    __tablename__ = 'score_log'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True), ForeignKey('organization.id', ondelete='CASCADE'), nullable=False)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey('employee.id', ondelete='CASCADE'), nullable=False)

    score = Column(Numeric(4, 1, asdecimal=False), nullable=True)  # 0-100, 1 decimal
    breakdown = Column(JsonType, nullable=True)  # Versioned record, see ScoreBreakdown.to_record

    computed_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index('idx_score_log_org_employee_computed', 'org_id', 'employee_id', 'computed_at'),
        Index('idx_score_log_org_computed', 'org_id', 'computed_at'),
    )
