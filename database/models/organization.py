import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid

from .base import Base, utcnow


class Organization(Base):
    """Tenant boundary. Every other row is scoped by org_id."""
    __tablename__ = 'organization'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
