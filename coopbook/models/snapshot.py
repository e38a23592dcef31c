from sqlalchemy import Column, String, Integer, DateTime, Text, Uuid, text, func
import uuid

from coopbook.db.base import Base


class StateSnapshot(Base):
    """Latest persisted revision of a society book, stored as a JSON document."""
    __tablename__ = "state_snapshot"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    state_key = Column(String(100), nullable=False, unique=True, index=True)
    revision = Column(Integer, nullable=False, default=0)
    document = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())
