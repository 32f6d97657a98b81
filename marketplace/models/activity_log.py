from sqlalchemy import Column, Uuid, String, Integer, JSON, DateTime, Text
import uuid

from marketplace.models.base import Base, utcnow

class ActivityLog(Base):
    __tablename__ = "activity_logs"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(50), nullable=False)
    action = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    entity_id = Column(Integer)
    details = Column(JSON)
    created_at = Column(DateTime, default=utcnow)
