from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String

from marketplace.models.base import Base, utcnow


class SavedSearch(Base):
    __tablename__ = "saved_searches"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    search_criteria = Column(JSON, nullable=False, default=dict)
    notification_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
