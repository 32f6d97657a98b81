from sqlalchemy import Column, DateTime, Integer, String

from marketplace.models.base import Base, utcnow


class Image(Base):
    """Rows are written by the image storage service; this service only reads them."""
    __tablename__ = "images"
    id = Column(Integer, primary_key=True)
    listing_id = Column(Integer, nullable=False, index=True)
    listing_type = Column(String(20), nullable=False)
    file_path = Column(String(500), nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    uploaded_at = Column(DateTime, default=utcnow)
