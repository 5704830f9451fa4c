from sqlalchemy import Column, ForeignKey, String, Integer, DateTime, JSON
from datetime import datetime, timezone
import uuid

from ..database.core import Base


class SavedStyle(Base):
    __tablename__ = "saved_styles"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    base_style = Column(String, nullable=False)
    refinement = Column(String, nullable=True)
    reference_image_url = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<SavedStyle(id={self.id}, user_id={self.user_id}, name={self.name})>"
