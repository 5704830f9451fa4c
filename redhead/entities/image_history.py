from sqlalchemy import Column, ForeignKey, String, DateTime, JSON
from datetime import datetime, timezone
import uuid

from ..database.core import Base


class ImageHistory(Base):
    __tablename__ = "image_history"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    prompt = Column(String, nullable=False)
    style = Column(String, nullable=False)
    refinement = Column(String, nullable=True)
    dimension = Column(String, nullable=False)
    image_urls = Column(JSON, nullable=False)
    # Weak reference: no foreign key so deleting the style keeps the record valid
    style_id = Column(String(36), nullable=True)
    generated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<ImageHistory(id={self.id}, user_id={self.user_id}, style={self.style})>"
