from sqlalchemy import Column, ForeignKey, String, DateTime
from datetime import datetime, timezone
import uuid

from ..database.core import Base


class ReferenceUpload(Base):
    __tablename__ = "reference_uploads"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    filename = Column(String, nullable=False)
    url = Column(String, nullable=False)
    uploaded_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<ReferenceUpload(id={self.id}, user_id={self.user_id}, filename={self.filename})>"
