from sqlalchemy import Column, String, Integer, JSON
import uuid

from ..database.core import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    credits = Column(Integer, nullable=False, default=120)
    # Versioned UserPreferences document
    preferences = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, credits={self.credits})>"
