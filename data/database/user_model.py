"""User directory model."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from data.database.connection import Base


class User(Base):
    """Account record; only identity and role are used by the order services."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, default="user")  # "user" or "admin"
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
