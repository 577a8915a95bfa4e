"""User directory: identity and role lookups for the order services."""
from dataclasses import dataclass
from typing import Optional
from data.database.connection import SessionLocal
from data.database.user_model import User


@dataclass(frozen=True)
class UserRecord:
    """Read-only view of a user handed to the services."""
    id: int
    name: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class DatabaseUserDirectory:
    """Looks users up in the ``users`` table with a short-lived session."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        db = self.session_factory()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return None
            return UserRecord(id=user.id, name=user.name, email=user.email, role=user.role)
        finally:
            db.close()
