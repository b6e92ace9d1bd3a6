"""
Travel Journal Backend — User SQLAlchemy Model
================================================

Registered accounts. Only UserService writes here; the journal tables
reference users by plain integer id, because the id comes from whatever
credential verifier is plugged into the authentication gate.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from travel_journal.database import Base
from travel_journal.models.journal import utcnow


class User(Base):
    """An account that can log in and receive a bearer token."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # bcrypt hash of the SHA-256 hex digest of the password
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
