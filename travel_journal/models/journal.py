"""
Travel Journal Backend — Journal SQLAlchemy Models
====================================================

What:  ORM models for the `journal_entries` and `country_status` tables.
Why:   The persistence facade (JournalService) is the only writer of both
       tables; these classes are its storage schema.
Who:   Used by JournalService for CRUD and by init_models()/Alembic for DDL.

Table Design:
    journal_entries — append-style, many rows per (user, country). Each row
        keeps the status that was chosen when it was written; that value may
        be stale, read paths prefer country_status.
    country_status  — exactly one row per (user_id, country_code), enforced
        by a unique constraint. Upserted on every POST /journal.

Column names are snake_case here; the API layer translates to camelCase.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from travel_journal.database import Base

NOT_VISITED = "not-visited"
WANT_TO_VISIT = "want-to-visit"
VISITED = "visited"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalEntry(Base):
    """
    A timestamped free-text journal entry about one country.

    Lifecycle:
        1. Created by POST /journal when the entry text is non-blank
        2. Partially updated by PUT /journal/{id} (only supplied fields change,
           updated_at refreshed every time)
        3. Deleted by DELETE /journal/{id}
    created_at never changes after insert.
    """

    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    country_code: Mapped[str] = mapped_column(String(16), nullable=False)
    country_name: Mapped[str] = mapped_column(String(255), nullable=False)

    entry: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Not constrained to the three statuses above; arbitrary strings are stored as sent
    visit_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=NOT_VISITED
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # Every query is scoped by user; listing is newest-first
    __table_args__ = (
        Index("idx_journal_entries_user_created", "user_id", created_at.desc()),
        Index("idx_journal_entries_user_country", "user_id", "country_code"),
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntry(id={self.id}, user_id={self.user_id}, "
            f"country_code='{self.country_code}', visit_status='{self.visit_status}')>"
        )


class CountryStatus(Base):
    """
    The authoritative current visit status of a country for one user.

    Invariant: at most one row per (user_id, country_code).
    """

    __tablename__ = "country_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    country_code: Mapped[str] = mapped_column(String(16), nullable=False)
    country_name: Mapped[str] = mapped_column(String(255), nullable=False)

    visit_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=NOT_VISITED
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "country_code", name="uq_country_status_user_country"),
    )

    def __repr__(self) -> str:
        return (
            f"<CountryStatus(user_id={self.user_id}, country_code='{self.country_code}', "
            f"visit_status='{self.visit_status}')>"
        )
