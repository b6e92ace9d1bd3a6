"""
Travel Journal Backend — Journal Service (Persistence Facade)
===============================================================

What:  All reads and writes of the journal_entries and country_status tables.
Why:   The HTTP layer only validates, authenticates and translates; every
       storage rule lives here.
Who:   Called by the /api/journal route handlers.

Operations:
    list_entries / list_entries_for_country
        Entries for one user, newest first, left-joined with country_status.
        The country's current status overrides the status stored on the entry.
    upsert_entry
        1. Upsert the (user, country) status row
        2. If the text is non-blank, insert a journal entry
        Returns the created entry (has `id`) or a status-only result (no `id`).
    update_entry
        Partial update; omitted fields keep their value; updated_at refreshed.
        The row is matched on (id, user_id) so a foreign entry is "not found".
    delete_entry
        Same ownership-in-the-match rule.
    get_status
        Stored status row, or a synthesized not-visited default.
    get_stats
        Profile numbers derived from list_entries.

Atomicity:
    Both writes of upsert_entry are flushed on the caller's session, status
    first. Nothing is committed here: get_db_session commits once at the end
    of the request or rolls back both writes if anything raised. If the status
    write fails, the entry insert is never attempted.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from sqlalchemy import and_, delete, desc, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_journal.database import parse_row_id
from travel_journal.exceptions import DatabaseError, NotFoundError, ValidationError
from travel_journal.models.journal import (
    NOT_VISITED,
    VISITED,
    WANT_TO_VISIT,
    CountryStatus,
    JournalEntry,
    utcnow,
)
from travel_journal.schemas.journal import (
    CountryStatusResponse,
    JournalEntryResponse,
    JournalWriteResponse,
    TravelStatsResponse,
)

logger = logging.getLogger(__name__)

# Approximate number of countries in the world, for coverage percentages
TOTAL_COUNTRIES = 195

ENTRY_NOT_FOUND = "Entry not found or access denied"

# INSERT ... ON CONFLICT DO UPDATE constructors per supported dialect
UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _entry_key(entry_id: Union[int, str]) -> int:
    """Entry id as an int, or NotFoundError when it cannot name any row."""
    key = parse_row_id(str(entry_id))
    if key is None:
        raise NotFoundError(
            message=ENTRY_NOT_FOUND,
            resource="journal_entry",
            resource_id=str(entry_id)[:32],
        )
    return key


class JournalService:
    """
    Persistence facade for journal entries and country statuses.

    Error Handling Strategy:
        SQLAlchemy errors are logged with context and re-raised as
        DatabaseError, whose client-facing message is always "Database error".
        NotFoundError and ValidationError propagate untouched.
    """

    # ══════════════════════════════════════════════════════════════════════
    # Reads
    # ══════════════════════════════════════════════════════════════════════

    async def list_entries(
        self, db: AsyncSession, user_id: int
    ) -> List[JournalEntryResponse]:
        """All entries of a user, newest first, with current country status."""
        return await self._query_entries(db, user_id)

    async def list_entries_for_country(
        self, db: AsyncSession, user_id: int, country_code: str
    ) -> List[JournalEntryResponse]:
        """Entries of a user for one country, newest first."""
        return await self._query_entries(db, user_id, country_code=country_code)

    async def get_status(
        self, db: AsyncSession, user_id: int, country_code: str
    ) -> CountryStatusResponse:
        """
        Current status of a country for a user.

        Never fails for an unknown country: returns
        {countryCode, visitStatus: "not-visited"} instead.
        """
        try:
            status_row = await self._find_status(db, user_id, country_code)
        except SQLAlchemyError as e:
            logger.error(
                "Database error reading status %s for user %d: %s",
                country_code, user_id, str(e),
            )
            raise DatabaseError(context={"country_code": country_code})

        if status_row is None:
            return CountryStatusResponse(country_code=country_code, visit_status=NOT_VISITED)
        return CountryStatusResponse.model_validate(status_row)

    async def get_stats(self, db: AsyncSession, user_id: int) -> TravelStatsResponse:
        """
        Totals for the profile page.

        Countries are counted once each, by the status shown on their entries
        (country status wins over the entry's own status).
        """
        entries = await self._query_entries(db, user_id)

        visited = {e.country_code for e in entries if e.visit_status == VISITED}
        want_to_visit = {e.country_code for e in entries if e.visit_status == WANT_TO_VISIT}

        return TravelStatsResponse(
            total_entries=len(entries),
            countries_visited=len(visited),
            countries_want_to_visit=len(want_to_visit),
            total_countries=TOTAL_COUNTRIES,
            world_coverage=round(len(visited) / TOTAL_COUNTRIES * 100),
        )

    # ══════════════════════════════════════════════════════════════════════
    # Writes
    # ══════════════════════════════════════════════════════════════════════

    async def upsert_entry(
        self,
        db: AsyncSession,
        user_id: int,
        country_code: Optional[str],
        country_name: Optional[str],
        entry: Optional[str] = None,
        visit_status: Optional[str] = None,
    ) -> JournalWriteResponse:
        """
        Record a country's status and, when there is text, a journal entry.

        Args:
            entry: Journal text. Blank or missing → status-only update.
            visit_status: Stored as given; defaults to "not-visited".

        Returns:
            JournalWriteResponse with `id` set when an entry was created,
            without `id` for a status-only update.

        Raises:
            ValidationError: countryCode or countryName missing
            DatabaseError: either write failed (the request rolls back both)
        """
        if _is_blank(country_code) or _is_blank(country_name):
            raise ValidationError(
                message="Country code and name are required",
                context={"country_code": country_code, "country_name": country_name},
            )

        status = visit_status or NOT_VISITED
        now = utcnow()

        try:
            await self._upsert_status(db, user_id, country_code, country_name, status, now)

            if _is_blank(entry):
                logger.info(
                    "Status-only update for user %d: %s → %s", user_id, country_code, status
                )
                return JournalWriteResponse(
                    country_code=country_code,
                    country_name=country_name,
                    visit_status=status,
                    updated_at=now,
                    message="Country status updated",
                )

            journal_entry = JournalEntry(
                country_code=country_code,
                country_name=country_name,
                entry=entry,
                visit_status=status,
                created_at=now,
                updated_at=now,
                user_id=user_id,
            )
            db.add(journal_entry)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Database error saving %s for user %d: %s",
                country_code, user_id, str(e), exc_info=True,
            )
            raise DatabaseError(
                context={"country_code": country_code, "error_type": type(e).__name__}
            )

        logger.info("Journal entry %d created for user %d (%s)", journal_entry.id, user_id, country_code)
        return JournalWriteResponse.model_validate(journal_entry)

    async def update_entry(
        self,
        db: AsyncSession,
        user_id: int,
        entry_id: Union[int, str],
        entry: Optional[str] = None,
        visit_status: Optional[str] = None,
    ) -> JournalEntryResponse:
        """
        Partially update an owned entry.

        None means "keep the stored value"; updated_at is always refreshed.

        Raises:
            NotFoundError: no entry with this id belongs to this user
            DatabaseError: query or flush failed
        """
        entry_id = _entry_key(entry_id)
        try:
            journal_entry = await self._find_owned_entry(db, user_id, entry_id)
            if journal_entry is None:
                raise NotFoundError(
                    message=ENTRY_NOT_FOUND,
                    resource="journal_entry",
                    resource_id=str(entry_id),
                )

            if entry is not None:
                journal_entry.entry = entry
            if visit_status is not None:
                journal_entry.visit_status = visit_status
            journal_entry.updated_at = utcnow()
            await db.flush()

            status_row = await self._find_status(db, user_id, journal_entry.country_code)
        except SQLAlchemyError as e:
            logger.error("Database error updating entry %d: %s", entry_id, str(e))
            raise DatabaseError(context={"entry_id": entry_id})

        return self._to_response(
            journal_entry, status_row.visit_status if status_row else None
        )

    async def delete_entry(
        self, db: AsyncSession, user_id: int, entry_id: Union[int, str]
    ) -> None:
        """
        Delete an owned entry.

        Raises:
            NotFoundError: no entry with this id belongs to this user
            DatabaseError: delete failed
        """
        entry_id = _entry_key(entry_id)
        try:
            result = await db.execute(
                delete(JournalEntry).where(
                    JournalEntry.id == entry_id,
                    JournalEntry.user_id == user_id,
                )
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting entry %d: %s", entry_id, str(e))
            raise DatabaseError(context={"entry_id": entry_id})

        if result.rowcount == 0:
            raise NotFoundError(
                message=ENTRY_NOT_FOUND,
                resource="journal_entry",
                resource_id=str(entry_id),
            )
        logger.info("Journal entry %d deleted by user %d", entry_id, user_id)

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    async def _query_entries(
        self,
        db: AsyncSession,
        user_id: int,
        country_code: Optional[str] = None,
    ) -> List[JournalEntryResponse]:
        """
        SELECT e.*, s.visit_status AS country_visit_status
        FROM journal_entries e
        LEFT JOIN country_status s
               ON s.user_id = e.user_id AND s.country_code = e.country_code
        WHERE e.user_id = :user_id [AND e.country_code = :code]
        ORDER BY e.created_at DESC, e.id DESC
        """
        query = (
            select(JournalEntry, CountryStatus.visit_status.label("country_visit_status"))
            .outerjoin(
                CountryStatus,
                and_(
                    CountryStatus.user_id == JournalEntry.user_id,
                    CountryStatus.country_code == JournalEntry.country_code,
                ),
            )
            .where(JournalEntry.user_id == user_id)
        )
        if country_code is not None:
            query = query.where(JournalEntry.country_code == country_code)
        query = query.order_by(desc(JournalEntry.created_at), desc(JournalEntry.id))

        try:
            result = await db.execute(query)
            rows: List[Tuple[JournalEntry, Optional[str]]] = list(result.tuples().all())
        except SQLAlchemyError as e:
            logger.error(
                "Database error listing entries for user %d: %s", user_id, str(e), exc_info=True
            )
            raise DatabaseError(context={"user_id": user_id, "country_code": country_code})

        return [self._to_response(entry, country_status) for entry, country_status in rows]

    async def _upsert_status(
        self,
        db: AsyncSession,
        user_id: int,
        country_code: str,
        country_name: str,
        visit_status: str,
        now: datetime,
    ) -> None:
        """
        INSERT ... ON CONFLICT (user_id, country_code) DO UPDATE.

        A single statement: concurrent writes of the same country both succeed
        and the last one wins.
        """
        dialect = db.get_bind().dialect.name
        insert_ = UPSERT_INSERTS.get(dialect)
        if insert_ is None:
            raise DatabaseError(context={"reason": f"no upsert support for {dialect}"})

        stmt = insert_(CountryStatus).values(
            country_code=country_code,
            country_name=country_name,
            visit_status=visit_status,
            updated_at=now,
            user_id=user_id,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CountryStatus.user_id, CountryStatus.country_code],
            set_={
                "country_name": stmt.excluded.country_name,
                "visit_status": stmt.excluded.visit_status,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await db.execute(stmt)

    async def _find_status(
        self, db: AsyncSession, user_id: int, country_code: str
    ) -> Optional[CountryStatus]:
        # populate_existing: the upsert bypasses the identity map
        result = await db.execute(
            select(CountryStatus)
            .where(
                CountryStatus.user_id == user_id,
                CountryStatus.country_code == country_code,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _find_owned_entry(
        self, db: AsyncSession, user_id: int, entry_id: int
    ) -> Optional[JournalEntry]:
        result = await db.execute(
            select(JournalEntry).where(
                JournalEntry.id == entry_id,
                JournalEntry.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_response(
        entry: JournalEntry, country_visit_status: Optional[str]
    ) -> JournalEntryResponse:
        return JournalEntryResponse(
            id=entry.id,
            country_code=entry.country_code,
            country_name=entry.country_name,
            entry=entry.entry,
            visit_status=country_visit_status or entry.visit_status,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            user_id=entry.user_id,
        )


journal_service = JournalService()
