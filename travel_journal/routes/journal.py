"""
Travel Journal Backend — Journal Route Handlers
=================================================

What:  REST surface over JournalService.
Who:   Called by the map views, country panel, journal list and profile page.

Every route requires a bearer token. Ownership is enforced in the service by
scoping each query to the caller's id, so an entry that belongs to someone
else answers exactly like one that does not exist (404).
Entry ids arrive as strings; one that is not a positive integer (or is too
large for the id column) is also answered with 404.

Wire format is camelCase (countryCode, visitStatus, createdAt, ...); the
schemas translate to and from the snake_case storage names.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from travel_journal.database import get_db_session
from travel_journal.dependencies import get_current_user_id, get_journal_service
from travel_journal.schemas.common import ErrorResponse
from travel_journal.schemas.journal import (
    CountryStatusResponse,
    JournalEntryCreate,
    JournalEntryResponse,
    JournalEntryUpdate,
    JournalWriteResponse,
    TravelStatsResponse,
)
from travel_journal.services.journal_service import JournalService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/journal",
    tags=["Journal"],
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
)


@router.get(
    "",
    response_model=List[JournalEntryResponse],
    summary="List the caller's journal entries, newest first",
)
async def list_entries(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> List[JournalEntryResponse]:
    return await service.list_entries(db, user_id)


@router.get(
    "/country/{country_code}",
    response_model=List[JournalEntryResponse],
    summary="List the caller's entries for one country",
)
async def list_entries_for_country(
    country_code: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> List[JournalEntryResponse]:
    return await service.list_entries_for_country(db, user_id, country_code)


@router.get(
    "/status/{country_code}",
    response_model=CountryStatusResponse,
    response_model_exclude_none=True,
    summary="Current visit status of a country",
    description="Countries never written answer with visitStatus 'not-visited'.",
)
async def get_status(
    country_code: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> CountryStatusResponse:
    return await service.get_status(db, user_id, country_code)


@router.get(
    "/stats",
    response_model=TravelStatsResponse,
    summary="Travel statistics for the profile page",
)
async def get_stats(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> TravelStatsResponse:
    return await service.get_stats(db, user_id)


@router.post(
    "",
    status_code=201,
    response_model=JournalWriteResponse,
    response_model_exclude_none=True,
    responses={400: {"description": "Missing countryCode/countryName", "model": ErrorResponse}},
    summary="Set a country's status and optionally add a journal entry",
    description=(
        "Always upserts the country status. When `entry` has text a journal entry "
        "is created too and the response carries its `id`; otherwise the response "
        "has no `id`."
    ),
)
async def create_entry(
    body: JournalEntryCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> JournalWriteResponse:
    return await service.upsert_entry(
        db,
        user_id,
        country_code=body.country_code,
        country_name=body.country_name,
        entry=body.entry,
        visit_status=body.visit_status,
    )


@router.put(
    "/{entry_id}",
    response_model=JournalEntryResponse,
    responses={404: {"description": "Entry not found or access denied", "model": ErrorResponse}},
    summary="Partially update a journal entry",
)
async def update_entry(
    entry_id: str,
    body: JournalEntryUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> JournalEntryResponse:
    return await service.update_entry(
        db,
        user_id,
        entry_id,
        entry=body.entry,
        visit_status=body.visit_status,
    )


@router.delete(
    "/{entry_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Entry not found or access denied", "model": ErrorResponse}},
    summary="Delete a journal entry",
)
async def delete_entry(
    entry_id: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
    service: JournalService = Depends(get_journal_service),
) -> Response:
    await service.delete_entry(db, user_id, entry_id)
    return Response(status_code=204)
