"""
Travel Journal Backend — Country Directory Route Handlers
===========================================================

What:  Public proxy to the REST Countries API.
Who:   Map renderers (full list) and the country detail panel (single country).

Caching Strategy:
    - GET /api/countries: served from the CountryDirectory cache (1 hour)
    - GET /api/countries/{code}: always fetched upstream
Both routes accept an optional bearer token; it only tags the access log.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends

from travel_journal.dependencies import get_country_directory, get_optional_user_id
from travel_journal.schemas.common import ErrorResponse
from travel_journal.services.country_service import CountryDirectory

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/countries",
    tags=["Countries"],
    responses={500: {"description": "Upstream failure", "model": ErrorResponse}},
)


@router.get("", summary="All countries (cached)")
async def list_countries(
    user_id: Optional[int] = Depends(get_optional_user_id),
    directory: CountryDirectory = Depends(get_country_directory),
) -> List[Any]:
    return await directory.list_countries()


@router.get(
    "/{code}",
    responses={404: {"description": "Country not found", "model": ErrorResponse}},
    summary="One country by ISO code",
)
async def get_country(
    code: str,
    user_id: Optional[int] = Depends(get_optional_user_id),
    directory: CountryDirectory = Depends(get_country_directory),
) -> Any:
    return await directory.get_country(code)
