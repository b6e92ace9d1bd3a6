"""
Travel Journal Backend — Journal Request/Response Schemas
===========================================================

What:  API contracts for /api/journal.
Why:   Requests are parsed leniently (every field optional) so the service can
       answer missing countryCode/countryName with its own 400 message rather
       than a framework-generated one.
"""

from typing import Optional

from pydantic import Field

from travel_journal.schemas.common import CamelModel, UTCDateTime


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class JournalEntryCreate(CamelModel):
    """Body of POST /journal. Blank `entry` means a status-only update."""
    country_code: Optional[str] = None
    country_name: Optional[str] = None
    entry: Optional[str] = None
    visit_status: Optional[str] = None


class JournalEntryUpdate(CamelModel):
    """Body of PUT /journal/{id}. Omitted fields keep their stored value."""
    entry: Optional[str] = None
    visit_status: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class JournalEntryResponse(CamelModel):
    """
    A journal entry as the client sees it.

    visit_status is the country's current status when one is recorded,
    otherwise the status stored on the entry itself.
    """
    id: int
    country_code: str
    country_name: str
    entry: Optional[str] = None
    visit_status: str
    created_at: UTCDateTime
    updated_at: UTCDateTime
    user_id: int


class JournalWriteResponse(CamelModel):
    """
    Result of POST /journal.

    Two shapes share this model and are told apart by `id`:
        - entry created:      id, countryCode, countryName, entry, visitStatus,
                              createdAt, updatedAt, userId
        - status-only update: countryCode, countryName, visitStatus, updatedAt,
                              message
    The route serializes with exclude_none so the status-only shape has no `id`.
    """
    id: Optional[int] = None
    country_code: str
    country_name: str
    entry: Optional[str] = None
    visit_status: str
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None
    user_id: Optional[int] = None
    message: Optional[str] = None


class CountryStatusResponse(CamelModel):
    """
    Current status of one country. For a country never written this is the
    synthesized default {countryCode, visitStatus: "not-visited"}.
    """
    country_code: str
    country_name: Optional[str] = None
    visit_status: str
    updated_at: Optional[UTCDateTime] = None


class TravelStatsResponse(CamelModel):
    """Profile page numbers, computed with status precedence applied."""
    total_entries: int = Field(description="Number of journal entries")
    countries_visited: int = Field(description="Distinct countries marked visited")
    countries_want_to_visit: int = Field(description="Distinct countries marked want-to-visit")
    total_countries: int = Field(description="Denominator for world coverage")
    world_coverage: int = Field(description="Visited share of all countries, percent")
