"""
Travel Journal Backend — Shared Pydantic Schemas
==================================================

What:  Base model with the snake_case → camelCase wire translation, plus the
       error and health response contracts used by every router.
Why:   Storage and Python code use snake_case; the browser client speaks
       camelCase. The alias generator does the translation in both directions
       (request bodies are parsed by alias, responses are dumped by alias).
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _assume_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_assume_utc)]


class CamelModel(BaseModel):
    """Base for every API model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Human-readable message the client displays (e.g. "Invalid token")
        code: Machine-readable error code (e.g. "authentication_error")
        details: Optional extra context (e.g. which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="OK or DEGRADED")
    message: str = Field(description="Human-readable status line")
    timestamp: datetime = Field(description="Server time of the check (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
