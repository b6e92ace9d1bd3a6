"""
Travel Journal Backend — Request Dependencies (Authentication Gate)
=====================================================================

What:  FastAPI dependencies that resolve the caller and hand out services.
Why:   Routes declare what they need (`user_id: int = Depends(get_current_user_id)`)
       and tests swap any piece through app.dependency_overrides.

Authentication Gate:
    get_current_user_id   — required mode. Missing header or a scheme other
                            than Bearer → 401 "No token provided"; otherwise
                            the CredentialVerifier decides ("Invalid token",
                            "Invalid token format").
    get_optional_user_id  — optional mode. Never rejects; returns None when
                            no valid token is present.
Both store the resolved id on request.state.user_id for the access log.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from travel_journal.exceptions import AuthenticationError
from travel_journal.services.country_service import CountryDirectory, country_directory
from travel_journal.services.journal_service import JournalService, journal_service
from travel_journal.services.token_service import token_verifier
from travel_journal.services.user_service import UserService, user_service
from travel_journal.services.verifier_base import CredentialVerifier

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_credential_verifier() -> CredentialVerifier:
    return token_verifier


def get_journal_service() -> JournalService:
    return journal_service


def get_user_service() -> UserService:
    return user_service


def get_country_directory() -> CountryDirectory:
    return country_directory


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token part of "Bearer <token>", or None for a missing/non-Bearer header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization.split(" ")[1]


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> int:
    """Resolve the caller or reject the request with 401."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationError(message="No token provided")

    user_id = verifier.verify(token)
    request.state.user_id = user_id
    return user_id


async def get_optional_user_id(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> Optional[int]:
    """Resolve the caller if a valid token is present; otherwise None."""
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    try:
        user_id = verifier.verify(token)
    except AuthenticationError as e:
        logger.debug("Ignoring unusable token on optional route: %s", e.message)
        return None

    request.state.user_id = user_id
    return user_id
