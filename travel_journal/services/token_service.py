"""
Travel Journal Backend — Demo Bearer Token Verifier
=====================================================

What:  CredentialVerifier for the demo token scheme.
Why:   Stand-in for real token issuance/verification. Nothing is signed;
       anyone can claim any id. It is kept behind CredentialVerifier so it can
       be swapped out wholesale.

Token grammar:
    "demo-token"        → the demo user (id 1)
    "token-<digits>"    → that id, only if it is in 1..2**63-1 (fits an INTEGER column)
                          ("token-0", "token-abc", "token-12x" are malformed)
    anything else       → rejected
"""

import logging

from travel_journal.config import settings
from travel_journal.database import parse_row_id
from travel_journal.exceptions import AuthenticationError
from travel_journal.services.verifier_base import CredentialVerifier

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "token-"


class DemoTokenVerifier(CredentialVerifier):
    """Maps demo-token and token-<id> strings to user ids."""

    def __init__(self, demo_token: str = "demo-token", demo_user_id: int = 1):
        self.demo_token = demo_token
        self.demo_user_id = demo_user_id

    def verify(self, token: str) -> int:
        if token == self.demo_token:
            return self.demo_user_id

        if not token.startswith(TOKEN_PREFIX):
            raise AuthenticationError(message="Invalid token")

        raw_id = token[len(TOKEN_PREFIX):]
        user_id = parse_row_id(raw_id)
        if user_id is None:
            logger.debug("Rejected malformed token id %r", raw_id)
            raise AuthenticationError(
                message="Invalid token format",
                context={"token_suffix": raw_id[:16]},
            )
        return user_id

    def issue(self, user_id: int) -> str:
        if user_id == self.demo_user_id:
            return self.demo_token
        return f"{TOKEN_PREFIX}{user_id}"


token_verifier = DemoTokenVerifier(
    demo_token=settings.demo_token,
    demo_user_id=settings.demo_user_id,
)
