"""
Travel Journal Backend — Abstract Credential Verifier Interface
=================================================================

What:  Abstract base class for turning an opaque bearer credential into a
       user id.
Why:   The journal routes only ever need "who is calling". Keeping that behind
       an interface lets a real token/session mechanism replace the demo
       scheme without touching any route or service.
How:   Concrete implementations inherit from CredentialVerifier and implement
       verify() and issue(). The authentication gate (dependencies.py) calls
       verify(); login/register call issue().
"""

from abc import ABC, abstractmethod


class CredentialVerifier(ABC):
    """
    Contract:
        - verify() accepts the token string from "Authorization: Bearer <token>"
          and returns a positive integer user id
        - verify() raises AuthenticationError for anything it does not accept;
          the error message is what the client sees
        - issue() returns a token that verify() maps back to the same user id
    """

    @abstractmethod
    def verify(self, token: str) -> int:
        """
        Resolve a bearer token to a user id.

        Raises:
            AuthenticationError: the token is unknown or malformed.
        """
        ...

    @abstractmethod
    def issue(self, user_id: int) -> str:
        """Produce a bearer token for an authenticated user."""
        ...
