"""
Travel Journal Backend — Auth Request/Response Schemas
========================================================

Login/register bodies are all-optional for the same reason as the journal
bodies: the service decides which 400/401 message a missing field gets.
The user model never carries the password.
"""

from typing import Optional

from travel_journal.schemas.common import CamelModel, UTCDateTime


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(CamelModel):
    """Public view of an account."""
    id: int
    username: str
    email: str
    created_at: Optional[UTCDateTime] = None


class AuthResponse(CamelModel):
    """Result of login and register: the account plus its bearer token."""
    user: UserResponse
    token: str
