"""
Travel Journal Backend — User Service
=======================================

What:  Account registration, login and profile lookup.
Why:   Keeps credential checks and the users table out of the route layer.
How:   Passwords are stored as bcrypt hashes of their SHA-256 hex digest
       (the prehash sidesteps bcrypt's 72-byte input limit). Tokens come from
       the configured CredentialVerifier, so every token handed out here is one
       the authentication gate accepts.

Error messages match what the browser client displays:
    login    → 401 "Invalid credentials" (unknown user, wrong or missing password)
    register → 400 "All fields are required" / "User already exists"
    profile  → 404 "User not found"
"""

import hashlib
import logging
from typing import Optional

import bcrypt
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from travel_journal.config import settings
from travel_journal.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from travel_journal.models.user import User
from travel_journal.schemas.auth import AuthResponse, UserResponse
from travel_journal.services.token_service import token_verifier
from travel_journal.services.verifier_base import CredentialVerifier

logger = logging.getLogger(__name__)


def _pw_bytes(password: str) -> bytes:
    return hashlib.sha256(password.encode("utf-8")).hexdigest().encode("utf-8")


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_pw_bytes(password), salt).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(_pw_bytes(password), password_hash.encode("utf-8"))


class UserService:
    """
    Business logic for accounts.

    Stateless apart from the verifier used to mint tokens; the database
    session is passed to every call.
    """

    def __init__(self, verifier: CredentialVerifier = token_verifier):
        self.verifier = verifier

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> AuthResponse:
        """
        Check a username/password pair and return the user with a token.

        Raises:
            AuthenticationError: missing field, unknown user or wrong password
            DatabaseError: lookup failed
        """
        if not username or not password:
            raise AuthenticationError(message="Invalid credentials")

        try:
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login for %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "login"})

        if user is None or not check_password(password, user.password_hash):
            logger.info("Failed login for username %r", username)
            raise AuthenticationError(message="Invalid credentials")

        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=self.verifier.issue(user.id),
        )

    async def register(
        self,
        db: AsyncSession,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> AuthResponse:
        """
        Create an account; username and email must both be unused.

        Raises:
            ValidationError: a field is missing or the user already exists
            DatabaseError: insert failed for another reason
        """
        if not username or not email or not password:
            raise ValidationError(message="All fields are required")

        try:
            result = await db.execute(
                select(User.id).where(or_(User.username == username, User.email == email))
            )
            if result.first() is not None:
                raise ValidationError(
                    message="User already exists",
                    context={"username": username},
                )

            user = User(
                username=username,
                email=email,
                password_hash=hash_password(password),
            )
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name
            raise ValidationError(message="User already exists", context={"username": username})
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "register"})

        logger.info("Registered user %d (%s)", user.id, username)
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=self.verifier.issue(user.id),
        )

    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        """Public record of the account behind a user id."""
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %d: %s", user_id, str(e))
            raise DatabaseError(context={"user_id": user_id})

        if user is None:
            raise NotFoundError(
                message="User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return UserResponse.model_validate(user)

    async def ensure_demo_user(self, db: AsyncSession) -> None:
        """
        Seed the demo account if it does not exist yet.

        When:  Application startup, before any registration can happen, so on
               a fresh database the demo account takes id 1.
        """
        result = await db.execute(
            select(User).where(User.username == settings.demo_username)
        )
        if result.scalar_one_or_none() is not None:
            return

        user = User(
            username=settings.demo_username,
            email=settings.demo_email,
            password_hash=hash_password(settings.demo_password),
        )
        db.add(user)
        await db.flush()

        if user.id != settings.demo_user_id:
            logger.warning(
                "Demo user seeded with id %d, expected %d; %r will not map to it",
                user.id,
                settings.demo_user_id,
                settings.demo_token,
            )
        else:
            logger.info("Seeded demo user (id=%d)", user.id)


user_service = UserService()
