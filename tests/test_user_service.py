"""
Travel Journal Backend — User Service Unit Tests
===================================================

What:  Tests for registration, login, profile lookup and demo seeding.
How:   Real in-memory database; bcrypt runs with the low work factor set in
       conftest.py.

What we test:
    ✅ Password hashing round trip (including passwords over 72 bytes)
    ✅ Register → login → profile
    ✅ Duplicate username or email rejected
    ✅ Missing fields and bad credentials give the client-facing messages
    ✅ Demo user seeding is idempotent and takes id 1
"""

import pytest
from sqlalchemy import func, select

from travel_journal.exceptions import AuthenticationError, NotFoundError, ValidationError
from travel_journal.models.user import User
from travel_journal.services.token_service import DemoTokenVerifier
from travel_journal.services.user_service import (
    UserService,
    check_password,
    hash_password,
)


class TestPasswordHashing:
    """Tests for hash_password / check_password."""

    def test_round_trip(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert check_password("correct horse", hashed)
        assert not check_password("wrong horse", hashed)

    def test_long_passwords_differ_after_72_bytes(self):
        """The SHA-256 prehash keeps bytes past bcrypt's 72-byte limit significant."""
        base = "x" * 80
        hashed = hash_password(base + "a")
        assert check_password(base + "a", hashed)
        assert not check_password(base + "b", hashed)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")


class TestRegisterAndLogin:
    """Tests for register, login and get_user."""

    def setup_method(self):
        self.service = UserService(verifier=DemoTokenVerifier())

    @pytest.mark.asyncio
    async def test_register_then_login(self, db_session):
        await self.service.ensure_demo_user(db_session)

        registered = await self.service.register(db_session, "alice", "alice@example.com", "pw")
        assert registered.user.username == "alice"
        assert registered.user.id == 2
        assert registered.token == "token-2"

        logged_in = await self.service.login(db_session, "alice", "pw")
        assert logged_in.user.id == registered.user.id
        assert logged_in.token == "token-2"

    @pytest.mark.asyncio
    async def test_password_not_stored_in_clear(self, db_session):
        await self.service.register(db_session, "bob", "bob@example.com", "hunter2")

        result = await db_session.execute(select(User).where(User.username == "bob"))
        user = result.scalar_one()
        assert user.password_hash != "hunter2"
        assert check_password("hunter2", user.password_hash)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email,password",
        [(None, "a@b.c", "pw"), ("a", None, "pw"), ("a", "a@b.c", None), ("", "a@b.c", "pw")],
    )
    async def test_register_missing_field(self, db_session, username, email, password):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, username, email, password)
        assert exc_info.value.message == "All fields are required"

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, db_session):
        await self.service.register(db_session, "carol", "carol@example.com", "pw")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, "carol", "other@example.com", "pw")
        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, db_session):
        await self.service.register(db_session, "dave", "shared@example.com", "pw")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.register(db_session, "erin", "shared@example.com", "pw")
        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, db_session):
        await self.service.register(db_session, "frank", "frank@example.com", "right")

        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.login(db_session, "frank", "wrong")
        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, db_session):
        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.login(db_session, "nobody", "pw")
        assert exc_info.value.message == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_login_missing_password(self, db_session):
        with pytest.raises(AuthenticationError):
            await self.service.login(db_session, "frank", None)

    @pytest.mark.asyncio
    async def test_get_user(self, db_session):
        registered = await self.service.register(db_session, "gina", "gina@example.com", "pw")

        user = await self.service.get_user(db_session, registered.user.id)
        assert user.email == "gina@example.com"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_user(db_session, 404)
        assert exc_info.value.message == "User not found"


class TestDemoUserSeeding:
    """Tests for ensure_demo_user."""

    def setup_method(self):
        self.service = UserService(verifier=DemoTokenVerifier())

    @pytest.mark.asyncio
    async def test_seeds_demo_user_as_id_one(self, db_session):
        await self.service.ensure_demo_user(db_session)

        auth = await self.service.login(db_session, "demo", "demo")
        assert auth.user.id == 1
        assert auth.token == "demo-token"

    @pytest.mark.asyncio
    async def test_idempotent(self, db_session):
        await self.service.ensure_demo_user(db_session)
        await self.service.ensure_demo_user(db_session)

        result = await db_session.execute(select(func.count()).select_from(User))
        assert result.scalar_one() == 1
