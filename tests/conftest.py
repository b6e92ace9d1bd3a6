"""
Travel Journal Backend — Test Configuration (conftest.py)
===========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    ├── db_engine: in-memory SQLite (StaticPool) with all tables created
    ├── session_factory / db_session: sessions bound to that engine
    ├── clock: FakeClock injected into the country directory
    ├── upstream: UpstreamStub behind httpx.MockTransport
    ├── country_directory: CountryDirectory wired to clock + upstream
    ├── app: fresh FastAPI app with DB and directory dependencies overridden
    └── test_client: HTTPX AsyncClient talking to `app` in-process
"""

import os

# Override settings BEFORE any application import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from typing import List  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from travel_journal.database import get_db_session, init_models  # noqa: E402
from travel_journal.dependencies import get_country_directory  # noqa: E402
from travel_journal.main import create_app  # noqa: E402
from travel_journal.services.country_service import CountryDirectory  # noqa: E402
from travel_journal.services.user_service import user_service  # noqa: E402

UPSTREAM_BASE = "https://restcountries.test/v3.1"

SAMPLE_COUNTRIES = [
    {
        "name": {"common": "Finland", "official": "Republic of Finland"},
        "cca2": "FI",
        "cca3": "FIN",
        "flag": "\U0001F1EB\U0001F1EE",
        "capital": ["Helsinki"],
        "population": 5530719,
        "region": "Europe",
        "languages": {"fin": "Finnish", "swe": "Swedish"},
    },
    {
        "name": {"common": "Sweden", "official": "Kingdom of Sweden"},
        "cca2": "SE",
        "cca3": "SWE",
        "flag": "\U0001F1F8\U0001F1EA",
        "capital": ["Stockholm"],
        "population": 10353442,
        "region": "Europe",
        "languages": {"swe": "Swedish"},
    },
]


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """
    Stand-in for the REST Countries API.

    Records every request path. Switches:
        fail_list:    raise a transport error on /all
        list_status:  HTTP status for /all (200 returns SAMPLE_COUNTRIES)
    Per-country: known codes answer a one-element list, unknown codes 404,
    the code TIMEOUT raises a read timeout.
    """

    def __init__(self):
        self.paths: List[str] = []
        self.fail_list = False
        self.list_status = 200
        self.countries = list(SAMPLE_COUNTRIES)

    def list_calls(self) -> int:
        return sum(1 for p in self.paths if p.endswith("/all"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.paths.append(path)

        if path.endswith("/all"):
            if self.fail_list:
                raise httpx.ConnectError("connection refused", request=request)
            if self.list_status != 200:
                return httpx.Response(self.list_status, json={"message": "upstream broke"})
            return httpx.Response(200, json=self.countries)

        if "/alpha/" in path:
            code = path.rsplit("/", 1)[-1].upper()
            if code == "TIMEOUT":
                raise httpx.ReadTimeout("upstream too slow", request=request)
            matches = [c for c in self.countries if code in (c["cca2"], c["cca3"])]
            if not matches:
                return httpx.Response(404, json={"status": 404, "message": "Not Found"})
            return httpx.Response(200, json=matches)

        return httpx.Response(404, json={"status": 404, "message": "Not Found"})


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A session for service-level tests; nothing is committed."""
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Country Directory Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def country_directory(clock, upstream):
    return CountryDirectory(
        base_url=UPSTREAM_BASE,
        fields="name,cca2,cca3,flag",
        ttl=3600,
        timeout=5.0,
        clock=clock,
        transport=httpx.MockTransport(upstream.handler),
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def app(session_factory, country_directory):
    """
    Fresh application wired to the test database and country stub.

    The demo account is seeded first, so it holds id 1 like on a fresh
    production database.
    """
    async with session_factory() as session:
        async with session.begin():
            await user_service.ensure_demo_user(session)

    application = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    application.dependency_overrides[get_country_directory] = lambda: country_directory
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def demo_headers():
    return {"Authorization": "Bearer demo-token"}
