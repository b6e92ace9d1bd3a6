"""
Travel Journal Backend — Country Directory Proxy
==================================================

What:  Caching pass-through to the REST Countries API (name, flag, capital,
       population, region, languages).
Why:   Every map view needs the full country list; fetching it once an hour
       instead of once per page load keeps the upstream quota and latency
       out of the request path.
How:   One process-scoped CountryCache holds (snapshot, fetched_at). Reads
       inside the freshness window return the snapshot; otherwise the list is
       fetched and the cache replaced, only on success. Per-country lookups
       always go upstream.

Failure mapping:
    list call, any failure         → UpstreamUnavailableError (500)
    per-country, non-2xx status    → NotFoundError "Country not found" (404)
    per-country, transport failure → UpstreamUnavailableError (500)
No retries: a failed request fails; the next one tries again.

Concurrency:
    Refreshes are serialized with an asyncio.Lock and the freshness check is
    repeated under the lock, so concurrent cache misses cause one upstream
    fetch, not one per request.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import httpx

from travel_journal.config import settings
from travel_journal.exceptions import NotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountryCache:
    """Snapshot of the full country list and the clock reading when it was fetched."""

    snapshot: Optional[List[Any]] = None
    fetched_at: Optional[float] = None

    def is_fresh(self, now: float, ttl: float) -> bool:
        if self.snapshot is None or self.fetched_at is None:
            return False
        return now - self.fetched_at < ttl


class CountryDirectory:
    """
    Memoized client for the country reference API.

    Args:
        base_url: REST Countries base, e.g. https://restcountries.com/v3.1
        fields: Field filter for the list call
        ttl: Freshness window in seconds
        timeout: httpx timeout for each upstream call
        clock: Monotonic seconds source; injected in tests
        transport: Optional httpx transport; tests pass httpx.MockTransport
    """

    def __init__(
        self,
        base_url: str,
        fields: str,
        ttl: float = 3600,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.fields = fields
        self.ttl = ttl
        self.timeout = timeout
        self._clock = clock
        self._transport = transport
        self._cache = CountryCache()
        self._refresh_lock = asyncio.Lock()

    @property
    def cache(self) -> CountryCache:
        return self._cache

    def invalidate(self) -> None:
        """
        Test support: drop the cached snapshot so the next list call goes
        upstream. The application itself never calls this.
        """
        self._cache = CountryCache()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def list_countries(self) -> List[Any]:
        """
        The full country list, from cache when fresh.

        Raises:
            UpstreamUnavailableError: the refresh failed (the old snapshot,
                fresh or not, is left in place)
        """
        if self._cache.is_fresh(self._clock(), self.ttl):
            return self._cache.snapshot

        async with self._refresh_lock:
            # Another request may have refreshed while we waited
            if self._cache.is_fresh(self._clock(), self.ttl):
                return self._cache.snapshot

            countries = await self._fetch_all()
            self._cache = CountryCache(snapshot=countries, fetched_at=self._clock())
            logger.info("Country list refreshed: %d countries", len(countries))
            return countries

    async def get_country(self, code: str) -> Any:
        """
        One country by ISO alpha-2/alpha-3 code, fetched directly.

        Raises:
            NotFoundError: upstream answered with a non-success status
            UpstreamUnavailableError: the upstream could not be reached
        """
        try:
            async with self._client() as client:
                response = await client.get(f"/alpha/{code}")
        except httpx.HTTPError as e:
            logger.error("Country lookup %s failed: %s", code, str(e))
            raise UpstreamUnavailableError(
                message="Failed to fetch country data",
                context={"code": code, "error_type": type(e).__name__},
            )

        if not response.is_success:
            raise NotFoundError(
                message="Country not found",
                resource="country",
                resource_id=code,
                context={"upstream_status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError:
            raise UpstreamUnavailableError(
                message="Failed to fetch country data",
                context={"code": code, "reason": "invalid JSON"},
            )

        # /alpha/{code} answers with a one-element list
        if isinstance(data, list):
            if not data:
                raise NotFoundError(message="Country not found", resource="country", resource_id=code)
            return data[0]
        return data

    async def _fetch_all(self) -> List[Any]:
        try:
            async with self._client() as client:
                response = await client.get("/all", params={"fields": self.fields})
        except httpx.HTTPError as e:
            logger.error("Country list fetch failed: %s", str(e))
            raise UpstreamUnavailableError(context={"error_type": type(e).__name__})

        if not response.is_success:
            logger.error("Country list fetch returned HTTP %d", response.status_code)
            raise UpstreamUnavailableError(context={"upstream_status": response.status_code})

        try:
            countries = response.json()
        except ValueError:
            raise UpstreamUnavailableError(context={"reason": "invalid JSON"})

        if not isinstance(countries, list):
            raise UpstreamUnavailableError(context={"reason": "unexpected payload"})
        return countries


country_directory = CountryDirectory(
    base_url=settings.countries_api_url,
    fields=settings.countries_fields,
    ttl=settings.countries_cache_ttl,
    timeout=settings.upstream_timeout,
)
