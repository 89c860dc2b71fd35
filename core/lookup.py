"""
core/lookup.py — Creature lookup service client and cache for StatClash.

The lookup service is a black box: give it an identifier in
[CREATURE_ID_MIN, CREATURE_ID_MAX], get a CreatureRecord back or a
FetchError. Three pieces live here:

    PokeApiLookup  — aiohttp client for the public API
    CreatureCache  — process-wide, append-only record cache
    CachedLookup   — lookup wrapper that reads through the cache

plus prefetch(), which warms the cache with random records while the
player sits on the menu. Prefetching is best effort: every cache miss
falls through to a direct fetch.

Usage:
    cache  = CreatureCache()
    lookup = CachedLookup(PokeApiLookup(), cache)
    record = await lookup.fetch_creature(25)
    await prefetch(lookup)
"""

from __future__ import annotations
import asyncio
import logging
import random
from typing import Protocol, runtime_checkable

import aiohttp

from core.creature import CreatureRecord
from core.errors import FetchError
from settings import (
    API_BASE_URL,
    FETCH_TIMEOUT_S,
    CREATURE_ID_MIN,
    CREATURE_ID_MAX,
    PREFETCH_COUNT,
    PREFETCH_CONCURRENCY,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class CreatureLookup(Protocol):
    """Anything that can turn an identifier into a CreatureRecord."""

    async def fetch_creature(self, creature_id: int) -> CreatureRecord:
        """Return the record for creature_id or raise FetchError."""
        ...


def random_creature_id(rng: random.Random, exclude: int | None = None) -> int:
    """Draw a uniformly random identifier from the configured range.

    Args:
        rng:     Random source.
        exclude: Identifier that must not be returned, e.g. the first
                 candidate of a round.

    Returns:
        An identifier in [CREATURE_ID_MIN, CREATURE_ID_MAX], != exclude.
    """
    if exclude is None:
        return rng.randint(CREATURE_ID_MIN, CREATURE_ID_MAX)
    # Draw from a range one shorter and skip over the excluded id.
    creature_id = rng.randint(CREATURE_ID_MIN, CREATURE_ID_MAX - 1)
    if creature_id >= exclude:
        creature_id += 1
    return creature_id


# ── HTTP client ───────────────────────────────────────────────────────────────

class PokeApiLookup:
    """Fetches creature records from the public PokeAPI.

    The aiohttp session is created lazily on first use so the object can be
    built before an event loop is running. Call close() on shutdown.

    Attributes:
        _base_url: Endpoint prefix; the creature id is appended.
        _timeout:  Total request timeout in seconds.
        _session:  Shared aiohttp.ClientSession, or None until first fetch.
        _owns_session: True if close() should close the session.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = FETCH_TIMEOUT_S,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def fetch_creature(self, creature_id: int) -> CreatureRecord:
        """Fetch and decode one creature.

        Args:
            creature_id: Identifier to request.

        Returns:
            The decoded CreatureRecord.

        Raises:
            FetchError: On transport errors, timeouts, non-200 responses or
                        malformed payloads.
        """
        url = f"{self._base_url}/{creature_id}"
        try:
            async with self._get_session().get(
                url, timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as response:
                if response.status != 200:
                    raise FetchError(
                        f"lookup returned {response.status} for creature {creature_id}",
                        creature_id=creature_id,
                        status=response.status,
                    )
                data = await response.json()
        except asyncio.TimeoutError as exc:
            raise FetchError(f"lookup timed out for creature {creature_id}",
                             creature_id=creature_id) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"lookup failed for creature {creature_id}: {exc}",
                             creature_id=creature_id) from exc
        except ValueError as exc:
            # aiohttp raises ContentTypeError / JSONDecodeError on bad bodies
            raise FetchError(f"invalid JSON for creature {creature_id}",
                             creature_id=creature_id) from exc

        record = CreatureRecord.from_payload(data)
        logger.debug("Fetched creature %d (%s)", record.id, record.name)
        return record

    async def fetch_image(self, url: str) -> bytes:
        """Download raw sprite bytes.

        Raises:
            FetchError: On any transport failure or non-200 response.
        """
        try:
            async with self._get_session().get(
                url, timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as response:
                if response.status != 200:
                    raise FetchError(f"sprite request returned {response.status}",
                                     status=response.status)
                return await response.read()
        except asyncio.TimeoutError as exc:
            raise FetchError(f"sprite request timed out: {url}") from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"sprite request failed: {exc}") from exc

    async def close(self) -> None:
        """Close the underlying session if this lookup created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None


# ── Cache ─────────────────────────────────────────────────────────────────────

class CreatureCache:
    """Append-only record cache shared by everything in the process.

    Records for one identifier are immutable, so concurrent inserts of the
    same key are harmless; the first write wins and later ones are ignored.
    Nothing is ever evicted.
    """

    def __init__(self) -> None:
        self._records: dict[int, CreatureRecord] = {}

    def get(self, creature_id: int) -> CreatureRecord | None:
        return self._records.get(creature_id)

    def put(self, record: CreatureRecord) -> None:
        self._records.setdefault(record.id, record)

    def __contains__(self, creature_id: int) -> bool:
        return creature_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class CachedLookup:
    """Read-through cache in front of another CreatureLookup.

    Attributes:
        inner: The lookup used on cache misses.
        cache: The shared CreatureCache.
    """

    def __init__(self, inner: CreatureLookup, cache: CreatureCache) -> None:
        self.inner = inner
        self.cache = cache

    async def fetch_creature(self, creature_id: int) -> CreatureRecord:
        cached = self.cache.get(creature_id)
        if cached is not None:
            return cached
        record = await self.inner.fetch_creature(creature_id)
        self.cache.put(record)
        return record


async def prefetch(
    lookup: CreatureLookup,
    count: int = PREFETCH_COUNT,
    rng: random.Random | None = None,
    concurrency: int = PREFETCH_CONCURRENCY,
) -> int:
    """Warm a cache by fetching `count` random creatures.

    Failures are logged and skipped; this never raises FetchError.

    Args:
        lookup:      Lookup to fetch through, normally a CachedLookup so
                     results land in the shared cache.
        count:       Number of random identifiers to request.
        rng:         Random source. Defaults to a fresh Random().
        concurrency: Maximum requests in flight at once.

    Returns:
        Number of records fetched successfully.
    """
    rng = rng or random.Random()
    ids = {random_creature_id(rng) for _ in range(count)}
    semaphore = asyncio.Semaphore(concurrency)

    async def fetch_one(creature_id: int) -> bool:
        async with semaphore:
            try:
                await lookup.fetch_creature(creature_id)
                return True
            except FetchError as exc:
                logger.debug("Prefetch of creature %d failed: %s", creature_id, exc)
                return False

    results = await asyncio.gather(*(fetch_one(i) for i in sorted(ids)))
    fetched = sum(results)
    logger.info("Prefetched %d/%d creatures", fetched, len(ids))
    return fetched
