"""Tests for creature records, the HTTP lookup client, cache and prefetch."""

import asyncio
import random
from unittest.mock import AsyncMock

import aiohttp
import pytest

from conftest import make_creature
from core.creature import CreatureRecord, total_score
from core.errors import FetchError
from core.lookup import (
    CachedLookup,
    CreatureCache,
    CreatureLookup,
    PokeApiLookup,
    prefetch,
    random_creature_id,
)
from settings import CREATURE_ID_MAX, CREATURE_ID_MIN

PIKACHU = {
    "id": 25,
    "name": "pikachu",
    "sprites": {"front_default": "https://sprites.example/25.png"},
    "stats": [
        {"base_stat": 35, "stat": {"name": "hp"}},
        {"base_stat": 55, "stat": {"name": "attack"}},
        {"base_stat": 40, "stat": {"name": "defense"}},
        {"base_stat": 50, "stat": {"name": "special-attack"}},
        {"base_stat": 50, "stat": {"name": "special-defense"}},
        {"base_stat": 90, "stat": {"name": "speed"}},
    ],
    "types": [{"slot": 1, "type": {"name": "electric"}}],
}


class FakeResponse:
    def __init__(self, status=200, payload=None, body=b"", error=None, json_error=None):
        self.status = status
        self._payload = payload
        self._body = body
        self._error = error
        self._json_error = json_error

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    async def read(self):
        return self._body


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        return self.response


class TestCreatureRecord:
    """Tests for payload decoding and total score."""

    def test_from_payload(self):
        record = CreatureRecord.from_payload(PIKACHU)
        assert record.id == 25
        assert record.name == "pikachu"
        assert record.image_ref == "https://sprites.example/25.png"
        assert record.attributes[0] == ("hp", 35)
        assert record.types == ("electric",)

    def test_total_score(self):
        assert total_score(CreatureRecord.from_payload(PIKACHU)) == 320

    def test_attribute_order_preserved(self):
        record = CreatureRecord.from_payload(PIKACHU)
        assert [name for name, _ in record.attributes][-1] == "speed"

    def test_missing_sprite_allowed(self):
        payload = dict(PIKACHU, sprites={"front_default": None})
        assert CreatureRecord.from_payload(payload).image_ref is None

    def test_missing_stats_is_fetch_error(self):
        payload = {k: v for k, v in PIKACHU.items() if k != "stats"}
        with pytest.raises(FetchError) as exc_info:
            CreatureRecord.from_payload(payload)
        assert exc_info.value.creature_id == 25

    def test_negative_stat_is_fetch_error(self):
        payload = dict(PIKACHU, stats=[{"base_stat": -1, "stat": {"name": "hp"}}])
        with pytest.raises(FetchError):
            CreatureRecord.from_payload(payload)

    def test_non_dict_payload_is_fetch_error(self):
        with pytest.raises(FetchError):
            CreatureRecord.from_payload(["not", "a", "creature"])

    def test_display_name(self):
        assert make_creature(1, 10, name="mr-mime").display_name == "Mr Mime"


class TestRandomCreatureId:
    """Tests for identifier sampling."""

    def test_in_range(self):
        rng = random.Random(3)
        ids = [random_creature_id(rng) for _ in range(2000)]
        assert min(ids) >= CREATURE_ID_MIN
        assert max(ids) <= CREATURE_ID_MAX

    @pytest.mark.parametrize("exclude", [CREATURE_ID_MIN, 450, CREATURE_ID_MAX])
    def test_excluded_id_never_drawn(self, exclude):
        rng = random.Random(5)
        ids = [random_creature_id(rng, exclude=exclude) for _ in range(3000)]
        assert exclude not in ids
        assert all(CREATURE_ID_MIN <= i <= CREATURE_ID_MAX for i in ids)


class TestPokeApiLookup:
    """Tests for the aiohttp client using a fake session."""

    def test_conforms_to_protocol(self):
        assert isinstance(PokeApiLookup(session=FakeSession(FakeResponse())), CreatureLookup)

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        session = FakeSession(FakeResponse(payload=PIKACHU))
        lookup = PokeApiLookup(base_url="https://api.example/pokemon/", session=session)

        record = await lookup.fetch_creature(25)

        assert record.name == "pikachu"
        assert session.urls == ["https://api.example/pokemon/25"]

    @pytest.mark.asyncio
    async def test_non_200_raises(self):
        lookup = PokeApiLookup(session=FakeSession(FakeResponse(status=404)))
        with pytest.raises(FetchError) as exc_info:
            await lookup.fetch_creature(9999)
        assert exc_info.value.status == 404
        assert exc_info.value.creature_id == 9999

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self):
        error = aiohttp.ClientConnectionError("refused")
        lookup = PokeApiLookup(session=FakeSession(FakeResponse(error=error)))
        with pytest.raises(FetchError) as exc_info:
            await lookup.fetch_creature(1)
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        lookup = PokeApiLookup(session=FakeSession(FakeResponse(error=asyncio.TimeoutError())))
        with pytest.raises(FetchError):
            await lookup.fetch_creature(1)

    @pytest.mark.asyncio
    async def test_bad_json_wrapped(self):
        response = FakeResponse(json_error=ValueError("not json"))
        lookup = PokeApiLookup(session=FakeSession(response))
        with pytest.raises(FetchError):
            await lookup.fetch_creature(1)

    @pytest.mark.asyncio
    async def test_fetch_image(self):
        lookup = PokeApiLookup(session=FakeSession(FakeResponse(body=b"\x89PNG")))
        assert await lookup.fetch_image("https://sprites.example/1.png") == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_fetch_image_error(self):
        lookup = PokeApiLookup(session=FakeSession(FakeResponse(status=500)))
        with pytest.raises(FetchError):
            await lookup.fetch_image("https://sprites.example/1.png")

    @pytest.mark.asyncio
    async def test_close_leaves_injected_session_open(self):
        session = FakeSession(FakeResponse())
        session.close = AsyncMock()
        lookup = PokeApiLookup(session=session)

        await lookup.close()

        session.close.assert_not_awaited()


class TestCreatureCache:
    """Tests for the append-only cache."""

    def test_put_and_get(self):
        cache = CreatureCache()
        record = make_creature(7, 300)
        cache.put(record)
        assert cache.get(7) is record
        assert 7 in cache
        assert len(cache) == 1

    def test_first_write_wins(self):
        cache = CreatureCache()
        first = make_creature(7, 300)
        cache.put(first)
        cache.put(make_creature(7, 300))
        assert cache.get(7) is first

    def test_miss_returns_none(self):
        assert CreatureCache().get(1) is None


class TestCachedLookup:
    """Tests for the read-through wrapper."""

    @pytest.mark.asyncio
    async def test_miss_fetches_and_caches(self):
        inner = AsyncMock()
        inner.fetch_creature.return_value = make_creature(4, 200)
        cache = CreatureCache()
        lookup = CachedLookup(inner, cache)

        first = await lookup.fetch_creature(4)
        second = await lookup.fetch_creature(4)

        assert first is second
        inner.fetch_creature.assert_awaited_once_with(4)
        assert 4 in cache

    @pytest.mark.asyncio
    async def test_errors_not_cached(self):
        inner = AsyncMock()
        inner.fetch_creature.side_effect = FetchError("down", creature_id=4)
        cache = CreatureCache()
        lookup = CachedLookup(inner, cache)

        with pytest.raises(FetchError):
            await lookup.fetch_creature(4)
        assert len(cache) == 0


class FlakyLookup:
    """Fails for even identifiers."""

    async def fetch_creature(self, creature_id):
        if creature_id % 2 == 0:
            raise FetchError("even ids are down", creature_id=creature_id)
        return make_creature(creature_id, 300)


class TestPrefetch:
    """Tests for cache warming."""

    @pytest.mark.asyncio
    async def test_fills_cache(self):
        cache = CreatureCache()
        fetched = await prefetch(CachedLookup(FlakyLookup(), cache), count=0)
        assert fetched == 0

        rng = random.Random(11)
        fetched = await prefetch(CachedLookup(FlakyLookup(), cache), count=20, rng=rng)

        assert fetched == len(cache)
        assert all(creature_id % 2 == 1 for creature_id in cache._records)

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self):
        inner = AsyncMock()
        inner.fetch_creature.side_effect = FetchError("down")
        cache = CreatureCache()

        fetched = await prefetch(CachedLookup(inner, cache), count=5, rng=random.Random(1))

        assert fetched == 0
        assert len(cache) == 0
        assert inner.fetch_creature.await_count >= 1
