"""Tests that concurrent callers see serialized registry mutations.

Create inserts only when the code is free and resolve increments only an
active record; both must hold when calls overlap, even across registries.
"""

import asyncio
import pytest

from shortlink.errors import ErrorKind, RegistryError
from shortlink.registry import LinkRegistry
from shortlink.storage.memory import MemoryLinkStore
from shortlink.storage.models import LinkRecord


class YieldingStore(MemoryLinkStore):
    """Store that suspends between every read and write, like a networked store."""

    async def get(self, code):
        await asyncio.sleep(0)
        return await super().get(code)

    async def insert(self, record, replace_expired_at=None):
        await asyncio.sleep(0)
        return await super().insert(record, replace_expired_at)

    async def add_click(self, code, now):
        await asyncio.sleep(0)
        return await super().add_click(code, now)

    async def delete(self, code):
        await asyncio.sleep(0)
        return await super().delete(code)


@pytest.fixture
def registry(logger, clock, short_code_generator):
    """Registry over a yielding store (overrides the plain one)."""
    return LinkRegistry(
        YieldingStore(logger=logger),
        short_code_generator=short_code_generator,
        logger=logger,
        clock=clock,
    )


@pytest.mark.asyncio
class TestConcurrentRegistry:

    async def test_same_custom_code_only_one_wins(self, registry):
        results = await asyncio.gather(*(
            registry.create(f"https://example.com/{i}", "contested", 10)
            for i in range(20)
        ))

        winners = [r for r in results if isinstance(r, LinkRecord)]
        losers = [r for r in results if isinstance(r, RegistryError)]
        assert len(winners) == 1
        assert all(r.kind == ErrorKind.CODE_TAKEN for r in losers)
        assert (await registry.get("contested")) == winners[0]

    async def test_concurrent_generated_codes_unique(self, registry):
        results = await asyncio.gather(*(
            registry.create(f"https://example.com/{i}", None, 10)
            for i in range(50)
        ))

        codes = [r.code for r in results]
        assert len(set(codes)) == 50
        assert len(await registry.list()) == 50

    async def test_resolve_and_delete_race(self, registry):
        record = await registry.create("https://example.com", None, 10)

        results = await asyncio.gather(
            *(registry.resolve(record.code) for _ in range(10)),
            registry.delete(record.code),
            *(registry.resolve(record.code) for _ in range(10)),
        )

        resolutions = results[:10] + results[11:]
        ok = [r for r in resolutions if not isinstance(r, RegistryError)]
        missing = [r for r in resolutions if isinstance(r, RegistryError)]
        # Every click that landed before the delete was counted once
        assert [r.clicks for r in ok] == list(range(1, len(ok) + 1))
        assert all(r.kind == ErrorKind.NOT_FOUND for r in missing)
        assert results[10].code == record.code


@pytest.mark.asyncio
@pytest.mark.asyncio
class TestSharedStore:
    """Separate registries (server, CLI, seed script) over one store."""

    @pytest.fixture
    def registries(self, logger, clock):
        store = YieldingStore(logger=logger)
        return [
            LinkRegistry(store, logger=logger, clock=clock, allow_expired_code_reuse=True)
            for _ in range(2)
        ]

    async def test_same_custom_code_only_one_wins(self, registries):
        first, second = registries

        results = await asyncio.gather(
            first.create("https://a.com", "shared", 10),
            second.create("https://b.com", "shared", 10),
        )

        winners = [r for r in results if isinstance(r, LinkRecord)]
        assert len(winners) == 1
        assert [r.kind for r in results if isinstance(r, RegistryError)] == [ErrorKind.CODE_TAKEN]
        assert (await first.get("shared")) == winners[0]
        assert (await second.get("shared")) == winners[0]

    async def test_expired_code_replaced_once(self, registries, clock):
        first, second = registries
        await first.create("https://old.com", "shared", 1)
        clock.advance(minutes=2)

        results = await asyncio.gather(
            first.create("https://a.com", "shared", 10),
            second.create("https://b.com", "shared", 10),
        )

        winners = [r for r in results if isinstance(r, LinkRecord)]
        assert len(winners) == 1
        assert (await second.get("shared")).original_url == winners[0].original_url

    async def test_clicks_from_both_registries_counted(self, registries):
        first, second = registries
        record = await first.create("https://example.com", None, 10)

        results = await asyncio.gather(*(
            registry.resolve(record.code)
            for _ in range(10)
            for registry in registries
        ))

        assert sorted(r.clicks for r in results) == list(range(1, 21))
        assert (await second.get(record.code)).clicks == 20

    async def test_resolve_after_other_registry_deletes(self, registries):
        first, second = registries
        record = await first.create("https://example.com", None, 10)

        await second.delete(record.code)

        assert (await first.resolve(record.code)).kind == ErrorKind.NOT_FOUND


class TestConcurrentConnections:
    """Many simultaneous HTTP requests against one app."""

    async def test_concurrent_create_requests(self, client):
        """Many concurrent POST /api/links; all succeed and codes are unique."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        responses = await asyncio.gather(*(
            client.post("/api/links", json={"url": url}) for url in urls
        ))

        codes = []
        for i, r in enumerate(responses):
            assert r.status_code == 201, f"Request {i}: status {r.status_code} body={r.text}"
            assert r.json()["original_url"] == urls[i]
            codes.append(r.json()["code"])

        assert len(codes) == len(set(codes)), "All codes must be unique under concurrency"

    async def test_concurrent_redirect_requests(self, client):
        """Concurrent redirects each count exactly one click."""
        create_resp = await client.post(
            "/api/links",
            json={"url": "https://example.com/redirect-target"},
        )
        assert create_resp.status_code == 201
        code = create_resp.json()["code"]

        responses = await asyncio.gather(*(client.get(f"/{code}") for _ in range(20)))

        for i, r in enumerate(responses):
            assert r.status_code == 302, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"

        info = await client.get(f"/api/links/{code}")
        assert info.json()["clicks"] == 20
