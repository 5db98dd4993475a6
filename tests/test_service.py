"""Tests for the emote service lifecycle."""

import asyncio

import pytest

from conftest import FakeProvider, items
from emote_inliner.chat.models import EmoteNode, TextNode
from emote_inliner.core.service import EmoteService
from emote_inliner.core.settings import EmoteSettings, Settings


def _settings(**emotes) -> Settings:
    emotes.setdefault("show_notifications", False)
    return Settings(emotes=EmoteSettings(**emotes))


@pytest.mark.asyncio
async def test_start_builds_in_background():
    provider = FakeProvider(global_pages={1: [("abc", "KEK")]})
    service = EmoteService(_settings(), provider=provider)

    await service.start()
    catalog = await service.wait_ready()

    assert catalog["KEK"] == "https://cdn.7tv.app/emote/abc/1x.webp"
    nodes = service.rewrite([TextNode("KEK hi")])
    assert nodes[0] == EmoteNode(name="KEK", id="KEK", src=catalog["KEK"])
    await service.stop()


@pytest.mark.asyncio
async def test_catalog_published_atomically():
    release = asyncio.Event()
    reached_page_2 = asyncio.Event()

    class GatedProvider(FakeProvider):
        async def search_emotes(self, page, per_page=100):
            if page == 2:
                reached_page_2.set()
                await release.wait()
            return await super().search_emotes(page, per_page)

    provider = GatedProvider(global_pages={1: items("a"), 2: items("b")})
    service = EmoteService(_settings(), provider=provider)
    await service.start()

    await reached_page_2.wait()
    # Page 1 is fetched but the catalog is not published yet
    assert len(service.catalog) == 0
    assert service.is_building
    assert service.rewrite([TextNode("a")]) == [TextNode("a")]

    release.set()
    catalog = await service.wait_ready()
    assert sorted(catalog) == ["a", "b"]
    assert dict(service.catalog) == dict(catalog)
    await service.stop()


@pytest.mark.asyncio
async def test_stop_cancels_build_and_clears():
    release = asyncio.Event()
    reached_page_2 = asyncio.Event()

    class GatedProvider(FakeProvider):
        async def search_emotes(self, page, per_page=100):
            if page == 2:
                reached_page_2.set()
                await release.wait()
            return await super().search_emotes(page, per_page)

    provider = GatedProvider(global_pages={p: items(f"e{p}") for p in range(1, 6)})
    service = EmoteService(_settings(), provider=provider)
    await service.start()
    await reached_page_2.wait()

    stop_task = asyncio.create_task(service.stop())
    await asyncio.sleep(0)
    release.set()
    await stop_task

    assert ("global", 3) not in provider.calls
    assert len(service.catalog) == 0
    assert not service.is_building
    assert provider.closed


@pytest.mark.asyncio
async def test_stop_clears_published_catalog():
    provider = FakeProvider(global_pages={1: items("a")})
    service = EmoteService(_settings(), provider=provider)
    await service.start()
    catalog = await service.wait_ready()
    assert "a" in catalog

    await service.stop()
    assert len(catalog) == 0
    assert len(service.catalog) == 0


@pytest.mark.asyncio
async def test_catalog_ready_callback():
    provider = FakeProvider(global_pages={1: items("a")})
    service = EmoteService(_settings(), provider=provider)
    seen = []
    service.on_catalog_ready(lambda catalog: seen.append(len(catalog)))

    await service.start()
    await service.wait_ready()
    await service.stop()

    assert seen == [1]


@pytest.mark.asyncio
async def test_wait_ready_without_start_returns_empty():
    service = EmoteService(_settings(), provider=FakeProvider())
    assert len(await service.wait_ready()) == 0


@pytest.mark.asyncio
async def test_catalog_view_is_read_only():
    provider = FakeProvider(global_pages={1: items("a")})
    service = EmoteService(_settings(), provider=provider)
    await service.start()
    catalog = await service.wait_ready()

    assert not hasattr(catalog, "add")
    assert not hasattr(catalog, "clear")
    with pytest.raises(TypeError):
        catalog["b"] = "url"
    assert "b" not in service.catalog
    await service.stop()
