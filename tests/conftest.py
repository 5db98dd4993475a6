"""Shared test fixtures for emote_inliner tests."""

import json

import pytest

from emote_inliner.api.errors import TransportError
from emote_inliner.chat.models import CatalogPage
from emote_inliner.core.settings import EmoteSettings, NotificationSettings


class FakeProvider:
    """Stands in for SevenTVProvider, serving canned pages."""

    def __init__(self, global_pages=None, set_pages=None, set_names=None):
        # page number -> list of (id, name) or an exception to raise
        self.global_pages = global_pages or {}
        # set id -> {page number -> items or exception}
        self.set_pages = set_pages or {}
        self.set_names = set_names or {}
        self.calls: list[tuple] = []
        self.closed = False

    async def search_emotes(self, page, per_page=100):
        self.calls.append(("global", page))
        return self._serve(self.global_pages.get(page, []))

    async def get_emote_set(self, set_id, page, per_page=100):
        self.calls.append(("set", set_id, page))
        pages = self.set_pages.get(set_id, {})
        return self._serve(pages.get(page, []))

    async def get_emote_set_name(self, set_id):
        self.calls.append(("name", set_id))
        name = self.set_names.get(set_id)
        if isinstance(name, Exception):
            raise name
        return name

    async def close(self):
        self.closed = True

    @staticmethod
    def _serve(items):
        if isinstance(items, Exception):
            raise items
        return CatalogPage(items=list(items))


class FakeNotifier:
    """Collects status messages instead of showing them."""

    def __init__(self):
        self.messages: list[str] = []

    async def notify_status(self, message):
        self.messages.append(message)
        return True


class FakeResponse:
    def __init__(self, status=200, body=None, raw=None):
        self.status = status
        self._body = body
        self._raw = raw

    async def json(self):
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Minimal aiohttp.ClientSession replacement recording POST payloads."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests: list[tuple[str, dict]] = []
        self.closed = False

    def post(self, url, json=None):
        self.requests.append((url, json))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


def items(*names, prefix="id"):
    """Build (id, name) pairs with ids derived from the names."""
    return [(f"{prefix}-{name}", name) for name in names]


@pytest.fixture
def emote_settings():
    return EmoteSettings(use_global=True, global_pages=5, show_notifications=False)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def quiet_notification_settings():
    return NotificationSettings(enabled=False, backend="none")


@pytest.fixture
def transport_error():
    return TransportError("7tv returned HTTP 502", status=502)
