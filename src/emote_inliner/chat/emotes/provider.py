"""7TV emote catalog provider (GraphQL API)."""

import logging

import aiohttp

from ...api.base import BaseApiClient
from ...api.errors import NotFoundWarning, ResponseShapeError
from ...core.models import ImageScale
from ..models import PAGE_SIZE, CatalogPage

logger = logging.getLogger(__name__)

SEVENTV_GQL_URL = "https://7tv.io/v4/gql"
SEVENTV_CDN_URL = "https://cdn.7tv.app"

SEARCH_QUERY = """
query SearchEmote($query: String!, $perPage: Int!, $page: Int!) {
    search {
        all(query: $query, page: $page, perPage: $perPage) {
            emotes {
                items {
                    id
                    defaultName
                }
            }
        }
    }
}
"""

EMOTE_SET_QUERY = """
query EmoteSet($id: Id!, $query: String, $perPage: Int!, $page: Int!) {
    emoteSets {
        emoteSet(id: $id) {
            name
            emotes(query: $query, page: $page, perPage: $perPage) {
                items {
                    id
                    alias
                }
            }
        }
    }
}
"""

EMOTE_SET_NAME_QUERY = """
query EmoteSetName($id: Id!) {
    emoteSets {
        emoteSet(id: $id) {
            name
        }
    }
}
"""


def image_url(emote_id: str, scale: ImageScale = ImageScale.X1) -> str:
    """Build the CDN URL for an emote image."""
    return f"{SEVENTV_CDN_URL}/emote/{emote_id}/{ImageScale(scale).value}.webp"


def _dig(data: dict, *keys: str):
    """Walk nested response objects, raising ResponseShapeError on a missing key."""
    node = data
    path = []
    for key in keys:
        path.append(key)
        if not isinstance(node, dict) or key not in node:
            raise ResponseShapeError(f"Missing field {'.'.join(path)}")
        node = node[key]
    return node


def _parse_items(items, name_key: str) -> list[tuple[str, str]]:
    """Extract (id, name) pairs from an item list."""
    if not isinstance(items, list):
        raise ResponseShapeError(f"Expected a list of emotes, got {type(items).__name__}")

    parsed: list[tuple[str, str]] = []
    for item in items:
        if not isinstance(item, dict):
            logger.debug(f"Skipping malformed emote item: {item!r}")
            continue
        emote_id = item.get("id")
        name = item.get(name_key)
        if not emote_id or not name:
            logger.debug(f"Skipping emote without id or {name_key}: {item!r}")
            continue
        parsed.append((str(emote_id), str(name)))
    return parsed


class SevenTVProvider(BaseApiClient):
    """Pages through 7TV's popularity listing and emote sets."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        url: str = SEVENTV_GQL_URL,
    ):
        super().__init__(session)
        self.url = url

    @property
    def name(self) -> str:
        return "7tv"

    async def _query(self, query: str, variables: dict) -> dict:
        """Run a GraphQL query and return its data object."""
        payload = {"query": query, "variables": variables}
        body = await self._post_json(self.url, payload)

        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise ResponseShapeError(f"GraphQL errors: {messages}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise ResponseShapeError("Response has no data object")
        return data

    async def search_emotes(self, page: int, per_page: int = PAGE_SIZE) -> CatalogPage:
        """Fetch one page of the most popular emotes of all time."""
        data = await self._query(
            SEARCH_QUERY,
            {"query": "", "perPage": per_page, "sort": "TOP_ALL_TIME", "page": page},
        )
        items = _dig(data, "search", "all", "emotes", "items")
        return CatalogPage(items=_parse_items(items, "defaultName"))

    async def get_emote_set(
        self, set_id: str, page: int, per_page: int = PAGE_SIZE
    ) -> CatalogPage:
        """Fetch one page of an emote set's emotes."""
        data = await self._query(
            EMOTE_SET_QUERY,
            {"id": set_id, "query": "", "perPage": per_page, "page": page},
        )
        emote_set = _dig(data, "emoteSets", "emoteSet")
        if emote_set is None:
            logger.warning(str(NotFoundWarning(set_id)))
            return CatalogPage()
        items = _dig(emote_set, "emotes", "items")
        set_name = emote_set.get("name") if isinstance(emote_set, dict) else None
        return CatalogPage(items=_parse_items(items, "alias"), set_name=set_name or None)

    async def get_emote_set_name(self, set_id: str) -> str | None:
        """Look up an emote set's display name, or None if the set doesn't exist."""
        data = await self._query(EMOTE_SET_NAME_QUERY, {"id": set_id})
        emote_set = _dig(data, "emoteSets", "emoteSet")
        if not isinstance(emote_set, dict):
            return None
        return emote_set.get("name") or None
