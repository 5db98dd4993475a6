"""Emote catalog - name to image URL lookup, and the paged builder that fills it."""

import asyncio
import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ...api.errors import CatalogError, NotFoundWarning
from ...core.models import ImageScale
from ...core.settings import EmoteSettings
from ...notifications.notifier import Notifier
from ..models import CatalogPage, FetchTarget, TargetKind
from .provider import SevenTVProvider, image_url

logger = logging.getLogger(__name__)


class EmoteCatalog(Mapping[str, str]):
    """Maps emote names to image URLs.

    The first URL added for a name is kept; entries are never replaced.
    """

    def __init__(self) -> None:
        self._emotes: dict[str, str] = {}

    def add(self, name: str, url: str) -> bool:
        """Insert name -> url unless the name is taken. Returns True if inserted."""
        if name in self._emotes:
            return False
        self._emotes[name] = url
        return True

    def clear(self) -> None:
        self._emotes.clear()

    def view(self) -> Mapping[str, str]:
        """Read-only live view, for consumers that must not add or clear."""
        return MappingProxyType(self._emotes)

    def __getitem__(self, name: str) -> str:
        return self._emotes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._emotes)

    def __len__(self) -> int:
        return len(self._emotes)

    def __repr__(self) -> str:
        return f"EmoteCatalog({len(self._emotes)} emotes)"


def targets_from_settings(settings: EmoteSettings) -> list[FetchTarget]:
    """Build the ordered fetch targets: emote sets first, then global."""
    targets: list[FetchTarget] = []
    seen: set[str] = set()
    for raw_id in settings.emote_sets:
        set_id = raw_id.strip()
        if not set_id or set_id in seen:
            continue
        seen.add(set_id)
        targets.append(FetchTarget.emote_set(set_id))

    if settings.use_global:
        targets.append(FetchTarget.global_popularity(settings.global_pages))
    return targets


class CatalogBuilder:
    """Fetches catalog pages target by target and merges them first-write-wins."""

    def __init__(
        self,
        provider: SevenTVProvider,
        settings: EmoteSettings,
        notifier: Notifier | None = None,
    ):
        self.provider = provider
        self.settings = settings
        self.notifier = notifier
        self._set_names: dict[str, str] = {}
        self.pages_fetched = 0
        self.pages_failed = 0

    @property
    def scale(self) -> ImageScale:
        return ImageScale.parse(self.settings.scale)

    async def build(
        self,
        catalog: EmoteCatalog | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> EmoteCatalog:
        """Fill a catalog from every configured target.

        Page failures are logged and skipped. If cancel_event gets set, the
        build stops before the next page and returns what it has so far.
        """
        if catalog is None:
            catalog = EmoteCatalog()

        targets = targets_from_settings(self.settings)
        logger.info(f"Building emote catalog from {len(targets)} target(s)")

        for target in targets:
            if cancel_event is not None and cancel_event.is_set():
                break
            await self._fetch_target(target, catalog, cancel_event)

        if cancel_event is not None and cancel_event.is_set():
            logger.info(f"Emote catalog build cancelled with {len(catalog)} emotes")
        logger.info(
            f"Emote catalog ready: {len(catalog)} emotes, {self.pages_fetched} pages fetched, "
            f"{self.pages_failed} failed"
        )
        return catalog

    async def _fetch_target(
        self,
        target: FetchTarget,
        catalog: EmoteCatalog,
        cancel_event: asyncio.Event | None,
    ) -> None:
        """Page through a single target."""
        for page in range(1, target.max_pages + 1):
            if cancel_event is not None and cancel_event.is_set():
                return

            try:
                result = await self._fetch_page(target, page)
            except CatalogError as e:
                self.pages_failed += 1
                logger.warning(f"Failed to fetch {target.label} page {page}: {e}")
                continue
            except Exception as e:
                self.pages_failed += 1
                logger.error(f"Unexpected error fetching {target.label} page {page}: {e!r}")
                continue

            self.pages_fetched += 1
            added = self._merge(result, catalog)
            logger.debug(
                f"{target.label} page {page}: {len(result)} emotes, {added} new, "
                f"{len(catalog)} total"
            )

            if self.settings.show_notifications and self.notifier is not None:
                await self._notify_page(target, page, result, catalog)

            if not result.items:
                # Past the last page of this listing
                return

    async def _fetch_page(self, target: FetchTarget, page: int) -> CatalogPage:
        if target.kind == TargetKind.EMOTE_SET:
            return await self.provider.get_emote_set(target.set_id, page)
        return await self.provider.search_emotes(page)

    def _merge(self, result: CatalogPage, catalog: EmoteCatalog) -> int:
        """Add a page's emotes to the catalog. Returns how many were new."""
        scale = self.scale
        added = 0
        for emote_id, name in result.items:
            if catalog.add(name, image_url(emote_id, scale)):
                added += 1
        return added

    async def _notify_page(
        self,
        target: FetchTarget,
        page: int,
        result: CatalogPage,
        catalog: EmoteCatalog,
    ) -> None:
        """Send the per-page progress notification."""
        if target.kind == TargetKind.EMOTE_SET:
            label = await self.resolve_set_name(target.set_id, result.set_name)
        else:
            label = "global emotes"
        await self.notifier.notify_status(
            f"Fetched {len(result)} emotes from {label} (page {page}), {len(catalog)} total"
        )

    async def resolve_set_name(self, set_id: str, known_name: str | None = None) -> str:
        """Best-effort display name for an emote set.

        Falls back to a synthetic label when the lookup fails or the set
        doesn't exist. Never raises.
        """
        if set_id in self._set_names:
            return self._set_names[set_id]

        name = known_name
        if not name:
            try:
                name = await self.provider.get_emote_set_name(set_id)
            except Exception as e:
                logger.debug(f"Could not resolve name of emote set {set_id}: {e}")
                # Retry on the next page
                return f"emote set {set_id}"
            if name is None:
                logger.warning(str(NotFoundWarning(set_id)))

        label = name or f"emote set {set_id}"
        self._set_names[set_id] = label
        return label
