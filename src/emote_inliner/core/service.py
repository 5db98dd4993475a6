"""Emote catalog service."""

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping

from ..chat.emotes.catalog import CatalogBuilder, EmoteCatalog
from ..chat.emotes.provider import SevenTVProvider
from ..chat.emotes.rewriter import rewrite
from ..chat.models import ContentNode
from ..notifications.notifier import Notifier
from .settings import Settings

logger = logging.getLogger(__name__)


class EmoteService:
    """
    Owns the emote catalog for the lifetime of the host.
    Builds it in the background at start and hands a read-only view to renderers.
    """

    def __init__(
        self,
        settings: Settings,
        provider: SevenTVProvider | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider or SevenTVProvider()
        if notifier is None and settings.emotes.show_notifications:
            notifier = Notifier(settings.notifications)
        self.notifier = notifier

        # Replaced as a whole when a build finishes, never filled in place
        self._catalog = EmoteCatalog()
        self._build_task: asyncio.Task | None = None
        self._cancel_event: asyncio.Event | None = None

        self._on_catalog_ready: list[Callable[[Mapping[str, str]], None]] = []

    @property
    def catalog(self) -> Mapping[str, str]:
        """Read-only view of the current catalog (empty until the first build completes)."""
        return self._catalog.view()

    @property
    def is_building(self) -> bool:
        return self._build_task is not None and not self._build_task.done()

    def on_catalog_ready(self, callback: Callable[[Mapping[str, str]], None]) -> None:
        """Register a callback for when a build publishes its catalog."""
        self._on_catalog_ready.append(callback)

    def rewrite(self, nodes: Iterable[ContentNode]) -> list[ContentNode]:
        """Rewrite message content against the current catalog."""
        return rewrite(nodes, self._catalog)

    async def start(self) -> None:
        """Start building the catalog in the background."""
        if self.is_building:
            return

        self._cancel_event = asyncio.Event()
        self._build_task = asyncio.create_task(self._build(self._cancel_event))

    async def wait_ready(self) -> Mapping[str, str]:
        """Wait for the running build (if any) and return the catalog."""
        if self._build_task is not None:
            try:
                await asyncio.shield(self._build_task)
            except asyncio.CancelledError:
                if not self._build_task.cancelled():
                    raise
        return self._catalog.view()

    async def stop(self) -> None:
        """Stop any running build, close the client and drop the catalog."""
        if self._cancel_event is not None:
            self._cancel_event.set()

        if self._build_task:
            try:
                await self._build_task
            except asyncio.CancelledError:
                pass
            self._build_task = None

        await self.provider.close()
        self._catalog.clear()
        self._catalog = EmoteCatalog()
        logger.info("Emote service stopped")

    async def _build(self, cancel_event: asyncio.Event) -> None:
        """Build a fresh catalog and publish it in one step."""
        builder = CatalogBuilder(self.provider, self.settings.emotes, self.notifier)
        try:
            catalog = await builder.build(EmoteCatalog(), cancel_event=cancel_event)
        except Exception as e:
            logger.error(f"Emote catalog build failed: {e}")
            return

        if cancel_event.is_set():
            # Stopped while building; stop() drops the catalog
            return

        self._catalog = catalog
        for callback in self._on_catalog_ready:
            try:
                callback(catalog.view())
            except Exception as e:
                logger.error(f"Error in catalog ready callback: {e}")
