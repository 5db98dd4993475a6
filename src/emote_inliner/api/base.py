"""Base API client interface."""

import asyncio
import json
import logging
from abc import ABC, abstractmethod

import aiohttp

from .errors import ResponseShapeError, TransportError

logger = logging.getLogger(__name__)

# Total request timeout in seconds
DEFAULT_TIMEOUT = 30


async def safe_json(resp: aiohttp.ClientResponse) -> dict | list | None:
    """Safely parse JSON from response, returning None on error.

    This handles common error cases:
    - HTML error pages (ContentTypeError)
    - Malformed JSON (JSONDecodeError)
    - Bodies that are not valid text (UnicodeDecodeError)
    - Empty responses

    Args:
        resp: aiohttp response object

    Returns:
        Parsed JSON data or None if parsing failed
    """
    try:
        return await resp.json()
    except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        return None


class BaseApiClient(ABC):
    """Abstract base class for catalog service clients."""

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the display name for this service."""
        ...

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            try:
                await self._session.close()
                # Allow time for underlying connections to fully close
                await asyncio.sleep(0.1)
            except RuntimeError as e:
                # Session may be attached to a different event loop
                if "attached to a different loop" in str(e):
                    logger.debug(f"Session attached to different loop, skipping close: {e}")
                else:
                    raise
            finally:
                self._session = None

    async def _post_json(self, url: str, payload: dict) -> dict:
        """POST a JSON payload and return the decoded JSON object.

        Raises:
            TransportError: The request failed or returned a non-success status.
            ResponseShapeError: The body was not a JSON object.
        """
        try:
            async with self.session.post(url, json=payload) as resp:
                if resp.status != 200:
                    raise TransportError(
                        f"{self.name} returned HTTP {resp.status}", status=resp.status
                    )
                data = await safe_json(resp)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"{self.name} request failed: {e!r}") from e

        if not isinstance(data, dict):
            raise ResponseShapeError(f"{self.name} returned a non-object body")
        return data
