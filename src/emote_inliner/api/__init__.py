"""API clients for the emote catalog service."""

from .base import BaseApiClient
from .errors import CatalogError, NotFoundWarning, ResponseShapeError, TransportError

__all__ = [
    "BaseApiClient",
    "CatalogError",
    "TransportError",
    "ResponseShapeError",
    "NotFoundWarning",
]
