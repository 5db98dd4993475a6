"""Errors raised by catalog service clients."""


class CatalogError(Exception):
    """Base class for catalog fetch failures."""


class TransportError(CatalogError):
    """The request could not be completed or returned a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ResponseShapeError(CatalogError):
    """The response was received but did not have the expected fields."""


class NotFoundWarning(UserWarning):
    """An emote set id did not resolve to any emote set."""

    def __init__(self, set_id: str):
        super().__init__(f"Emote set `{set_id}` not found.")
        self.set_id = set_id
