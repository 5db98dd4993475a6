"""Data models for message content and emote fetching."""

from dataclasses import dataclass, field
from enum import Enum

# Named emote sets are never paged past this, regardless of settings
EMOTE_SET_MAX_PAGES = 10

# Items requested per catalog page
PAGE_SIZE = 100


@dataclass(frozen=True)
class TextNode:
    """A run of plain message text."""

    content: str
    type: str = field(default="text", init=False)


@dataclass(frozen=True)
class EmoteNode:
    """An inline emote image that replaces a matched token."""

    name: str
    id: str
    src: str  # Image URL
    animated: bool = True
    type: str = field(default="emoji", init=False)


ContentNode = TextNode | EmoteNode


class TargetKind(str, Enum):
    """Kinds of catalog sources."""

    GLOBAL = "global"  # Most popular emotes of all time
    EMOTE_SET = "emote_set"  # A named, user-chosen emote set


@dataclass(frozen=True)
class FetchTarget:
    """One catalog source to page through during a build."""

    kind: TargetKind
    max_pages: int
    set_id: str | None = None

    @classmethod
    def global_popularity(cls, max_pages: int) -> "FetchTarget":
        return cls(kind=TargetKind.GLOBAL, max_pages=max_pages)

    @classmethod
    def emote_set(cls, set_id: str) -> "FetchTarget":
        return cls(kind=TargetKind.EMOTE_SET, max_pages=EMOTE_SET_MAX_PAGES, set_id=set_id)

    @property
    def label(self) -> str:
        """Short description for log messages."""
        if self.kind == TargetKind.GLOBAL:
            return "global emotes"
        return f"emote set {self.set_id}"


@dataclass
class CatalogPage:
    """Parsed result of a single catalog page request."""

    items: list[tuple[str, str]] = field(default_factory=list)  # (emote_id, name)
    set_name: str | None = None  # Only filled for emote set lookups

    def __len__(self) -> int:
        return len(self.items)
