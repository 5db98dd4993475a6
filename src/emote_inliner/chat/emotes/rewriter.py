"""Emote rewriter - replaces emote names in text nodes with inline emote nodes."""

import re
from collections.abc import Iterable, Mapping

from ..models import ContentNode, EmoteNode, TextNode

# Capturing group keeps the whitespace runs as their own tokens
_TOKEN_SPLIT = re.compile(r"(\s+)")


def split_tokens(text: str) -> list[str]:
    """Split text into alternating word and whitespace tokens.

    Joining the result gives back the original text.
    """
    return [token for token in _TOKEN_SPLIT.split(text) if token]


def rewrite_text(text: str, catalog: Mapping[str, str] | None) -> list[ContentNode]:
    """Rewrite a single string into text and emote nodes."""
    emote_map = catalog or {}
    nodes: list[ContentNode] = []
    for token in split_tokens(text):
        if token in emote_map:
            nodes.append(EmoteNode(name=token, id=token, src=emote_map[token], animated=True))
        else:
            nodes.append(TextNode(content=token))
    return nodes


def rewrite(
    nodes: Iterable[ContentNode],
    catalog: Mapping[str, str] | None,
) -> list[ContentNode]:
    """Return a new node list with emote names in text nodes swapped for emotes.

    Each text node is replaced in place by the nodes its tokens produce; any
    other node is passed through untouched. Matching is exact and
    case-sensitive, so "KEK!" does not match "KEK".

    Args:
        nodes: Parsed message content.
        catalog: Emote name -> image URL. None is treated as empty.

    Returns:
        The rewritten content, never sharing a list with the input.
    """
    result: list[ContentNode] = []
    for node in nodes:
        if isinstance(node, TextNode):
            result.extend(rewrite_text(node.content, catalog))
        else:
            result.append(node)
    return result


def plain_text(nodes: Iterable[ContentNode]) -> str:
    """Flatten content back to text, using emote names for emote nodes."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, TextNode):
            parts.append(node.content)
        elif isinstance(node, EmoteNode):
            parts.append(node.name)
    return "".join(parts)
