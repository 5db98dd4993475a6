"""Core data models for Emote Inliner."""

from enum import Enum


class ImageScale(str, Enum):
    """Emote image resolutions offered by the CDN."""

    X1 = "1x"
    X2 = "2x"
    X3 = "3x"
    X4 = "4x"

    @classmethod
    def parse(cls, value: object, default: "ImageScale | None" = None) -> "ImageScale":
        """Convert a settings value to a scale, falling back to the default."""
        try:
            return cls(value)
        except ValueError:
            return default or cls.X1
