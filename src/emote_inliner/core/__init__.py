"""Core models and settings for Emote Inliner."""

from .models import ImageScale
from .settings import EmoteSettings, NotificationSettings, Settings

__all__ = [
    "ImageScale",
    "EmoteSettings",
    "NotificationSettings",
    "Settings",
]
