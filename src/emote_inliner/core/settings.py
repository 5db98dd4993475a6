"""Settings management for Emote Inliner."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from appdirs import user_config_dir

from .models import ImageScale

logger = logging.getLogger(__name__)

APP_NAME = "emote-inliner"
APP_AUTHOR = "emote-inliner"

# Bounds for the global popularity page count (100 emotes per page)
DEFAULT_GLOBAL_PAGES = 50
MAX_GLOBAL_PAGES = 500


def get_config_dir() -> Path:
    """Get the configuration directory."""
    path = Path(user_config_dir(APP_NAME, APP_AUTHOR))
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass
class EmoteSettings:
    """Emote catalog settings."""

    use_global: bool = True  # Include the most popular emotes of all time
    global_pages: int = DEFAULT_GLOBAL_PAGES
    emote_sets: list[str] = field(default_factory=list)  # 7TV emote set ids
    scale: ImageScale = ImageScale.X1
    show_notifications: bool = True  # Progress notifications while fetching


@dataclass
class NotificationSettings:
    """Notification-related settings."""

    enabled: bool = True
    backend: str = "auto"  # auto, dbus, notify-send, none
    urgency: str = "low"  # low, normal, critical
    timeout_seconds: int = 0  # 0 = system default


@dataclass
class Settings:
    """Application settings."""

    emotes: EmoteSettings = field(default_factory=EmoteSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from file."""
        if path is None:
            path = get_config_dir() / "settings.json"

        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return cls()

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        if path is None:
            path = get_config_dir() / "settings.json"

        path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file then rename to prevent corruption on crash
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix="settings_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._to_dict(), f, indent=2)
            os.replace(tmp_path, path)  # Atomic on POSIX
        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @staticmethod
    def _validate_int(value, default: int, min_val: int = 0, max_val: int | None = None) -> int:
        """Validate and constrain an integer value."""
        if not isinstance(value, int) or isinstance(value, bool):
            return default
        if value < min_val:
            return min_val
        if max_val is not None and value > max_val:
            return max_val
        return value

    @staticmethod
    def _validate_bool(value, default: bool) -> bool:
        """Return value if it is a bool, otherwise the default."""
        return value if isinstance(value, bool) else default

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        """Create Settings from a dictionary with validation."""
        settings = cls()

        # Emotes
        if "emotes" in data:
            e = data["emotes"]
            emote_sets = e.get("emote_sets", [])
            if not isinstance(emote_sets, list):
                emote_sets = []
            settings.emotes = EmoteSettings(
                use_global=cls._validate_bool(e.get("use_global"), True),
                global_pages=cls._validate_int(
                    e.get("global_pages"),
                    DEFAULT_GLOBAL_PAGES,
                    min_val=1,
                    max_val=MAX_GLOBAL_PAGES,
                ),
                emote_sets=[str(s) for s in emote_sets if isinstance(s, (str, int))],
                scale=ImageScale.parse(e.get("scale")),
                show_notifications=cls._validate_bool(e.get("show_notifications"), True),
            )

        # Notifications
        if "notifications" in data:
            n = data["notifications"]
            backend = n.get("backend", "auto")
            if backend not in ("auto", "dbus", "notify-send", "none"):
                backend = "auto"
            urgency = n.get("urgency", "low")
            if urgency not in ("low", "normal", "critical"):
                urgency = "low"
            settings.notifications = NotificationSettings(
                enabled=cls._validate_bool(n.get("enabled"), True),
                backend=backend,
                urgency=urgency,
                timeout_seconds=cls._validate_int(n.get("timeout_seconds"), 0, max_val=300),
            )

        return settings

    def _to_dict(self) -> dict:
        """Convert Settings to a dictionary."""
        return {
            "emotes": {
                "use_global": self.emotes.use_global,
                "global_pages": self.emotes.global_pages,
                "emote_sets": list(self.emotes.emote_sets),
                "scale": self.emotes.scale.value,
                "show_notifications": self.emotes.show_notifications,
            },
            "notifications": {
                "enabled": self.notifications.enabled,
                "backend": self.notifications.backend,
                "urgency": self.notifications.urgency,
                "timeout_seconds": self.notifications.timeout_seconds,
            },
        }
