"""Desktop notification handler."""

import logging
import shutil
import subprocess

from ..core.settings import NotificationSettings

logger = logging.getLogger(__name__)

APP_NAME = "Emote Inliner"

# Status messages kept in memory
MAX_LOG_ENTRIES = 50


class Notifier:
    """Shows progress notifications while the emote catalog is built."""

    def __init__(self, settings: NotificationSettings) -> None:
        self.settings = settings
        self._notifier = None
        self._backend = "none"
        self._notification_log: list[str] = []
        self._init_backend()

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def history(self) -> list[str]:
        """Most recent status messages (max 50), oldest first."""
        return list(self._notification_log)

    def _init_backend(self) -> None:
        """Initialize the notification backend based on settings."""
        backend = self.settings.backend

        if backend == "none":
            self._backend = "none"

        elif backend == "auto":
            # Try desktop-notifier first (handles most cases)
            try:
                from desktop_notifier import DesktopNotifier

                self._notifier = DesktopNotifier(app_name=APP_NAME, app_icon=None)
                self._backend = "desktop-notifier"
                logger.debug("Using desktop-notifier backend")
                return
            except Exception as e:
                logger.debug(f"desktop-notifier failed: {e}, trying fallback")

            # Fallback to notify-send
            if shutil.which("notify-send"):
                self._backend = "notify-send"
                logger.debug("Using notify-send backend")
                return

            logger.info("No notification backend available, status goes to the log only")
            self._backend = "none"

        elif backend == "dbus":
            try:
                from desktop_notifier import DesktopNotifier

                self._notifier = DesktopNotifier(app_name=APP_NAME, app_icon=None)
                self._backend = "desktop-notifier"
            except Exception as e:
                logger.error(f"D-Bus backend failed: {e}")
                self._backend = "none"

        elif backend == "notify-send":
            if shutil.which("notify-send"):
                self._backend = "notify-send"
            else:
                logger.error("notify-send not found")
                self._backend = "none"

        else:
            logger.warning(f"Unknown backend: {backend}, using auto")
            self.settings.backend = "auto"
            self._init_backend()

    async def notify_status(self, message: str) -> bool:
        """Show a catalog status message. Returns True if a notification was shown."""
        logger.info(message)
        self._notification_log.append(message)
        if len(self._notification_log) > MAX_LOG_ENTRIES:
            self._notification_log = self._notification_log[-MAX_LOG_ENTRIES:]

        if not self.settings.enabled:
            return False
        return await self._send_notification(APP_NAME, message)

    async def _send_notification(self, title: str, body: str) -> bool:
        """Send a notification using the configured backend."""
        if self._backend == "none":
            return False

        try:
            if self._backend == "desktop-notifier" and self._notifier:
                from desktop_notifier import Urgency

                urgency_map = {
                    "low": Urgency.Low,
                    "normal": Urgency.Normal,
                    "critical": Urgency.Critical,
                }
                urgency = urgency_map.get(self.settings.urgency, Urgency.Low)
                timeout = self.settings.timeout_seconds or -1

                await self._notifier.send(
                    title=title,
                    message=body,
                    urgency=urgency,
                    timeout=timeout,
                )
                return True

            elif self._backend == "notify-send":
                cmd = ["notify-send", title, body, f"--app-name={APP_NAME}"]
                cmd.append(f"--urgency={self.settings.urgency}")
                if self.settings.timeout_seconds > 0:
                    cmd.append(f"--expire-time={self.settings.timeout_seconds * 1000}")
                subprocess.Popen(
                    cmd,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
                return True

        except Exception as e:
            logger.error(f"Failed to send notification: {e}")
            return False

        return False
