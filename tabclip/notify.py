"""Transient result notifications."""

from __future__ import annotations

import asyncio
import itertools
import logging
import os
import shutil
import subprocess
import sys
import webbrowser
from typing import Callable, Optional

from .config import CopyConfig
from .ports import NotificationCenter

log = logging.getLogger(__name__)

DEFAULT_ICON = "copy"


class Notifier:
    def __init__(self, center: NotificationCenter, *, icon: str = DEFAULT_ICON):
        self.center = center
        self.icon = icon

    async def notify(
        self,
        *,
        title: str,
        message: str,
        timeout: float,
        icon: Optional[str] = None,
        url: Optional[str] = None,
    ) -> bool:
        """Show one notification and return whether the user clicked it.

        Waits for a click, a close or ``timeout`` seconds, whichever comes
        first, then clears it. A negative timeout clears it right away.
        """
        notification_id = await self.center.create(title, message, icon or self.icon)
        loop = asyncio.get_running_loop()
        clicked: asyncio.Future = loop.create_future()

        def settle(value: bool) -> Callable[[str], None]:
            def listener(event_id: str) -> None:
                if event_id == notification_id and not clicked.done():
                    clicked.set_result(value)

            return listener

        remove_clicked = self.center.on_clicked(settle(True))
        remove_closed = self.center.on_closed(settle(False))
        try:
            if timeout >= 0 and not clicked.done():
                try:
                    await asyncio.wait_for(asyncio.shield(clicked), timeout)
                except asyncio.TimeoutError:
                    pass
            await self.center.clear(notification_id)
            was_clicked = clicked.done() and clicked.result()
            if was_clicked and url:
                await self.center.open_url(url)
            return bool(was_clicked)
        finally:
            remove_clicked()
            remove_closed()
            if not clicked.done():
                clicked.cancel()


class ResultReporter:
    """Turns delivery outcomes into at most one notification each."""

    def __init__(self, notifier: Optional[Notifier], cfg: CopyConfig):
        self.notifier = notifier
        self.cfg = cfg

    @property
    def enabled(self) -> bool:
        return self.notifier is not None and self.cfg.should_notify_result

    async def copied(self, count: int, copied: str) -> bool:
        if not self.enabled:
            return False
        multiple = count > 1
        title_key = "notification_copied_multiple_title" if multiple else "notification_copied_title"
        message_key = "notification_copied_multiple_message" if multiple else "notification_copied_message"
        return await self.notifier.notify(
            title=self.cfg.message(title_key, count),
            message=self.cfg.message(message_key, count, copied),
            timeout=self.cfg.notification_timeout,
        )

    async def failed(self, error: Optional[BaseException]) -> bool:
        if not self.enabled:
            return False
        return await self.notifier.notify(
            title=self.cfg.message("notification_failedToCopy_title"),
            message=self.cfg.message("notification_failedToCopy_message", str(error)),
            timeout=self.cfg.notification_timeout,
        )


def _applescript_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _notifications_enabled() -> bool:
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return False
    enabled = str(os.environ.get("TABCLIP_NOTIFY", "1")).strip().lower()
    return enabled not in {"0", "false", "no", "off"}


class DesktopNotificationCenter:
    """Fire-and-forget desktop notifications (osascript or notify-send).

    Neither tool reports clicks, so listeners never fire and clearing is a
    no-op.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    async def create(self, title: str, message: str, icon: Optional[str] = None) -> str:
        notification_id = f"tabclip-{next(self._ids)}"
        if _notifications_enabled():
            self._display(title, message)
        return notification_id

    def _display(self, title: str, message: str) -> None:
        if sys.platform == "darwin":
            script = f'display notification "{_applescript_escape(message)}" with title "{_applescript_escape(title)}"'
            argv = ["/usr/bin/osascript", "-e", script]
        elif shutil.which("notify-send"):
            argv = ["notify-send", title, message]
        else:
            log.info("%s: %s", title, message)
            return
        try:
            subprocess.Popen(argv, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as exc:
            log.warning("notification failed (%s)", exc)

    def on_clicked(self, listener: Callable[[str], None]) -> Callable[[], None]:
        return lambda: None

    def on_closed(self, listener: Callable[[str], None]) -> Callable[[], None]:
        return lambda: None

    async def clear(self, notification_id: str) -> None:
        return None

    async def open_url(self, url: str) -> None:
        webbrowser.open(url)
