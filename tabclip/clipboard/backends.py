"""System clipboard backend built on pyperclip (plain text only)."""

from __future__ import annotations

import logging
from typing import Mapping

import pyperclip

from ..errors import ClipboardCapabilityAbsent, ClipboardWriteError

log = logging.getLogger(__name__)


class SystemClipboard:
    """Writes through whatever copy mechanism pyperclip finds on this host."""

    name = "pyperclip"

    async def write_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardWriteError(f"Failed to access clipboard via pyperclip: {exc}") from exc
        log.debug("wrote %d characters via pyperclip", len(text))

    async def write(self, items: Mapping[str, str]) -> None:
        raise ClipboardCapabilityAbsent(
            f"pyperclip cannot write {', '.join(sorted(items))} together"
        )
