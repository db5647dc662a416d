"""Clipboard write strategies, each reporting unsupported, success or failure."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import ClipboardCapabilityAbsent, ClipboardError, ClipboardWriteError, SurfaceAcquisitionError
from ..models import ClipboardPayload
from ..ports import ClipboardBackend, SurfaceProvider
from .surface import COPY_EVENT_TIMEOUT, intercept_copy, temporary_surface

log = logging.getLogger(__name__)


class StrategyStatus(enum.Enum):
    UNSUPPORTED = "unsupported"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class StrategyResult:
    status: StrategyStatus
    error: Optional[BaseException] = None

    @classmethod
    def unsupported(cls, reason: Optional[BaseException] = None) -> "StrategyResult":
        return cls(StrategyStatus.UNSUPPORTED, reason)

    @classmethod
    def success(cls) -> "StrategyResult":
        return cls(StrategyStatus.SUCCESS)

    @classmethod
    def failure(cls, error: BaseException) -> "StrategyResult":
        return cls(StrategyStatus.FAILURE, error)


def _as_clipboard_error(exc: Exception) -> ClipboardError:
    if isinstance(exc, ClipboardCapabilityAbsent):
        return ClipboardWriteError(f"clipboard unavailable: {exc}")
    if isinstance(exc, ClipboardError):
        return exc
    return ClipboardWriteError(str(exc) or type(exc).__name__)


class PlainTextWrite:
    """Direct text write.

    As the first strategy it only handles payloads without rich text; as the
    last resort it takes anything and always ends the chain.
    """

    def __init__(self, clipboard: ClipboardBackend, *, last_resort: bool = False):
        self.clipboard = clipboard
        self.last_resort = last_resort
        self.name = "plain-text-fallback" if last_resort else "plain-text"

    async def attempt(self, payload: ClipboardPayload) -> StrategyResult:
        if payload.has_rich_text and not self.last_resort:
            return StrategyResult.unsupported()
        try:
            await self.clipboard.write_text(payload.plain_text)
        except Exception as exc:
            return StrategyResult.failure(_as_clipboard_error(exc))
        return StrategyResult.success()


class RichWrite:
    """Single write carrying both text/plain and text/html."""

    name = "rich"

    def __init__(self, clipboard: ClipboardBackend):
        self.clipboard = clipboard

    async def attempt(self, payload: ClipboardPayload) -> StrategyResult:
        if not payload.has_rich_text:
            return StrategyResult.unsupported()
        try:
            await self.clipboard.write({"text/plain": payload.plain_text, "text/html": payload.rich_text})
        except ClipboardCapabilityAbsent as exc:
            return StrategyResult.unsupported(exc)
        except Exception as exc:
            return StrategyResult.failure(_as_clipboard_error(exc))
        return StrategyResult.success()


class CopyEventFallback:
    """Copy command inside a temporary surface, filled by a copy-event listener.

    Anything short of an intercepted event yields to the next strategy.
    """

    name = "copy-event"

    def __init__(
        self,
        surfaces: Optional[SurfaceProvider],
        *,
        window_id: Optional[int] = None,
        index: int = 0,
        timeout: float = COPY_EVENT_TIMEOUT,
    ):
        self.surfaces = surfaces
        self.window_id = window_id
        self.index = index
        self.timeout = timeout

    async def attempt(self, payload: ClipboardPayload) -> StrategyResult:
        if not payload.has_rich_text or self.surfaces is None:
            return StrategyResult.unsupported()
        try:
            async with temporary_surface(self.surfaces, self.window_id, self.index) as surface:
                intercepted = await intercept_copy(self.surfaces, surface, payload, self.timeout)
        except SurfaceAcquisitionError as exc:
            log.debug("no temporary surface available: %s", exc)
            return StrategyResult.unsupported(exc)
        except Exception as exc:
            log.debug("failed to run the copy command in a temporary surface: %s", exc)
            return StrategyResult.unsupported(_as_clipboard_error(exc))
        if not intercepted:
            return StrategyResult.unsupported(
                ClipboardWriteError(f"copy event was not intercepted within {self.timeout}s")
            )
        return StrategyResult.success()
