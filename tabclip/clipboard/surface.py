"""Ephemeral tab/window used to run a copy command in a content page."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from ..errors import SurfaceAcquisitionError
from ..models import ClipboardPayload
from ..ports import CopyEvent, SurfaceProvider

log = logging.getLogger(__name__)

# Seconds to wait for the copy listener; the event can be disabled by policy.
COPY_EVENT_TIMEOUT = 0.25


@dataclass(frozen=True)
class Surface:
    tab_id: int
    # Set only when a temporary window had to be opened.
    window_id: Optional[int] = None


async def _acquire(provider: SurfaceProvider, window_id: Optional[int], index: int) -> Surface:
    if window_id is not None:
        try:
            return Surface(tab_id=await provider.create_tab(window_id, index))
        except Exception as exc:
            log.debug(
                "cannot open temporary tab in the window %s, retrying with a temporary window: %s",
                window_id,
                exc,
            )
    try:
        new_window_id, tab_id = await provider.create_window()
    except Exception as exc:
        raise SurfaceAcquisitionError(f"cannot open a temporary tab or window: {exc}") from exc
    return Surface(tab_id=tab_id, window_id=new_window_id)


async def _release(provider: SurfaceProvider, surface: Surface) -> None:
    try:
        if surface.window_id is not None:
            await provider.remove_window(surface.window_id)
        else:
            await provider.remove_tab(surface.tab_id)
    except Exception as exc:
        log.warning("failed to remove temporary surface %s: %s", surface, exc)


@asynccontextmanager
async def temporary_surface(
    provider: SurfaceProvider,
    window_id: Optional[int],
    index: int,
) -> AsyncIterator[Surface]:
    """Open a blank inactive tab (or a small window) and always remove it.

    The window is removed when one was created, otherwise the tab; exactly one
    of the two, whatever happens inside the block.
    """
    surface = await _acquire(provider, window_id, index)
    try:
        yield surface
    finally:
        await _release(provider, surface)


async def intercept_copy(
    provider: SurfaceProvider,
    surface: Surface,
    payload: ClipboardPayload,
    timeout: float = COPY_EVENT_TIMEOUT,
) -> bool:
    """Trigger a copy in ``surface`` and fill it from a one-shot listener.

    Returns True when the listener ran before ``timeout``. The listener is
    de-registered on every path.
    """
    loop = asyncio.get_running_loop()
    intercepted: asyncio.Future = loop.create_future()

    def on_copy(event: CopyEvent) -> None:
        if intercepted.done():
            return
        event.stop_immediate_propagation()
        event.prevent_default()
        event.set_data("text/plain", payload.plain_text)
        event.set_data("text/html", payload.rich_text)
        intercepted.set_result(True)

    remove_listener = await provider.add_copy_listener(surface.tab_id, on_copy)
    try:
        await provider.exec_copy(surface.tab_id)
        try:
            return await asyncio.wait_for(intercepted, timeout)
        except asyncio.TimeoutError:
            return False
    finally:
        remove_listener()
