"""End-to-end copy: indentation, rendering, delivery and notification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .clipboard.pipeline import default_strategies, deliver
from .config import CopyConfig
from .models import DeliveryOutcome, Tab
from .notify import Notifier, ResultReporter
from .ports import ClipboardBackend, ContentExtractor, SurfaceProvider, TabSource, TreeProvider
from .render.orchestrator import Clock, fetch_indent_levels, render_tabs
from .render.template import referenced_names
from .selection import resolve_context_state

log = logging.getLogger(__name__)


@dataclass
class Platform:
    """Host collaborators; only ``clipboard`` is mandatory."""

    clipboard: ClipboardBackend
    surfaces: Optional[SurfaceProvider] = None
    notifier: Optional[Notifier] = None
    tree_provider: Optional[TreeProvider] = None
    extractor: Optional[ContentExtractor] = None
    tab_source: Optional[TabSource] = None


def _surface_placement(tabs: Sequence[Tab]) -> tuple:
    if not tabs:
        return None, 0
    anchor = next((tab for tab in tabs if tab.active), tabs[0])
    # Next to the visible tab so the tab bar does not scroll.
    return tabs[0].window_id, anchor.index + 1


async def copy_to_clipboard(
    tabs: Sequence[Tab],
    fmt: str,
    cfg: CopyConfig,
    platform: Platform,
    *,
    clock: Optional[Clock] = None,
) -> DeliveryOutcome:
    levels = await fetch_indent_levels(tabs, fmt, platform.tree_provider)
    payload = await render_tabs(
        tabs,
        fmt,
        cfg,
        indent_levels=levels,
        extractor=platform.extractor,
        clock=clock,
    )
    window_id, index = _surface_placement(tabs)
    strategies = default_strategies(platform.clipboard, platform.surfaces, window_id=window_id, index=index)
    return await deliver(payload, strategies, ResultReporter(platform.notifier, cfg))


def _uses_container(fmt: str) -> bool:
    return any(name.startswith("CONTAINER_") for name in referenced_names(fmt))


async def copy_from_tab(
    base_tab: Tab,
    fmt: str,
    cfg: CopyConfig,
    platform: Platform,
    *,
    mode: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> DeliveryOutcome:
    """Copy the tabs a command on ``base_tab`` applies to (selection, tree or window)."""
    if platform.tab_source is None:
        raise ValueError("platform.tab_source is required to resolve the tab selection")
    state = await resolve_context_state(
        base_tab,
        platform.tab_source,
        cfg,
        mode=mode,
        tree_provider=platform.tree_provider,
        with_container=_uses_container(fmt),
    )
    log.debug("copying %d tab(s) (tree=%s, all=%s)", len(state.tabs), state.is_tree, state.is_all)
    return await copy_to_clipboard(state.tabs, fmt, cfg, platform, clock=clock)
