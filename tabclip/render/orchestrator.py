"""Render a list of tabs into one clipboard payload."""

from __future__ import annotations

import asyncio
import datetime as _dt
import email.utils
import logging
import traceback
from typing import Callable, Dict, Mapping, Optional, Sequence

from ..config import CopyConfig
from ..errors import ExtractionError, PlaceholderError
from ..models import ClipboardPayload, RenderContext, RenderedItem, Tab
from ..ports import ContentExtractor, TreeProvider
from ..tab_policy import is_permitted_tab
from .indent import compute_indent_levels
from .placeholders import fill_placeholders, wants_indent, wants_page_metadata, wants_rich_text
from .sanitize import escape_html

log = logging.getLogger(__name__)

METADATA_FIELDS = ("author", "description", "keywords")
RICH_TEXT_SEPARATOR = "<br />"

Clock = Callable[[], _dt.datetime]


def _now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


def format_utc(now: _dt.datetime) -> str:
    return email.utils.format_datetime(now.astimezone(_dt.timezone.utc), usegmt=True)


def format_local(now: _dt.datetime) -> str:
    return now.astimezone().strftime("%c")


def build_context(
    tab: Tab,
    cfg: CopyConfig,
    *,
    indent_level: int = 0,
    now: Optional[_dt.datetime] = None,
) -> RenderContext:
    now = now or _now()
    return RenderContext(
        tab=tab,
        indent_level=indent_level,
        line_feed=cfg.line_feed,
        time_utc=format_utc(now),
        time_local=format_local(now),
    )


def _error_fields(cfg: CopyConfig, reason: str, *args: object) -> Dict[str, Optional[str]]:
    if not cfg.report_errors:
        return {}
    return {field: cfg.message(f"error_{reason}_{field}", *args) for field in METADATA_FIELDS}


def _describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def _extract(tab: Tab, extractor: ContentExtractor) -> Dict[str, Optional[str]]:
    try:
        fields = await extractor.extract(tab.id)
        if isinstance(fields, (list, tuple)):
            # One result per frame; the top frame comes first.
            fields = fields[0] if fields else None
        if not isinstance(fields, Mapping):
            raise TypeError(f"expected a mapping of page fields, got {type(fields).__name__}")
        return {
            field: (str(fields[field]) if fields.get(field) is not None else None)
            for field in METADATA_FIELDS
        }
    except Exception as exc:
        raise ExtractionError(_describe_error(exc)) from exc


async def collect_page_metadata(
    tab: Tab,
    cfg: CopyConfig,
    extractor: Optional[ContentExtractor],
) -> Dict[str, Optional[str]]:
    """Author/description/keywords for one tab, or the configured error texts."""
    if tab.discarded:
        return _error_fields(cfg, "discarded")
    if extractor is None or not is_permitted_tab(tab, cfg):
        return _error_fields(cfg, "unpermitted")

    log.debug("trying to get data from content %s", tab.id)
    try:
        fields = await _extract(tab, extractor)
    except ExtractionError as exc:
        log.warning("failed to get data from content %s %s: %s", tab.id, tab.url, exc)
        return _error_fields(cfg, "failed", str(exc))
    return fields


def render_item(fmt: str, ctx: RenderContext) -> RenderedItem:
    """Fill ``fmt`` for one tab; template errors become the tab's text."""
    try:
        filled = fill_placeholders(fmt, ctx)
    except PlaceholderError as exc:
        return RenderedItem(plain_text=str(exc))
    except Exception as exc:
        log.exception("unexpected error while rendering tab %s", ctx.tab.id)
        return RenderedItem(plain_text=f"{exc}\n{traceback.format_exc()}")

    if not wants_rich_text(fmt):
        return RenderedItem(plain_text=filled)
    if filled.strip():
        return RenderedItem(plain_text=filled, rich_text=filled)
    tab = ctx.tab
    return RenderedItem(
        plain_text=f"{tab.title}<{tab.url}>",
        rich_text=f'<a href="{escape_html(tab.url)}">{escape_html(tab.title)}</a>',
    )


async def render_tab(
    fmt: str,
    tab: Tab,
    cfg: CopyConfig,
    *,
    indent_level: int = 0,
    extractor: Optional[ContentExtractor] = None,
    now: Optional[_dt.datetime] = None,
    needs_metadata: Optional[bool] = None,
) -> RenderedItem:
    ctx = build_context(tab, cfg, indent_level=indent_level, now=now)
    if needs_metadata is None:
        needs_metadata = wants_page_metadata(fmt)
    if needs_metadata:
        fields = await collect_page_metadata(tab, cfg, extractor)
        ctx.author = fields.get("author")
        ctx.description = fields.get("description")
        ctx.keywords = fields.get("keywords")
    return render_item(fmt, ctx)


def join_items(items: Sequence[RenderedItem], line_feed: str) -> ClipboardPayload:
    rich_text = ""
    if any(item.rich_text for item in items):
        rich_text = RICH_TEXT_SEPARATOR.join(item.rich_text for item in items)
    plain_text = line_feed.join(item.plain_text for item in items)
    if len(items) > 1:
        plain_text += line_feed
    return ClipboardPayload(plain_text=plain_text, rich_text=rich_text, count=len(items))


async def fetch_indent_levels(
    tabs: Sequence[Tab],
    fmt: str,
    tree_provider: Optional[TreeProvider],
    *,
    only_descendants: bool = False,
) -> Dict[int, int]:
    """Indent levels keyed by tab id; empty (all zero) when not applicable."""
    if tree_provider is None or not tabs or not wants_indent(fmt):
        return {}
    try:
        forest = await tree_provider.get_trees([tab.id for tab in tabs])
    except Exception as exc:
        log.debug("tree information unavailable: %s", exc)
        return {}
    if not forest:
        return {}
    levels = compute_indent_levels(forest, [tab.id for tab in tabs], only_descendants=only_descendants)
    log.debug("indent levels: %s", levels)
    return levels


async def render_tabs(
    tabs: Sequence[Tab],
    fmt: str,
    cfg: CopyConfig,
    *,
    indent_levels: Optional[Mapping[int, int]] = None,
    extractor: Optional[ContentExtractor] = None,
    clock: Optional[Clock] = None,
) -> ClipboardPayload:
    """Render every tab concurrently and join them in the given order."""
    levels = indent_levels or {}
    clock = clock or _now
    needs_metadata = wants_page_metadata(fmt)
    items = await asyncio.gather(
        *(
            render_tab(
                fmt,
                tab,
                cfg,
                indent_level=levels.get(tab.id, 0),
                extractor=extractor,
                now=clock(),
                needs_metadata=needs_metadata,
            )
            for tab in tabs
        )
    )
    payload = join_items(items, cfg.line_feed)
    log.debug("richText: %r", payload.rich_text)
    log.debug("plainText: %r", payload.plain_text)
    return payload
