"""Resolve which tabs a copy command applies to."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import COPY_ALL, COPY_TREE, COPY_TREE_DESCENDANTS, CopyConfig
from .models import Tab, TreeNode
from .ports import TabSource, TreeProvider

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextState:
    is_all: bool
    is_tree: bool
    only_descendants: bool
    has_multiple_tabs: bool
    tabs: Tuple[Tab, ...]


async def get_multiselected_tabs(tab: Optional[Tab], tab_source: TabSource) -> List[Tab]:
    if tab is None:
        return []
    if tab.highlighted:
        return list(await tab_source.query_highlighted(tab.window_id))
    return [tab]


def collect_tree_item_ids(node: TreeNode) -> List[int]:
    ids = [node.id]
    for child in node.children:
        ids.extend(collect_tree_item_ids(child))
    return ids


async def collect_tabs_from_tree(
    node: TreeNode,
    window_id: int,
    tab_source: TabSource,
    *,
    only_descendants: bool = False,
) -> List[Tab]:
    """Tabs of the tree rooted at ``node``, in window order."""
    ids = set(collect_tree_item_ids(node))
    if only_descendants:
        ids.discard(node.id)
    all_tabs = await tab_source.query_all(window_id)
    return [tab for tab in all_tabs if tab.id in ids]


async def _with_container(tab: Tab, tab_source: TabSource) -> Tab:
    if not tab.cookie_store_id:
        return tab
    try:
        name = await tab_source.container_name(tab.cookie_store_id)
    except Exception as exc:
        log.debug("no container for tab %s: %s", tab.id, exc)
        name = None
    return dataclasses.replace(tab, container=name or None)


async def attach_container_names(tabs: Sequence[Tab], tab_source: TabSource) -> List[Tab]:
    return list(await asyncio.gather(*(_with_container(tab, tab_source) for tab in tabs)))


async def resolve_context_state(
    base_tab: Tab,
    tab_source: TabSource,
    cfg: CopyConfig,
    *,
    mode: Optional[str] = None,
    selected_tabs: Optional[Sequence[Tab]] = None,
    tree_provider: Optional[TreeProvider] = None,
    with_container: bool = False,
) -> ContextState:
    if mode is None:
        mode = cfg.fallback_for_single_tab
    if selected_tabs is None:
        selected_tabs = await get_multiselected_tabs(base_tab, tab_source)
    selected = list(selected_tabs)

    is_all = mode == COPY_ALL
    should_collect_tree = mode in (COPY_TREE, COPY_TREE_DESCENDANTS)
    tree: Optional[TreeNode] = None
    if len(selected) == 1 and should_collect_tree and tree_provider is not None:
        try:
            tree = await tree_provider.get_tree(base_tab.id)
        except Exception as exc:
            log.debug("tree provider unavailable: %s", exc)
            tree = None
    is_tree = bool(tree is not None and tree.children)
    only_descendants = is_tree and mode == COPY_TREE_DESCENDANTS
    log.debug("isTree: %s onlyDescendants: %s", is_tree, only_descendants)

    if is_tree:
        roots = [] if only_descendants else [tree]
        has_multiple_tabs = len(roots) + len(tree.children) > 1
    else:
        has_multiple_tabs = len(selected) > 1

    if is_all:
        try:
            tabs = list(await tab_source.query_visible(base_tab.window_id))
        except Exception as exc:
            log.debug("cannot query tabs of window %s: %s", base_tab.window_id, exc)
            tabs = []
    elif is_tree:
        tabs = await collect_tabs_from_tree(
            tree, base_tab.window_id, tab_source, only_descendants=only_descendants
        )
    else:
        tabs = selected

    if with_container:
        tabs = await attach_container_names(tabs, tab_source)

    return ContextState(
        is_all=is_all,
        is_tree=is_tree,
        only_descendants=only_descendants,
        has_multiple_tabs=has_multiple_tabs,
        tabs=tuple(tabs),
    )
