"""Indent levels of selected tabs, counted over selected ancestors only."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..models import TreeNode


def collect_ancestors(forest: Iterable[TreeNode]) -> Dict[int, List[int]]:
    """Map every node id in ``forest`` to its ancestor ids, nearest first.

    A tab can show up both as a root and inside another root's subtree (the
    tree provider returns one node per requested id); the longest chain wins.
    """
    ancestors: Dict[int, List[int]] = {}
    stack = [(root, []) for root in reversed(list(forest))]
    while stack:
        node, chain = stack.pop()
        known = ancestors.get(node.id)
        if known is None or len(chain) > len(known):
            ancestors[node.id] = chain
        child_chain = [node.id] + chain
        for child in reversed(node.children):
            stack.append((child, child_chain))
    return ancestors


def _topmost(selected: Sequence[int], ancestors: Dict[int, List[int]]) -> Optional[int]:
    members = set(selected)
    for tab_id in selected:
        if not any(a in members for a in ancestors.get(tab_id, [])):
            return tab_id
    return selected[0] if selected else None


def compute_indent_levels(
    forest: Iterable[TreeNode],
    selected_ids: Sequence[int],
    *,
    only_descendants: bool = False,
) -> Dict[int, int]:
    """Return ``{tab_id: level}`` for every tab that ends up in the output.

    With ``only_descendants`` the topmost selected tab is dropped from the
    output and no longer counts as an ancestor of the remaining tabs.
    """
    ancestors = collect_ancestors(forest)
    selected = list(dict.fromkeys(selected_ids))
    if only_descendants and selected:
        root = _topmost(selected, ancestors)
        selected = [tab_id for tab_id in selected if tab_id != root]
    members = set(selected)
    return {
        tab_id: sum(1 for ancestor in ancestors.get(tab_id, []) if ancestor in members)
        for tab_id in selected
    }
