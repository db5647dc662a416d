#!/usr/bin/env python3
"""Render tabs from a JSON snapshot and copy them to the system clipboard.

usage: tabclip [-v] [--config PATH] [--format FMT | --preset N] [--print] [--crlf] TABS.json

TABS.json is either a list of tab objects or {"tabs": [...], "tree": [...]}, where
"tree" holds {"id": ..., "children": [...]} nodes used for %TST_INDENT%.

Exit codes: 0 copied (or printed), 1 delivery failed, 2 usage error.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .clipboard.backends import SystemClipboard
from .commands import Platform, copy_to_clipboard
from .config import load_cfg, load_config
from .models import Tab, TreeNode
from .notify import DesktopNotificationCenter, Notifier
from .render.orchestrator import fetch_indent_levels, render_tabs

USAGE = "usage: tabclip [-v] [--config PATH] [--format FMT | --preset N] [--print] [--crlf] TABS.json"


class UsageError(Exception):
    pass


@dataclass
class CliOptions:
    tabs_path: Path
    verbose: bool = False
    config_path: Optional[Path] = None
    fmt: Optional[str] = None
    preset: int = 0
    print_only: bool = False
    crlf: bool = False


def _take_value(args: List[str], idx: int, flag: str) -> Tuple[str, int]:
    arg = args[idx]
    if arg.startswith(flag + "="):
        return arg.split("=", 1)[1], idx
    if idx + 1 >= len(args):
        raise UsageError(f"{flag} requires a value")
    return args[idx + 1], idx + 1


def parse_args(argv: Sequence[str]) -> CliOptions:
    args = list(argv[1:])
    verbose = print_only = crlf = False
    config_path: Optional[Path] = None
    fmt: Optional[str] = None
    preset: Optional[int] = None
    rest: List[str] = []
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("-v", "--verbose"):
            verbose = True
        elif arg == "--print":
            print_only = True
        elif arg == "--crlf":
            crlf = True
        elif arg == "--config" or arg.startswith("--config="):
            value, idx = _take_value(args, idx, "--config")
            config_path = Path(value).expanduser()
        elif arg == "--format" or arg.startswith("--format="):
            fmt, idx = _take_value(args, idx, "--format")
        elif arg == "--preset" or arg.startswith("--preset="):
            value, idx = _take_value(args, idx, "--preset")
            try:
                preset = int(value)
            except ValueError:
                raise UsageError(f"invalid --preset value: {value}")
        elif arg in ("-h", "--help"):
            raise UsageError(USAGE)
        elif arg.startswith("-") and arg != "-":
            raise UsageError(f"unknown option: {arg}")
        else:
            rest.append(arg)
        idx += 1
    if fmt is not None and preset is not None:
        raise UsageError("--format and --preset are mutually exclusive")
    if len(rest) != 1:
        raise UsageError(USAGE)
    return CliOptions(
        tabs_path=Path(rest[0]).expanduser(),
        verbose=verbose,
        config_path=config_path,
        fmt=fmt,
        preset=preset or 0,
        print_only=print_only,
        crlf=crlf,
    )


def load_tabs(data: object) -> Tuple[List[Tab], List[TreeNode]]:
    if isinstance(data, list):
        raw_tabs, raw_tree = data, []
    elif isinstance(data, dict):
        raw_tabs, raw_tree = data.get("tabs") or [], data.get("tree") or []
    else:
        raise ValueError("tabs document must be a list or an object with a 'tabs' list")
    tabs = [Tab.from_dict(item) for item in raw_tabs]
    forest = [TreeNode.from_dict(item) for item in raw_tree]
    return tabs, forest


class StaticTreeProvider:
    """Tree provider backed by a tree snapshot shipped with the tabs."""

    def __init__(self, forest: Sequence[TreeNode]):
        self._nodes: Dict[int, TreeNode] = {}
        stack = list(forest)
        while stack:
            node = stack.pop()
            self._nodes.setdefault(node.id, node)
            stack.extend(node.children)

    async def get_tree(self, tab_id: int) -> Optional[TreeNode]:
        return self._nodes.get(tab_id)

    async def get_trees(self, tab_ids: Sequence[int]) -> List[TreeNode]:
        return [self._nodes[tab_id] for tab_id in tab_ids if tab_id in self._nodes]


async def _render_only(tabs, fmt, cfg, tree_provider):
    levels = await fetch_indent_levels(tabs, fmt, tree_provider)
    return await render_tabs(tabs, fmt, cfg, indent_levels=levels)


def main(argv: List[str]) -> int:
    try:
        opts = parse_args(argv)
    except UsageError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    stored_cfg = load_cfg(opts.config_path) if opts.config_path else None
    # Desktop notifications cannot report clicks; do not wait on them.
    override_cfg: Dict = {"notificationTimeout": 0}
    if opts.crlf:
        override_cfg["useCRLF"] = True
    cfg = load_config(stored_cfg, override_cfg)

    logging.basicConfig(
        level=logging.DEBUG if opts.verbose or cfg.debug else logging.WARNING,
        format="[tabclip] %(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if opts.fmt is not None:
        fmt = opts.fmt
    else:
        try:
            fmt = cfg.preset(opts.preset).format
        except IndexError:
            print(f"no format preset #{opts.preset} (have {len(cfg.formats)})", file=sys.stderr)
            return 2

    tabs, forest = load_tabs(json.loads(opts.tabs_path.read_text(encoding="utf-8")))
    tree_provider = StaticTreeProvider(forest) if forest else None

    if opts.print_only:
        payload = asyncio.run(_render_only(tabs, fmt, cfg, tree_provider))
        sys.stdout.write(payload.plain_text)
        return 0

    platform = Platform(
        clipboard=SystemClipboard(),
        notifier=Notifier(DesktopNotificationCenter()),
        tree_provider=tree_provider,
    )
    outcome = asyncio.run(copy_to_clipboard(tabs, fmt, cfg, platform))
    if not outcome.success:
        print(f"failed to copy: {outcome.error}", file=sys.stderr)
        return 1
    return 0


def run() -> int:
    return main(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
