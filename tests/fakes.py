"""In-memory collaborators for tests."""

from __future__ import annotations

from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from tabclip.errors import ClipboardCapabilityAbsent, ClipboardWriteError
from tabclip.models import Tab, TreeNode


def make_tab(tab_id: int = 1, **overrides) -> Tab:
    base = {
        "id": tab_id,
        "window_id": 1,
        "title": f"Tab {tab_id}",
        "url": f"https://example.com/{tab_id}",
        "index": tab_id,
    }
    base.update(overrides)
    return Tab(**base)


class FakeClipboard:
    def __init__(self, *, supports_write: bool = True, fail_text: bool = False, fail_write: bool = False):
        self.supports_write = supports_write
        self.fail_text = fail_text
        self.fail_write = fail_write
        self.text_writes: List[str] = []
        self.writes: List[Dict[str, str]] = []

    async def write_text(self, text: str) -> None:
        if self.fail_text:
            raise ClipboardWriteError("text write rejected")
        self.text_writes.append(text)

    async def write(self, items: Mapping[str, str]) -> None:
        if not self.supports_write:
            raise ClipboardCapabilityAbsent("no clipboard.write")
        if self.fail_write:
            raise ClipboardWriteError("rich write rejected")
        self.writes.append(dict(items))


class FakeCopyEvent:
    def __init__(self):
        self.data: Dict[str, str] = {}
        self.default_prevented = False
        self.propagation_stopped = False

    def set_data(self, mime_type: str, data: str) -> None:
        self.data[mime_type] = data

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_immediate_propagation(self) -> None:
        self.propagation_stopped = True


class FakeSurfaces:
    """Temporary tab/window provider that records every call."""

    def __init__(
        self,
        *,
        tab_fails: bool = False,
        window_fails: bool = False,
        copy_events_enabled: bool = True,
        exec_fails: bool = False,
    ):
        self.tab_fails = tab_fails
        self.window_fails = window_fails
        self.copy_events_enabled = copy_events_enabled
        self.exec_fails = exec_fails
        self.created_tabs: List[Tuple[int, int]] = []
        self.created_windows: List[int] = []
        self.removed_tabs: List[int] = []
        self.removed_windows: List[int] = []
        self.listeners: Dict[int, List[Callable]] = {}
        self.events: List[FakeCopyEvent] = []
        self._next_id = 100

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    async def create_tab(self, window_id: int, index: int) -> int:
        if self.tab_fails:
            raise RuntimeError(f"no window {window_id}")
        tab_id = self._new_id()
        self.created_tabs.append((window_id, index))
        return tab_id

    async def create_window(self) -> Tuple[int, int]:
        if self.window_fails:
            raise RuntimeError("cannot open window")
        window_id = self._new_id()
        self.created_windows.append(window_id)
        return window_id, self._new_id()

    async def remove_tab(self, tab_id: int) -> None:
        self.removed_tabs.append(tab_id)

    async def remove_window(self, window_id: int) -> None:
        self.removed_windows.append(window_id)

    async def add_copy_listener(self, tab_id: int, listener: Callable) -> Callable[[], None]:
        self.listeners.setdefault(tab_id, []).append(listener)
        return lambda: self.listeners[tab_id].remove(listener)

    async def exec_copy(self, tab_id: int) -> None:
        if self.exec_fails:
            raise RuntimeError("script injection failed")
        if not self.copy_events_enabled:
            return
        event = FakeCopyEvent()
        self.events.append(event)
        for listener in list(self.listeners.get(tab_id, [])):
            listener(event)

    @property
    def release_count(self) -> int:
        return len(self.removed_tabs) + len(self.removed_windows)


class FakeNotificationCenter:
    def __init__(self, *, click: bool = False, close: bool = False):
        self.click = click
        self.close = close
        self.created: List[Tuple[str, str]] = []
        self.cleared: List[str] = []
        self.opened: List[str] = []
        self.clicked_listeners: List[Callable[[str], None]] = []
        self.closed_listeners: List[Callable[[str], None]] = []

    async def create(self, title: str, message: str, icon: Optional[str] = None) -> str:
        self.created.append((title, message))
        return f"n{len(self.created)}"

    def _register(self, bucket: List, listener: Callable[[str], None]) -> Callable[[], None]:
        bucket.append(listener)
        return lambda: bucket.remove(listener)

    def on_clicked(self, listener: Callable[[str], None]) -> Callable[[], None]:
        remove = self._register(self.clicked_listeners, listener)
        if self.click:
            listener(f"n{len(self.created)}")
        return remove

    def on_closed(self, listener: Callable[[str], None]) -> Callable[[], None]:
        remove = self._register(self.closed_listeners, listener)
        if self.close:
            listener(f"n{len(self.created)}")
        return remove

    async def clear(self, notification_id: str) -> None:
        self.cleared.append(notification_id)

    async def open_url(self, url: str) -> None:
        self.opened.append(url)


class FakeTreeProvider:
    def __init__(self, forest: Sequence[TreeNode], *, fails: bool = False):
        self.fails = fails
        self.nodes: Dict[int, TreeNode] = {}
        stack = list(forest)
        while stack:
            node = stack.pop()
            self.nodes.setdefault(node.id, node)
            stack.extend(node.children)
        self.calls = 0

    async def get_tree(self, tab_id: int) -> Optional[TreeNode]:
        if self.fails:
            raise RuntimeError("tree provider is not installed")
        return self.nodes.get(tab_id)

    async def get_trees(self, tab_ids: Sequence[int]) -> List[TreeNode]:
        self.calls += 1
        if self.fails:
            raise RuntimeError("tree provider is not installed")
        return [self.nodes[tab_id] for tab_id in tab_ids if tab_id in self.nodes]


class FakeExtractor:
    def __init__(self, fields: Optional[Mapping[str, str]] = None, *, error: Optional[Exception] = None):
        self.fields = dict(fields or {})
        self.error = error
        self.calls: List[int] = []

    async def extract(self, tab_id: int) -> Mapping[str, str]:
        self.calls.append(tab_id)
        if self.error is not None:
            raise self.error
        return self.fields


class FakeTabSource:
    def __init__(
        self,
        tabs: Sequence[Tab],
        *,
        containers: Optional[Mapping[str, str]] = None,
        visible_fails: bool = False,
    ):
        self.tabs = list(tabs)
        self.containers = dict(containers or {})
        self.visible_fails = visible_fails

    async def query_highlighted(self, window_id: int) -> List[Tab]:
        return [tab for tab in self.tabs if tab.window_id == window_id and tab.highlighted]

    async def query_visible(self, window_id: int) -> List[Tab]:
        if self.visible_fails:
            raise RuntimeError("window closed")
        return [tab for tab in self.tabs if tab.window_id == window_id]

    async def query_all(self, window_id: int) -> List[Tab]:
        return [tab for tab in self.tabs if tab.window_id == window_id]

    async def container_name(self, cookie_store_id: str) -> Optional[str]:
        if cookie_store_id not in self.containers:
            raise LookupError(f"No contextual identity for {cookie_store_id}")
        return self.containers[cookie_store_id]
