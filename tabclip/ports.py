"""Collaborator contracts consumed by the renderer and the clipboard pipeline.

Browsers, tree-style tab managers, clipboards and notification centres are
provided by the host; tabclip only talks to them through these protocols.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Protocol, Sequence, Tuple

from .models import Tab, TreeNode


class TabSource(Protocol):
    async def query_highlighted(self, window_id: int) -> Sequence[Tab]:
        ...

    async def query_visible(self, window_id: int) -> Sequence[Tab]:
        ...

    async def query_all(self, window_id: int) -> Sequence[Tab]:
        ...

    async def container_name(self, cookie_store_id: str) -> Optional[str]:
        """Display name of a container; raises when it cannot be resolved."""
        ...


class TreeProvider(Protocol):
    async def get_tree(self, tab_id: int) -> Optional[TreeNode]:
        ...

    async def get_trees(self, tab_ids: Sequence[int]) -> Sequence[TreeNode]:
        """One node per id, children populated."""
        ...


class ContentExtractor(Protocol):
    async def extract(self, tab_id: int) -> Mapping[str, Optional[str]]:
        """Return ``author``/``description``/``keywords`` read from the page."""
        ...


class ClipboardBackend(Protocol):
    async def write_text(self, text: str) -> None:
        ...

    async def write(self, items: Mapping[str, str]) -> None:
        """Write several MIME representations at once.

        Raises ``ClipboardCapabilityAbsent`` when the platform cannot.
        """
        ...


class CopyEvent(Protocol):
    def set_data(self, mime_type: str, data: str) -> None:
        ...

    def prevent_default(self) -> None:
        ...

    def stop_immediate_propagation(self) -> None:
        ...


class SurfaceProvider(Protocol):
    async def create_tab(self, window_id: int, index: int) -> int:
        """Open a blank, inactive tab and return its id."""
        ...

    async def create_window(self) -> Tuple[int, int]:
        """Open a small blank window and return ``(window_id, tab_id)``."""
        ...

    async def remove_tab(self, tab_id: int) -> None:
        ...

    async def remove_window(self, window_id: int) -> None:
        ...

    async def add_copy_listener(self, tab_id: int, listener: Callable[[CopyEvent], None]) -> Callable[[], None]:
        """Install a capturing copy listener in the tab; returns its remover."""
        ...

    async def exec_copy(self, tab_id: int) -> None:
        """Trigger the native copy command inside the tab."""
        ...


class NotificationCenter(Protocol):
    async def create(self, title: str, message: str, icon: Optional[str] = None) -> str:
        ...

    def on_clicked(self, listener: Callable[[str], None]) -> Callable[[], None]:
        ...

    def on_closed(self, listener: Callable[[str], None]) -> Callable[[], None]:
        ...

    async def clear(self, notification_id: str) -> None:
        ...

    async def open_url(self, url: str) -> None:
        ...
