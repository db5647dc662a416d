"""Data models for tabs, tree nodes, render passes and clipboard delivery."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Tab:
    id: int
    window_id: int
    title: str
    url: str
    container: Optional[str] = None
    discarded: bool = False
    active: bool = False
    highlighted: bool = False
    index: int = 0
    cookie_store_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Tab":
        return cls(
            id=int(data["id"]),
            window_id=int(data.get("windowId", data.get("window_id", 0)) or 0),
            title=str(data.get("title") or ""),
            url=str(data.get("url") or ""),
            container=data.get("container") or None,
            discarded=bool(data.get("discarded", False)),
            active=bool(data.get("active", False)),
            highlighted=bool(data.get("highlighted", False)),
            index=int(data.get("index", 0) or 0),
            cookie_store_id=data.get("cookieStoreId") or None,
        )


@dataclass(frozen=True)
class TreeNode:
    id: int
    children: Tuple["TreeNode", ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "TreeNode":
        return cls(
            id=int(data["id"]),
            children=tuple(cls.from_dict(child) for child in data.get("children") or []),
        )


@dataclass
class RenderContext:
    tab: Tab
    indent_level: int = 0
    line_feed: str = "\n"
    time_utc: str = ""
    time_local: str = ""
    author: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None


@dataclass(frozen=True)
class RenderedItem:
    plain_text: str
    # "" means plain text only.
    rich_text: str = ""


@dataclass(frozen=True)
class ClipboardPayload:
    plain_text: str
    rich_text: str = ""
    count: int = 0

    @property
    def has_rich_text(self) -> bool:
        return bool(self.rich_text)


@dataclass(frozen=True)
class DeliveryOutcome:
    success: bool
    count: int
    plain_text: str
    strategy: str = ""
    error: Optional[BaseException] = field(default=None, compare=False)
