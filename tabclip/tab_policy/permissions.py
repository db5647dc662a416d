"""Whether page metadata may be read from a tab by script injection."""

from __future__ import annotations

from typing import Iterable

from ..config import CopyConfig
from ..models import Tab
from .matching import host_matches_base, url_host


def is_privileged_url(url: str, prefixes: Iterable[str]) -> bool:
    low = (url or "").strip().lower()
    return any(low.startswith(prefix) for prefix in prefixes)


def is_permitted_tab(tab: Tab, cfg: CopyConfig) -> bool:
    if not tab.url or is_privileged_url(tab.url, cfg.privileged_prefixes):
        return False
    host = url_host(tab.url)
    return not any(host_matches_base(host, base) for base in cfg.restricted_domains)
