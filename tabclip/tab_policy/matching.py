"""Hostname helpers for restricted-domain checks."""

from __future__ import annotations

import urllib.parse


def host_matches_base(host: str, base: str) -> bool:
    """True when ``host`` is ``base`` or one of its subdomains."""
    host_norm = (host or "").strip().lower()
    base_norm = (base or "").strip().lower()
    if not host_norm or not base_norm:
        return False
    return host_norm == base_norm or host_norm.endswith("." + base_norm)


def url_host(url: str) -> str:
    try:
        return (urllib.parse.urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""
