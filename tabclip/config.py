"""Configuration defaults, layering, and the immutable per-call config value."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

COPY_SINGLE_TAB = "single"
COPY_TREE = "tree"
COPY_TREE_DESCENDANTS = "tree-descendants"
COPY_ALL = "all"
COPY_MODES = (COPY_SINGLE_TAB, COPY_TREE, COPY_TREE_DESCENDANTS, COPY_ALL)

DEFAULT_FORMATS: List[Dict[str, str]] = [
    {"label": "URL", "format": "%URL%"},
    {"label": "Title and URL", "format": "%TITLE%%EOL%%URL%"},
    {"label": "HTML Link", "format": '<a title="%TITLE_HTML%" href="%URL_HTML%">%TITLE_HTML%</a>'},
    {"label": "Markdown", "format": '[%TITLE_MD%](%URL% "%TITLE_MD_LINK_TITLE%")'},
    {"label": "Markdown List", "format": '%TST_INDENT(  )%* [%TITLE_MD%](%URL% "%TITLE_MD_LINK_TITLE%")'},
]

DEFAULT_MESSAGES: Dict[str, str] = {
    "error_discarded_author": "(author unavailable: tab is discarded)",
    "error_discarded_description": "(description unavailable: tab is discarded)",
    "error_discarded_keywords": "(keywords unavailable: tab is discarded)",
    "error_unpermitted_author": "(author unavailable: page is not accessible)",
    "error_unpermitted_description": "(description unavailable: page is not accessible)",
    "error_unpermitted_keywords": "(keywords unavailable: page is not accessible)",
    "error_failed_author": "(failed to get author: {0})",
    "error_failed_description": "(failed to get description: {0})",
    "error_failed_keywords": "(failed to get keywords: {0})",
    "notification_copied_title": "Copied",
    "notification_copied_message": "{1}",
    "notification_copied_multiple_title": "Copied {0} tabs",
    "notification_copied_multiple_message": "{0} tabs copied:\n{1}",
    "notification_failedToCopy_title": "Failed to copy",
    "notification_failedToCopy_message": "Could not write to the clipboard: {0}",
}

DEFAULT_CFG: Dict = {
    "useCRLF": False,
    "reportErrors": False,
    "shouldNotifyResult": True,
    "notificationTimeout": 10.0,
    "copyToClipboardFormats": DEFAULT_FORMATS,
    "fallbackForSingleTab": COPY_SINGLE_TAB,
    "privilegedPrefixes": [
        "about:",
        "chrome:",
        "chrome-extension://",
        "moz-extension://",
        "resource://",
        "view-source:",
        "data:",
        "javascript:",
    ],
    "restrictedDomains": [
        "accounts-static.cdn.mozilla.net",
        "accounts.firefox.com",
        "addons.cdn.mozilla.net",
        "addons.mozilla.org",
        "api.accounts.firefox.com",
        "content.cdn.mozilla.net",
        "discovery.addons.mozilla.org",
        "install.mozilla.org",
        "oauth.accounts.firefox.com",
        "profile.accounts.firefox.com",
        "support.mozilla.org",
        "sync.services.mozilla.com",
    ],
    "messages": {},
    "debug": False,
}


def merge_cfg(payload_cfg: Dict | None, override_cfg: Dict | None) -> Dict:
    merged = dict(DEFAULT_CFG)
    if payload_cfg:
        merged.update(payload_cfg)
    if override_cfg:
        merged.update(override_cfg)
    return merged


def load_cfg(p: Path) -> dict:
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    return json.loads(p.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class FormatPreset:
    label: str
    format: str


@dataclass(frozen=True)
class CopyConfig:
    """Read-only settings threaded through one render + delivery pass."""

    use_crlf: bool = False
    report_errors: bool = False
    should_notify_result: bool = True
    notification_timeout: float = 10.0
    formats: Tuple[FormatPreset, ...] = ()
    fallback_for_single_tab: str = COPY_SINGLE_TAB
    privileged_prefixes: Tuple[str, ...] = ()
    restricted_domains: Tuple[str, ...] = ()
    messages: Mapping[str, str] = field(default_factory=dict)
    debug: bool = False

    @property
    def line_feed(self) -> str:
        return "\r\n" if self.use_crlf else "\n"

    def message(self, key: str, *args: object) -> str:
        template = self.messages.get(key, DEFAULT_MESSAGES.get(key))
        if template is None:
            return key
        return template.format(*args)

    def preset(self, index: int) -> FormatPreset:
        return self.formats[index]

    @classmethod
    def from_cfg(cls, cfg: Dict) -> "CopyConfig":
        formats = tuple(
            FormatPreset(label=str(entry.get("label") or ""), format=str(entry.get("format") or ""))
            for entry in cfg.get("copyToClipboardFormats") or []
            if isinstance(entry, dict)
        )
        mode = str(cfg.get("fallbackForSingleTab") or COPY_SINGLE_TAB).strip().lower()
        if mode not in COPY_MODES:
            mode = COPY_SINGLE_TAB
        messages = dict(DEFAULT_MESSAGES)
        messages.update(cfg.get("messages") or {})
        return cls(
            use_crlf=bool(cfg.get("useCRLF", False)),
            report_errors=bool(cfg.get("reportErrors", False)),
            should_notify_result=bool(cfg.get("shouldNotifyResult", True)),
            notification_timeout=float(cfg.get("notificationTimeout", 10.0)),
            formats=formats,
            fallback_for_single_tab=mode,
            privileged_prefixes=tuple(str(p).lower() for p in cfg.get("privilegedPrefixes") or []),
            restricted_domains=tuple(str(d).lower() for d in cfg.get("restrictedDomains") or []),
            messages=messages,
            debug=bool(cfg.get("debug", False)),
        )


def load_config(
    payload_cfg: Optional[Dict] = None,
    override_cfg: Optional[Dict] = None,
) -> CopyConfig:
    return CopyConfig.from_cfg(merge_cfg(payload_cfg, override_cfg))
