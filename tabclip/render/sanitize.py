"""Text escaping for HTML and Markdown placeholder renderings.

None of these are idempotent: escape raw text exactly once.
"""

from __future__ import annotations

import re

_MD_SPECIAL_RE = re.compile(r"[-!\"#$%&'()*+,./:;<=>?@^_`{|}~\[\\\]]")
_MD_LINK_TITLE_SPECIAL_RE = re.compile(r"[\"'()&\\]")


def escape_html(text: str) -> str:
    # Ampersand first so the entities introduced below are not escaped again.
    return (
        text.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def escape_markdown(text: str) -> str:
    return _MD_SPECIAL_RE.sub(lambda m: "\\" + m.group(0), text)


def escape_markdown_link_title(text: str) -> str:
    return _MD_LINK_TITLE_SPECIAL_RE.sub(lambda m: "\\" + m.group(0), text)
