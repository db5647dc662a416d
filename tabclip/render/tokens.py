"""Token tables: fixed substitutions, functional placeholders and nested tokens.

Names are upper-case; format strings match them case-insensitively.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Dict, Optional, Sequence

from ..errors import TemplateSyntaxError
from ..models import RenderContext
from .sanitize import escape_html, escape_markdown, escape_markdown_link_title

if TYPE_CHECKING:
    from .template import Argument

Resolver = Callable[[RenderContext], str]
Function = Callable[[RenderContext, str, str], str]
NestedHandler = Callable[[RenderContext, Sequence["Argument"], Callable[["Argument"], str]], str]

DEFAULT_INDENT = "  "

FIXED_TOKENS: Dict[str, Resolver] = {}


def _renderings(names: Sequence[str], getter: Resolver, *, html: bool = True) -> None:
    for name in names:
        FIXED_TOKENS[name] = getter
        if html:
            FIXED_TOKENS[f"{name}_HTML"] = lambda ctx: escape_html(getter(ctx))
            FIXED_TOKENS[f"{name}_HTMLIFIED"] = FIXED_TOKENS[f"{name}_HTML"]
        FIXED_TOKENS[f"{name}_MD"] = lambda ctx: escape_markdown(getter(ctx))
        FIXED_TOKENS[f"{name}_MD_LINK_TITLE"] = lambda ctx: escape_markdown_link_title(getter(ctx))


def _labelled(escape: Callable[[str], str]) -> Resolver:
    def resolve(ctx: RenderContext) -> str:
        label = ctx.tab.container
        return f"{escape(label)}: " if label else ""

    return resolve


def _container_url(escape: Callable[[str], str]) -> Resolver:
    def resolve(ctx: RenderContext) -> str:
        url = escape(ctx.tab.url)
        if ctx.tab.container:
            return f"ext+container:name={ctx.tab.container}&url={url}"
        return url

    return resolve


def _blank(_ctx: RenderContext) -> str:
    return ""


_renderings(("URL",), lambda ctx: ctx.tab.url)
_renderings(("TITLE", "TEXT"), lambda ctx: ctx.tab.title)
_renderings(("AUTHOR",), lambda ctx: ctx.author or "")
_renderings(("DESCRIPTION", "DESC"), lambda ctx: ctx.description or "")
_renderings(("KEYWORDS",), lambda ctx: ctx.keywords or "")
_renderings(("UTC_TIME",), lambda ctx: ctx.time_utc, html=False)
_renderings(("LOCAL_TIME",), lambda ctx: ctx.time_local, html=False)

for _name in ("CONTAINER_NAME", "CONTAINER_TITLE"):
    FIXED_TOKENS[_name] = _labelled(lambda text: text)
    FIXED_TOKENS[f"{_name}_HTML"] = _labelled(escape_html)
    FIXED_TOKENS[f"{_name}_HTMLIFIED"] = _labelled(escape_html)
    FIXED_TOKENS[f"{_name}_MD"] = _labelled(escape_markdown)
    FIXED_TOKENS[f"{_name}_MD_LINK_TITLE"] = _labelled(escape_markdown_link_title)

FIXED_TOKENS["CONTAINER_URL"] = _container_url(lambda text: text)
FIXED_TOKENS["CONTAINER_URL_HTML"] = _container_url(escape_html)
FIXED_TOKENS["CONTAINER_URL_HTMLIFIED"] = _container_url(escape_html)

FIXED_TOKENS["TAB"] = lambda _ctx: "\t"
FIXED_TOKENS["EOL"] = lambda ctx: ctx.line_feed
# Rich-text marker: only a signal, never output.
FIXED_TOKENS["RT"] = _blank

# Reserved: selection text and reverse links are not captured yet.
for _name in ("SEL", "SEL_HTML", "SEL_HTMLIFIED", "RLINK", "RLINK_HTML", "RLINK_HTMLIFIED"):
    FIXED_TOKENS[_name] = _blank


def _container_function(escape: Optional[Callable[[str], str]]) -> Function:
    def call(ctx: RenderContext, prefix: str, suffix: str) -> str:
        if not ctx.tab.container:
            return ""
        text = f"{prefix}{ctx.tab.container}{suffix}"
        return escape(text) if escape else text

    return call


FUNCTIONS: Dict[str, Function] = {
    "CONTAINER_NAME": _container_function(None),
    "CONTAINER_NAME_HTML": _container_function(escape_html),
    "CONTAINER_NAME_HTMLIFIED": _container_function(escape_html),
    "CONTAINER_TITLE": _container_function(None),
    "CONTAINER_TITLE_HTML": _container_function(escape_html),
    "CONTAINER_TITLE_HTMLIFIED": _container_function(escape_html),
}


def _tst_indent(ctx: RenderContext, args, render) -> str:
    indenters = [render(arg) for arg in args] or [DEFAULT_INDENT]
    # The last group sits next to the text; the first repeats outwards.
    indenters.reverse()
    indent = ""
    for level in range(max(0, ctx.indent_level)):
        indent = indenters[min(level, len(indenters) - 1)] + indent
    return indent


def _replace(ctx: RenderContext, args, render) -> str:
    if not args:
        raise TemplateSyntaxError("%REPLACE% needs an input argument")
    pairs = list(args[1:])
    if len(pairs) % 2:
        raise TemplateSyntaxError(
            f"%REPLACE% needs pattern/replacement pairs, got {len(pairs)} extra argument(s)"
        )
    text = render(args[0])
    for pattern_arg, replacement_arg in zip(pairs[::2], pairs[1::2]):
        try:
            text = re.sub(pattern_arg.raw, replacement_arg.raw, text)
        except (re.error, IndexError) as exc:
            raise TemplateSyntaxError(
                f"Invalid %REPLACE% pattern {pattern_arg.raw!r} -> {replacement_arg.raw!r}: {exc}"
            ) from exc
    return text


NESTED_TOKENS: Dict[str, NestedHandler] = {
    "TST_INDENT": _tst_indent,
    "REPLACE": _replace,
}

INDENT_TOKENS = frozenset({"TST_INDENT"})
METADATA_TOKENS = frozenset(
    name
    for name in FIXED_TOKENS
    if name.split("_")[0] in {"AUTHOR", "DESC", "DESCRIPTION", "KEYWORDS"}
)
RICH_TEXT_TOKEN = "RT"
