"""Recursive evaluation of parsed format strings against a render context."""

from __future__ import annotations

from typing import Tuple

from ..errors import UnknownFunctionError
from ..models import RenderContext
from .template import Argument, FunctionalToken, Literal, NestedToken, Node, parse_template, referenced_names
from .tokens import FIXED_TOKENS, FUNCTIONS, INDENT_TOKENS, METADATA_TOKENS, NESTED_TOKENS, RICH_TEXT_TOKEN


def fill_placeholders(fmt: str, ctx: RenderContext) -> str:
    """Render ``fmt`` for one tab.

    Raises ``TemplateSyntaxError`` or ``UnknownFunctionError``; callers decide
    how to surface them.
    """
    return _evaluate(parse_template(fmt), ctx)


def _evaluate(nodes: Tuple[Node, ...], ctx: RenderContext) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(node.text)
        elif isinstance(node, NestedToken):
            handler = NESTED_TOKENS[node.name]
            parts.append(handler(ctx, node.args, lambda arg: _render_argument(arg, ctx)))
        elif isinstance(node, FunctionalToken):
            parts.append(_call_function(node, ctx))
        else:
            resolver = FIXED_TOKENS.get(node.name)
            parts.append(resolver(ctx) if resolver else node.raw)
    return "".join(parts)


def _render_argument(arg: Argument, ctx: RenderContext) -> str:
    return _evaluate(arg.nodes, ctx)


def _call_function(node: FunctionalToken, ctx: RenderContext) -> str:
    function = FUNCTIONS.get(node.name)
    if function is None:
        raise UnknownFunctionError(node.name)
    prefix = node.args[0].raw if len(node.args) > 0 else ""
    suffix = node.args[1].raw if len(node.args) > 1 else ""
    return function(ctx, prefix, suffix)


def wants_rich_text(fmt: str) -> bool:
    return RICH_TEXT_TOKEN in referenced_names(fmt)


def wants_indent(fmt: str) -> bool:
    return bool(INDENT_TOKENS & referenced_names(fmt))


def wants_page_metadata(fmt: str) -> bool:
    return bool(METADATA_TOKENS & referenced_names(fmt))
