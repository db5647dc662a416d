"""Tokenizer/parser for placeholder format strings.

A format string parses into a flat tuple of nodes:

- ``Literal``: text copied verbatim.
- ``FixedToken``: ``%NAME%`` looked up in the fixed-token table.
- ``FunctionalToken``: ``%NAME(prefix)(suffix)%`` calling a named function.
- ``NestedToken``: ``%TST_INDENT(...)%`` / ``%REPLACE(...)%``, whose arguments are
  themselves parsed templates rendered against the same context.

Argument groups use ``()``, ``[]``, ``{}`` or ``<>``. A group whose first
non-blank character is ``"`` holds comma-separated quoted strings instead of
one literal argument. Unknown ``%NAME%`` markers stay as literal text.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set, Tuple, Union

from ..errors import TemplateSyntaxError
from .tokens import FIXED_TOKENS, FUNCTIONS, NESTED_TOKENS

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_LOOSE_NAME_RE = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)")
_CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class FixedToken:
    name: str
    raw: str


@dataclass(frozen=True)
class Argument:
    raw: str
    nodes: Tuple["Node", ...]


@dataclass(frozen=True)
class FunctionalToken:
    name: str
    args: Tuple[Argument, ...]
    raw: str


@dataclass(frozen=True)
class NestedToken:
    name: str
    args: Tuple[Argument, ...]
    raw: str


Node = Union[Literal, FixedToken, FunctionalToken, NestedToken]


class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.length = len(source)

    def parse(self) -> Tuple[Node, ...]:
        s = self.source
        nodes: List[Node] = []
        buf: List[str] = []
        i = 0
        while i < self.length:
            if s[i] != "%":
                buf.append(s[i])
                i += 1
                continue
            token, end = self._token_at(i)
            if token is None:
                buf.append(s[i:end])
            else:
                if buf:
                    nodes.append(Literal("".join(buf)))
                    buf = []
                nodes.append(token)
            i = end
        if buf:
            nodes.append(Literal("".join(buf)))
        return tuple(nodes)

    def _token_at(self, i: int) -> Tuple[Optional[Node], int]:
        s = self.source
        m = _NAME_RE.match(s, i + 1)
        if not m:
            return None, i + 1
        name = m.group(0).upper()
        j = m.end()
        if j >= self.length:
            return None, j

        if s[j] == "%":
            raw = s[i : j + 1]
            if name in NESTED_TOKENS:
                return NestedToken(name, (), raw), j + 1
            if name in FIXED_TOKENS:
                return FixedToken(name, raw), j + 1
            # Resume at the closing "%" so it can open the next token.
            return None, j

        if s[j] not in _CLOSERS:
            return None, j

        known = name in NESTED_TOKENS or name in FUNCTIONS
        try:
            raw_args, k = self._groups_at(j)
            if k >= self.length or s[k] != "%":
                raise TemplateSyntaxError(f"Missing closing '%' for %{m.group(0)}...: {s[i:k]!r}")
        except TemplateSyntaxError:
            if known:
                raise
            return None, i + 1

        args = tuple(Argument(raw, parse_template(raw)) for raw in raw_args)
        raw = s[i : k + 1]
        if name in NESTED_TOKENS:
            return NestedToken(name, args, raw), k + 1
        return FunctionalToken(name, args, raw), k + 1

    def _groups_at(self, j: int) -> Tuple[List[str], int]:
        args: List[str] = []
        k = j
        while k < self.length and self.source[k] in _CLOSERS:
            group, k = self._group_at(k)
            args.extend(group)
        return args, k

    def _group_at(self, k: int) -> Tuple[List[str], int]:
        s = self.source
        opener = s[k]
        closer = _CLOSERS[opener]
        p = k + 1
        q = p
        while q < self.length and s[q] in " \t":
            q += 1
        if q < self.length and s[q] == '"':
            return self._quoted_group(q, closer)

        buf: List[str] = []
        while True:
            if p >= self.length:
                raise TemplateSyntaxError(f"Unbalanced '{opener}' in {s!r}")
            c = s[p]
            if c == closer:
                return ["".join(buf)], p + 1
            if c == "%":
                inner_end = self._inner_token_end(p)
                if inner_end is not None:
                    buf.append(s[p:inner_end])
                    p = inner_end
                    continue
            buf.append(c)
            p += 1

    def _inner_token_end(self, p: int) -> Optional[int]:
        m = _NAME_RE.match(self.source, p + 1)
        if not m or m.end() >= self.length or self.source[m.end()] not in _CLOSERS:
            return None
        try:
            _args, k = self._groups_at(m.end())
        except TemplateSyntaxError:
            return None
        if k < self.length and self.source[k] == "%":
            return k + 1
        return None

    def _quoted_group(self, p: int, closer: str) -> Tuple[List[str], int]:
        s = self.source
        args: List[str] = []
        while True:
            while p < self.length and s[p] in " \t":
                p += 1
            if p >= self.length or s[p] != '"':
                raise TemplateSyntaxError(f"Expected a quoted argument at offset {p} in {s!r}")
            p += 1
            buf: List[str] = []
            while True:
                if p >= self.length:
                    raise TemplateSyntaxError(f"Unterminated quoted argument in {s!r}")
                c = s[p]
                if c == "\\" and p + 1 < self.length:
                    nxt = s[p + 1]
                    buf.append(nxt if nxt in '"\\' else c + nxt)
                    p += 2
                    continue
                if c == '"':
                    p += 1
                    break
                buf.append(c)
                p += 1
            args.append("".join(buf))
            while p < self.length and s[p] in " \t":
                p += 1
            if p < self.length and s[p] == ",":
                p += 1
                continue
            if p < self.length and s[p] == closer:
                return args, p + 1
            raise TemplateSyntaxError(f"Expected ',' or '{closer}' after quoted argument in {s!r}")


@functools.lru_cache(maxsize=256)
def parse_template(source: str) -> Tuple[Node, ...]:
    return _Parser(source).parse()


def iter_tokens(nodes: Tuple[Node, ...]) -> Iterator[Node]:
    """Yield every token node, descending into argument templates."""
    for node in nodes:
        if isinstance(node, Literal):
            continue
        yield node
        if isinstance(node, (FunctionalToken, NestedToken)):
            for arg in node.args:
                yield from iter_tokens(arg.nodes)


def referenced_names(source: str) -> Set[str]:
    """Upper-cased names of the tokens a format string uses.

    Falls back to a loose scan when the format does not parse, so callers can
    still decide what data to prepare; the syntax error surfaces at render time.
    """
    try:
        return {node.name for node in iter_tokens(parse_template(source))}
    except TemplateSyntaxError:
        return {name.upper() for name in _LOOSE_NAME_RE.findall(source)}
