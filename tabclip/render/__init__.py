"""Placeholder rendering: sanitizers, indentation, template parsing and evaluation."""

from .indent import compute_indent_levels
from .orchestrator import fetch_indent_levels, render_item, render_tab, render_tabs
from .placeholders import fill_placeholders
from .sanitize import escape_html, escape_markdown, escape_markdown_link_title

__all__ = [
    "compute_indent_levels",
    "fetch_indent_levels",
    "render_item",
    "render_tab",
    "render_tabs",
    "fill_placeholders",
    "escape_html",
    "escape_markdown",
    "escape_markdown_link_title",
]
