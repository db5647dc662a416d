"""Error hierarchy shared by the renderer and the clipboard pipeline."""

from __future__ import annotations


class TabclipError(Exception):
    """Base class for every error raised by tabclip."""


class PlaceholderError(TabclipError):
    """A format string could not be rendered for one tab."""


class TemplateSyntaxError(PlaceholderError):
    """Malformed nested token: unbalanced argument group, bad pattern, wrong arity."""


class UnknownFunctionError(PlaceholderError):
    """A functional placeholder names a function that does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Unknown function placeholder: {name}")
        self.name = name


ReplacerError = TemplateSyntaxError
FunctionalPlaceholderError = UnknownFunctionError


class ExtractionError(TabclipError):
    """Page metadata could not be read from a tab."""


class ClipboardError(TabclipError):
    """Base class for clipboard delivery failures."""


class ClipboardCapabilityAbsent(ClipboardError):
    """The platform does not offer the primitive a strategy needs."""


class ClipboardWriteError(ClipboardError):
    """The platform rejected a clipboard write."""


class SurfaceAcquisitionError(ClipboardError):
    """Neither a temporary tab nor a temporary window could be opened."""
