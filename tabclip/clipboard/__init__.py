"""Clipboard delivery: backends, ephemeral surfaces and the strategy chain."""

from .backends import SystemClipboard
from .pipeline import default_strategies, deliver
from .strategies import (
    CopyEventFallback,
    PlainTextWrite,
    RichWrite,
    StrategyResult,
    StrategyStatus,
)
from .surface import COPY_EVENT_TIMEOUT, Surface, intercept_copy, temporary_surface

__all__ = [
    "SystemClipboard",
    "default_strategies",
    "deliver",
    "CopyEventFallback",
    "PlainTextWrite",
    "RichWrite",
    "StrategyResult",
    "StrategyStatus",
    "COPY_EVENT_TIMEOUT",
    "Surface",
    "intercept_copy",
    "temporary_surface",
]
