"""Render selected browser tabs into text/rich text and deliver it to the clipboard."""

from .commands import copy_to_clipboard
from .config import CopyConfig, DEFAULT_CFG, load_config, merge_cfg
from .models import ClipboardPayload, DeliveryOutcome, RenderContext, RenderedItem, Tab, TreeNode

__all__ = [
    "copy_to_clipboard",
    "CopyConfig",
    "DEFAULT_CFG",
    "load_config",
    "merge_cfg",
    "ClipboardPayload",
    "DeliveryOutcome",
    "RenderContext",
    "RenderedItem",
    "Tab",
    "TreeNode",
]
