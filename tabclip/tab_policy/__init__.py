"""Tab access rules shared by the renderer and the selection helpers."""

from .matching import host_matches_base, url_host
from .permissions import is_permitted_tab, is_privileged_url

__all__ = [
    "host_matches_base",
    "url_host",
    "is_permitted_tab",
    "is_privileged_url",
]
