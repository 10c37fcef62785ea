"""Docroutes utility modules."""

from scripts.docroutes.utils.lazy import Lazy
from scripts.docroutes.utils.text_utils import (
    Cursor,
    normalize_route,
    urlify,
)

__all__ = [
    "Lazy",
    "Cursor",
    "normalize_route",
    "urlify",
]
