"""Docroutes - Documentation routes for standard library symbols.

This package provides tools for:
- Resolving intra-doc links like ``$calc.round`` to documentation URLs
- Looking up the documentation route of a library function or type
- Rewriting the links of raw documentation text for display

Usage:
    python -m scripts.docroutes resolve '$calc.round'   # Resolve a link
    python -m scripts.docroutes route text              # Route of a definition
    python -m scripts.docroutes docs README.md          # Rewrite doc links
    python -m scripts.docroutes export                  # Write the route map
"""

from scripts.docroutes.context import (
    DocsContext,
    get_context,
    hover_info,
    plain_docs_sentence,
    resolve,
    route_of_value,
)

__version__ = "1.0.0"

__all__ = [
    "DocsContext",
    "get_context",
    "hover_info",
    "plain_docs_sentence",
    "resolve",
    "route_of_value",
]
