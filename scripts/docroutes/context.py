"""Process-wide wiring of the namespace, groups, resolver, index and scanner.

Initialization order: the namespace tree first, then the group registry
(which needs the tree to fill default membership), then the resolver and
the symbol index (both need tree and groups, but not each other), and
finally the scanner (which needs only the resolver). Group membership and
the symbol index are filled lazily on first use.
"""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from scripts.docroutes.config import DocsConfig, get_default_config
from scripts.docroutes.groups import GroupRegistry
from scripts.docroutes.namespace import Func, NamespaceTree, kind_of, load_library
from scripts.docroutes.resolver import LinkResolver
from scripts.docroutes.scanner import DocScanner
from scripts.docroutes.symbol_index import SymbolIndex
from scripts.docroutes.utils.lazy import Lazy


class HoverInfo(TypedDict):
    """Hover summary of a library definition."""

    name: str
    kind: str
    category: Optional[str]
    route: Optional[str]
    docs: str


class DocsContext:
    """Owns one of each component, wired in dependency order."""

    def __init__(
        self,
        tree: NamespaceTree,
        groups: GroupRegistry,
        config: Optional[DocsConfig] = None,
    ):
        self.config = config or get_default_config()
        self.tree = tree
        self.groups = groups
        self.resolver = LinkResolver(
            tree,
            groups,
            community_url=self.config.community_url,
            universe_url=self.config.universe_url,
        )
        self.index = SymbolIndex(tree, groups)
        self.scanner = DocScanner(
            self.resolver,
            base=self.config.docs_base,
            not_found_url=self.config.not_found_url,
        )

    @classmethod
    def from_config(cls, config: Optional[DocsConfig] = None) -> DocsContext:
        """Load the library and group definitions named by ``config``."""
        config = config or get_default_config()
        tree = load_library(config.library_path)
        groups = GroupRegistry.from_file(tree, config.groups_path)
        return cls(tree, groups, config)

    def resolve(self, link: str, base: Optional[str] = None) -> str:
        return self.resolver.resolve(link, base if base is not None else self.config.docs_base)

    def route_of_value(self, value: Any) -> Optional[str]:
        return self.index.route_of_value(value)

    def plain_docs_sentence(self, docs: str) -> str:
        return self.scanner.plain_docs_sentence(docs)

    def hover_info(self, path: str) -> HoverInfo:
        """Summarize the definition at a dotted path for hover text.

        Raises:
            UnknownFieldError: If the path does not name a definition.
        """
        binding, category = self.tree.locate(path)
        value = binding.read()
        route = self.index.route_of_value(value)
        if isinstance(value, Func):
            docs = value.definition.docs
        else:
            docs = getattr(value, "docs", "")
        return {
            "name": path.lstrip("$"),
            "kind": kind_of(value),
            "category": category.name if category is not None else None,
            "route": self.config.docs_base + route if route is not None else None,
            "docs": self.scanner.plain_docs_sentence(docs),
        }


_default: Lazy[DocsContext] = Lazy(DocsContext.from_config, name="default docs context")


def get_context() -> DocsContext:
    """Return the default context over the bundled library, built once."""
    return _default.get()


def resolve(link: str, base: str) -> str:
    """Resolve an intra-doc link against ``base`` using the default context."""
    return get_context().resolver.resolve(link, base)


def route_of_value(value: Any) -> Optional[str]:
    """Get the route of a library value using the default context."""
    return get_context().route_of_value(value)


def plain_docs_sentence(docs: str) -> str:
    """Rewrite documentation text using the default context."""
    return get_context().plain_docs_sentence(docs)


def hover_info(path: str) -> HoverInfo:
    """Summarize a definition using the default context."""
    return get_context().hover_info(path)
