"""Reverse index from library values to their documentation route."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TypedDict

from scripts.docroutes.errors import IndexBuildError
from scripts.docroutes.groups import GroupRegistry
from scripts.docroutes.namespace import (
    CLOSURE,
    Category,
    Func,
    Module,
    NamespaceTree,
    Scope,
    Type,
    Value,
)
from scripts.docroutes.utils.lazy import Lazy
from scripts.docroutes.utils.text_utils import urlify


logger = logging.getLogger(__name__)


class RouteMap(TypedDict):
    """Exported route map, for generated reference pages."""

    generated: str
    route_count: int
    routes: dict[str, str]


# Output path
ROUTES_PATH = Path("docs/indexes/routes.json")


@dataclass(frozen=True)
class SymbolKey:
    """Identity key of an indexable value.

    ``target`` is a function definition or a type, both of which compare by
    identity. Closures get no key at all: two closures are never the same
    symbol, not even a closure and itself looked up twice.
    """

    tag: str  # "native", "element" or "type"
    target: object

    @classmethod
    def of(cls, value: Value) -> Optional[SymbolKey]:
        if isinstance(value, Func):
            if value.kind == CLOSURE:
                return None
            return cls(value.kind, value.definition)
        if isinstance(value, Type):
            return cls("type", value)
        return None


@dataclass
class _Entry:
    route: str
    path: str


class SymbolIndex:
    """Maps functions and types to their route, built once on first use.

    Args:
        tree: Namespace to index; every root scope seeds the traversal.
        groups: Group registry consulted before default routing.
    """

    def __init__(self, tree: NamespaceTree, groups: GroupRegistry):
        self.tree = tree
        self.groups = groups
        self._entries: Lazy[dict[SymbolKey, _Entry]] = Lazy(
            self._build, name="symbol index"
        )

    def _insert(
        self,
        entries: dict[SymbolKey, _Entry],
        key: SymbolKey,
        route: str,
        path: str,
    ) -> None:
        if key in entries:
            raise IndexBuildError(
                f"`{path}` is registered twice "
                f"(already indexed as `{entries[key].path}`)"
            )
        logger.debug("%s -> %s", path, route)
        entries[key] = _Entry(route=route, path=path)

    def _func_route(
        self,
        func: Func,
        category: Category,
        parent: Optional[str],
    ) -> str:
        name = func.name
        group = self.groups.find(category.name, name)
        if group is not None:
            return f"reference/{group.category}/{group.name}/#functions-{name}"
        if parent is not None:
            return f"reference/{category.name}/{parent}/#definitions-{name}"
        return f"reference/{category.name}/{name}/"

    def _build(self) -> dict[SymbolKey, _Entry]:
        entries: dict[SymbolKey, _Entry] = {}
        visited: set[int] = set()

        # (scope, parent name, dotted path, inherited category)
        work: list[tuple[Scope, Optional[str], str, Optional[Category]]] = [
            (scope, None, "" if label == "global" else label, None)
            for label, scope in self.tree.roots()
        ]

        while work:
            scope, parent, prefix, inherited = work.pop()
            if id(scope) in visited:
                continue
            visited.add(id(scope))

            for name, binding in self.tree.iterate(scope):
                category = inherited or self.tree.category_of(binding)
                path = f"{prefix}.{name}" if prefix else name
                value = binding.read()
                slug = urlify(name)

                if isinstance(value, Func):
                    key = SymbolKey.of(value)
                    if key is not None and category is not None and value.name:
                        route = self._func_route(value, category, parent)
                        self._insert(entries, key, route, path)
                    if value.scope is not None:
                        work.append((value.scope, slug, path, category))
                elif isinstance(value, Type):
                    if category is not None:
                        if parent is not None:
                            route = f"reference/{category.name}/{parent}/#definitions-{slug}"
                        else:
                            route = f"reference/{category.name}/{slug}/"
                        self._insert(entries, SymbolKey.of(value), route, path)
                    work.append((value.scope, slug, path, category))
                elif isinstance(value, Module):
                    work.append((value.scope, None, path, category))

        logger.info("indexed %d symbols", len(entries))
        return entries

    def route_of_value(self, value: Value) -> Optional[str]:
        """Get the route of a value, or None if it is not indexed."""
        key = SymbolKey.of(value)
        if key is None:
            return None
        entry = self._entries.get().get(key)
        return entry.route if entry is not None else None

    def routes(self) -> dict[SymbolKey, str]:
        return {key: entry.route for key, entry in self._entries.get().items()}

    def export(self) -> RouteMap:
        """Export the index as dotted names mapped to routes."""
        routes = {
            entry.path: entry.route
            for entry in sorted(self._entries.get().values(), key=lambda e: e.path)
        }
        return {
            "generated": datetime.now(timezone.utc).isoformat(),
            "route_count": len(routes),
            "routes": routes,
        }


def save_routes(route_map: RouteMap, path: Path | None = None) -> None:
    """Write the result of :meth:`SymbolIndex.export` as JSON.

    Parent directories are created; ``path`` defaults to ROUTES_PATH.
    """
    if path is None:
        path = ROUTES_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(route_map, indent=2), encoding="utf-8")


def load_routes(path: Path | None = None) -> RouteMap | None:
    """Load a previously exported route map.

    Returns:
        The dotted-name to route mapping with its generation timestamp and
        route count, or None if no map has been exported to ``path`` yet.
    """
    if path is None:
        path = ROUTES_PATH

    if not path.exists():
        return None

    return json.loads(path.read_text(encoding="utf-8"))
