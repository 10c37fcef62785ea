"""Resolve intra-doc links such as ``$calc.round`` to documentation routes."""

from __future__ import annotations

import logging
import re
from typing import Optional

from scripts.docroutes.errors import (
    EmptyLinkHeadError,
    NoCategoryError,
    UnknownFieldError,
    UnknownModuleError,
)
from scripts.docroutes.groups import GroupRegistry
from scripts.docroutes.namespace import Category, Func, NamespaceTree
from scripts.docroutes.utils.text_utils import normalize_route


UNIVERSE_URL = "https://typst.app/universe"

# Link heads with a fixed destination, relative to the docs base
KNOWN_ROUTES: dict[str, str] = {
    "$tutorial": "tutorial",
    "$reference": "reference",
    "$category": "reference",
    "$syntax": "reference/syntax",
    "$styling": "reference/styling",
    "$scripting": "reference/scripting",
    "$context": "reference/context",
    "$guides": "guides",
    "$changelog": "changelog",
    "$community": "community",
}

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

logger = logging.getLogger(__name__)


def split_link(link: str) -> tuple[str, str]:
    """Split a link at the first slash into head and tail."""
    head = link.split("/", 1)[0]
    tail = link[len(head):].lstrip("/")
    return head, tail


def is_absolute(link: str) -> bool:
    """Check whether a link is a fragment or carries a URL scheme."""
    return link.startswith("#") or SCHEME_PATTERN.match(link) is not None


class LinkResolver:
    """Turns symbolic links into routes.

    Args:
        tree: Namespace that ``$`` links are resolved against.
        groups: Group registry consulted before default routing.
        community_url: Absolute URL for ``$community``; when None the link
            resolves under the docs base.
        universe_url: Absolute URL for ``$universe``.
    """

    def __init__(
        self,
        tree: NamespaceTree,
        groups: GroupRegistry,
        community_url: Optional[str] = None,
        universe_url: str = UNIVERSE_URL,
    ):
        self.tree = tree
        self.groups = groups
        self.absolute_routes: dict[str, str] = {"$universe": universe_url}
        if community_url:
            self.absolute_routes["$community"] = community_url

    def resolve(self, link: str, base: str) -> str:
        """Resolve an intra-doc link.

        Fragments and links with a scheme are returned unchanged.

        Raises:
            ResolutionError: The first failure met while resolving.
        """
        if is_absolute(link):
            return link

        head, tail = split_link(link)
        if not head:
            raise EmptyLinkHeadError(f"link `{link}` has no first part")

        route = self.resolve_known(head, base)
        if route is None:
            route = self.resolve_definition(head, base)

        if tail:
            route = f"{route}/{tail}"

        route = normalize_route(route)
        logger.debug("resolved %s -> %s", link, route)
        return route

    def resolve_known(self, head: str, base: str) -> Optional[str]:
        """Resolve a ``$`` link head to a known destination."""
        if head in self.absolute_routes:
            return self.absolute_routes[head]
        if head in KNOWN_ROUTES:
            return f"{base}{KNOWN_ROUTES[head]}"
        return None

    def resolve_definition(self, head: str, base: str) -> str:
        """Resolve a ``$`` link to a global definition.

        Module segments are walked from the global scope; the first segment
        that is not a module names the definition. Remaining segments
        address a field or parameter of it.
        """
        parts = head.lstrip("$").split(".")
        scope = self.tree.global_scope
        category: Optional[Category] = None

        i = 0
        while i < len(parts):
            name = parts[i]
            if category is None:
                binding = self.tree.lookup(scope, name)
                if binding is not None:
                    category = self.tree.category_of(binding)
            try:
                scope = self.tree.get_module(scope, name).scope
            except UnknownModuleError:
                break
            i += 1

        if category is None:
            raise NoCategoryError(f"{head} has no category")

        if i >= len(parts):
            raise EmptyLinkHeadError("link is missing first part")
        name = parts[i]
        rest = parts[i + 1:]

        binding = self.tree.lookup(scope, name)
        if binding is None:
            raise UnknownFieldError(f"definition `{name}` not found in {head}")
        value = binding.read()

        group = self.groups.find(category.name, name)
        if group is not None:
            route = f"{base}reference/{group.category}/{group.name}/#functions-{name}"
            if rest:
                route += f"-{rest[0]}"
            return route

        route = f"{base}reference/{category.name}/{name}"
        if not rest:
            return route

        next_name = rest[0]
        try:
            member = self.tree.field(value, next_name)
            has_field = True
        except UnknownFieldError:
            member, has_field = None, False

        if has_field:
            route += f"/#definitions-{next_name}"
            if len(rest) > 1 and isinstance(member, Func) and member.param(rest[1]):
                route += f"-{rest[1]}"
        elif isinstance(value, Func) and value.param(next_name):
            route += f"/#parameters-{next_name}"
        else:
            raise UnknownFieldError(f"field {next_name} not found")

        return route
