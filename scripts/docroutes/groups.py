"""Registry of functions that are documented together on one page.

A group overrides the default per-symbol route: every function named in the
group's ``filter`` is documented on the ``reference/<category>/<name>/``
listing instead of on a page of its own.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.docroutes.errors import RegistryLoadError, UnknownModuleError
from scripts.docroutes.namespace import DATA_DIR, Func, NamespaceTree, Scope
from scripts.docroutes.utils.lazy import Lazy


GROUPS_PATH = DATA_DIR / "groups.yml"

logger = logging.getLogger(__name__)


@dataclass
class GroupData:
    """Data about a collection of functions."""

    name: str
    category: str
    title: str = ""
    path: list[str] = field(default_factory=list)
    filter: list[str] = field(default_factory=list)
    details: str = ""


def _load_error(message: str, source: Optional[str]) -> RegistryLoadError:
    return RegistryLoadError(message, file=source, error_type="groups_invalid")


def _parse_group(raw: Any, source: Optional[str]) -> GroupData:
    if not isinstance(raw, dict):
        raise _load_error(f"group must be a mapping, got {raw!r}", source)

    for key in ("name", "category"):
        if not isinstance(raw.get(key), str) or not raw[key]:
            raise _load_error(f"group is missing '{key}': {raw!r}", source)

    for key in ("path", "filter"):
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
            raise _load_error(
                f"'{key}' of group '{raw['name']}' must be a list of strings", source
            )

    return GroupData(
        name=raw["name"],
        category=raw["category"],
        title=str(raw.get("title") or ""),
        path=list(raw.get("path") or []),
        filter=list(raw.get("filter") or []),
        details=str(raw.get("details") or ""),
    )


def parse_groups(content: str, source: Optional[str] = None) -> list[GroupData]:
    """Parse a YAML list of group records.

    Raises:
        RegistryLoadError: If the YAML is invalid or a record is malformed.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise _load_error(f"Invalid YAML: {e}", source)

    if data is None:
        return []
    if not isinstance(data, list):
        raise _load_error("group definitions must be a list", source)

    return [_parse_group(raw, source) for raw in data]


def load_groups(path: Path | str | None = None) -> list[GroupData]:
    """Load group records from a YAML file (defaults to the bundled file)."""
    path = Path(path) if path is not None else GROUPS_PATH
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise _load_error(f"Cannot read group definitions: {e}", str(path))
    return parse_groups(content, source=str(path))


class GroupRegistry:
    """Group definitions with lazily filled default membership.

    Args:
        tree: Namespace used to fill groups that omit ``filter``.
        groups: Parsed group records. They are not modified; filled copies
            are built on first use.
    """

    def __init__(self, tree: NamespaceTree, groups: list[GroupData]):
        self.tree = tree
        self._raw = list(groups)
        self._filled: Lazy[list[GroupData]] = Lazy(self._fill, name="group registry")

    @classmethod
    def from_file(
        cls,
        tree: NamespaceTree,
        path: Path | str | None = None,
    ) -> GroupRegistry:
        return cls(tree, load_groups(path))

    def module_scope(self, group: GroupData) -> Scope:
        """Walk the group's path from the global scope.

        Raises:
            UnknownModuleError: If a path segment is not a nested module.
        """
        scope = self.tree.global_scope
        for name in group.path:
            scope = self.tree.get_module(scope, name).scope
        return scope

    def _fill(self) -> list[GroupData]:
        filled = []
        for group in self._raw:
            if group.filter:
                filled.append(group)
                continue
            try:
                scope = self.module_scope(group)
            except UnknownModuleError as e:
                raise RegistryLoadError(
                    f"group '{group.name}' has an invalid path "
                    f"{'.'.join(group.path)}: {e.message}",
                    error_type="groups_invalid",
                ) from e
            funcs = [
                name
                for name, binding in self.tree.iterate(scope)
                if isinstance(binding.read(), Func)
            ]
            logger.debug("group %s: %d functions", group.name, len(funcs))
            filled.append(dataclasses.replace(group, filter=funcs))
        return filled

    def groups(self) -> list[GroupData]:
        """Return every group with its membership filled in."""
        return self._filled.get()

    def find(self, category: str, func: str) -> Optional[GroupData]:
        """Return the first group of ``category`` that lists ``func``."""
        for group in self.groups():
            if group.category == category and func in group.filter:
                return group
        return None
