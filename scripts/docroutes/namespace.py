"""In-memory namespace tree of the documented standard library.

The tree is a set of nested scopes. A scope maps names to bindings; a
binding holds a value and, optionally, the category it is documented under.
Functions, types and modules may carry a nested scope of their own.

The bundled library description lives in ``data/library.yml`` and is loaded
with :func:`load_library`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import yaml

from scripts.docroutes.errors import (
    RegistryLoadError,
    UnknownFieldError,
    UnknownModuleError,
)


DATA_DIR = Path(__file__).parent / "data"
LIBRARY_PATH = DATA_DIR / "library.yml"

# Function representations
NATIVE = "native"
ELEMENT = "element"
CLOSURE = "closure"
FUNC_KINDS = (NATIVE, ELEMENT, CLOSURE)

# Entry kinds accepted in a library description
ENTRY_KINDS = FUNC_KINDS + ("type", "module", "value")


@dataclass(frozen=True)
class Category:
    """A reference section that symbols are documented under."""

    name: str
    title: str = ""

    @property
    def display_name(self) -> str:
        return self.title or self.name


@dataclass(eq=False)
class FuncDef:
    """Static definition shared by every handle to one function."""

    name: Optional[str]
    params: tuple[str, ...] = ()
    scope: Optional["Scope"] = None
    docs: str = ""


@dataclass(frozen=True)
class Func:
    """A function handle.

    Handles are cheap; two handles with the same kind and definition refer
    to the same function.
    """

    kind: str
    definition: FuncDef

    @property
    def name(self) -> Optional[str]:
        return self.definition.name

    @property
    def scope(self) -> Optional["Scope"]:
        return self.definition.scope

    def param(self, name: str) -> bool:
        return name in self.definition.params


@dataclass(eq=False)
class Type:
    """A type; compared by identity."""

    name: str
    scope: "Scope" = field(default_factory=lambda: Scope())
    docs: str = ""


@dataclass(eq=False)
class Module:
    """A module; compared by identity."""

    name: str
    scope: "Scope" = field(default_factory=lambda: Scope())
    docs: str = ""


Value = Union[Func, Type, Module, Any]


@dataclass(eq=False)
class Binding:
    """A named slot in a scope."""

    value: Value
    category: Optional[Category] = None

    def read(self) -> Value:
        return self.value


class Scope:
    """An ordered mapping from names to bindings."""

    def __init__(self) -> None:
        self._bindings: dict[str, Binding] = {}

    def define(
        self,
        name: str,
        value: Value,
        category: Optional[Category] = None,
    ) -> Binding:
        binding = Binding(value=value, category=category)
        self._bindings[name] = binding
        return binding

    def get(self, name: str) -> Optional[Binding]:
        return self._bindings.get(name)

    def iter(self) -> Iterator[tuple[str, Binding]]:
        return iter(self._bindings.items())

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"Scope({list(self._bindings)!r})"


def nested_scope_of(value: Value) -> Optional[Scope]:
    """Return the scope carried by a function, type or module."""
    if isinstance(value, (Func, Type, Module)):
        return value.scope
    return None


def kind_of(value: Value) -> str:
    """Return the entry kind of a value (``native``, ``type``, ...)."""
    if isinstance(value, Func):
        return value.kind
    if isinstance(value, Type):
        return "type"
    if isinstance(value, Module):
        return "module"
    return "value"


class NamespaceTree:
    """Read-only view of the library's scopes.

    Args:
        global_scope: The root scope every lookup starts from.
        roots: Secondary root scopes by name, traversed in addition to the
            global scope when building the symbol index.
    """

    def __init__(
        self,
        global_scope: Scope,
        roots: Optional[dict[str, Scope]] = None,
    ):
        self.global_scope = global_scope
        self.secondary_roots: dict[str, Scope] = dict(roots or {})

    def roots(self) -> list[tuple[str, Scope]]:
        """Return the global scope followed by the secondary roots."""
        return [("global", self.global_scope), *self.secondary_roots.items()]

    def lookup(self, scope: Scope, name: str) -> Optional[Binding]:
        return scope.get(name)

    def iterate(self, scope: Scope) -> Iterator[tuple[str, Binding]]:
        return scope.iter()

    def category_of(self, binding: Binding) -> Optional[Category]:
        return binding.category

    def nested_scope_of(self, value: Value) -> Optional[Scope]:
        return nested_scope_of(value)

    def get_module(self, scope: Scope, name: str) -> Module:
        """Extract a module bound in ``scope``.

        Raises:
            UnknownModuleError: If ``name`` is unbound or not a module.
        """
        binding = scope.get(name)
        if binding is None or not isinstance(binding.read(), Module):
            raise UnknownModuleError(f"module doesn't contain module `{name}`")
        return binding.read()

    def field(self, value: Value, name: str) -> Value:
        """Access a field of a value through its nested scope.

        Raises:
            UnknownFieldError: If the value has no such field.
        """
        scope = nested_scope_of(value)
        binding = scope.get(name) if scope is not None else None
        if binding is None:
            owner = getattr(value, "name", None) or type(value).__name__
            raise UnknownFieldError(f"`{owner}` does not contain field `{name}`")
        return binding.read()

    def locate(self, path: str) -> tuple[Binding, Optional[Category]]:
        """Find the binding at a dotted path such as ``calc.abs``.

        Returns:
            The binding and the category it is documented under: the first
            category met walking down from the global scope.

        Raises:
            UnknownFieldError: If a segment cannot be found.
        """
        parts = path.lstrip("$").split(".")
        scope: Optional[Scope] = self.global_scope
        binding: Optional[Binding] = None
        category: Optional[Category] = None
        for part in parts:
            binding = scope.get(part) if scope is not None else None
            if binding is None:
                raise UnknownFieldError(f"`{path}` not found (at `{part}`)")
            category = category or binding.category
            scope = nested_scope_of(binding.read())
        if binding is None:
            raise UnknownFieldError("empty path")
        return binding, category


# ---------------------------------------------------------------------------
# Loading the bundled library description
# ---------------------------------------------------------------------------


def _load_error(message: str, source: Optional[str]) -> RegistryLoadError:
    return RegistryLoadError(message, file=source, error_type="library_invalid")


def _str_list(raw: Any, what: str, source: Optional[str]) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
        raise _load_error(f"'{what}' must be a list of strings", source)
    return tuple(raw)


def _build_scope(
    entries: Any,
    categories: dict[str, Category],
    source: Optional[str],
) -> Scope:
    if entries is None:
        return Scope()
    if not isinstance(entries, list):
        raise _load_error("scope must be a list of definitions", source)

    scope = Scope()
    for entry in entries:
        if not isinstance(entry, dict):
            raise _load_error(f"definition must be a mapping, got {entry!r}", source)
        name = entry.get("name")
        if not isinstance(name, str) or not name:
            raise _load_error(f"definition is missing a name: {entry!r}", source)

        kind = entry.get("kind", "value")
        if kind not in ENTRY_KINDS:
            raise _load_error(f"unknown kind '{kind}' for `{name}`", source)

        category = None
        cat_name = entry.get("category")
        if cat_name is not None:
            if cat_name not in categories:
                raise _load_error(f"unknown category '{cat_name}' for `{name}`", source)
            category = categories[cat_name]

        docs = entry.get("docs") or ""
        nested = entry.get("scope")

        value: Value
        if kind in FUNC_KINDS:
            definition = FuncDef(
                name=name,
                params=_str_list(entry.get("params"), "params", source),
                scope=_build_scope(nested, categories, source) if nested else None,
                docs=docs,
            )
            value = Func(kind=kind, definition=definition)
        elif kind == "type":
            value = Type(name=name, scope=_build_scope(nested, categories, source), docs=docs)
        elif kind == "module":
            value = Module(name=name, scope=_build_scope(nested, categories, source), docs=docs)
        else:
            value = entry.get("value")

        if name in scope:
            raise _load_error(f"`{name}` is defined twice in one scope", source)
        scope.define(name, value, category)

    return scope


def parse_library(content: str, source: Optional[str] = None) -> NamespaceTree:
    """Parse a YAML library description into a namespace tree.

    Raises:
        RegistryLoadError: If the description is malformed.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise _load_error(f"Invalid YAML: {e}", source)

    if not isinstance(data, dict):
        raise _load_error("library description must be a mapping", source)

    raw_categories = data.get("categories") or {}
    if not isinstance(raw_categories, dict):
        raise _load_error("'categories' must map names to titles", source)
    categories = {
        str(name): Category(name=str(name), title=str(title or ""))
        for name, title in raw_categories.items()
    }

    global_scope = _build_scope(data.get("global"), categories, source)

    roots: dict[str, Scope] = {}
    for root in _str_list(data.get("roots"), "roots", source):
        binding = global_scope.get(root)
        if binding is None or not isinstance(binding.read(), Module):
            raise _load_error(f"root `{root}` is not a global module", source)
        roots[root] = binding.read().scope

    return NamespaceTree(global_scope, roots)


def load_library(path: Path | str | None = None) -> NamespaceTree:
    """Load a library description from a YAML file.

    Args:
        path: Description file (defaults to the bundled LIBRARY_PATH)

    Raises:
        RegistryLoadError: If the file is missing or malformed.
    """
    path = Path(path) if path is not None else LIBRARY_PATH
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise _load_error(f"Cannot read library description: {e}", str(path))
    return parse_library(content, source=str(path))
