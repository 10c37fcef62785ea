"""Shared fixtures for docroutes tests."""

import pytest

from scripts.docroutes.context import DocsContext
from scripts.docroutes.groups import GroupData, GroupRegistry
from scripts.docroutes.namespace import (
    CLOSURE,
    ELEMENT,
    NATIVE,
    Category,
    Func,
    FuncDef,
    Module,
    NamespaceTree,
    Scope,
    Type,
)
from scripts.docroutes.resolver import LinkResolver
from scripts.docroutes.symbol_index import SymbolIndex


BASE = "https://docs.example.org/"


def native(name, *params, scope=None):
    return Func(NATIVE, FuncDef(name=name, params=tuple(params), scope=scope))


def element(name, *params, scope=None):
    return Func(ELEMENT, FuncDef(name=name, params=tuple(params), scope=scope))


@pytest.fixture
def categories():
    return {
        "foundations": Category("foundations", "Foundations"),
        "model": Category("model", "Model"),
        "math": Category("math", "Math"),
    }


@pytest.fixture
def small_tree(categories):
    """A minimal library with modules, types, elements and a closure."""
    foundations = categories["foundations"]
    model = categories["model"]
    math = categories["math"]

    calc = Module("calc")
    calc.scope.define("abs", native("abs", "value"))
    calc.scope.define("round", native("round", "value", "digits"))
    calc.scope.define("pi", 3.14159)

    string = Type("str")
    string.scope.define("split", native("split", "pattern"))
    string.scope.define("len", native("len"))

    caption_scope = Scope()
    caption_scope.define("caption", element("caption", "position", "body"))

    math_module = Module("math")
    math_module.scope.define("frac", element("frac", "num", "denom"), math)
    math_module.scope.define("abs", native("abs", "body", "size"), math)

    global_scope = Scope()
    global_scope.define("calc", calc, foundations)
    global_scope.define("str", string, foundations)
    global_scope.define("cite", element("cite", "key", "supplement"), model)
    global_scope.define(
        "figure",
        element("figure", "body", "caption", scope=caption_scope),
        model,
    )
    global_scope.define("math", math_module, math)
    global_scope.define("cite-later", Func(CLOSURE, FuncDef(name="cite")), model)
    global_scope.define("helper", native("helper", "x"))

    return NamespaceTree(global_scope, {"math": math_module.scope})


@pytest.fixture
def small_groups(small_tree):
    """Groups over the small tree: calc by path, lr by explicit filter."""
    return GroupRegistry(
        small_tree,
        [
            GroupData(name="calc", category="foundations", path=["calc"]),
            GroupData(name="lr", category="math", path=["math"], filter=["abs"]),
        ],
    )


@pytest.fixture
def small_resolver(small_tree, small_groups):
    return LinkResolver(small_tree, small_groups)


@pytest.fixture
def small_index(small_tree, small_groups):
    return SymbolIndex(small_tree, small_groups)


@pytest.fixture(scope="session")
def bundled():
    """A context over the bundled library and group definitions."""
    return DocsContext.from_config()
