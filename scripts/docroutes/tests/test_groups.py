"""Tests for the group registry."""

import pytest

from scripts.docroutes.errors import RegistryLoadError
from scripts.docroutes.groups import (
    GroupData,
    GroupRegistry,
    load_groups,
    parse_groups,
)


class TestParseGroups:
    """Tests for parse_groups."""

    def test_parses_records(self):
        """Records keep name, category, path and filter."""
        groups = parse_groups(
            "- name: calc\n"
            "  title: Calculation\n"
            "  category: foundations\n"
            "  path: [calc]\n"
            "- name: lr\n"
            "  category: math\n"
            "  filter: [abs, norm]\n"
        )
        assert [g.name for g in groups] == ["calc", "lr"]
        assert groups[0].title == "Calculation"
        assert groups[0].path == ["calc"]
        assert groups[0].filter == []
        assert groups[1].filter == ["abs", "norm"]

    def test_empty_document(self):
        """An empty document has no groups."""
        assert parse_groups("") == []

    def test_missing_category_rejected(self):
        """Every record needs a category."""
        with pytest.raises(RegistryLoadError) as exc:
            parse_groups("- name: calc\n")
        assert exc.value.error_type == "groups_invalid"

    def test_filter_must_be_string_list(self):
        """filter must be a list of strings."""
        with pytest.raises(RegistryLoadError):
            parse_groups("- {name: a, category: b, filter: abs}\n")

    def test_top_level_must_be_list(self):
        """A mapping at the top level is rejected."""
        with pytest.raises(RegistryLoadError):
            parse_groups("name: calc\n")

    def test_invalid_yaml(self):
        """Invalid YAML is a load error."""
        with pytest.raises(RegistryLoadError):
            parse_groups("- [unclosed\n")

    def test_missing_file(self, tmp_path):
        """A missing file is a load error."""
        with pytest.raises(RegistryLoadError):
            load_groups(tmp_path / "groups.yml")


class TestGroupRegistry:
    """Tests for lazy membership filling."""

    def test_default_filter_lists_functions(self, small_groups):
        """An empty filter is filled with the module's functions only."""
        calc = small_groups.groups()[0]
        assert calc.filter == ["abs", "round"]

    def test_explicit_filter_kept(self, small_groups):
        """An explicit filter is not recomputed."""
        lr = small_groups.groups()[1]
        assert lr.filter == ["abs"]

    def test_fill_is_cached(self, small_groups):
        """Group data is computed once and then reused."""
        assert small_groups.groups() is small_groups.groups()

    def test_source_records_not_mutated(self, small_tree):
        """Filling works on copies of the parsed records."""
        record = GroupData(name="calc", category="foundations", path=["calc"])
        registry = GroupRegistry(small_tree, [record])
        registry.groups()
        assert record.filter == []

    def test_find_matches_category_and_name(self, small_groups):
        """find needs both category and function name to match."""
        assert small_groups.find("foundations", "abs").name == "calc"
        assert small_groups.find("math", "abs").name == "lr"
        assert small_groups.find("model", "abs") is None
        assert small_groups.find("foundations", "pi") is None

    def test_invalid_path_is_fatal(self, small_tree):
        """A path through a non-module fails the load."""
        registry = GroupRegistry(
            small_tree,
            [GroupData(name="bad", category="model", path=["cite"])],
        )
        with pytest.raises(RegistryLoadError) as exc:
            registry.groups()
        assert "bad" in exc.value.message

    def test_failed_fill_stays_failed(self, small_tree):
        """A failed fill is re-raised on every later call."""
        registry = GroupRegistry(
            small_tree,
            [GroupData(name="bad", category="model", path=["nope"])],
        )
        with pytest.raises(RegistryLoadError):
            registry.groups()
        with pytest.raises(RegistryLoadError):
            registry.find("model", "x")

    def test_explicit_filter_skips_path_walk(self, small_tree):
        """Groups with an explicit filter never walk their path."""
        registry = GroupRegistry(
            small_tree,
            [GroupData(name="ok", category="model", path=["nope"], filter=["cite"])],
        )
        assert registry.find("model", "cite").name == "ok"


class TestBundledGroups:
    """Tests for the bundled group definitions."""

    def test_calc_filled_from_module(self, bundled):
        """The calc group lists the calc functions but not its constants."""
        calc = bundled.groups.find("foundations", "round")
        assert calc.name == "calc"
        assert "abs" in calc.filter
        assert "pi" not in calc.filter

    def test_sys_has_no_functions(self, bundled):
        """A module without functions yields an empty group."""
        sys_group = [g for g in bundled.groups.groups() if g.name == "sys"][0]
        assert sys_group.filter == []

    def test_math_groups(self, bundled):
        """Math functions are grouped by their explicit filters."""
        assert bundled.groups.find("math", "sqrt").name == "roots"
        assert bundled.groups.find("math", "bb").name == "variants"
        assert bundled.groups.find("math", "frac") is None
