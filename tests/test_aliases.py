"""Tests for the alias table."""

from cmdnest import aliases as alias_module
from cmdnest.aliases import DEFAULT_ALIASES, AliasTable
from cmdnest.config import ProjectConfig


def test_expand_replaces_first_token():
    table = AliasTable({"b": ["build", "--fast"]})
    assert table.expand(["b", "x"]) == ["build", "--fast", "x"]


def test_expand_leaves_unknown_names_alone():
    table = AliasTable({"b": ["build"]})
    assert table.expand(["deploy", "b"]) == ["deploy", "b"]
    assert table.expand([]) == []


def test_expansion_is_single_pass():
    """An alias naming another alias is not expanded again."""
    table = AliasTable({"a": ["b", "x"], "b": ["a"]})
    assert table.expand(["a", "y"]) == ["b", "x", "y"]
    assert table.expand(table.expand(["a"])) == ["a", "x"]


def test_expand_does_not_mutate_input():
    table = AliasTable({"b": ["build"]})
    argv = ["b", "1"]
    table.expand(argv)
    assert argv == ["b", "1"]


def test_default_table_maps_tools_to_themselves():
    table = AliasTable()
    assert table.expand(["grep", "-r", "TODO"]) == ["grep", "-r", "TODO"]
    assert table.list_aliases() == sorted(DEFAULT_ALIASES)


def test_load_merges_defaults_and_splits_strings():
    loaded = alias_module.load({"t": "test --fast 'two words'", "grep": ["rg"]})
    assert loaded["t"] == ["test", "--fast", "two words"]
    assert loaded["grep"] == ["rg"]
    assert loaded["awk"] == ["awk"]


def test_load_without_defaults():
    assert alias_module.load({"t": ["test"]}, include_defaults=False) == {"t": ["test"]}


def test_load_skips_empty_expansions():
    assert "e" not in alias_module.load({"e": ""}, include_defaults=False)


def test_load_from_project_config_and_file(tmp_path):
    cfg = ProjectConfig(aliases={"up": "deploy prod"})
    assert alias_module.load(cfg)["up"] == ["deploy", "prod"]

    path = tmp_path / "cmdnest.yaml"
    path.write_text("aliases:\n  up: deploy staging\n  st: [status, --short]\n")
    loaded = alias_module.load(path)
    assert loaded["up"] == ["deploy", "staging"]
    assert loaded["st"] == ["status", "--short"]


def test_get_alias_returns_copy():
    table = AliasTable({"b": ["build"]})
    expansion = table.get_alias("b")
    expansion.append("oops")
    assert table.get_alias("b") == ["build"]
    assert table.get_alias("missing") is None
