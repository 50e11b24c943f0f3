"""Tests for per-toolchain configuration decoding."""

import pytest

from extensions.config import ConfigDecodeError, ToolchainConfig, decode_section
from toolchains.go import GoConfig


def test_decode_section_returns_mapping():
    src = """
workspace:
  with:
    go:
      version: 1.11.2
      go_111_module: auto
"""
    assert decode_section(src, "go") == {"version": "1.11.2", "go_111_module": "auto"}


@pytest.mark.parametrize(
    "src",
    [
        "",
        "workspace:\n",
        "workspace:\n  shell:\n    program: /bin/zsh\n",
        "workspace:\n  with:\n",
        "workspace:\n  with:\n    node:\n      version: 20.0.0\n",
        "workspace:\n  with:\n    go:\n",
    ],
)
def test_decode_section_absent(src):
    assert decode_section(src, "go") is None


def test_scalars_stay_strings():
    src = "workspace:\n  with:\n    go:\n      version: 1.20\n      go_path: false\n"
    section = decode_section(src, "go")

    assert section["version"] == "1.20"
    assert section["go_path"] == "false"


def test_malformed_yaml_raises():
    with pytest.raises(ConfigDecodeError):
        decode_section("workspace: [unclosed\n", "go")


def test_non_mapping_level_raises():
    with pytest.raises(ConfigDecodeError):
        decode_section("workspace:\n  with:\n    - go\n", "go")

    with pytest.raises(ConfigDecodeError):
        decode_section("workspace:\n  with:\n    go: 1.11.2\n", "go")


def test_missing_version_is_not_applicable():
    assert ToolchainConfig.from_dict({}) is None
    assert ToolchainConfig.from_dict({"version": ""}) is None
    assert GoConfig.from_dict({"go_path": "/go"}) is None


def test_optional_fields_and_unknown_keys():
    config = GoConfig.from_dict(
        {"version": "1.11.2", "go_111_module": "on", "unknown": "ignored"}
    )

    assert config == GoConfig(version="1.11.2", go_111_module="on")
    assert config.go_path == ""
    assert config.aliases == {}


def test_aliases_decode():
    config = ToolchainConfig.from_dict(
        {"version": "1", "aliases": {"gt": "go test ./..."}}
    )
    assert config.aliases == {"gt": "go test ./..."}

    with pytest.raises(ConfigDecodeError):
        ToolchainConfig.from_dict({"version": "1", "aliases": ["gt"]})


def test_nested_value_for_scalar_field_raises():
    with pytest.raises(ConfigDecodeError):
        GoConfig.from_dict({"version": {"major": "1"}})


@pytest.mark.parametrize("null", ["~", "null", "Null", "NULL", ""])
def test_null_version_is_not_applicable(null):
    section = decode_section(f"workspace:\n  with:\n    go:\n      version: {null}\n", "go")

    assert section == {"version": None}
    assert GoConfig.from_dict(section) is None


@pytest.mark.parametrize(
    "src",
    [
        "workspace:\n  with:\n    go: ~\n",
        "workspace:\n  with:\n    go: null\n",
        "workspace:\n  with: null\n",
        "workspace: ~\n",
    ],
)
def test_null_levels_are_absent(src):
    assert decode_section(src, "go") is None


def test_quoted_null_stays_text():
    src = "workspace:\n  with:\n    go:\n      version: 1.11.2\n      go_path: 'null'\n"

    assert decode_section(src, "go")["go_path"] == "null"


def test_null_optional_field_keeps_default():
    src = "workspace:\n  with:\n    go:\n      version: 1.11.2\n      go_path: null\n"

    config = GoConfig.from_dict(decode_section(src, "go"))

    assert config.go_path == ""


@pytest.mark.parametrize("name", ["gt; rm -rf /", "$(id)", "1go", "a b", ""])
def test_invalid_alias_names_raise(name):
    with pytest.raises(ConfigDecodeError):
        ToolchainConfig.from_dict({"version": "1", "aliases": {name: "go test"}})


@pytest.mark.parametrize("name", ["gt", "go-test", "go.vet", "_g1"])
def test_valid_alias_names(name):
    config = ToolchainConfig.from_dict({"version": "1", "aliases": {name: "go test"}})

    assert config.aliases == {name: "go test"}
