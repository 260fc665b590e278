"""Tests for configuration file loading and merging."""

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jsonld_cli.cli.commands import compact, format_document, frame
from jsonld_cli.cli.config import (
    ConfigError,
    command_config,
    load_command_config,
    load_config,
    merge_config,
    validate_config,
)
from jsonld_cli.cli.exit_codes import ExitCode
from tests.conftest import SAMPLE_DOCUMENT


class TestLoadConfig:
    """Loading JSON and YAML files."""

    def test_json(self, tmp_path):
        path = tmp_path / "jsonld.json"
        path.write_text(json.dumps({"indent": 4}))
        assert load_config(path) == {"indent": 4}

    def test_yaml(self, tmp_path):
        path = tmp_path / "jsonld.yaml"
        path.write_text("indent: 4\nframe:\n  embed: false\n")
        assert load_config(path) == {"indent": 4, "frame": {"embed": False}}

    def test_unknown_extension_falls_back_to_yaml(self, tmp_path):
        path = tmp_path / "jsonld.conf"
        path.write_text("newline: no\n")
        assert load_config(path) == {"newline": False}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "jsonld.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "jsonld.json"
        path.write_text("{indent: ")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "jsonld.yml"
        path.write_text("indent: [4\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "jsonld.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)


class TestValidateConfig:
    """Structure checks."""

    def test_valid(self):
        config = {"indent": 4, "compact": {"context": "ctx.jsonld", "indent": 0}}
        assert validate_config(config) == []

    def test_unknown_top_level(self):
        assert validate_config({"colour": "red"}) == ["Unknown option 'colour'"]

    def test_option_in_wrong_section(self):
        assert validate_config({"expand": {"embed": True}}) == [
            "Unknown option 'embed' in section 'expand'"
        ]

    def test_section_not_mapping(self):
        assert validate_config({"frame": "frame.jsonld"}) == ["Section 'frame' must be a mapping"]

    def test_load_command_config_rejects_invalid(self, tmp_path):
        path = tmp_path / "jsonld.json"
        path.write_text(json.dumps({"colour": "red"}))
        with pytest.raises(ConfigError, match="colour"):
            load_command_config(path, "format")

    def test_load_command_config_without_path(self):
        assert load_command_config(None, "format") == {}


class TestMerging:
    """Precedence between CLI, sections and top-level keys."""

    def test_section_overrides_top_level(self):
        config = {"indent": 4, "base": "urn:a:", "compact": {"indent": 1}}
        assert command_config(config, "compact") == {"indent": 1, "base": "urn:a:"}
        assert command_config(config, "expand") == {"indent": 4, "base": "urn:a:"}

    def test_other_sections_ignored(self):
        config = {"frame": {"embed": False}}
        assert command_config(config, "compact") == {}

    def test_base_is_an_ordinary_override(self):
        assert merge_config({"base": "urn:a:", "indent": 4}, base="urn:b:") == {
            "base": "urn:b:",
            "indent": 4,
        }

    def test_empty_values_count_as_unset(self):
        config = {"indent": None, "base": "urn:a:", "frame": {"embed": None, "explicit": True}}
        assert command_config(config, "frame") == {"base": "urn:a:", "explicit": True}

    def test_empty_section_is_valid(self):
        assert validate_config({"frame": None}) == []
        assert command_config({"frame": None}, "frame") == {}

    def test_none_does_not_override(self):
        assert merge_config({"indent": 4}, indent=None, base="urn:b:") == {
            "indent": 4,
            "base": "urn:b:",
        }


# Property: CLI values always override config values, None never does
@given(
    base=st.dictionaries(st.sampled_from(["indent", "base", "newline"]), st.integers()),
    overrides=st.dictionaries(
        st.sampled_from(["indent", "base", "newline"]), st.one_of(st.none(), st.integers())
    ),
)
def test_property_cli_precedence(base, overrides):
    merged = merge_config(base, **overrides)
    for key, value in overrides.items():
        if value is not None:
            assert merged[key] == value
        elif key in base:
            assert merged[key] == base[key]


class TestCommandsUseConfig:
    """Config values flow into command invocations."""

    def test_indent_from_config(self, engine, write_document, tmp_path, capsys):
        config = tmp_path / "jsonld.yaml"
        config.write_text("indent: 4\n")
        doc = write_document(SAMPLE_DOCUMENT)

        assert format_document(doc, config=config) == ExitCode.SUCCESS
        assert capsys.readouterr().out == json.dumps(SAMPLE_DOCUMENT, indent=4) + "\n"

    def test_cli_overrides_config(self, engine, write_document, tmp_path, capsys):
        config = tmp_path / "jsonld.yaml"
        config.write_text("indent: 4\nnewline: true\n")
        doc = write_document(SAMPLE_DOCUMENT)

        assert format_document(doc, config=config, indent=0, no_newline=True) == ExitCode.SUCCESS
        assert capsys.readouterr().out == json.dumps(SAMPLE_DOCUMENT, separators=(",", ":"))

    def test_section_options(self, engine, write_document, tmp_path):
        ctx = write_document({"@context": {}}, "ctx.jsonld")
        config = tmp_path / "jsonld.yaml"
        config.write_text(f"compact:\n  context: {ctx}\n  compact_arrays: 'no'\n")
        doc = write_document(SAMPLE_DOCUMENT)

        assert compact(doc, config=config) == ExitCode.SUCCESS
        [request] = engine.requests
        assert request.secondary == {"@context": {}}
        assert request.options["compactArrays"] is False

    def test_boolean_strings_in_config(self, engine, write_document, tmp_path):
        config = tmp_path / "jsonld.json"
        config.write_text(json.dumps({"frame": {"embed": "false", "explicit": True}}))
        doc = write_document(SAMPLE_DOCUMENT)

        assert frame(doc, config=config) == ExitCode.SUCCESS
        options = engine.requests[0].options
        assert options["embed"] is False
        assert options["explicit"] is True

    def test_cli_flag_beats_config_section(self, engine, write_document, tmp_path):
        config = tmp_path / "jsonld.json"
        config.write_text(json.dumps({"frame": {"embed": "false"}}))
        doc = write_document(SAMPLE_DOCUMENT)

        assert frame(doc, config=config, embed="true") == ExitCode.SUCCESS
        assert engine.requests[0].options["embed"] is True

    def test_empty_yaml_value_uses_default(self, engine, write_document, tmp_path):
        config = tmp_path / "jsonld.yaml"
        config.write_text("newline:\nframe:\n  embed:\n  explicit: yes\n")
        doc = write_document(SAMPLE_DOCUMENT)

        assert frame(doc, config=config) == ExitCode.SUCCESS
        options = engine.requests[0].options
        assert options["embed"] is True
        assert options["explicit"] is True

    def test_base_from_cli_with_config(self, engine, write_document, tmp_path):
        config = tmp_path / "jsonld.yaml"
        config.write_text("base: urn:config:\n")
        doc = write_document(SAMPLE_DOCUMENT)

        assert compact(doc, config=config, base="urn:cli:") == ExitCode.SUCCESS
        assert engine.requests[0].options["base"] == "urn:cli:"

    def test_invalid_config_fails(self, engine, write_document, tmp_path, capsys):
        config = tmp_path / "jsonld.json"
        config.write_text(json.dumps({"expand": {"embed": True}}))
        doc = write_document(SAMPLE_DOCUMENT)

        assert format_document(doc, config=config) == ExitCode.FAILURE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("ERROR: Invalid configuration")
