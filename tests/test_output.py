"""Tests for output rendering and configuration."""

import argparse
import json
import logging
import os

import pytest
import yaml

from stylusport.analysis import normalize
from stylusport.core.config import Config, load_env
from stylusport.core.errors import ConfigError, OutputError
from stylusport.core.logging import level_for
from stylusport.output import OutputFormat, render, write_output


class TestRender:

    def test_yaml(self, hello_world_program):
        data = yaml.safe_load(render(normalize(hello_world_program), OutputFormat.YAML))

        assert data["name"] == "hello_world"
        assert data["modules"][0]["instructions"][0]["body"] == {"kind": "unknown"}

    def test_yaml_keeps_field_order(self, hello_world_program):
        text = render(hello_world_program, OutputFormat.YAML)

        assert text.index("modules:") < text.index("account_structs:") < text.index("raw_accounts:")

    def test_json(self, token_program):
        data = json.loads(render(normalize(token_program), OutputFormat.JSON))

        transfer = data["modules"][0]["instructions"][2]
        assert transfer["body"]["operations"] == [{"kind": "transfer", "from": "from", "to": "to"}]
        assert data["validation_issues"][0]["severity"] == "error"

    def test_debug(self, hello_world_program):
        text = render(hello_world_program, OutputFormat.DEBUG)

        assert text.startswith("Program(")

    def test_write_to_file(self, hello_world_program, tmp_path):
        target = tmp_path / "out.json"

        write_output(hello_world_program, OutputFormat.JSON, target)

        assert json.loads(target.read_text())["modules"][0]["name"] == "hello_world"

    def test_write_failure(self, hello_world_program, tmp_path):
        with pytest.raises(OutputError, match="Cannot write"):
            write_output(hello_world_program, OutputFormat.YAML, tmp_path / "missing" / "out.yaml")


class TestConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("STYLUSPORT_FORMAT", raising=False)
        config = Config.from_args(argparse.Namespace(input="lib.rs"))

        assert config.format == OutputFormat.YAML
        assert config.output_path is None
        assert not config.strict

    def test_format_from_env(self, monkeypatch):
        monkeypatch.setenv("STYLUSPORT_FORMAT", "json")

        assert Config.from_args(argparse.Namespace(input="lib.rs")).format == OutputFormat.JSON

    def test_flag_beats_env(self, monkeypatch):
        monkeypatch.setenv("STYLUSPORT_FORMAT", "json")
        config = Config.from_args(argparse.Namespace(input="lib.rs", format="debug"))

        assert config.format == OutputFormat.DEBUG

    def test_invalid_format(self, monkeypatch):
        monkeypatch.setenv("STYLUSPORT_FORMAT", "toml")

        with pytest.raises(ConfigError, match="Invalid format: toml"):
            Config.from_args(argparse.Namespace(input="lib.rs"))

    def test_load_env_does_not_override(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("# settings\nSTYLUSPORT_FORMAT=debug\nSTYLUSPORT_LOG_LEVEL = info\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.setenv("STYLUSPORT_FORMAT", "json")
        monkeypatch.setenv("STYLUSPORT_LOG_LEVEL", "unset")
        monkeypatch.delenv("STYLUSPORT_LOG_LEVEL")

        load_env(nested)

        assert os.environ["STYLUSPORT_FORMAT"] == "json"
        assert os.environ["STYLUSPORT_LOG_LEVEL"] == "info"


class TestLogLevel:

    @pytest.mark.parametrize("verbosity,quiet,expected", [
        (0, False, logging.WARNING),
        (1, False, logging.INFO),
        (2, False, logging.DEBUG),
        (3, False, logging.DEBUG),
        (2, True, logging.ERROR),
    ])
    def test_flags(self, monkeypatch, verbosity, quiet, expected):
        monkeypatch.delenv("STYLUSPORT_LOG_LEVEL", raising=False)

        assert level_for(verbosity, quiet) == expected

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("STYLUSPORT_LOG_LEVEL", "debug")

        assert level_for(0) == logging.DEBUG

    @pytest.mark.parametrize("value", ["logger", "Handler", "verbose", ""])
    def test_unknown_env_level_ignored(self, monkeypatch, value):
        monkeypatch.setenv("STYLUSPORT_LOG_LEVEL", value)

        assert level_for(1) == logging.INFO
