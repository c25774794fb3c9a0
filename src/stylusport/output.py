"""Serialization of program models for output."""

import json
import pprint
import sys
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import yaml

from .core.errors import ConfigError, OutputError


class OutputFormat(Enum):
    YAML = "yaml"
    JSON = "json"
    DEBUG = "debug"

    @classmethod
    def parse(cls, value: str) -> "OutputFormat":
        try:
            return cls(value.lower())
        except ValueError:
            raise ConfigError(f"Invalid format: {value}") from None


def render(model, fmt: OutputFormat) -> str:
    """Render a model exposing `to_dict()` in the requested format."""
    if fmt == OutputFormat.YAML:
        return yaml.safe_dump(model.to_dict(), sort_keys=False, allow_unicode=True)
    if fmt == OutputFormat.JSON:
        return json.dumps(model.to_dict(), indent=2) + "\n"
    return pprint.pformat(model, width=100) + "\n"


def write_output(model, fmt: OutputFormat, path: Optional[Union[str, Path]] = None):
    """Write to `path`, or to stdout when no path is given."""
    text = render(model, fmt)
    if path is None:
        sys.stdout.write(text)
        return
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise OutputError(f"Cannot write {path}: {e}") from e
