"""Command configuration."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..output import OutputFormat
from .errors import ConfigError

FORMAT_ENV = "STYLUSPORT_FORMAT"


def load_env(start: Optional[Path] = None):
    """Load a .env file from the current or parent directories."""
    current = start or Path.cwd()
    for _ in range(5):  # Check up to 5 parent dirs
        env_file = current / ".env"
        if env_file.exists():
            with open(env_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ.setdefault(key.strip(), value.strip())
            break
        current = current.parent


@dataclass
class Config:
    """Settings for one parse/normalize run."""
    input_path: Path
    output_path: Optional[Path] = None
    format: OutputFormat = OutputFormat.YAML
    verbosity: int = 0
    quiet: bool = False
    strict: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Config":
        if not getattr(args, "input", None):
            raise ConfigError("Missing required argument: input")

        fmt_name = getattr(args, "format", None) or os.environ.get(FORMAT_ENV) or OutputFormat.YAML.value
        output = getattr(args, "output", None)

        return cls(
            input_path=Path(args.input),
            output_path=Path(output) if output else None,
            format=OutputFormat.parse(fmt_name),
            verbosity=getattr(args, "verbose", 0) or 0,
            quiet=bool(getattr(args, "quiet", False)),
            strict=bool(getattr(args, "strict", False)),
        )
