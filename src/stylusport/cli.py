"""
CLI entry point for stylusport.

Usage:
    stylusport parse programs/vault/src/lib.rs
    stylusport normalize programs/vault/src/lib.rs -f json -o vault.json
    stylusport normalize programs/vault/src/lib.rs --strict -v
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from stylusport.core.config import Config, load_env
from stylusport.core.errors import StylusportError
from stylusport.core.logging import level_for, setup_logging
from stylusport.output import OutputFormat, write_output

console = Console(stderr=True)

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
}


def _configure(args: argparse.Namespace) -> Config:
    load_env()
    config = Config.from_args(args)
    setup_logging(level_for(config.verbosity, config.quiet), console=console)
    return config


def _emit(model, config: Config):
    write_output(model, config.format, config.output_path)
    if config.output_path and not config.quiet:
        console.print(f"[dim]Output written to: {config.output_path}[/dim]")


def run_parse(args: argparse.Namespace) -> int:
    """Parse an Anchor source file and print the base program model."""
    from stylusport.parser import parse_file

    try:
        config = _configure(args)
        logger.info("Parsing %s", config.input_path)
        program = parse_file(config.input_path)
        _emit(program, config)
    except StylusportError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if config.verbosity and not config.quiet:
        console.print(Panel(program.summary(), title="[bold]Parsed program[/bold]"))
    return 0


def run_normalize(args: argparse.Namespace) -> int:
    """Parse, normalize and validate an Anchor source file."""
    from stylusport.parser import parse_file
    from stylusport.analysis import normalize

    try:
        config = _configure(args)
        logger.info("Normalizing %s", config.input_path)
        program = parse_file(config.input_path)
        normalized = normalize(program)
    except StylusportError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    try:
        _emit(normalized, config)
    except StylusportError as e:
        # the issues are still reported when the model cannot be written
        if not config.quiet:
            print_issues(normalized)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    if not config.quiet:
        print_issues(normalized)

    if config.strict and normalized.has_errors():
        console.print("[red]✗ Validation failed (strict mode)[/red]")
        return 1
    return 0


def print_issues(program):
    """Summarise validation issues on stderr."""
    if not program.validation_issues:
        console.print("[green]✓ No validation issues[/green]")
        return

    table = Table(title=f"Validation Issues ({program.name})")
    table.add_column("Severity")
    table.add_column("Element", style="cyan")
    table.add_column("Message")

    for issue in program.validation_issues:
        style = SEVERITY_STYLES.get(issue.severity.value, "white")
        table.add_row(
            f"[{style}]{issue.severity.value}[/{style}]",
            issue.element or "",
            escape(issue.message),
        )

    console.print(table)


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("input", type=str, help="Path to the Anchor program source (lib.rs)")
    parser.add_argument(
        "--format", "-f",
        type=str,
        choices=[f.value for f in OutputFormat],
        help="Output format (default: yaml, or $STYLUSPORT_FORMAT)"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file (default: stdout)"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors and skip the issue summary"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="stylusport",
        description="Extract and normalize Anchor program models from Rust source",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Extract the program model")
    _add_common_arguments(parse_parser)

    # normalize command
    normalize_parser = subparsers.add_parser(
        "normalize", help="Extract, normalize and validate the program model"
    )
    _add_common_arguments(normalize_parser)
    normalize_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when validation reports errors"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "parse":
        return run_parse(args)
    elif args.command == "normalize":
        return run_normalize(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
