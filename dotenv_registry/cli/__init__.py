"""
Command-Line Interface

CLI commands for inspecting and editing a config file through the registry.

Commands:
    dotenv-registry get     - Resolve a key (environment, then file)
    dotenv-registry lookup  - Look a key up in the file only
    dotenv-registry set     - Write a key to the file
    dotenv-registry list    - Show every key in the file

Usage:
    # Resolve with a prefix
    dotenv-registry --file app.env --prefix app get port

    # Pre-load another dotenv file into the process environment
    dotenv-registry --env-file .env.local get database_url

    # Persist a value
    dotenv-registry --file app.env set debug true
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from dotenv_registry.api.registry import DotEnv
from dotenv_registry.storage.dotenv_file import EnvFileParseError
from dotenv_registry.utils.casting import to_string

__all__ = ["main", "app"]

app = typer.Typer(
    name="dotenv-registry",
    help="Prioritized .env configuration registry",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


@dataclass
class _State:
    file: Path
    separator: str
    prefix: str
    allow_empty: bool
    strict: bool

    def registry(self) -> DotEnv:
        return DotEnv(
            self.file,
            separator=self.separator,
            prefix=self.prefix,
            allow_empty_env_vars=self.allow_empty,
            strict_parsing=self.strict,
        )


@app.callback()
def _options(
    ctx: typer.Context,
    file: Path = typer.Option(
        Path(".env"),
        "--file", "-f",
        help="Config file",
    ),
    separator: str = typer.Option(
        "=",
        "--separator", "-s",
        help="Key/value separator",
    ),
    prefix: str = typer.Option(
        "",
        "--prefix", "-p",
        help="Key prefix (without underscore)",
    ),
    allow_empty: bool = typer.Option(
        False,
        "--allow-empty",
        help="Count set-but-empty environment variables as values",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail on malformed lines instead of skipping them",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file", "-e",
        help="Dotenv file to load into the environment first (never overrides)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Prioritized .env configuration registry."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if env_file is not None:
        load_dotenv(env_file, override=False)

    ctx.obj = _State(
        file=file,
        separator=separator,
        prefix=prefix,
        allow_empty=allow_empty,
        strict=strict,
    )


@app.command()
def get(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to resolve"),
) -> None:
    """Resolve KEY from the environment, then the config file."""
    resolved = ctx.obj.registry().resolve(key)
    if not resolved.present:
        err_console.print(f"[yellow]{escape(resolved.key or key)} is not set[/]")
        raise typer.Exit(code=1)
    console.print(to_string(resolved.value), markup=False, highlight=False)


@app.command()
def lookup(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to look up"),
) -> None:
    """Look KEY up in the config file only."""
    state: _State = ctx.obj
    try:
        value, found = state.registry().lookup(key)
    except (FileNotFoundError, EnvFileParseError) as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(code=2)

    if not found:
        err_console.print(f"[yellow]{escape(key)} not found in {escape(str(state.file))}[/]")
        raise typer.Exit(code=1)
    console.print(to_string(value), markup=False, highlight=False)


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Key to write"),
    value: str = typer.Argument(..., help="Value to write"),
) -> None:
    """Write KEY=VALUE to the config file."""
    state: _State = ctx.obj
    registry = state.registry()
    try:
        registry.write(key, value)
    except (OSError, ValueError) as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(code=2)
    console.print(f"[green]Wrote {escape(registry.transform_key(key))} to {escape(str(state.file))}[/]")


@app.command("list")
def list_values(ctx: typer.Context) -> None:
    """Show every key in the config file."""
    state: _State = ctx.obj
    settings = state.registry().all_settings()
    if not settings:
        console.print(f"[yellow]No values in {escape(str(state.file))}[/]")
        return

    table = Table(title=Text(str(state.file)))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(settings):
        table.add_row(Text(key), Text(to_string(settings[key])))
    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
