"""Main CLI entry point and application setup."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console

from searchlite import __version__
from searchlite.cli import commands
from searchlite.config import load_config
from searchlite.provider import SqliteProvider


@dataclass
class Context:
    """CLI context that holds shared resources."""

    provider: SqliteProvider
    console: Console
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


class SearchliteGroup(click.Group):
    """Custom group that turns unexpected errors into exit codes."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except Exception as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=SearchliteGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--index",
    "-i",
    "index_file",
    type=click.Path(path_type=Path),
    help="Override index database location",
)
@click.version_option(
    version=__version__, prog_name="searchlite", message="searchlite version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    index_file: Path | None,
) -> None:
    """Full-text search index backed by SQLite FTS5."""
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        provider_config = load_config(
            config, file=str(index_file) if index_file else None
        )
        provider = SqliteProvider(provider_config)
    except Exception as e:
        if debug:
            raise
        console.print(f"[red]Error initializing index:[/red] {e}")
        ctx.exit(1)

    ctx.call_on_close(provider.close)
    ctx.obj = Context(provider=provider, console=console, debug=debug)


cli.add_command(commands.index)
cli.add_command(commands.add)
cli.add_command(commands.remove)
cli.add_command(commands.search)
cli.add_command(commands.status)


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
