"""
Command-line entry point.

``serve`` runs the gateway over stdin/stdout. The other commands inspect
the tool catalog and dry-run the path and command checks without a client.
"""

import asyncio
import logging
import sys
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from winbasic import __version__
from winbasic.filesystem.roots import Root, RootRegistry
from winbasic.gateway.server import GatewayServer
from winbasic.gateway.tools import TOOL_DEFINITIONS
from winbasic.settings.config import GatewaySettings
from winbasic.shell.safety import DenylistPolicy

# Load environment variables
load_dotenv()

console = Console()
# stdout carries the protocol while serving, so logs go to stderr
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Setup rich logging on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def load_settings(config: Optional[str], roots: tuple[str, ...]) -> GatewaySettings:
    """Build settings from an optional file, then apply ``--root`` overrides."""
    settings = GatewaySettings.from_file(config) if config else GatewaySettings()
    if roots:
        settings.roots = list(roots)
    return settings


@click.group()
@click.version_option(version=__version__)
def cli():
    """Windows Basic gateway - file and command tools over MCP."""
    pass


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to a YAML or JSON config file",
)
@click.option(
    "--root",
    "-r",
    "roots",
    multiple=True,
    help="Initial root (path or file: URI); may be repeated",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def serve(config: Optional[str], roots: tuple[str, ...], verbose: bool):
    """
    Serve the gateway over stdin/stdout.

    Without roots every path is accessible until the client sends its
    own root list.

    Examples:

        winbasic serve

        winbasic serve -r C:/projects/app -v

        winbasic serve -c gateway.yaml
    """
    try:
        settings = load_settings(config, roots)
    except Exception as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {e}")
        sys.exit(1)

    setup_logging(verbose, settings.log_level)
    server = GatewayServer(settings)

    try:
        asyncio.run(server.run_stdio())
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted.[/yellow]")


@cli.command()
def tools():
    """List the tools the gateway exposes."""
    table = Table(title="Tools")
    table.add_column("Name", style="green")
    table.add_column("Description")
    for definition in TOOL_DEFINITIONS:
        table.add_row(definition.name, definition.description)
    console.print(table)


@cli.command("check-path")
@click.argument("path")
@click.option(
    "--root",
    "-r",
    "roots",
    multiple=True,
    help="Root to check against (path or file: URI); may be repeated",
)
def check_path(path: str, roots: tuple[str, ...]):
    """
    Check whether PATH would be accessible under the given roots.

    Examples:

        winbasic check-path C:/projects/app/main.py -r file:///C:/projects
    """
    registry = RootRegistry(Root.from_value(value) for value in roots)
    if registry.is_allowed(path):
        console.print(f"[green]Allowed:[/green] {path}")
    else:
        console.print(f"[bold red]Denied:[/bold red] {path}")
        sys.exit(1)


@cli.command("check-command")
@click.argument("command")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to a YAML or JSON config file",
)
def check_command(command: str, config: Optional[str]):
    """
    Check COMMAND against the destructive-command denylist.

    Examples:

        winbasic check-command "rm -rf /"
    """
    try:
        settings = load_settings(config, ())
    except Exception as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        sys.exit(1)

    policy = DenylistPolicy(settings.shell.blocked_patterns)
    matched = policy.match(command)
    if matched is None:
        console.print(Panel(command, title="[green]Allowed[/green]"))
    else:
        console.print(
            Panel(command, title=f"[bold red]Rejected[/bold red] ({matched.tag})")
        )
        sys.exit(1)


if __name__ == "__main__":
    cli()
