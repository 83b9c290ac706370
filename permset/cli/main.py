"""
CLI Main for Permset
=====================
Typer-based CLI to inspect, encode and validate permission files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import Settings, load_settings
from ..errors import ActionsNotInUniverseError, ConfigError, PermsetError
from ..permissions import Permission, PermissionManager
from ..utils import setup_logging
from .demo import run_demo

# Configure module logger
logger = logging.getLogger(__name__)

# Console for Rich output
console = Console()

# Create Typer app
app = typer.Typer(
    name="permset",
    help="Permset - Permissions as sets of actions",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich"
)


# Global state
class AppState:
    """Global application state"""
    settings: Settings = Settings()
    verbose: bool = False


state = AppState()


def version_callback(value: bool):
    """Print version and exit"""
    if value:
        from .. import __version__
        console.print(f"permset v{__version__}")
        raise typer.Exit()


def _fail(message: str, code: int = 1) -> NoReturn:
    console.print(f"[red]{escape(message)}[/red]", highlight=False)
    raise typer.Exit(code)


def _load(path: Path) -> Permission:
    try:
        return Permission.from_file(path)
    except (PermsetError, OSError) as e:
        logger.debug(f"Failed to load {path}: {e}")
        _fail(f"Failed to load {path}: {e}")


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Settings file (defaults to ~/.permset/config.yaml and ./.permset/config.yaml)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output"
    ),
    version: bool = typer.Option(
        None,
        "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
):
    """
    Permset - inspect, encode and validate permissions.

    [dim]Examples:[/dim]
        permset demo
        permset decode perms.json
        permset encode user.create user.view
        permset check perms.yaml --universe universe.yaml
    """
    try:
        settings = load_settings(config)
    except ConfigError as e:
        _fail(str(e), code=2)

    setup_logging(config=settings.to_log_config(verbose), verbose=verbose)

    state.settings = settings
    state.verbose = verbose


@app.command("demo")
def demo():
    """Run a walkthrough of managers and permission operations"""
    run_demo()


@app.command("decode")
def decode(
    file: Path = typer.Argument(
        ...,
        help="JSON or YAML actions tree"
    ),
    json_output: bool = typer.Option(
        False,
        "--json", "-j",
        help="Output as JSON"
    )
):
    """List the actions granted by an actions tree file"""
    perm = _load(file)

    if json_output:
        console.print_json(data=list(perm))
        return

    if not perm:
        console.print("[dim]No actions granted.[/dim]")
        return

    table = Table(title=f"Actions in {file.name}", border_style="cyan")
    table.add_column("Action", style="bold")

    for action in perm:
        table.add_row(action)

    console.print(table)


@app.command("encode")
def encode(
    actions: List[str] = typer.Argument(
        ...,
        help="Actions to encode (e.g. user.create)"
    ),
    yaml_output: bool = typer.Option(
        False,
        "--yaml", "-y",
        help="Output as YAML"
    )
):
    """Print the actions tree for a list of actions"""
    perm = Permission.from_actions(actions)

    try:
        if yaml_output:
            typer.echo(perm.to_yaml(), nl=False)
        else:
            console.print_json(perm.to_json())
    except PermsetError as e:
        _fail(str(e))


@app.command("check")
def check(
    permission_file: Path = typer.Argument(
        ...,
        help="JSON or YAML actions tree to validate"
    ),
    universe: Optional[Path] = typer.Option(
        None,
        "--universe", "-u",
        help="Universe actions tree (defaults to the 'universe' setting)"
    )
):
    """
    Validate a permission against a universe of actions.

    Exits with 1 if the permission grants actions outside the universe.
    """
    universe = universe or state.settings.universe
    if universe is None:
        _fail("No universe given, use --universe or the 'universe' setting", code=2)

    try:
        manager = PermissionManager.from_file(universe)
    except (PermsetError, OSError) as e:
        _fail(f"Failed to load universe {universe}: {e}")

    requested = _load(permission_file)

    try:
        perm = manager.adopt(requested)
    except ActionsNotInUniverseError as e:
        console.print(Panel(
            "[red]Actions outside the universe:[/red]\n\n" +
            "\n".join(f"  ✗ {escape(action)}" for action in sorted(e.actions)),
            title="Invalid",
            border_style="red"
        ))
        raise typer.Exit(1)

    console.print(Panel(
        f"[green]Permission is valid[/green]\n\n"
        f"{len(perm)} of {len(manager.universe)} actions granted",
        title="Valid",
        border_style="green"
    ))


@app.command("has")
def has(
    file: Path = typer.Argument(
        ...,
        help="JSON or YAML actions tree"
    ),
    action: str = typer.Argument(
        ...,
        help="Action to look for (e.g. user.create)"
    )
):
    """Exit with 0 if the actions tree grants the action, 1 otherwise"""
    perm = _load(file)

    if action in perm:
        console.print(f"[green]✓[/green] {escape(action)}", highlight=False)
        return

    console.print(f"[red]✗[/red] {escape(action)}", highlight=False)
    raise typer.Exit(1)


def main_entry():
    """Entry point for the CLI"""
    app()


__all__ = ['app', 'main_entry']
