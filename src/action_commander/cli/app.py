"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

from typing import Optional

import typer

from action_commander import __version__

app = typer.Typer(
    name="acom",
    help="Action Commander - pin and upgrade the actions used by CI workflows.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"acom {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit",
    ),
) -> None:
    """Action Commander - pin and upgrade the actions used by CI workflows."""


def _register_commands() -> None:
    from action_commander.cli.commands.list_cmd import list_actions
    from action_commander.cli.commands.pin_cmd import pin, upgrade

    app.command("list")(list_actions)
    app.command("pin")(pin)
    app.command("upgrade")(upgrade)


_register_commands()


def main() -> None:
    app()
