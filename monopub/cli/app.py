from __future__ import annotations

import typer

from monopub.cli.commands.release_cmd import release


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
)

# Single command: typer runs it as the root command.
app.command(name="monopub")(release)


def main() -> None:
    app()
