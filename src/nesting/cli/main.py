"""Typer CLI for sheet nesting."""

import logging
from typing import Annotated

import typer

from nesting.cli.commands import import_csv_command, pack_command, validate_command

app = typer.Typer(
    name="nesting",
    help="Pack rectangular parts onto stock sheets with guillotine cuts.",
)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log packing decisions to stderr"),
    ] = False,
) -> None:
    """Pack rectangular parts onto stock sheets with guillotine cuts."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )


app.command(name="pack")(pack_command)
app.command(name="validate")(validate_command)
app.command(name="import-csv")(import_csv_command)


if __name__ == "__main__":
    app()
