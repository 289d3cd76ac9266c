"""CLI entry point: registers the analyze command."""

import typer

app = typer.Typer(
    name="import-atlas",
    help="Import Atlas - module dependency graphs for JavaScript/TypeScript",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import commands to register them
from .analyze import main as _main  # noqa: F401, E402
