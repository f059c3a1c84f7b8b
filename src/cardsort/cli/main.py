"""
Main CLI entry point for cardsort.

Provides subcommands for the card sort analysis pipeline:
- analyze: Similarity matrix and UPGMA clustering
- config: Analysis configuration files
"""

from __future__ import annotations

import typer
from rich import print as rprint
from rich.console import Console

from cardsort import __version__

app = typer.Typer(
    name="cardsort",
    help="Similarity and hierarchical clustering for card sorting studies",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"cardsort version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Cardsort: consensus analysis for card sorting studies.

    Computes how often participants grouped each pair of cards together
    and clusters the cards into a dendrogram of related groups.
    """


# Import subcommands
from cardsort.cli import analyze, config

# Register subcommands
app.add_typer(analyze.app, name="analyze")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
