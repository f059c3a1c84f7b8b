"""
Config command for analysis configuration files.

Provides subcommands:
- init: Write the default configuration as YAML
- show: Print the effective configuration of a YAML file
"""
from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from cardsort.models.config import AnalysisConfig

app = typer.Typer(
    name="config",
    help="Create and inspect analysis configuration files",
    no_args_is_help=True,
)

console = Console()


@app.command(name="init")
def init(
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output YAML file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file",
    ),
) -> None:
    """Write the default analysis configuration."""
    if output.exists() and not force:
        console.print(f"[red]Error: {output} exists (use --force to overwrite)[/red]")
        raise typer.Exit(code=1) from None

    output.parent.mkdir(parents=True, exist_ok=True)
    AnalysisConfig().to_yaml(output)
    console.print(f"[bold green]Configuration written:[/bold green] {output}")


@app.command(name="show")
def show(
    config_path: Path = typer.Argument(
        ...,
        help="YAML configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Validate a configuration file and print the effective settings."""
    try:
        config = AnalysisConfig.from_yaml(config_path)
    except Exception as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from None

    console.print(config.to_yaml_str(), markup=False, highlight=False)
