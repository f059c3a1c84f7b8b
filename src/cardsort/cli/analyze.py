"""
Analyze command for card sort results.

Provides subcommands:
- similarity: Card-by-card similarity matrix
- cluster: UPGMA dendrogram and leaf-ordered similarity matrix
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from cardsort.cli.utils import QuietConsole, resolve_config, spinner_progress, write_json
from cardsort.core.analysis import analyze_similarity, cluster_similarity
from cardsort.core.exceptions import CardSortError
from cardsort.core.io_utils import load_study, write_matrix
from cardsort.models.config import AnalysisConfig
from cardsort.models.results import SimilarityResult
from cardsort.models.study import StudyExport

app = typer.Typer(
    name="analyze",
    help="Compute similarity and clustering from card sort results",
    no_args_is_help=True,
)

console = Console()


class MatrixFormat(str, Enum):
    """Matrix table output format."""

    CSV = "csv"
    PARQUET = "parquet"


INPUT_OPTION = typer.Option(
    ...,
    "--input",
    "-i",
    help="Study JSON export or sort table (.csv, .tsv, .parquet)",
    exists=True,
    dir_okay=False,
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML analysis configuration",
    exists=True,
    dir_okay=False,
)
FORMAT_OPTION = typer.Option(
    None,
    "--format",
    "-f",
    help="Matrix table format (default from config: csv)",
)
INCLUDE_EXCLUDED_OPTION = typer.Option(
    None,
    "--include-excluded/--skip-excluded",
    help="Include sessions the researcher excluded",
)
QUIET_OPTION = typer.Option(
    False,
    "--quiet",
    "-q",
    help="Suppress progress output",
)


def _load(
    input_path: Path,
    config_path: Path | None,
    include_excluded: bool | None,
    matrix_format: MatrixFormat | None,
    out: QuietConsole,
) -> tuple[StudyExport, AnalysisConfig]:
    """Load configuration and study data, exiting with code 1 on failure."""
    try:
        config = resolve_config(
            config_path,
            include_excluded=include_excluded,
            matrix_format=matrix_format.value if matrix_format else None,
        )
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(code=1) from None

    out.print(f"[bold]Input:[/bold] {input_path}")
    try:
        study = load_study(input_path)
    except CardSortError as e:
        console.print(f"[red]Error: {e.full_message}[/red]")
        raise typer.Exit(code=1) from None
    except Exception as e:
        console.print(f"[red]Error loading study results: {e}[/red]")
        raise typer.Exit(code=1) from None

    out.print(f"[bold]Cards:[/bold] {len(study.cards or [])}")
    out.print(f"[bold]Sessions:[/bold] {len(study.sessions)}")
    return study, config


def _print_top_pairs(out: QuietConsole, result: SimilarityResult, limit: int = 5) -> None:
    """Show the most similar card pairs."""
    pairs = [
        (result.matrix[i][j], result.cards[i].name, result.cards[j].name)
        for i in range(len(result.cards))
        for j in range(i + 1, len(result.cards))
    ]
    if not pairs:
        return
    pairs.sort(key=lambda p: p[0], reverse=True)

    table = Table(title="Most similar card pairs")
    table.add_column("Card A")
    table.add_column("Card B")
    table.add_column("Similarity", justify="right")
    for value, name_a, name_b in pairs[:limit]:
        table.add_row(name_a, name_b, f"{value:.2f}")
    out.print(table)


@app.command(name="similarity")
def similarity(
    input_path: Path = INPUT_OPTION,
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output JSON file ({cards, matrix})",
    ),
    matrix: Path | None = typer.Option(
        None,
        "--matrix",
        "-m",
        help="Also write the matrix as a labelled table",
    ),
    matrix_format: MatrixFormat | None = FORMAT_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    include_excluded: bool | None = INCLUDE_EXCLUDED_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """
    Compute the card similarity matrix.

    Similarity is the fraction of completed sessions in which two cards
    were placed in the same category.

    Examples:

        cardsort analyze similarity -i study.json -o similarity.json

        cardsort analyze similarity -i sorts.csv -o similarity.json -m matrix.csv
    """
    out = QuietConsole(console, quiet=quiet)
    out.print("\n[bold blue]Cardsort Similarity[/bold blue]\n")

    study, config = _load(input_path, config_path, include_excluded, matrix_format, out)

    with spinner_progress("Computing similarity matrix...", console, quiet):
        try:
            result = analyze_similarity(study.cards or [], study.sessions, config)
        except CardSortError as e:
            console.print(f"[red]Error: {e.full_message}[/red]")
            raise typer.Exit(code=1) from None

    write_json(result.to_json_dict(), output)
    if matrix is not None:
        matrix.parent.mkdir(parents=True, exist_ok=True)
        write_matrix(result.cards, result.matrix, matrix, config.matrix_format)
        out.print(f"[bold]Matrix table:[/bold] {matrix}")

    _print_top_pairs(out, result)
    out.print("\n[bold green]Similarity analysis complete![/bold green]")
    out.print(f"[bold]Output:[/bold] {output}")
    out.print()


@app.command(name="cluster")
def cluster(
    input_path: Path = INPUT_OPTION,
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Output JSON file ({dendrogram, cards, clusteredMatrix})",
    ),
    matrix: Path | None = typer.Option(
        None,
        "--matrix",
        "-m",
        help="Also write the leaf-ordered matrix as a labelled table",
    ),
    matrix_format: MatrixFormat | None = FORMAT_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    include_excluded: bool | None = INCLUDE_EXCLUDED_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """
    Cluster cards with average linkage (UPGMA).

    Writes the dendrogram together with the cards and similarity matrix
    reordered along the dendrogram leaves.

    Examples:

        cardsort analyze cluster -i study.json -o clustering.json

        cardsort analyze cluster -i sorts.parquet -o clustering.json -m clustered.parquet -f parquet
    """
    out = QuietConsole(console, quiet=quiet)
    out.print("\n[bold blue]Cardsort Clustering[/bold blue]\n")

    study, config = _load(input_path, config_path, include_excluded, matrix_format, out)
    n_cards = len(study.cards or [])

    with spinner_progress(f"Clustering {n_cards} cards...", console, quiet):
        try:
            result = cluster_similarity(
                analyze_similarity(study.cards or [], study.sessions, config)
            )
        except CardSortError as e:
            console.print(f"[red]Error: {e.full_message}[/red]")
            raise typer.Exit(code=1) from None

    write_json(result.to_json_dict(), output)
    if matrix is not None:
        matrix.parent.mkdir(parents=True, exist_ok=True)
        write_matrix(result.cards, result.clustered_matrix, matrix, config.matrix_format)
        out.print(f"[bold]Matrix table:[/bold] {matrix}")

    out.print(f"[bold]Merges:[/bold] {result.dendrogram.count_merges()}")
    out.print(f"[bold]Root height:[/bold] {result.dendrogram.height:.2f}")
    out.print("\n[bold green]Clustering complete![/bold green]")
    out.print(f"[bold]Output:[/bold] {output}")
    out.print()
