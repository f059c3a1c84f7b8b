"""
Shared CLI utilities for cardsort commands.

Provides common functionality used across CLI modules.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from cardsort.models.config import AnalysisConfig


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    The spinner is suppressed when quiet mode is enabled.

    Args:
        description: Task description to display.
        console: Rich Console instance.
        quiet: If True, suppress the progress display entirely.

    Yields:
        Progress instance (even when quiet, for API consistency).
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console if not quiet else None,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    Example:
        >>> qc = QuietConsole(Console(), quiet=True)
        >>> qc.print("This won't be shown")
    """

    def __init__(self, console: Console, quiet: bool = False):
        self._console = console
        self._quiet = quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console unless quiet mode is enabled."""
        if not self._quiet:
            self._console.print(*args, **kwargs)


def resolve_config(
    config_path: Path | None,
    include_excluded: bool | None = None,
    matrix_format: str | None = None,
) -> AnalysisConfig:
    """Load the YAML config (or defaults) and apply CLI overrides.

    Args:
        config_path: Optional YAML configuration file.
        include_excluded: Override for ``include_excluded`` when not None.
        matrix_format: Override for ``matrix_format`` when not None.

    Returns:
        Effective AnalysisConfig.
    """
    config = AnalysisConfig.from_yaml(config_path) if config_path else AnalysisConfig()

    overrides: dict[str, Any] = {}
    if include_excluded is not None:
        overrides["include_excluded"] = include_excluded
    if matrix_format is not None:
        overrides["matrix_format"] = matrix_format
    if overrides:
        config = AnalysisConfig(**{**config.model_dump(), **overrides})
    return config


def write_json(data: dict[str, Any], path: Path) -> None:
    """Write a JSON document, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")

