"""
I/O utilities for card sort study data.

Loads study results from long-format sort tables (CSV/TSV/Parquet) or
from the study store's JSON export, and writes labelled matrix tables.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

import polars as pl

from cardsort.core.constants import (
    CARD_ID_COLUMN,
    CARD_NAME_COLUMN,
    CATEGORY_COLUMN,
    EXCLUDED_COLUMN,
    MATRIX_LABEL_COLUMN,
    REQUIRED_SORT_COLUMNS,
    SESSION_COLUMN,
    SUBMITTED_COLUMN,
)
from cardsort.core.exceptions import (
    MissingColumnsError,
    UnsupportedFormatError,
)
from cardsort.models.study import Card, Session, SortItem, StudyExport

logger = logging.getLogger(__name__)

OutputFormat = Literal["csv", "parquet"]


def write_dataframe(
    df: pl.DataFrame,
    path: Path,
    output_format: OutputFormat = "csv",
) -> None:
    """
    Write DataFrame to file in specified format.

    For Parquet output, uses zstd compression.

    Args:
        df: Polars DataFrame to write.
        path: Output file path.
        output_format: Output format - 'csv' or 'parquet'.
    """
    if output_format == "parquet":
        df.write_parquet(path, compression="zstd")
    else:
        df.write_csv(path)


def read_dataframe(path: Path) -> pl.DataFrame:
    """
    Read DataFrame from file, auto-detecting format from extension.

    Supports: .csv, .tsv, .parquet, .csv.gz, .tsv.gz

    Raises:
        UnsupportedFormatError: If file extension is not recognized.
    """
    suffix = path.suffix.lower()
    name = path.name.lower()

    if suffix == ".parquet":
        return pl.read_parquet(path)
    if suffix == ".csv" or name.endswith(".csv.gz"):
        return pl.read_csv(path)
    if suffix == ".tsv" or name.endswith(".tsv.gz"):
        return pl.read_csv(path, separator="\t")
    raise UnsupportedFormatError(str(path))


def _is_unsorted(category: Any) -> bool:
    return category is None or (isinstance(category, str) and not category.strip())


def _as_flag(value: Any, default: bool) -> bool:
    """Interpret a status cell that may have been read as text."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "t", "yes", "y", "1")
    return bool(value)


def load_sort_table(path: Path) -> StudyExport:
    """
    Load study results from a long-format sort table.

    One row per (session, card) placement with columns ``session_id``,
    ``card_id``, ``card_name`` and optionally ``category`` (empty or
    missing = unsorted), ``submitted`` and ``excluded``.

    Category labels are local to their session: every distinct
    (session, label) pair gets its own integer category id, so the same
    label used by two participants never links their sorts.

    Args:
        path: Path to the sort table.

    Returns:
        StudyExport with cards ordered by id and sessions in order of
        first appearance. A table with a header but no rows gives an
        export without cards or sessions.

    Raises:
        MissingColumnsError: If required columns are absent.
    """
    df = read_dataframe(path)

    missing = REQUIRED_SORT_COLUMNS - set(df.columns)
    if missing:
        raise MissingColumnsError(str(path), missing)
    if df.is_empty():
        logger.warning(f"Sort table {path} has no rows")
        return StudyExport(cards=[], sessions=[])

    if CATEGORY_COLUMN not in df.columns:
        logger.warning(f"No '{CATEGORY_COLUMN}' column in {path}; all cards treated as unsorted")
        df = df.with_columns(pl.lit(None, dtype=pl.Utf8).alias(CATEGORY_COLUMN))

    cards_df = (
        df.select(CARD_ID_COLUMN, CARD_NAME_COLUMN)
        .unique(subset=CARD_ID_COLUMN, keep="first", maintain_order=True)
        .sort(CARD_ID_COLUMN)
    )
    cards = [Card(id=int(card_id), name=str(name)) for card_id, name in cards_df.iter_rows()]

    category_ids: dict[tuple[Any, str], int] = {}
    sessions: list[Session] = []

    for part in df.partition_by(SESSION_COLUMN, maintain_order=True):
        session_key = part[SESSION_COLUMN][0]
        items: list[SortItem] = []
        for card_id, category in part.select(CARD_ID_COLUMN, CATEGORY_COLUMN).iter_rows():
            if _is_unsorted(category):
                category_id = None
            else:
                key = (session_key, str(category).strip())
                category_id = category_ids.setdefault(key, len(category_ids) + 1)
            items.append(SortItem(card_id=int(card_id), category_id=category_id))

        submitted = True
        if SUBMITTED_COLUMN in part.columns:
            submitted = _as_flag(part[SUBMITTED_COLUMN][0], default=True)
        excluded = False
        if EXCLUDED_COLUMN in part.columns:
            excluded = _as_flag(part[EXCLUDED_COLUMN][0], default=False)

        sessions.append(
            Session(
                id=session_key if isinstance(session_key, int) else None,
                participant_ref=str(session_key),
                submitted=submitted,
                excluded=excluded,
                sort_items=items,
            )
        )

    logger.debug(f"Loaded {len(cards)} cards and {len(sessions)} sessions from {path}")
    return StudyExport(cards=cards, sessions=sessions)


def _cards_from_export(raw: dict[str, Any]) -> list[Card]:
    """
    Recover the card list from a study export without a ``cards`` key.

    Prefers the card list of an embedded similarity result; otherwise
    collects the ``card`` objects embedded in sort items. Ordered by id.
    """
    similarity = raw.get("similarity") or {}
    if similarity.get("cards"):
        return [Card.model_validate(c) for c in similarity["cards"]]

    found: dict[int, Card] = {}
    for session in raw.get("sessions") or []:
        for item in session.get("sortItems") or []:
            card = item.get("card")
            if card is not None and card["id"] not in found:
                found[card["id"]] = Card.model_validate(card)
    return [found[card_id] for card_id in sorted(found)]


def load_study_export(path: Path) -> StudyExport:
    """
    Load a study JSON export.

    The export lists sessions with their ``sortItems``; each item carries
    ``cardId``, ``categoryId`` and usually the embedded ``card``. When no
    top-level ``cards`` list is present it is rebuilt from the export.

    Raises:
        pydantic.ValidationError: If the document does not match the
            export shape.
    """
    raw = json.loads(path.read_text())
    export = StudyExport.model_validate(raw)
    if export.cards is None:
        export = export.model_copy(update={"cards": _cards_from_export(raw)})

    logger.debug(f"Loaded {len(export.cards)} cards and {len(export.sessions)} sessions from {path}")
    return export


def load_study(path: Path) -> StudyExport:
    """Load study results, choosing the reader from the file extension."""
    if path.suffix.lower() == ".json":
        return load_study_export(path)
    return load_sort_table(path)


def _column_labels(cards: list[Card]) -> list[str]:
    """Card names, suffixed with the id where a name is not unique."""
    names = [card.name for card in cards]
    return [
        name if names.count(name) == 1 else f"{name} ({card.id})"
        for name, card in zip(names, cards)
    ]


def matrix_to_dataframe(cards: list[Card], matrix: list[list[float]]) -> pl.DataFrame:
    """
    Convert a card matrix to a labelled square table.

    Output format:
    - First column named 'card' contains card names
    - One column per card, in matrix order
    """
    labels = _column_labels(cards)
    data: dict[str, list[str] | list[float]] = {MATRIX_LABEL_COLUMN: labels}
    for j, label in enumerate(labels):
        data[label] = [row[j] for row in matrix]
    schema = {MATRIX_LABEL_COLUMN: pl.Utf8, **{label: pl.Float64 for label in labels}}
    return pl.DataFrame(data, schema=schema)


def write_matrix(
    cards: list[Card],
    matrix: list[list[float]],
    path: Path,
    output_format: OutputFormat = "csv",
) -> None:
    """Write a labelled card matrix as CSV or Parquet."""
    write_dataframe(matrix_to_dataframe(cards, matrix), path, output_format)
