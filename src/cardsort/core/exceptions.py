"""
Custom exceptions with actionable guidance.

Provides specific error types for inconsistent analysis input,
each with helpful suggestions for resolution.
"""

from __future__ import annotations

from collections.abc import Iterable


class CardSortError(Exception):
    """Base exception for cardsort errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


def _preview(values: Iterable[object], limit: int = 5) -> str:
    items = sorted(values, key=str)
    text = ", ".join(str(v) for v in items[:limit])
    if len(items) > limit:
        text += f"... and {len(items) - limit} more"
    return text


class MatrixError(CardSortError):
    """Base class for similarity matrix errors."""



class MatrixNotSquareError(MatrixError):
    """Raised when a similarity matrix is not square."""

    def __init__(self, rows: int, cols: int):
        super().__init__(
            message=f"Similarity matrix is not square: {rows} rows x {cols} columns",
            suggestion=(
                "Recompute the matrix with compute_similarity_matrix(). "
                "Every row must have one value per card."
            ),
        )
        self.rows = rows
        self.cols = cols


class MatrixShapeError(MatrixError):
    """Raised when the matrix size does not match the number of cards."""

    def __init__(self, n_cards: int, n_rows: int):
        super().__init__(
            message=f"Similarity matrix has {n_rows} rows but {n_cards} cards were given",
            suggestion=(
                "Pass the cards list returned alongside the matrix, "
                "in the same order, without adding or removing cards."
            ),
        )
        self.n_cards = n_cards
        self.n_rows = n_rows


class LeafOrderMismatchError(CardSortError):
    """Raised when a leaf order references cards absent from the card list."""

    def __init__(self, missing_ids: Iterable[int]):
        missing = set(missing_ids)
        super().__init__(
            message=f"Leaf order references unknown card ids: {_preview(missing)}",
            suggestion=(
                "The dendrogram was built from a different card list. "
                "Build the dendrogram and reorder with the same cards."
            ),
        )
        self.missing_ids = missing


class DuplicateCardError(CardSortError):
    """Raised when the card list contains the same id more than once."""

    def __init__(self, card_ids: Iterable[int]):
        duplicates = set(card_ids)
        super().__init__(
            message=f"Card list contains duplicate ids: {_preview(duplicates)}",
            suggestion="Each card must appear exactly once in the card list.",
        )
        self.card_ids = duplicates


class InputFileError(CardSortError):
    """Base class for sort result input file errors."""



class MissingColumnsError(InputFileError):
    """Raised when a sort result table lacks required columns."""

    def __init__(self, path: str, missing: Iterable[str]):
        missing_cols = set(missing)
        super().__init__(
            message=f"Sort result table '{path}' is missing columns: {_preview(missing_cols)}",
            suggestion=(
                "Sort result tables need one row per sorted card with columns:\n"
                "  session_id card_id card_name category\n\n"
                "Optional columns: submitted, excluded"
            ),
        )
        self.missing = missing_cols


class UnsupportedFormatError(InputFileError):
    """Raised when an input file extension is not recognized."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Unrecognized input format: {path}",
            suggestion="Use a .json study export or a .csv, .tsv or .parquet sort table.",
        )


class ConfigurationError(CardSortError):
    """Raised when configuration is invalid."""

