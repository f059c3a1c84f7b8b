"""
Card co-occurrence similarity.

Builds the pairwise similarity matrix from participant sessions: the
similarity of two cards is the fraction of sessions in which both were
placed in the same (non-null) category.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

import numpy as np

from cardsort.core.constants import SIMILARITY_DECIMALS
from cardsort.core.exceptions import DuplicateCardError
from cardsort.models.results import SimilarityResult
from cardsort.models.study import Card, Session

logger = logging.getLogger(__name__)


def select_completed_sessions(
    sessions: Sequence[Session],
    include_excluded: bool = False,
) -> list[Session]:
    """
    Keep the sessions that count towards the analysis.

    Args:
        sessions: All sessions of a study.
        include_excluded: Keep submitted sessions the researcher excluded.

    Returns:
        Submitted sessions (minus excluded ones unless requested), in
        their original order.
    """
    completed = [
        s for s in sessions
        if s.submitted and (include_excluded or not s.excluded)
    ]
    if len(completed) != len(sessions):
        logger.info(
            f"Using {len(completed)} of {len(sessions)} sessions "
            f"({len(sessions) - len(completed)} unsubmitted or excluded)"
        )
    return completed


def round_half_up(values: np.ndarray, decimals: int = SIMILARITY_DECIMALS) -> np.ndarray:
    """
    Round non-negative values half away from zero.

    ``np.round`` rounds halves to even (0.125 -> 0.12); reported
    similarities round halves up (0.125 -> 0.13).
    """
    scale = 10.0 ** decimals
    return np.floor(values * scale + 0.5) / scale


def co_occurrence_counts(cards: Sequence[Card], sessions: Sequence[Session]) -> np.ndarray:
    """
    Count, for every card pair, the sessions that grouped them together.

    Args:
        cards: Cards in matrix order.
        sessions: Completed sessions.

    Returns:
        Symmetric integer matrix with a zero diagonal.
    """
    n = len(cards)
    counts = np.zeros((n, n), dtype=np.int64)
    card_ids = [card.id for card in cards]
    known = set(card_ids)

    for session in sessions:
        assignments = session.assignments()

        unknown = assignments.keys() - known
        if unknown:
            logger.debug(
                f"Session {session.id} places {len(unknown)} cards not in the card list; ignored"
            )

        categories = [assignments.get(card_id) for card_id in card_ids]
        for i in range(n):
            cat_i = categories[i]
            if cat_i is None:
                continue
            for j in range(i + 1, n):
                if categories[j] == cat_i:
                    counts[i, j] += 1
                    counts[j, i] += 1

    return counts


def compute_similarity_matrix(
    cards: Sequence[Card],
    sessions: Sequence[Session],
    decimals: int = SIMILARITY_DECIMALS,
) -> SimilarityResult:
    """
    Compute the card similarity matrix.

    ``matrix[i][j]`` is the number of sessions in which cards i and j
    share a category divided by the number of sessions, rounded half up
    to ``decimals`` places. The diagonal is 1. Unsorted cards (null
    category) never match anything.

    Args:
        cards: Cards in the order that defines matrix indices.
        sessions: Completed sessions only; filter with
            :func:`select_completed_sessions` first.
        decimals: Rounding precision.

    Returns:
        SimilarityResult with the cards (order preserved) and the matrix.

    Raises:
        DuplicateCardError: If a card id occurs more than once.

    Example:
        >>> cards = [Card(id=1, name="Apple"), Card(id=2, name="Pear")]
        >>> session = Session(sort_items=[
        ...     SortItem(card_id=1, category_id=10),
        ...     SortItem(card_id=2, category_id=10),
        ... ])
        >>> compute_similarity_matrix(cards, [session]).matrix
        [[1.0, 1.0], [1.0, 1.0]]
    """
    duplicates = [cid for cid, n in Counter(c.id for c in cards).items() if n > 1]
    if duplicates:
        raise DuplicateCardError(duplicates)

    n = len(cards)
    if n == 0:
        return SimilarityResult(cards=[], matrix=[])

    if not sessions:
        logger.debug(f"No sessions; similarity for {n} cards is zero off the diagonal")
        matrix = np.eye(n)
    else:
        counts = co_occurrence_counts(cards, sessions)
        matrix = round_half_up(counts / len(sessions), decimals)
        np.fill_diagonal(matrix, 1.0)

    logger.debug(f"Computed {n}x{n} similarity matrix from {len(sessions)} sessions")
    return SimilarityResult(cards=list(cards), matrix=matrix.tolist())
