"""
Hierarchical clustering of card similarity matrices.

This module builds the UPGMA (average linkage) dendrogram over the card
distance matrix, extracts its leaf order and reorders the similarity
matrix to match it, so that cards sorted together end up adjacent in
heatmaps.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from fractions import Fraction

import numpy as np

from cardsort.core.constants import (
    DISTANCE_SCALE,
    EMPTY_NODE_ID,
    EMPTY_NODE_NAME,
    LEAF_ID_PREFIX,
    MERGE_ID_PREFIX,
)
from cardsort.core.exceptions import (
    LeafOrderMismatchError,
    MatrixNotSquareError,
    MatrixShapeError,
)
from cardsort.models.results import DendrogramNode
from cardsort.models.study import Card

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cluster:
    """Active cluster during agglomeration."""

    node: DendrogramNode
    members: tuple[int, ...]  # indices into the card list


def _as_square_array(matrix: Sequence[Sequence[float]] | np.ndarray, n_cards: int) -> np.ndarray:
    """Validate shape and convert a similarity matrix to a float array."""
    rows = len(matrix)
    if rows != n_cards:
        raise MatrixShapeError(n_cards=n_cards, n_rows=rows)
    for row in matrix:
        if len(row) != rows:
            raise MatrixNotSquareError(rows=rows, cols=len(row))
    return np.asarray(matrix, dtype=np.float64).reshape(rows, rows)


def distance_units(similarity: np.ndarray) -> np.ndarray:
    """
    Convert similarities to integer distances in units of ``1 / DISTANCE_SCALE``.

    Similarities carry at most ``MAX_SIMILARITY_DECIMALS`` decimals, so
    ``1 - similarity`` is an exact integer count of units once scaled.
    """
    return np.rint((1.0 - similarity) * DISTANCE_SCALE).astype(np.int64)


def average_linkage(units: np.ndarray, a: Sequence[int], b: Sequence[int]) -> Fraction:
    """
    Exact mean distance over all member pairs of two clusters (UPGMA).

    Args:
        units: Integer distance matrix from :func:`distance_units`.
        a: Member indices of the first cluster.
        b: Member indices of the second cluster.

    Returns:
        The average as a Fraction, so equal means compare equal.
    """
    block = units[np.ix_(a, b)]
    return Fraction(int(block.sum()), block.size * DISTANCE_SCALE)


def leaf_node(card: Card) -> DendrogramNode:
    """Dendrogram leaf for a single card."""
    return DendrogramNode(
        id=f"{LEAF_ID_PREFIX}{card.id}",
        name=card.name,
        height=0.0,
        card_id=card.id,
    )


def empty_node() -> DendrogramNode:
    """Placeholder dendrogram for a study without cards."""
    return DendrogramNode(id=EMPTY_NODE_ID, name=EMPTY_NODE_NAME, height=0.0)


def build_dendrogram(
    cards: Sequence[Card],
    matrix: Sequence[Sequence[float]] | np.ndarray,
) -> DendrogramNode:
    """
    Build an average-linkage dendrogram from a similarity matrix.

    Distances are ``1 - similarity``, compared exactly. Each round, the average distance of
    every pair of active clusters is recomputed from the original
    distances and the closest pair is merged. Pairs are scanned in
    ascending (first, second) position in the active list and only a
    strictly smaller distance replaces the current best, so ties go to
    the pair found first. The merged cluster keeps its children in
    (first, second) order and is appended to the end of the active list.

    Args:
        cards: Cards in matrix row/column order.
        matrix: Square similarity matrix with values in [0, 1].

    Returns:
        Root node. A single card yields a leaf; no cards yields the
        ``empty`` placeholder node.

    Raises:
        MatrixShapeError: If the matrix size does not match the cards.
        MatrixNotSquareError: If a matrix row has the wrong length.
    """
    n = len(cards)
    units = distance_units(_as_square_array(matrix, n))

    if n == 0:
        return empty_node()
    if n == 1:
        return leaf_node(cards[0])

    clusters = [_Cluster(node=leaf_node(card), members=(i,)) for i, card in enumerate(cards)]
    merge_counter = 0

    while len(clusters) > 1:
        min_dist: Fraction | None = None
        min_i, min_j = 0, 1
        for i in range(len(clusters)):
            for j in range(i + 1, len(clusters)):
                d = average_linkage(units, clusters[i].members, clusters[j].members)
                if min_dist is None or d < min_dist:
                    min_dist = d
                    min_i, min_j = i, j

        a, b = clusters[min_i], clusters[min_j]
        merged = _Cluster(
            node=DendrogramNode(
                id=f"{MERGE_ID_PREFIX}{merge_counter}",
                height=float(min_dist),
                children=[a.node, b.node],
            ),
            members=a.members + b.members,
        )
        merge_counter += 1

        clusters = [c for k, c in enumerate(clusters) if k not in (min_i, min_j)]
        clusters.append(merged)

    logger.debug(f"Built dendrogram with {merge_counter} merges over {n} cards")
    return clusters[0].node


def extract_leaf_order(node: DendrogramNode) -> list[int]:
    """
    Card ids of the dendrogram leaves, left to right.

    Children are visited in their stored (merge) order; nothing is
    re-sorted. The empty placeholder node yields an empty list.
    """
    if node.is_leaf:
        return [] if node.card_id is None else [node.card_id]
    order: list[int] = []
    for child in node.children:
        order.extend(extract_leaf_order(child))
    return order


def reorder_matrix(
    cards: Sequence[Card],
    matrix: Sequence[Sequence[float]] | np.ndarray,
    leaf_order: Sequence[int],
) -> tuple[list[Card], list[list[float]]]:
    """
    Permute cards and similarity matrix rows/columns into leaf order.

    Args:
        cards: Cards in original matrix order.
        matrix: Square similarity matrix.
        leaf_order: Card ids in the desired order.

    Returns:
        Tuple of (reordered_cards, reordered_matrix) where
        ``reordered_matrix[k][l] = matrix[idx(leaf_order[k])][idx(leaf_order[l])]``.

    Raises:
        LeafOrderMismatchError: If the leaf order names unknown card ids.
    """
    array = _as_square_array(matrix, len(cards))
    index_of = {card.id: i for i, card in enumerate(cards)}

    missing = [card_id for card_id in leaf_order if card_id not in index_of]
    if missing:
        raise LeafOrderMismatchError(missing)

    order = [index_of[card_id] for card_id in leaf_order]
    reordered = array[np.ix_(order, order)]
    return [cards[i] for i in order], reordered.tolist()
