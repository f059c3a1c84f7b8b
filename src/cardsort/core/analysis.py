"""
End-to-end card sort analysis.

Chains session selection, similarity, dendrogram construction, leaf
ordering and matrix reordering into the two results the viewer consumes.
Every call recomputes from its inputs; nothing is cached.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cardsort.core.clustering import build_dendrogram, extract_leaf_order, reorder_matrix
from cardsort.core.similarity import compute_similarity_matrix, select_completed_sessions
from cardsort.models.config import AnalysisConfig
from cardsort.models.results import ClusteringResult, SimilarityResult
from cardsort.models.study import Card, Session, StudyExport

logger = logging.getLogger(__name__)


def analyze_similarity(
    cards: Sequence[Card],
    sessions: Sequence[Session],
    config: AnalysisConfig | None = None,
) -> SimilarityResult:
    """
    Compute the similarity matrix over the completed sessions.

    Args:
        cards: Cards in creation order.
        sessions: All study sessions; unsubmitted (and, unless the config
            says otherwise, excluded) sessions are dropped here.
        config: Analysis configuration (defaults if omitted).

    Returns:
        SimilarityResult.
    """
    config = config or AnalysisConfig()
    completed = select_completed_sessions(sessions, include_excluded=config.include_excluded)
    return compute_similarity_matrix(cards, completed, decimals=config.decimals)


def cluster_similarity(similarity: SimilarityResult) -> ClusteringResult:
    """
    Cluster an already computed similarity matrix.

    Builds the UPGMA dendrogram, takes its leaf order and permutes the
    cards and matrix to match.
    """
    dendrogram = build_dendrogram(similarity.cards, similarity.matrix)
    leaf_order = extract_leaf_order(dendrogram)
    ordered_cards, clustered = reorder_matrix(similarity.cards, similarity.matrix, leaf_order)

    logger.debug(f"Clustered {len(ordered_cards)} cards, root height {dendrogram.height:.4f}")
    return ClusteringResult(
        dendrogram=dendrogram,
        cards=ordered_cards,
        clustered_matrix=clustered,
    )


def analyze_clustering(
    cards: Sequence[Card],
    sessions: Sequence[Session],
    config: AnalysisConfig | None = None,
) -> ClusteringResult:
    """Similarity followed by clustering, from raw sessions."""
    return cluster_similarity(analyze_similarity(cards, sessions, config))


def analyze_study(
    export: StudyExport,
    config: AnalysisConfig | None = None,
) -> tuple[SimilarityResult, ClusteringResult]:
    """
    Run both analyses on a study export.

    Exports returned by :func:`cardsort.core.io_utils.load_study` always
    carry their card list; an export without cards yields empty results.
    """
    cards = export.cards or []
    similarity = analyze_similarity(cards, export.sessions, config)
    return similarity, cluster_similarity(similarity)
