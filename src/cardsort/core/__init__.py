"""
Core card sort analysis algorithms.

This module contains the similarity computation and the hierarchical
clustering used to order cards for heatmap display.
"""

from cardsort.core.clustering import (
    build_dendrogram,
    extract_leaf_order,
    reorder_matrix,
)
from cardsort.core.similarity import (
    compute_similarity_matrix,
    select_completed_sessions,
)

__all__ = [
    "build_dendrogram",
    "compute_similarity_matrix",
    "extract_leaf_order",
    "reorder_matrix",
    "select_completed_sessions",
]
