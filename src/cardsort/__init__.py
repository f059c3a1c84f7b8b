"""
Cardsort: consensus analysis for open and closed card sorting studies.

Turns the categories participants sorted cards into into a pairwise card
similarity matrix and an average-linkage (UPGMA) dendrogram, and reorders
the matrix along the dendrogram so related cards sit next to each other.
"""

__version__ = "0.1.0"
__author__ = "Cardsort Team"

from cardsort.models.results import ClusteringResult, DendrogramNode, SimilarityResult
from cardsort.models.study import Card, Session, SortItem
from cardsort.core.analysis import analyze_clustering, analyze_similarity

__all__ = [
    "Card",
    "ClusteringResult",
    "DendrogramNode",
    "Session",
    "SimilarityResult",
    "SortItem",
    "__version__",
    "analyze_clustering",
    "analyze_similarity",
]
