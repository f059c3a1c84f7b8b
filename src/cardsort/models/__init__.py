"""
Pydantic data models for cardsort.

Provides type-safe models for study input, analysis results and
configuration.
"""

from cardsort.models.config import AnalysisConfig
from cardsort.models.results import ClusteringResult, DendrogramNode, SimilarityResult
from cardsort.models.study import Card, Session, SortItem, StudyExport

__all__ = [
    "AnalysisConfig",
    "Card",
    "ClusteringResult",
    "DendrogramNode",
    "Session",
    "SimilarityResult",
    "SortItem",
    "StudyExport",
]
