"""
Pydantic models for analysis results.

These are the JSON-shaped outputs handed to the results viewer and the
export layer: the similarity matrix and the clustering result with its
dendrogram and leaf-ordered matrix.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from cardsort.models.study import Card


class SimilarityResult(BaseModel):
    """
    Pairwise card similarity.

    ``matrix[i][j]`` is the fraction of sessions in which ``cards[i]`` and
    ``cards[j]`` were placed in the same category. The matrix is symmetric
    with a unit diagonal.
    """

    cards: list[Card] = Field(description="Cards in matrix row/column order")
    matrix: list[list[float]] = Field(description="Square similarity matrix")

    model_config = {"frozen": True}

    def to_json_dict(self) -> dict:
        """Serialize in the viewer's wire format."""
        return self.model_dump(mode="json")


class DendrogramNode(BaseModel):
    """
    Node of the average-linkage merge tree.

    Leaves wrap a single card (height 0). Merge nodes hold exactly two
    children and the distance at which they were joined. ``card_id`` is
    kept for leaf-order extraction and is not serialized.
    """

    id: str = Field(description="Node identifier (leaf_<card id> or merge_<n>)")
    name: str | None = Field(default=None, description="Card name for leaves")
    height: float = Field(ge=0, description="Merge distance, 0 for leaves")
    children: list[DendrogramNode] | None = Field(
        default=None, description="Merged subtrees, in merge order"
    )
    card_id: int | None = Field(default=None, exclude=True)

    model_config = {"frozen": True}

    @property
    def is_leaf(self) -> bool:
        """True for leaves and for the empty placeholder node."""
        return not self.children

    def count_leaves(self) -> int:
        """Number of card leaves below this node."""
        if self.is_leaf:
            return 0 if self.card_id is None else 1
        return sum(child.count_leaves() for child in self.children)

    def count_merges(self) -> int:
        """Number of merge nodes in this subtree, including this one."""
        if self.is_leaf:
            return 0
        return 1 + sum(child.count_merges() for child in self.children)


class ClusteringResult(BaseModel):
    """Dendrogram plus the similarity matrix reordered by its leaf order."""

    dendrogram: DendrogramNode = Field(description="Root of the merge tree")
    cards: list[Card] = Field(description="Cards in dendrogram leaf order")
    clustered_matrix: list[list[float]] = Field(
        alias="clusteredMatrix",
        description="Similarity matrix permuted by leaf order on both axes",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def leaf_order(self) -> list[int]:
        """Card ids in dendrogram leaf order."""
        return [card.id for card in self.cards]

    def to_json_dict(self) -> dict:
        """Serialize in the viewer's wire format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
