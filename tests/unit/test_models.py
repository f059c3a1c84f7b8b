"""Unit tests for study and result Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cardsort.models.results import ClusteringResult, DendrogramNode, SimilarityResult
from cardsort.models.study import Card, Session, SortItem, StudyExport


class TestCard:
    """Tests for the Card model."""

    def test_create(self):
        card = Card(id=1, name="Apple")
        assert card.id == 1
        assert card.name == "Apple"

    def test_frozen(self):
        card = Card(id=1, name="Apple")
        with pytest.raises(ValidationError):
            card.name = "Pear"

    def test_requires_id(self):
        with pytest.raises(ValidationError):
            Card(name="Apple")


class TestSortItemAndSession:
    """Tests for placements and sessions."""

    def test_alias_and_field_names(self):
        """Both camelCase export keys and snake_case names are accepted."""
        by_alias = SortItem.model_validate({"cardId": 3, "categoryId": 7})
        by_name = SortItem(card_id=3, category_id=7)
        assert by_alias == by_name

    def test_unsorted_default(self):
        assert SortItem(card_id=3).category_id is None

    def test_session_defaults(self):
        session = Session()
        assert session.submitted is True
        assert session.excluded is False
        assert session.sort_items == []

    def test_session_from_export_keys(self):
        session = Session.model_validate({
            "id": 4,
            "participantRef": "p-004",
            "submitted": True,
            "excluded": False,
            "completedAt": "2024-03-01T10:00:00Z",
            "sortItems": [{"cardId": 1, "categoryId": None}],
        })
        assert session.participant_ref == "p-004"
        assert session.sort_items == [SortItem(card_id=1)]

    def test_assignments_last_wins(self):
        session = Session(sort_items=[
            SortItem(card_id=1, category_id=5),
            SortItem(card_id=2, category_id=None),
            SortItem(card_id=1, category_id=6),
        ])
        assert session.assignments() == {1: 6, 2: None}


class TestStudyExport:
    """Tests for the export container."""

    def test_cards_optional(self):
        export = StudyExport.model_validate({"sessions": []})
        assert export.cards is None
        assert export.study is None


class TestDendrogramNode:
    """Tests for dendrogram nodes."""

    @pytest.fixture
    def tree(self) -> DendrogramNode:
        a = DendrogramNode(id="leaf_1", name="A", height=0.0, card_id=1)
        b = DendrogramNode(id="leaf_2", name="B", height=0.0, card_id=2)
        c = DendrogramNode(id="leaf_3", name="C", height=0.0, card_id=3)
        ab = DendrogramNode(id="merge_0", height=0.5, children=[a, b])
        return DendrogramNode(id="merge_1", height=0.75, children=[c, ab])

    def test_counts(self, tree):
        assert tree.count_leaves() == 3
        assert tree.count_merges() == 2

    def test_is_leaf(self, tree):
        assert not tree.is_leaf
        assert tree.children[0].is_leaf

    def test_card_id_not_serialized(self, tree):
        data = tree.model_dump(exclude_none=True)
        leaf = data["children"][0]
        assert "card_id" not in leaf
        assert leaf == {"id": "leaf_3", "name": "C", "height": 0.0}

    def test_negative_height_rejected(self):
        with pytest.raises(ValidationError):
            DendrogramNode(id="merge_0", height=-0.1)

    def test_placeholder_counts(self):
        empty = DendrogramNode(id="empty", name="No cards", height=0.0)
        assert empty.count_leaves() == 0
        assert empty.count_merges() == 0


class TestResults:
    """Tests for result containers."""

    def test_similarity_json(self):
        result = SimilarityResult(cards=[Card(id=1, name="A")], matrix=[[1.0]])
        assert result.to_json_dict() == {"cards": [{"id": 1, "name": "A"}], "matrix": [[1.0]]}

    def test_clustering_alias(self):
        node = DendrogramNode(id="leaf_1", name="A", height=0.0, card_id=1)
        result = ClusteringResult(
            dendrogram=node,
            cards=[Card(id=1, name="A")],
            clustered_matrix=[[1.0]],
        )
        assert result.leaf_order == [1]
        data = result.to_json_dict()
        assert data["clusteredMatrix"] == [[1.0]]
        assert "clustered_matrix" not in data
        assert "leaf_order" not in data
