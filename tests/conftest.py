"""
Shared pytest fixtures for cardsort tests.

Provides reusable study data, temporary input files and the
reference scenarios used across unit and integration tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from cardsort.models.study import Card, Session, SortItem
from tests.factories import SortDataFactory


# =============================================================================
# Card and Session Fixtures
# =============================================================================


@pytest.fixture
def abc_cards() -> list[Card]:
    """Three cards A, B, C in creation order."""
    return [
        Card(id=1, name="A"),
        Card(id=2, name="B"),
        Card(id=3, name="C"),
    ]


@pytest.fixture
def abc_sessions() -> list[Session]:
    """
    Two sessions over A, B, C.

    Session 1 groups A and B (category 10), C unsorted.
    Session 2 groups A and C (category 20), B unsorted.
    """
    return [
        Session(
            id=1,
            sort_items=[
                SortItem(card_id=1, category_id=10),
                SortItem(card_id=2, category_id=10),
                SortItem(card_id=3, category_id=None),
            ],
        ),
        Session(
            id=2,
            sort_items=[
                SortItem(card_id=1, category_id=20),
                SortItem(card_id=2, category_id=None),
                SortItem(card_id=3, category_id=20),
            ],
        ),
    ]


@pytest.fixture
def fruit_cards() -> list[Card]:
    """Five cards forming two obvious groups plus an outlier."""
    return [
        Card(id=11, name="Apple"),
        Card(id=12, name="Carrot"),
        Card(id=13, name="Pear"),
        Card(id=14, name="Leek"),
        Card(id=15, name="Stapler"),
    ]


@pytest.fixture
def fruit_sessions() -> list[Session]:
    """Four sessions that mostly separate fruit from vegetables."""

    def session(sid: int, fruit: int, veg: int, stapler: int | None, carrot: int | None = None) -> Session:
        return Session(
            id=sid,
            sort_items=[
                SortItem(card_id=11, category_id=fruit),
                SortItem(card_id=12, category_id=veg if carrot is None else carrot),
                SortItem(card_id=13, category_id=fruit),
                SortItem(card_id=14, category_id=veg),
                SortItem(card_id=15, category_id=stapler),
            ],
        )

    return [
        session(1, fruit=101, veg=102, stapler=None),
        session(2, fruit=201, veg=202, stapler=203),
        session(3, fruit=301, veg=302, stapler=None),
        session(4, fruit=401, veg=402, stapler=403, carrot=401),
    ]


@pytest.fixture
def sort_factory() -> SortDataFactory:
    """Seeded synthetic study factory."""
    return SortDataFactory(seed=7)


# =============================================================================
# Input File Fixtures
# =============================================================================


@pytest.fixture
def study_export_dict() -> dict[str, Any]:
    """Study export in the store's JSON shape (cards embedded in sort items)."""

    def item(card_id: int, name: str, category_id: int | None) -> dict[str, Any]:
        return {
            "cardId": card_id,
            "categoryId": category_id,
            "card": {"id": card_id, "name": name},
        }

    return {
        "study": {"id": 5, "title": "Grocery navigation", "type": "open"},
        "sessions": [
            {
                "id": 1,
                "participantRef": "p-001",
                "submitted": True,
                "excluded": False,
                "sortItems": [item(1, "A", 10), item(2, "B", 10), item(3, "C", None)],
            },
            {
                "id": 2,
                "participantRef": "p-002",
                "submitted": True,
                "excluded": False,
                "sortItems": [item(1, "A", 20), item(2, "B", None), item(3, "C", 20)],
            },
            {
                "id": 3,
                "participantRef": "p-003",
                "submitted": True,
                "excluded": True,
                "sortItems": [item(1, "A", 30), item(2, "B", 30), item(3, "C", 30)],
            },
        ],
    }


@pytest.fixture
def study_export_file(tmp_path: Path, study_export_dict: dict[str, Any]) -> Path:
    """Study export written to a JSON file."""
    path = tmp_path / "study.json"
    path.write_text(json.dumps(study_export_dict))
    return path


@pytest.fixture
def sort_table_csv(tmp_path: Path) -> Path:
    """
    Long-format sort table.

    Both participants use the label "Fruit", but for different cards:
    labels are session-local and must not link the sessions.
    """
    path = tmp_path / "sorts.csv"
    path.write_text(
        "session_id,card_id,card_name,category\n"
        "1,2,B,Fruit\n"
        "1,1,A,Fruit\n"
        "1,3,C,\n"
        "2,1,A,Fruit\n"
        "2,2,B,\n"
        "2,3,C,Fruit\n"
    )
    return path
