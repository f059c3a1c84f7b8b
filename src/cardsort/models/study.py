"""
Pydantic models for card sort study input.

Mirrors the records supplied by the study store: cards, participant
sessions and the per-session card placements. Field aliases follow the
camelCase keys of the study JSON export.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Card(BaseModel):
    """A card that participants sort into categories."""

    id: int = Field(description="Stable card identifier")
    name: str = Field(description="Display name shown to participants")

    model_config = {"frozen": True}


class SortItem(BaseModel):
    """
    Placement of one card within one session.

    Category ids are scoped to their session: two sessions never share a
    category id, even when the category labels are identical. A null
    category means the participant left the card unsorted.
    """

    card_id: int = Field(alias="cardId", description="Card that was placed")
    category_id: int | None = Field(
        default=None,
        alias="categoryId",
        description="Session-local category id, None when unsorted",
    )

    model_config = {"frozen": True, "populate_by_name": True}


class Session(BaseModel):
    """
    One participant's categorization attempt.

    Only sessions that were submitted and not excluded by the researcher
    contribute to the analysis; see
    :func:`cardsort.core.similarity.select_completed_sessions`.
    """

    id: int | None = Field(default=None, description="Session identifier")
    participant_ref: str | None = Field(
        default=None,
        alias="participantRef",
        description="Anonymous participant reference",
    )
    submitted: bool = Field(default=True, description="Participant submitted the sort")
    excluded: bool = Field(default=False, description="Researcher excluded the session")
    sort_items: list[SortItem] = Field(
        default_factory=list,
        alias="sortItems",
        description="Card placements made in this session",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    def assignments(self) -> dict[int, int | None]:
        """Map card id to category id (None = unsorted); later items win."""
        return {item.card_id: item.category_id for item in self.sort_items}


class StudyExport(BaseModel):
    """
    Study results as exported by the study store.

    ``cards`` is optional because the store's export embeds each card in
    its sort items instead of listing them separately.
    """

    study: dict[str, Any] | None = Field(default=None, description="Study metadata")
    cards: list[Card] | None = Field(default=None, description="Cards in creation order")
    sessions: list[Session] = Field(default_factory=list, description="Participant sessions")

    model_config = {"frozen": True}
