"""
Card API endpoints.

CRUD over study cards. Admin only.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from cardbox.api.deps import SessionDep, load_record, require_admin
from cardbox.api.schemas import CardResponse
from cardbox.models.db import CardDB
from cardbox.services.cards import card_store

router = APIRouter(prefix="/cards", tags=["cards"], dependencies=[Depends(require_admin)])


async def _load_card(card_id: str, session: SessionDep) -> CardDB:
    return await load_record(card_store, session, card_id)


CardDep = Annotated[CardDB, Depends(_load_card)]


@router.get("", response_model=list[CardResponse])
async def list_cards(
    session: SessionDep,
    skip: int | None = None,
    limit: int | None = None,
) -> list[CardResponse]:
    """
    List cards in creation order.

    `skip` and `limit` paginate; both must be non-negative.
    """
    cards = await card_store.list(session, skip, limit)
    return [CardResponse.model_validate(card) for card in cards]


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> CardResponse:
    """Create a card. `kind` and `name` are required."""
    card = await card_store.create(session, payload)
    return CardResponse.model_validate(card)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(card: CardDep) -> CardResponse:
    return CardResponse.model_validate(card)


@router.put("/{card_id}", response_model=CardResponse)
async def update_card(
    card: CardDep,
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> CardResponse:
    """
    Update a card.

    Unknown fields, ids, timestamps and collection membership in the body
    are ignored.
    """
    updated = await card_store.update(session, card.id, payload)
    return CardResponse.model_validate(updated)


@router.delete("/{card_id}", response_model=CardResponse)
async def delete_card(card: CardDep, session: SessionDep) -> CardResponse:
    """Delete a card and return it."""
    await card_store.delete(session, card.id)
    return CardResponse.model_validate(card)
