"""
Collection API endpoints.

CRUD over collections plus card membership. Admin only.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from cardbox.api.deps import SessionDep, load_record, require_admin
from cardbox.api.schemas import CardResponse, CollectionResponse
from cardbox.models.db import CardDB, CollectionDB
from cardbox.services.cards import card_store
from cardbox.services.collections import collection_store

router = APIRouter(
    prefix="/collections",
    tags=["collections"],
    dependencies=[Depends(require_admin)],
)


async def _load_collection(collection_id: str, session: SessionDep) -> CollectionDB:
    return await load_record(collection_store, session, collection_id)


async def _load_card(card_id: str, session: SessionDep) -> CardDB:
    return await load_record(card_store, session, card_id)


CollectionDep = Annotated[CollectionDB, Depends(_load_collection)]
CardDep = Annotated[CardDB, Depends(_load_card)]


@router.get("", response_model=list[CollectionResponse])
async def list_collections(
    session: SessionDep,
    skip: int | None = None,
    limit: int | None = None,
) -> list[CollectionResponse]:
    collections = await collection_store.list(session, skip, limit)
    return [CollectionResponse.model_validate(c) for c in collections]


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection(
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> CollectionResponse:
    collection = await collection_store.create(session, payload)
    return CollectionResponse.model_validate(collection)


@router.get("/{collection_id}", response_model=CollectionResponse)
async def get_collection(collection: CollectionDep) -> CollectionResponse:
    return CollectionResponse.model_validate(collection)


@router.put("/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection: CollectionDep,
    payload: Annotated[dict[str, Any], Body()],
    session: SessionDep,
) -> CollectionResponse:
    updated = await collection_store.update(session, collection.id, payload)
    return CollectionResponse.model_validate(updated)


@router.delete("/{collection_id}", response_model=CollectionResponse)
async def delete_collection(collection: CollectionDep, session: SessionDep) -> CollectionResponse:
    """
    Delete a collection and return it.

    Cards are kept; they just stop belonging to the collection.
    """
    await collection_store.delete(session, collection.id)
    return CollectionResponse.model_validate(collection)


@router.get("/{collection_id}/cards", response_model=list[CardResponse])
async def get_cards_in_collection(
    collection: CollectionDep,
    session: SessionDep,
) -> list[CardResponse]:
    """Get every card in the collection. Not paginated."""
    cards = await collection_store.get_cards_in_collection(session, collection.id)
    return [CardResponse.model_validate(card) for card in cards]


@router.post("/{collection_id}/cards/{card_id}", response_model=bool)
async def add_card_to_collection(
    collection: CollectionDep,
    card: CardDep,
    session: SessionDep,
) -> bool:
    """Add a card to the collection. False if it was already a member."""
    return await card_store.add_to_collection(session, card.id, collection.id)


@router.delete("/{collection_id}/cards/{card_id}", response_model=bool)
async def remove_card_from_collection(
    collection: CollectionDep,
    card: CardDep,
    session: SessionDep,
) -> bool:
    """Remove a card from the collection. False if it was not a member."""
    return await card_store.remove_from_collection(session, card.id, collection.id)
