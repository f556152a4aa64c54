"""Collection store."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cardbox.db.crud import ResourceStore
from cardbox.models.db import CardDB, CollectionDB
from cardbox.models.fields import CollectionFields
from cardbox.services.cards import card_store


class CollectionStore(ResourceStore[CollectionDB]):
    def __init__(self) -> None:
        super().__init__(CollectionDB, CollectionFields)

    async def get_cards_in_collection(
        self, session: AsyncSession, collection_id: Any
    ) -> list[CardDB]:
        """Get all cards that belong to the collection. Not paginated."""
        return await card_store.in_collection(session, collection_id)

    async def delete(self, session: AsyncSession, record_id: Any) -> CollectionDB | None:
        """
        Delete a collection and drop it from every card's collection set.

        Returns the deleted collection, or None if it did not exist.
        """
        collection = await super().delete(session, record_id)
        if collection is None:
            return None

        for card in await card_store.in_collection(session, collection.id):
            await card_store.remove_from_collection(session, card.id, collection.id)

        return collection


collection_store = CollectionStore()
