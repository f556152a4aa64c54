"""
Card store and collection membership.

A card's memberships live on the card as a set of collection ids. Adding
or removing a membership is idempotent and reports whether anything
changed.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cardbox.db.crud import ResourceStore, parse_id
from cardbox.models.db import CardDB
from cardbox.models.fields import CardFields


class CardStore(ResourceStore[CardDB]):
    def __init__(self) -> None:
        super().__init__(CardDB, CardFields)

    async def add_to_collection(
        self, session: AsyncSession, card_id: Any, collection_id: Any
    ) -> bool:
        """
        Add a card to a collection.

        `collection_id` may be a string or a `uuid.UUID`; it is compared by
        value after normalization.

        Returns:
            True if the card was added, False if it was already a member

        Raises:
            NotFoundError: If the card does not exist
        """
        member = parse_id(collection_id)
        card = await self.get_or_fail(session, card_id)

        if member in card.collections:
            return False

        card.collections = [*card.collections, member]
        await self.flush(session)
        return True

    async def remove_from_collection(
        self, session: AsyncSession, card_id: Any, collection_id: Any
    ) -> bool:
        """
        Remove a card from a collection.

        Returns:
            True if the card was removed, False if it was not a member

        Raises:
            NotFoundError: If the card does not exist
        """
        member = parse_id(collection_id)
        card = await self.get_or_fail(session, card_id)

        if member not in card.collections:
            return False

        card.collections = [cid for cid in card.collections if cid != member]
        await self.flush(session)
        return True

    async def in_collection(self, session: AsyncSession, collection_id: Any) -> list[CardDB]:
        """Every card whose collection set contains the given id."""
        member = parse_id(collection_id)
        cards = await self.list(session)
        return [card for card in cards if member in card.collections]


card_store = CardStore()
