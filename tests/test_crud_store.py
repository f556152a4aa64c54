"""Tests for the generic resource store."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cardbox.db.crud import PROTECTED_FIELDS, parse_id
from cardbox.models.failure import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    RecordValidationError,
)
from cardbox.services.cards import card_store
from cardbox.services.collections import collection_store

EXAMPLE_CARDS = [
    {"kind": "animal", "name": "Apodemus sylvaticus"},
    {"kind": "animal", "name": "Canis lupus"},
    {"kind": "animal", "name": "Bos primigenius taurus"},
    {"kind": "plant", "name": "Quercus ilex"},
    {"kind": "plant", "name": "Olea europaea"},
    {"kind": "rock", "name": "Andalucita"},
]


async def create_examples(session: AsyncSession) -> None:
    for card in EXAMPLE_CARDS:
        await card_store.create(session, card)


class TestParseId:
    def test_normalizes_every_form(self) -> None:
        """UUID instances, hex and hyphenated strings map to the same id."""
        value = uuid.uuid4()

        assert parse_id(value) == value.hex
        assert parse_id(value.hex) == value.hex
        assert parse_id(str(value)) == value.hex

    @pytest.mark.parametrize("bad", ["", "1", "not-an-id", 1234, None, ["x"]])
    def test_malformed_rejected(self, bad: object) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_id(bad)


class TestList:
    async def test_list_empty(self, session: AsyncSession) -> None:
        assert await card_store.list(session) == []

    async def test_list_in_creation_order(self, session: AsyncSession) -> None:
        await create_examples(session)

        cards = await card_store.list(session)

        assert [c.name for c in cards] == [c["name"] for c in EXAMPLE_CARDS]

    async def test_skip_and_limit(self, session: AsyncSession) -> None:
        await create_examples(session)
        names = [c["name"] for c in EXAMPLE_CARDS]

        first = await card_store.list(session, 0, 3)
        middle = await card_store.list(session, 2, 2)
        tail = await card_store.list(session, 4, 4)

        assert [c.name for c in first] == names[0:3]
        assert [c.name for c in middle] == names[2:4]
        assert [c.name for c in tail] == names[4:6]

    async def test_limit_zero_returns_nothing(self, session: AsyncSession) -> None:
        await create_examples(session)

        assert await card_store.list(session, limit=0) == []

    @pytest.mark.parametrize(
        ("skip", "limit"),
        [(-1, None), (None, -1), ("2", None), (True, None), (1.5, None)],
    )
    async def test_negative_or_non_integer_rejected(
        self, session: AsyncSession, skip: object, limit: object
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await card_store.list(session, skip, limit)


class TestCreate:
    async def test_create_returns_stored_record(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        assert len(card.id) == 32
        assert card.version == 1
        assert card.created_at is not None
        assert card.updated_at is not None
        assert card.kind == "animal"
        assert card.name == "Apodemus sylvaticus"
        assert card.image == []
        assert card.collections == []

    async def test_create_then_find_matches_supplied_fields(self, session: AsyncSession) -> None:
        payload = {
            "kind": "plant",
            "name": "Quercus ilex",
            "image": ["oak.png", {"credit": "someone"}],
            "data": {"family": "Fagaceae", "evergreen": True},
        }

        created = await card_store.create(session, payload)
        found = await card_store.find_by_id(session, created.id)

        assert found is not None
        for key, value in payload.items():
            assert getattr(found, key) == value

    @pytest.mark.parametrize("data", [["a", "b"], "note", 7, None])
    async def test_data_is_free_form(self, session: AsyncSession, data: object) -> None:
        card = await card_store.create(
            session, {"kind": "rock", "name": "Andalucita", "data": data}
        )

        assert card.data == data

    async def test_unknown_and_protected_fields_ignored(self, session: AsyncSession) -> None:
        foreign_id = uuid.uuid4().hex
        card = await card_store.create(
            session,
            {
                "kind": "rock",
                "name": "Andalucita",
                "color": "pink",
                "id": foreign_id,
                "collections": [uuid.uuid4().hex],
            },
        )

        assert card.id != foreign_id
        assert card.collections == []
        assert not hasattr(card, "color")

    async def test_missing_name_rejected(self, session: AsyncSession) -> None:
        with pytest.raises(RecordValidationError) as exc_info:
            await card_store.create(session, {"kind": "animal"})

        assert "name" in (exc_info.value.detail or "")

    @pytest.mark.parametrize("bad_name", [[1, 2, 3], 42, "", None])
    async def test_mistyped_name_rejected(self, session: AsyncSession, bad_name: object) -> None:
        with pytest.raises(RecordValidationError):
            await card_store.create(session, {"kind": "animal", "name": bad_name})

    async def test_non_mapping_payload_rejected(self, session: AsyncSession) -> None:
        with pytest.raises(InvalidArgumentError):
            await card_store.create(session, ["kind", "name"])


class TestFindById:
    async def test_absent_returns_none(self, session: AsyncSession) -> None:
        assert await card_store.find_by_id(session, uuid.uuid4().hex) is None

    async def test_malformed_rejected(self, session: AsyncSession) -> None:
        with pytest.raises(InvalidArgumentError):
            await card_store.find_by_id(session, "1")

    async def test_accepts_uuid_instance(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        assert await card_store.find_by_id(session, uuid.UUID(card.id)) is card

    async def test_get_or_fail_raises_not_found(self, session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await card_store.get_or_fail(session, uuid.uuid4().hex)


class TestUpdate:
    async def test_update_applies_writable_fields(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        updated = await card_store.update(session, card.id, {"name": "Mus musculus"})

        assert updated.name == "Mus musculus"
        assert updated.kind == "animal"

    async def test_update_never_touches_protected_fields(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])
        original_id = card.id
        original_created = card.created_at

        changes = {field: "tampered" for field in PROTECTED_FIELDS}
        changes["name"] = "Mus musculus"
        updated = await card_store.update(session, card.id, changes)

        assert updated.id == original_id
        assert updated.created_at == original_created
        assert updated.name == "Mus musculus"

    async def test_update_ignores_unknown_fields(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        updated = await card_store.update(session, card.id, {"habitat": "forest"})

        assert updated is card
        assert not hasattr(updated, "habitat")

    async def test_update_never_touches_membership(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        updated = await card_store.update(session, card.id, {"collections": [uuid.uuid4().hex]})

        assert updated.collections == []

    async def test_update_bumps_version(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        updated = await card_store.update(session, card.id, {"name": "Mus musculus"})

        assert updated.version == 2

    async def test_update_not_found(self, session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await card_store.update(session, uuid.uuid4().hex, {"name": "x"})

    async def test_update_malformed_id(self, session: AsyncSession) -> None:
        with pytest.raises(InvalidArgumentError):
            await card_store.update(session, 1234, {"name": "x"})

    async def test_update_non_mapping(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        with pytest.raises(InvalidArgumentError):
            await card_store.update(session, card.id, "name=x")

    async def test_update_mistyped_value_rejected(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        with pytest.raises(RecordValidationError):
            await card_store.update(session, card.id, {"name": [1, 2, 3]})

        assert card.name == "Apodemus sylvaticus"


class TestDelete:
    async def test_delete_twice(self, session: AsyncSession) -> None:
        card = await card_store.create(session, EXAMPLE_CARDS[0])

        first = await card_store.delete(session, card.id)
        second = await card_store.delete(session, card.id)

        assert first is not None
        assert first.name == "Apodemus sylvaticus"
        assert second is None
        assert await card_store.find_by_id(session, card.id) is None

    async def test_delete_malformed_id(self, session: AsyncSession) -> None:
        with pytest.raises(InvalidArgumentError):
            await card_store.delete(session, "not-an-id")

    async def test_delete_all(self, session: AsyncSession) -> None:
        await create_examples(session)
        await collection_store.create(session, {"name": "Fauna"})

        await card_store.delete_all(session)

        assert await card_store.list(session) == []
        assert len(await collection_store.list(session)) == 1


class TestConcurrentUpdate:
    async def test_stale_update_is_a_conflict(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        """An update based on a superseded version is rejected, not applied."""
        async with session_factory() as setup:
            card = await card_store.create(setup, EXAMPLE_CARDS[0])
            await setup.commit()

        async with session_factory() as first, session_factory() as second:
            assert await card_store.find_by_id(first, card.id) is not None
            assert await card_store.find_by_id(second, card.id) is not None

            await card_store.update(first, card.id, {"name": "Mus musculus"})
            await first.commit()

            with pytest.raises(ConflictError):
                await card_store.update(second, card.id, {"name": "Rattus rattus"})

        async with session_factory() as fresh:
            stored = await card_store.find_by_id(fresh, card.id)
            assert stored is not None
            assert stored.name == "Mus musculus"
            assert stored.version == 2
