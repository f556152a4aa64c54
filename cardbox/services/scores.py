"""
Spaced-repetition score accumulator.

Each (card, user) pair has at most one score: a point count in
[MIN_POINTS, MAX_POINTS] that moves up on a hit and down on a miss. The
score is created by the first recorded result for the pair.

The load-modify-save sequence is not atomic across requests. Score rows
carry a version marker, so two concurrent writers for the same pair do not
silently lose a result: the second flush fails with ConflictError.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cardbox.config import MAX_POINTS, MIN_POINTS
from cardbox.db.crud import ResourceStore, parse_id
from cardbox.models.db import ScoreDB
from cardbox.models.failure import NotFoundError
from cardbox.models.fields import RecordFields
from cardbox.services.cards import card_store


@dataclass(frozen=True, slots=True)
class StudyResult:
    """One answered card: whether the user recalled it, and when."""

    card_id: str
    hit: bool
    date: datetime


def next_points(previous: int | None, hit: bool) -> int:
    """
    Points after one more result.

    A hit adds one and a miss removes one. With no previous score the
    result is MIN_POINTS either way. Always clamped to
    [MIN_POINTS, MAX_POINTS].
    """
    if previous is None:
        points = MIN_POINTS
    else:
        points = previous + 1 if hit else previous - 1
    return max(MIN_POINTS, min(MAX_POINTS, points))


# Scores have no generically writable fields; the store is used for
# lookups and bulk reset only.
_store: ResourceStore[ScoreDB] = ResourceStore(ScoreDB, RecordFields)


async def get(
    session: AsyncSession,
    card_id: Any,
    user_id: Any,
    populate: bool = False,
) -> ScoreDB | None:
    """
    Get the score for a card and user.

    Returns None if no result was ever recorded for the pair. With
    `populate`, the card and user records are loaded alongside.
    """
    query = select(ScoreDB).where(
        ScoreDB.card_id == parse_id(card_id),
        ScoreDB.user_id == parse_id(user_id),
    )
    if populate:
        query = query.options(selectinload(ScoreDB.card), selectinload(ScoreDB.user))

    result = await session.execute(query)
    return result.scalar_one_or_none()


async def _add_result(
    session: AsyncSession,
    card_id: Any,
    user_id: Any,
    date: datetime,
    hit: bool,
) -> ScoreDB:
    score = await get(session, card_id, user_id)
    if score is None:
        score = ScoreDB(
            card_id=parse_id(card_id),
            user_id=parse_id(user_id),
            points=next_points(None, hit),
        )
        session.add(score)
    else:
        score.points = next_points(score.points, hit)

    score.last_test = date
    await _store.flush(session)
    return score


async def add_hit(session: AsyncSession, card_id: Any, user_id: Any, date: datetime) -> ScoreDB:
    """Record a hit at `date` and return the updated score."""
    return await _add_result(session, card_id, user_id, date, hit=True)


async def add_miss(session: AsyncSession, card_id: Any, user_id: Any, date: datetime) -> ScoreDB:
    """Record a miss at `date` and return the updated score."""
    return await _add_result(session, card_id, user_id, date, hit=False)


async def record_results(
    session: AsyncSession,
    user_id: Any,
    results: Sequence[StudyResult],
) -> list[ScoreDB]:
    """
    Apply a batch of test results for one user, in order.

    Every card id is checked (format and existence) before anything is
    written, so a bad entry rejects the whole batch.

    Returns:
        One score per distinct card in the batch
    """
    card_ids = list(dict.fromkeys(parse_id(result.card_id) for result in results))

    for card_id in card_ids:
        if await card_store.find_by_id(session, card_id) is None:
            raise NotFoundError("Card not found", detail=f"id={card_id}")

    scores: dict[str, ScoreDB] = {}
    for result in results:
        key = parse_id(result.card_id)
        if result.hit:
            scores[key] = await add_hit(session, key, user_id, result.date)
        else:
            scores[key] = await add_miss(session, key, user_id, result.date)

    return [scores[card_id] for card_id in card_ids]


async def delete_all(session: AsyncSession) -> None:
    """Reset every score."""
    await _store.delete_all(session)
