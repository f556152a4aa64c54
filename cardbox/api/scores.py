"""
Score API endpoints.

Any authenticated user reads and records their own scores.
"""

from fastapi import APIRouter

from cardbox.api.deps import CurrentUser, SessionDep
from cardbox.api.schemas import ScoreResponse, ScoreResultEntry, score_to_response
from cardbox.models.failure import NotFoundError
from cardbox.services import scores
from cardbox.services.scores import StudyResult

router = APIRouter(prefix="/scores", tags=["scores"])


@router.post("/results", response_model=list[ScoreResponse])
async def post_results(
    entries: list[ScoreResultEntry],
    user: CurrentUser,
    session: SessionDep,
) -> list[ScoreResponse]:
    """
    Record a batch of test results for the current user.

    Entries are applied in order. The whole batch is rejected before any
    write if one entry is malformed. Returns one score per distinct card;
    order is not guaranteed to follow the input.
    """
    results = [StudyResult(card_id=e.card_id, hit=e.hit, date=e.date) for e in entries]
    updated = await scores.record_results(session, user.id, results)
    return [score_to_response(score) for score in updated]


@router.get("/{card_id}", response_model=ScoreResponse)
async def get_score(card_id: str, user: CurrentUser, session: SessionDep) -> ScoreResponse:
    """
    Get the current user's score for a card, with card and user embedded.

    404 if the user never recorded a result for the card.
    """
    score = await scores.get(session, card_id, user.id, populate=True)
    if score is None:
        raise NotFoundError("Score not found", detail=f"card_id={card_id}")
    return score_to_response(score, populate=True)
