from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from exceptions import NotFound
from models.auth import User
from models.common import get_session
from models.stats import GameResult, Sport
from routes.deps import current_user
from services import stats, users

router = APIRouter(prefix="/stats", tags=["stats"])


class GameReport(BaseModel):
    sport: Sport
    result: GameResult
    goals_scored: int = 0
    assists: int = 0
    game_id: str | None = None
    notes: str | None = None


class Questionnaire(BaseModel):
    answers: dict[str, Any]


@router.get("/me")
async def my_statistics(
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = stats.get_all_statistics(session, user_id=user.id)
    return {"statistics": [stats.statistics_to_dict(s) for s in rows]}


@router.get("/me/history")
async def my_history(
    sport: Sport | None = None,
    limit: int | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = stats.game_history(session, user_id=user.id, sport=sport, limit=limit)
    return {"games": [stats.game_to_dict(g) for g in rows]}


@router.get("/me/achievements")
async def my_achievements(
    sport: Sport | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    rows = stats.list_achievements(session, user_id=user.id, sport=sport)
    return {"achievements": [stats.achievement_to_dict(a) for a in rows]}


@router.post("/games")
async def report_game(
    payload: GameReport,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    game = stats.process_game_result(session, user_id=user.id, **payload.model_dump())
    return {"game": stats.game_to_dict(game)}


@router.post("/questionnaire/{sport}")
async def save_questionnaire(
    sport: Sport,
    payload: Questionnaire,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    row = stats.save_questionnaire(
        session, user_id=user.id, sport=sport, answers=payload.answers
    )
    return {"statistics": stats.statistics_to_dict(row)}


@router.get("/leaderboard/{sport}")
async def leaderboard(
    sport: Sport,
    order_by: str = "rating",
    limit: int | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    return {
        "leaderboard": stats.leaderboard(
            session, sport=sport, order_by=order_by, limit=limit
        ),
        "my_rank": stats.user_rank(
            session, user_id=user.id, sport=sport, order_by=order_by
        ),
    }


@router.get("/{user_id}/history")
async def user_history(
    user_id: str,
    sport: Sport | None = None,
    limit: int | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    target = users.get_profile(session, user_id=user_id)
    rows = stats.game_history(session, user_id=target.id, sport=sport, limit=limit)
    return {"games": [stats.game_to_dict(g) for g in rows]}


@router.get("/{user_id}/achievements")
async def user_achievements(
    user_id: str,
    sport: Sport | None = None,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    target = users.get_profile(session, user_id=user_id)
    rows = stats.list_achievements(session, user_id=target.id, sport=sport)
    return {"achievements": [stats.achievement_to_dict(a) for a in rows]}


# declared last, "history" and "achievements" are not sports
@router.get("/{user_id}/{sport}")
async def user_statistics(
    user_id: str,
    sport: Sport,
    session: Session = Depends(get_session),
    user: User = Depends(current_user),
):
    row = stats.get_statistics(session, user_id=user_id, sport=sport)
    if not row:
        raise NotFound("No statistics for this sport")
    return {"statistics": stats.statistics_to_dict(row)}
