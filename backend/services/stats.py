"""Ratings, statistics and leaderboards.

Ratings move in fixed steps and stay within [RATING_MIN, RATING_MAX]:
no streaks, no opponent strength, no variance weighting.
"""

import logging
import uuid
from typing import Any, Sequence

from sqlalchemy import or_
from sqlmodel import Session, select

import settings
from exceptions import ValidationError
from models.auth import User
from models.stats import (
    DEFAULT_RATING,
    Achievement,
    GameHistory,
    GameResult,
    Sport,
    UserStatistics,
)

logger = logging.getLogger("matchup.stats")

RATING_MIN = 2.0
RATING_MAX = 3.5

RATING_STEPS = {
    GameResult.win: 0.4,
    GameResult.loss: -0.4,
    GameResult.draw: 0.0,
}

# Onboarding questionnaire answers -> rating points
EXPERIENCE_POINTS = {
    "Više od 5 godina": 0.5,
    "Više od 3 godine": 0.5,
    "1 do 5 godina": 0.3,
    "1 do 3 godine": 0.3,
    "6 meseci do 1 godine": 0.3,
    "Manje od 1 godine": 0.1,
    "Manje od 6 meseci": 0.1,
}
FREQUENCY_POINTS = {
    "Skoro svaki dan": 0.4,
    "2-3 puta nedeljno": 0.3,
    "Jednom nedeljno": 0.2,
}
SKILL_LEVEL_POINTS = {
    "Takmičarski/Profesionalni": 0.4,
    "Napredni": 0.3,
    "Srednji": 0.2,
}
TRAINING_POINTS = {
    "Takmičim se profesionalno": 0.4,
    "Član sam kluba/tima": 0.4,
    "Redovno treniram sa trenerom": 0.3,
    "Povremeno idem na treninge": 0.2,
}
PLAY_TYPE_POINTS = {
    "Profesionalno/polu-profesionalno": 0.4,
    "Redovno se takmičim": 0.3,
    "Uglavnom rekreativno, ponekad takmičarski": 0.2,
}

# free-text questionnaire answers and their minimum number of words
TEXT_ANSWER_MIN_WORDS = {"enjoyment": 5}

LEADERBOARD_ORDERS = {
    "rating": (UserStatistics.average_rating, UserStatistics.games_won),
    "wins": (UserStatistics.games_won, UserStatistics.average_rating),
    "goals": (UserStatistics.goals_scored, UserStatistics.average_rating),
}

# type -> (name, description), shown as unlocked on the profile
ACHIEVEMENTS = {
    "new_player": ("Novi igrač", "Dobrodošli u Sastav!"),
    "first_game": ("Prvi meč", "Odigrajte prvi meč"),
    "regular_player": ("Redovan igrač", "10+ mečeva"),
}
# games played in a sport -> achievement unlocked for that sport
GAME_MILESTONES = {1: "first_game", 10: "regular_player"}


def parse_result(result: str | GameResult) -> GameResult:
    try:
        return GameResult(result)
    except ValueError:
        raise ValidationError(f"Unknown game result: {result!r}") from None


def parse_sport(sport: str | Sport) -> Sport:
    try:
        return Sport(sport)
    except ValueError:
        raise ValidationError(f"Unknown sport: {sport!r}") from None


def clamp_rating(rating: float) -> float:
    return max(RATING_MIN, min(RATING_MAX, round(rating, 1)))


def rating_change(result: str | GameResult) -> float:
    return RATING_STEPS[parse_result(result)]


def apply_rating_change(current_rating: float, change: float) -> float:
    """
    >>> apply_rating_change(2.5, 0.4)
    2.9
    >>> apply_rating_change(3.4, 0.4)
    3.5
    >>> apply_rating_change(2.0, -0.4)
    2.0
    """
    return clamp_rating(current_rating + change)


def word_count(text: str) -> int:
    return len((text or "").split())


def validate_text_answers(answers: dict[str, Any]):
    for question, min_words in TEXT_ANSWER_MIN_WORDS.items():
        if word_count(answers.get(question, "")) < min_words:
            raise ValidationError(
                f"The answer to {question!r} needs at least {min_words} words"
            )


def initial_rating(answers: dict[str, Any]) -> float:
    """Starting rating from the onboarding questionnaire"""
    score = DEFAULT_RATING
    score += EXPERIENCE_POINTS.get(answers.get("experience"), 0.0)
    score += FREQUENCY_POINTS.get(answers.get("frequency"), 0.0)
    score += SKILL_LEVEL_POINTS.get(answers.get("skill_level"), 0.0)
    # training and play type describe the same thing, the best one counts
    score += max(
        TRAINING_POINTS.get(answers.get("training"), 0.0),
        PLAY_TYPE_POINTS.get(answers.get("type"), 0.0),
    )
    return clamp_rating(score)


def win_percentage(games_won: int, games_played: int) -> float:
    """
    >>> win_percentage(1, 3)
    33.3
    >>> win_percentage(0, 0)
    0
    """
    if games_played == 0:
        return 0
    return round(games_won / games_played * 100, 1)


def get_statistics(session: Session, *, user_id: str, sport: Sport) -> UserStatistics | None:
    return session.exec(
        select(UserStatistics).where(
            UserStatistics.user_id == user_id,
            UserStatistics.sport == parse_sport(sport),
        )
    ).first()


def get_all_statistics(session: Session, *, user_id: str) -> Sequence[UserStatistics]:
    return session.exec(
        select(UserStatistics)
        .where(UserStatistics.user_id == user_id)
        .order_by(UserStatistics.sport)
    ).all()


def _statistics_for_update(session: Session, user_id: str, sport: Sport) -> UserStatistics:
    stats = get_statistics(session, user_id=user_id, sport=sport)
    if stats is None:
        stats = UserStatistics(user_id=user_id, sport=sport)
    return stats


def process_game_result(
    session: Session,
    *,
    user_id: str,
    sport: Sport | str,
    result: GameResult | str,
    goals_scored: int = 0,
    assists: int = 0,
    game_id: str | None = None,
    notes: str | None = None,
) -> GameHistory:
    sport = parse_sport(sport)
    result = parse_result(result)
    if goals_scored < 0 or assists < 0:
        raise ValidationError("Goals and assists cannot be negative")

    stats = _statistics_for_update(session, user_id, sport)
    new_rating = apply_rating_change(stats.average_rating, rating_change(result))

    stats.games_played += 1
    stats.games_won += result == GameResult.win
    stats.games_lost += result == GameResult.loss
    stats.goals_scored += goals_scored
    stats.assists += assists
    stats.average_rating = new_rating
    session.add(stats)
    if stats.games_played in GAME_MILESTONES:
        add_achievement(
            session,
            user_id=user_id,
            achievement_type=GAME_MILESTONES[stats.games_played],
            sport=sport,
        )

    game = GameHistory(
        user_id=user_id,
        game_id=game_id or uuid.uuid4().hex,
        sport=sport,
        result=result,
        goals_scored=goals_scored,
        assists=assists,
        rating=new_rating,
        notes=notes,
    )
    session.add(game)
    session.commit()
    logger.info(f"{user_id} {result.value} at {sport.value}, rating now {new_rating}")
    return game


def save_questionnaire(
    session: Session, *, user_id: str, sport: Sport | str, answers: dict[str, Any]
) -> UserStatistics:
    """Store the onboarding answers and seed the rating they imply"""
    validate_text_answers(answers)
    sport = parse_sport(sport)
    stats = _statistics_for_update(session, user_id, sport)
    stats.questionnaire = answers
    stats.average_rating = initial_rating(answers)
    session.add(stats)
    session.commit()
    return stats


def game_history(
    session: Session,
    *,
    user_id: str,
    sport: Sport | str | None = None,
    limit: int | None = None,
) -> Sequence[GameHistory]:
    query = (
        select(GameHistory)
        .where(GameHistory.user_id == user_id)
        .order_by(GameHistory.played_at.desc(), GameHistory.id.desc())
        .limit(limit or settings.GAME_HISTORY_LIMIT)
    )
    if sport:
        query = query.where(GameHistory.sport == parse_sport(sport))
    return session.exec(query).all()


def _ranked(sport: Sport, order_by: str):
    try:
        columns = LEADERBOARD_ORDERS[order_by]
    except KeyError:
        raise ValidationError(f"Unknown leaderboard order: {order_by!r}") from None
    return (
        select(UserStatistics, User)
        .join(User, User.id == UserStatistics.user_id)
        # only players with at least one game are ranked
        .where(UserStatistics.sport == sport, UserStatistics.games_played >= 1)
        .order_by(*(column.desc() for column in columns), UserStatistics.user_id)
    )


def leaderboard(
    session: Session,
    *,
    sport: Sport | str,
    order_by: str = "rating",
    limit: int | None = None,
) -> list[dict]:
    sport = parse_sport(sport)
    rows = session.exec(
        _ranked(sport, order_by).limit(limit or settings.LEADERBOARD_LIMIT)
    ).all()
    return [
        {"rank": position, "user": user.public(), **statistics_to_dict(stats)}
        for position, (stats, user) in enumerate(rows, start=1)
    ]


def user_rank(
    session: Session, *, user_id: str, sport: Sport | str, order_by: str = "rating"
) -> int | None:
    sport = parse_sport(sport)
    for position, (stats, _) in enumerate(session.exec(_ranked(sport, order_by)), start=1):
        if stats.user_id == user_id:
            return position
    return None


def add_achievement(
    session: Session,
    *,
    user_id: str,
    achievement_type: str,
    sport: Sport | str | None = None,
    data: dict | None = None,
) -> Achievement:
    """Unlock an achievement, once per user, type and sport.

    The row is added to the session, the caller commits.
    """
    try:
        name, description = ACHIEVEMENTS[achievement_type]
    except KeyError:
        raise ValidationError(f"Unknown achievement: {achievement_type!r}") from None
    sport = parse_sport(sport) if sport else None
    unlocked = session.exec(
        select(Achievement).where(
            Achievement.user_id == user_id,
            Achievement.achievement_type == achievement_type,
            Achievement.sport == sport if sport else Achievement.sport.is_(None),
        )
    ).first()
    if unlocked:
        return unlocked

    achievement = Achievement(
        user_id=user_id,
        achievement_type=achievement_type,
        name=name,
        description=description,
        sport=sport,
        data=data or {},
    )
    session.add(achievement)
    logger.info(f"{user_id} unlocked {achievement_type}")
    return achievement


def list_achievements(
    session: Session, *, user_id: str, sport: Sport | str | None = None
) -> Sequence[Achievement]:
    """Newest first, a sport filter keeps the sport-wide ones too"""
    query = (
        select(Achievement)
        .where(Achievement.user_id == user_id)
        .order_by(Achievement.unlocked_at.desc(), Achievement.id.desc())
    )
    if sport:
        sport = parse_sport(sport)
        query = query.where(or_(Achievement.sport == sport, Achievement.sport.is_(None)))
    return session.exec(query).all()


def statistics_to_dict(stats: UserStatistics) -> dict:
    return {
        "sport": Sport(stats.sport).value,
        "games_played": stats.games_played,
        "games_won": stats.games_won,
        "games_lost": stats.games_lost,
        "goals_scored": stats.goals_scored,
        "assists": stats.assists,
        "average_rating": stats.average_rating,
        "win_percentage": win_percentage(stats.games_won, stats.games_played),
    }


def game_to_dict(game: GameHistory) -> dict:
    return {
        "id": game.id,
        "game_id": game.game_id,
        "sport": Sport(game.sport).value,
        "result": GameResult(game.result).value,
        "goals_scored": game.goals_scored,
        "assists": game.assists,
        "rating": game.rating,
        "notes": game.notes,
        "played_at": game.played_at.isoformat(),
    }


def achievement_to_dict(achievement: Achievement) -> dict:
    return {
        "id": achievement.id,
        "type": achievement.achievement_type,
        "name": achievement.name,
        "description": achievement.description,
        "sport": Sport(achievement.sport).value if achievement.sport else None,
        "data": achievement.data or {},
        "unlocked_at": achievement.unlocked_at.isoformat(),
    }
