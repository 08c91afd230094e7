import logging

import bcrypt
from sqlmodel import Session, select

from exceptions import AlreadyExists, NotAuthenticated, ValidationError
from models.auth import USERNAME_MAX_LENGTH, User
from services import stats
from services.cache import cache

logger = logging.getLogger("matchup.auth")

PASSWORD_MIN_LENGTH = 6
PROFILE_FIELDS = ("first_name", "last_name", "bio", "location", "avatar_url")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _check_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username cannot be empty")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError("Username too long")
    return username


def sign_up(
    session: Session,
    *,
    email: str,
    password: str,
    username: str,
    first_name: str,
    last_name: str,
    skills: list[str] | None = None,
    positions: list[str] | None = None,
) -> User:
    email = normalize_email(email)
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    if not email or not first_name or not last_name:
        raise ValidationError("Email, first name and last name are required")
    if "@" not in email:
        raise ValidationError("Invalid email address")
    if len(password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    username = _check_username(username)

    if session.exec(select(User).where(User.username == username)).first():
        raise AlreadyExists("Username already taken")
    if session.exec(select(User).where(User.email == email)).first():
        raise AlreadyExists("Email already registered")

    user = User(
        email=email,
        username=username,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
        skills=skills or [],
        positions=positions or [],
    )
    session.add(user)
    stats.add_achievement(session, user_id=user.id, achievement_type="new_player")
    session.commit()
    logger.info(f"New user signed up: {user.username}")
    return user


def sign_in(session: Session, *, email: str, password: str) -> User:
    user = session.exec(select(User).where(User.email == normalize_email(email))).first()
    if not user or not verify_password(password or "", user.password_hash):
        # same answer for unknown email and wrong password
        raise NotAuthenticated("Invalid email or password")
    return user


def update_profile(session: Session, *, user: User, **changes) -> User:
    """Apply the provided profile changes, None values are left untouched"""
    username = changes.pop("username", None)
    if username is not None:
        username = _check_username(username)
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing and existing.id != user.id:
            raise AlreadyExists("Username already taken")
        user.username = username

    for field, value in changes.items():
        if field not in PROFILE_FIELDS:
            raise ValidationError(f"Unknown profile field: {field}")
        if value is not None:
            setattr(user, field, value.strip() if isinstance(value, str) else value)

    session.add(user)
    session.commit()
    cache.forget_user(user.id)
    return user


def user_to_dict(user: User) -> dict:
    return {
        **user.public(),
        "email": user.email,
        "location": user.location,
        "bio": user.bio,
        "skills": user.skills or [],
        "positions": user.positions or [],
        "created_at": user.created_at.isoformat(),
    }
