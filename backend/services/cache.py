# this file manages a short-lived cache of public user profiles
from functools import partial
from typing import Iterable

from expiringdict import ExpiringDict
from sqlmodel import Session, select

import settings
from models import User

new_cache = partial(
    ExpiringDict,
    max_len=10_000,
    max_age_seconds=settings.PROFILE_CACHE_SECONDS,
    items={},
)


class CacheService:
    def __init__(self):
        self.user_cache = new_cache()

    def get_users(self, user_ids: Iterable[str], db: Session) -> dict[str, dict]:
        user_ids = list(user_ids)
        missing_ids = [uid for uid in user_ids if uid not in self.user_cache]
        if missing_ids:
            missing_users = db.exec(select(User).where(User.id.in_(missing_ids))).all()
            for user in missing_users:
                self.user_cache[user.id] = user.public()
        return {uid: self.user_cache.get(uid) for uid in user_ids}

    def forget_user(self, user_id: str):
        """Drop a profile after it was edited"""
        self.user_cache.pop(user_id, None)

    def clear(self):
        self.user_cache.clear()


cache = CacheService()
