import datetime as _dt

from sqlalchemy.types import TypeDecorator, DateTime


def as_utc(value: _dt.datetime | str | None) -> _dt.datetime | None:
    """Normalize naive, aware or ISO-string datetimes to aware UTC.

    Naive values are taken to be UTC already (SQLite drops the offset).
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = _dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=_dt.timezone.utc)
    return value.astimezone(_dt.timezone.utc)


class UtcAwareDateTime(TypeDecorator):
    """Always write UTC and always return tz-aware datetimes (UTC)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)
