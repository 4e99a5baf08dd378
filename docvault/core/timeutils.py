from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite возвращает naive datetime; считаем его UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
