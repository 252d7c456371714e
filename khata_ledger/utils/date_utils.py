"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Timezone-aware current time in UTC"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def start_of_week(now: datetime) -> datetime:
    """Monday 00:00 of the week containing `now`"""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=midnight.weekday())


def start_of_month(now: datetime) -> datetime:
    """First day of the month containing `now`, at 00:00"""
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
