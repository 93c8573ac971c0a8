"""Timestamp helpers shared by models and jobs."""
from datetime import datetime, time, timezone, tzinfo


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC.

    SQLite hands back naive datetimes even for ``DateTime(timezone=True)``
    columns; those are always written as UTC wall time.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_local_day(now: datetime, tz: tzinfo | None = None) -> datetime:
    """Midnight of the local day containing ``now``, expressed in UTC.

    ``tz`` defaults to the process timezone. Midnight gets its own UTC offset,
    which differs from the offset of ``now`` on daylight saving change days.
    """
    local_date = as_utc(now).astimezone(tz).date()
    if tz is None:
        midnight = datetime.combine(local_date, time()).astimezone()
    else:
        midnight = datetime.combine(local_date, time(), tzinfo=tz)
    return midnight.astimezone(timezone.utc)
