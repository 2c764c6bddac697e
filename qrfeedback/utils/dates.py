import datetime
import pytz


def utcnow() -> datetime.datetime:
    # Naive UTC, which is what the DateTime columns store
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def start_of_month(now: datetime.datetime | None = None) -> datetime.datetime:
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def format_submitted_at(value: datetime.datetime, tz_name: str = "UTC") -> str:
    """Render a stored UTC timestamp like ``10/19/2026, 9:05:07 AM``."""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    local = value.astimezone(tz)

    hour = local.hour % 12 or 12
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local:%M:%S} {local:%p}"
