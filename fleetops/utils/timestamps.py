from datetime import datetime, timezone


def utcnow_iso() -> str:
    """Current UTC time as the ISO-8601 string stored in timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


def to_utc_iso(value: datetime) -> str:
    """Normalize a datetime to the stored format; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
