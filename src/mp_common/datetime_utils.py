"""UTC clock and timestamp rendering for API payloads."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime | None) -> str:
    """ISO-8601 in UTC; '' when unset.

    TIMESTAMPTZ columns come back aware. A naive value is taken to be UTC
    already rather than local time.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
