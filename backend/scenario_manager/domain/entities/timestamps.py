"""ISO-8601 timestamps as stored on scenarios and comments."""

from datetime import datetime, timezone


def iso_timestamp(moment: datetime | None = None) -> str:
    """Format a UTC instant as ``2024-05-01T09:30:00.000Z``.

    Fixed width with millisecond precision, so lexicographic order equals
    chronological order for every value produced here.
    """
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
