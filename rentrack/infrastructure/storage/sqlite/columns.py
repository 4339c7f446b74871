"""Column encoding shared by the SQLite stores."""

from datetime import datetime

from rentrack.core.entities.location import LocationRef, location_ref
from rentrack.core.entities.movement import ensure_utc


def encode_time(value: datetime | None) -> str | None:
    """UTC ISO-8601 with fixed microsecond precision, so text order is time order."""
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def decode_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except (ValueError, TypeError):
        return None


def encode_ref(ref: LocationRef | None) -> tuple[str | None, str | None]:
    """(space, id) column pair for a location reference."""
    if ref is None:
        return None, None
    return ref.space, ref.id


def decode_ref(space: str | None, location_id: str | None) -> LocationRef | None:
    if location_id is None:
        return None
    # Rows migrated from systems that never stored the space
    return location_ref(space or "untagged", location_id)
