# grocery_app/models/types.py
from datetime import datetime, timezone

from sqlalchemy import BigInteger
from sqlalchemy.types import TypeDecorator


class EpochMillis(TypeDecorator):
    """
    Store a datetime as integer milliseconds since the Unix epoch.

    The cart table predates this service and keeps `added_at` / `due_date`
    as INTEGER columns, so comparisons in SQL stay plain integer compares.

    - naive datetimes are treated as UTC
    - values come back as timezone-aware UTC datetimes
    """

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> int | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)

    def process_result_value(self, value: int | None, dialect) -> datetime | None:
        if value is None:
            return None
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
