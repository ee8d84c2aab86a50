"""Custom SQLAlchemy types."""

from datetime import datetime, timezone

from sqlalchemy.types import DateTime, TypeDecorator


class UtcDateTime(TypeDecorator):
    """
    Timestamp stored and returned in UTC.

    Aware values are converted to UTC before binding; naive values are taken
    to already be UTC. Backends without a timezone-aware column (SQLite) keep
    only the wall-clock fields, so the conversion has to happen here.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
