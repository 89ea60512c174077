from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the ``DateTime`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
