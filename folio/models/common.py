import uuid
from datetime import datetime, timezone


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    # Naive UTC, stored the same way by SQLite and PostgreSQL `timestamp`
    return datetime.now(timezone.utc).replace(tzinfo=None)
