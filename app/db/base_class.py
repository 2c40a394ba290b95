# app/db/base_class.py

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column in the schema is stored as UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls) -> list:
    # Persist enum values ("Fire") rather than member names ("FIRE")
    return [member.value for member in enum_cls]
