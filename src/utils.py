# src/utils.py
from datetime import datetime, timezone
from typing import Any, Dict


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def row_to_dict(row) -> Dict[str, Any]:
    """Column values of an ORM row keyed by column name."""
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}
