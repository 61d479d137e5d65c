"""
Helpers for aggregate query results.

Depending on the statement shape SQLModel hands back COUNT results either
as a bare int or as a one-element Row. scalar_int() accepts both.
"""
from typing import Any


def scalar_int(x: Any) -> int:
    """Coerce a COUNT/aggregate result (int or 1-tuple/Row) to int."""
    try:
        return int(x[0])
    except (TypeError, IndexError):
        return int(x)
