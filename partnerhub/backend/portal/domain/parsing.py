# portal/domain/parsing.py
from __future__ import annotations

from typing import Any


def is_blank(x: Any) -> bool:
    if x is None:
        return True
    if isinstance(x, str) and not x.strip():
        return True
    return False


def get_nested(payload: dict[str, Any], path: str) -> Any:
    """Tiny dot-path getter: 'address.suburb.name' or 'type.name'."""
    cur: Any = payload
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur


def as_text(x: Any) -> str | None:
    """Strings only; nested objects and numbers are not treated as text."""
    if isinstance(x, str):
        return x
    return None
