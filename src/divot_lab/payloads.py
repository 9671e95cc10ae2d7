"""
Accessors for feed payloads.

The same concept can live under several keys depending on whether the body
came through the proxy envelope (``{"success": ..., "data": {...}}``) or
straight from DataGolf. Each concept has an ordered tuple of candidate paths;
the first path that resolves to a non-None value wins.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

Path = tuple[str, ...]

SCHEDULE_LIST: tuple[Path, ...] = (("data", "schedule"), ("schedule",))

# The field body is either the envelope's "data" dict or the payload itself.
FIELD_BODY: tuple[Path, ...] = (("data",), ())
FIELD_LIST: tuple[Path, ...] = (("field",), ("players",))

SCHEDULE_START: tuple[Path, ...] = (("start_date",), ("date",))

PRE_TOURNAMENT_LIST: tuple[Path, ...] = (
    ("data", "baseline"),
    ("baseline",),
    ("data", "baseline_history_fit"),
    ("baseline_history_fit",),
)

LIVE_LIST: tuple[Path, ...] = (("data", "data"), ("data",))

SKILL_LIST: tuple[Path, ...] = (
    ("data", "players"),
    ("players",),
    ("data", "skill_ratings"),
    ("skill_ratings",),
    ("data", "rankings"),
    ("rankings",),
)

RANKINGS_LIST: tuple[Path, ...] = (("data", "rankings"), ("rankings",))

EVENT_NAME: tuple[Path, ...] = (
    ("data", "event_name"),
    ("event_name",),
    ("data", "info", "event_name"),
    ("info", "event_name"),
)


def dig(payload: Any, path: Path) -> Any:
    """Follow `path` through nested dicts. None as soon as a step is missing."""
    node = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
        if node is None:
            return None
    return node


def first_present(
    payload: Any,
    candidates: Sequence[Path],
    expect: type | tuple[type, ...] | None = None,
) -> Any:
    """Return the value at the first candidate path that resolves.

    With `expect`, values of the wrong type are skipped as if missing.
    """
    for path in candidates:
        value = dig(payload, path)
        if value is None:
            continue
        if expect is not None and not isinstance(value, expect):
            continue
        return value
    return None


def first_list(payload: Any, candidates: Sequence[Path]) -> list:
    found = first_present(payload, candidates, expect=list)
    return found if found is not None else []


def first_dict(payload: Any, candidates: Sequence[Path]) -> Optional[dict]:
    return first_present(payload, candidates, expect=dict)


def first_str(payload: Any, candidates: Sequence[Path]) -> Optional[str]:
    value = first_present(payload, candidates, expect=str)
    if value is None or not value.strip():
        return None
    return value
