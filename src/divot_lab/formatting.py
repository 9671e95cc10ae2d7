from __future__ import annotations

import math
from typing import Optional


def _number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(num) else num


def format_sg(value) -> str:
    """'+1.23' / '-0.45'; em dash when the value is missing."""
    num = _number(value)
    if num is None:
        return "—"
    return f"+{num:.2f}" if num >= 0 else f"{num:.2f}"


def format_percent(value, decimals: int = 1) -> str:
    """Probability in [0, 1] → '12.3%'."""
    num = _number(value)
    if num is None:
        return "—"
    return f"{num * 100:.{decimals}f}%"


def short_name(player_name: str) -> str:
    # DataGolf names are "Last, First"
    return player_name.split(",", 1)[0].strip()


def display_name(player_name: str) -> str:
    """'Scheffler, Scottie' → 'Scottie Scheffler'."""
    parts = player_name.split(", ", 1)
    if len(parts) == 2:
        return f"{parts[1]} {parts[0]}"
    return player_name
