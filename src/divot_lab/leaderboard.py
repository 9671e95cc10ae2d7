"""
Live leaderboard built from the in-play feed.

In-play rows double as scoring rows: ``current_pos``, ``current_score`` (to
par), ``today``, ``thru`` and ``R1``..``R4``. Before the first tee time the
feed already lists the field with empty scores, so the board only goes live
once some row shows holes played or a score for the day.

Rows sort by score to par, then by numeric position ("T5" counts as 5).
Missing or unreadable scores and positions sort last.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from . import payloads
from .models import to_float

NO_SCORE = 999.0
NO_POSITION = 999
ROUND_KEYS = ("R1", "R2", "R3", "R4")
LEADER_COUNT = 3


@dataclass(frozen=True)
class LeaderboardRow:
    position: str
    player_name: str
    score: str
    today: str
    thru: str
    rounds: tuple[Optional[int], ...]
    started: bool
    score_to_par: float  # NO_SCORE when unknown

    @property
    def under_par(self) -> bool:
        return self.score_to_par <= 0


def _blank(value: Any) -> bool:
    return value is None or value == "" or value == "-"


def has_started(row: dict) -> bool:
    thru = row.get("thru")
    return not (_blank(thru) or thru == 0 or thru == "0")


def _scored_today(row: dict) -> bool:
    today = row.get("today")
    return not (_blank(today) or today == 0 or today == "E")


def has_live_scores(rows: Sequence[dict]) -> bool:
    return any(has_started(r) or _scored_today(r) for r in rows)


def score_value(raw: Any) -> float:
    """Score to par as a number: "E" is 0, "+3" is 3, blanks are NO_SCORE."""
    if isinstance(raw, bool):
        return NO_SCORE
    if isinstance(raw, str) and raw.strip().upper() == "E":
        return 0.0
    value = to_float(raw)
    return NO_SCORE if value is None else value


def position_value(raw: Any) -> int:
    text = str(raw or "").replace("T", "").replace("-", "").strip()
    try:
        return int(text)
    except ValueError:
        return NO_POSITION


def format_to_par(raw: Any) -> str:
    value = score_value(raw)
    if value == NO_SCORE:
        return str(raw) if not _blank(raw) else "-"
    if value == 0:
        return "E"
    shown = int(value) if float(value).is_integer() else value
    return f"+{shown}" if value > 0 else str(shown)


def _round_score(raw: Any) -> Optional[int]:
    value = to_float(raw)
    return int(value) if value else None


def _to_row(raw: dict) -> LeaderboardRow:
    started = has_started(raw)
    score = raw.get("current_score")
    if not started and (_blank(score) or score_value(score) == 0):
        score_text, today_text = "E", "-"
    else:
        score_text = format_to_par(score if not _blank(score) else 0)
        today_text = format_to_par(raw.get("today") if not _blank(raw.get("today")) else 0)
    return LeaderboardRow(
        position=str(raw.get("current_pos") or "-"),
        player_name=raw["player_name"],
        score=score_text,
        today=today_text,
        thru=str(raw.get("thru")) if started else "-",
        rounds=tuple(_round_score(raw.get(k)) for k in ROUND_KEYS),
        started=started,
        score_to_par=score_value(score),
    )


def build_leaderboard(payload: Any) -> tuple[LeaderboardRow, ...]:
    """Sorted leaderboard, or empty until the in-play feed carries real scores."""
    rows = [
        r for r in payloads.first_list(payload, payloads.LIVE_LIST)
        if isinstance(r, dict) and r.get("player_name")
    ]
    if not has_live_scores(rows):
        return ()
    ordered = sorted(
        rows,
        key=lambda r: (score_value(r.get("current_score")), position_value(r.get("current_pos"))),
    )
    return tuple(_to_row(r) for r in ordered)


def leaders(board: Sequence[LeaderboardRow], n: int = LEADER_COUNT) -> list[LeaderboardRow]:
    return list(board[:n])
