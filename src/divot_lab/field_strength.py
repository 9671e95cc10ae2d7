"""
Field strength scoring.

The rating maps the field's mean SG: Total onto a 0–10 scale:

    rating = clamp((avg + 1.5) * 3, 0, 10)

so a field averaging -1.5 scores 0 and one averaging about +1.83 scores 10.
Labels are checked in a fixed order: Elite, Strong, Weak, then Moderate.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .models import FieldStrength, Player, SG_COMPONENTS

ELITE_SG = 1.5
TOP_TIER_SG = 1.0
TOP_N_DEPTH = 20

ELITE_RATING = 8.0
STRONG_RATING = 6.0
WEAK_RATING = 3.0

EMPTY_FIELD_STRENGTH = FieldStrength(rating=0.0, label="Weak", elite_count=0, top_tier=0)

# Shown when an entire load cycle fails
FALLBACK_FIELD_STRENGTH = FieldStrength(rating=5.0, label="Moderate", elite_count=0, top_tier=0)


def _label_for(rating: float) -> str:
    if rating >= ELITE_RATING:
        return "Elite"
    if rating >= STRONG_RATING:
        return "Strong"
    if rating <= WEAK_RATING:
        return "Weak"
    return "Moderate"


def analyze(players: Sequence[Player]) -> FieldStrength:
    if not players:
        return EMPTY_FIELD_STRENGTH

    totals = [p.sg("sg_total") for p in players]
    avg = sum(totals) / len(totals)
    rating = round(min(10.0, max(0.0, (avg + 1.5) * 3)), 1)

    depth = sorted(totals, reverse=True)[:TOP_N_DEPTH]
    top20_avg = sum(depth) / len(depth)

    return FieldStrength(
        rating=rating,
        label=_label_for(rating),
        elite_count=sum(1 for t in totals if t >= ELITE_SG),
        top_tier=sum(1 for t in totals if t >= TOP_TIER_SG),
        field_avg=avg,
        top20_avg=top20_avg,
    )


# ──────────────────────────────────────────────
# Playing style
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class PlayingStyle:
    name: str
    color: str


_STYLE_BY_COMPONENT: dict[str, PlayingStyle] = {
    "sg_ott": PlayingStyle("Power", "#E76F51"),
    "sg_app": PlayingStyle("Precision", "#5A8FA8"),
    "sg_putt": PlayingStyle("Touch", "#9B59B6"),
    "sg_arg": PlayingStyle("Scrambler", "#F4A259"),
}
COMPLETE = PlayingStyle("Complete", "#5BBF85")


def playing_style(player: Player) -> PlayingStyle:
    """Strongest SG component, or Complete for balanced elite players."""
    values = {k: player.sg(k) for k in SG_COMPONENTS}
    spread = max(values.values()) - min(values.values())
    if spread < 0.4 and player.sg("sg_total") > 1.0:
        return COMPLETE
    # Tie order follows Power, Precision, Touch, Scrambler
    best = max(_STYLE_BY_COMPONENT, key=lambda k: values[k])
    return _STYLE_BY_COMPONENT[best]
