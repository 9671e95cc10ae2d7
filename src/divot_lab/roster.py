from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError

from . import payloads
from .models import Player, SkillSource, to_float

logger = logging.getLogger(__name__)


def normalize_players(raw_players: Iterable[Any]) -> list[Player]:
    """Validate raw player dicts, dropping rows without a usable name."""
    players: list[Player] = []
    for raw in raw_players:
        if not isinstance(raw, dict) or not raw.get("player_name"):
            continue
        try:
            players.append(Player.model_validate(raw))
        except ValidationError:
            logger.debug("Skipping malformed player row: %r", raw)
    return players


def parse_skill_ratings(payload: Any) -> list[Player]:
    return normalize_players(payloads.first_list(payload, payloads.SKILL_LIST))


def skill_estimates(*row_lists: Iterable[Any]) -> dict[int, float]:
    """
    ``dg_id -> dg_skill_estimate`` from prediction or ranking rows.

    Earlier lists take precedence over later ones. Rows without an id or an
    estimate are skipped.
    """
    estimates: dict[int, float] = {}
    for rows in row_lists:
        for raw in rows:
            if not isinstance(raw, dict):
                continue
            dg_id = raw.get("dg_id")
            estimate = to_float(raw.get("dg_skill_estimate"))
            if isinstance(dg_id, int) and estimate is not None:
                estimates.setdefault(dg_id, estimate)
    return estimates


def prediction_estimates(pre_tournament: Any, live: Any = None) -> dict[int, float]:
    return skill_estimates(
        payloads.first_list(pre_tournament, payloads.PRE_TOURNAMENT_LIST),
        payloads.first_list(live, payloads.LIVE_LIST),
    )


def ranking_estimates(rankings: Any) -> dict[int, float]:
    return skill_estimates(payloads.first_list(rankings, payloads.RANKINGS_LIST))


def _estimated(fp: Player, estimate: float, source: SkillSource) -> Player:
    return fp.model_copy(update={"sg_total": estimate, "skill_source": source})


def build_roster(
    field: Sequence[Player],
    skill_players: Sequence[Player],
    predicted: Optional[Mapping[int, float]] = None,
    ranked: Optional[Mapping[int, float]] = None,
) -> list[Player]:
    """
    Merge the tournament field with skill ratings.

    The field feed usually carries names and ids only. Each field player with
    no SG numbers of its own is resolved in order:

    1. skill-ratings row matched by dg_id, then by exact name (full breakdown)
    2. ``dg_skill_estimate`` from the prediction feeds, as SG: Total only
    3. ``dg_skill_estimate`` from the DG rankings, as SG: Total only

    Players none of these cover are kept with empty SG values. Without a field
    the skill-ratings list stands in as the roster.
    """
    if not field:
        return list(skill_players)
    predicted = predicted or {}
    ranked = ranked or {}

    by_id = {p.dg_id: p for p in skill_players if p.dg_id is not None}
    by_name = {p.player_name: p for p in skill_players}

    roster: list[Player] = []
    for fp in field:
        if fp.has_skill_data:
            roster.append(fp)
            continue
        match = by_id.get(fp.dg_id) if fp.dg_id is not None else None
        if match is None:
            match = by_name.get(fp.player_name)
        if match is not None and match.has_skill_data:
            roster.append(
                match.model_copy(
                    update={
                        "player_name": fp.player_name,
                        "dg_id": fp.dg_id if fp.dg_id is not None else match.dg_id,
                        "country": fp.country or match.country,
                        "skill_source": "ratings",
                    }
                )
            )
        elif fp.dg_id in predicted:
            roster.append(_estimated(fp, predicted[fp.dg_id], "predictions"))
        elif fp.dg_id in ranked:
            roster.append(_estimated(fp, ranked[fp.dg_id], "rankings"))
        else:
            roster.append(fp)

    filled = Counter(p.skill_source for p in roster)
    if filled["predictions"] or filled["rankings"]:
        logger.info(
            "Roster: %d from skill ratings, %d from prediction estimates, %d from rankings, %d without data",
            filled["ratings"],
            filled["predictions"],
            filled["rankings"],
            sum(1 for p in roster if not p.has_skill_data),
        )
    return roster
