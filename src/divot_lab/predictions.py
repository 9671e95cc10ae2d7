"""
Prediction normalisation and the live/pre-tournament toggle.

DataGolf publishes pre-tournament odds under ``baseline`` and in-play odds
under ``data``. Both are flattened into PredictionEntry lists in source order,
which the feed already sorts by win probability.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from pydantic import ValidationError

from . import payloads
from .models import Phase, PredictionEntry

logger = logging.getLogger(__name__)

Source = Literal["pre", "live"]

MAX_ROWS = 25

TOGGLE_LABELS: dict[Source, str] = {
    # Label names the state the button switches *to*
    "live": "View Pre-Tournament Predictions",
    "pre": "View Live Predictions",
}


def _normalize_entries(raw_entries: list) -> list[PredictionEntry]:
    entries: list[PredictionEntry] = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            continue
        try:
            entries.append(
                PredictionEntry(
                    player_name=raw.get("player_name") or "",
                    dg_id=raw.get("dg_id"),
                    win=raw.get("win") or 0.0,
                    top_10=raw.get("top_10") or 0.0,
                    top_5=raw.get("top_5") or 0.0,
                    top_20=raw.get("top_20") or 0.0,
                    make_cut=raw.get("make_cut") or 0.0,
                )
            )
        except ValidationError:
            logger.debug("Dropping malformed prediction row: %r", raw)
    return entries


def normalize_pre_tournament(payload: Any) -> list[PredictionEntry]:
    return _normalize_entries(payloads.first_list(payload, payloads.PRE_TOURNAMENT_LIST))


def normalize_live(payload: Any) -> list[PredictionEntry]:
    return _normalize_entries(payloads.first_list(payload, payloads.LIVE_LIST))


def prediction_event_name(payload: Any) -> Optional[str]:
    return payloads.first_str(payload, payloads.EVENT_NAME)


def predictions_are_stale(prediction_event: Optional[str], tournament_event: Optional[str]) -> bool:
    """True when the predictions belong to a different event than the one displayed."""
    if not prediction_event or not tournament_event:
        return False
    return prediction_event.strip().lower() != tournament_event.strip().lower()


def active_source(
    phase: Phase,
    pre: list[PredictionEntry],
    live: list[PredictionEntry],
) -> Source:
    if phase == "live":
        return "live"
    if phase == "post":
        return "live" if live else "pre"
    return "pre"


def toggle_offered(
    phase: Phase,
    pre: list[PredictionEntry],
    live: list[PredictionEntry],
    stale: bool = False,
) -> bool:
    """Both sets must be usable; stale pre-tournament rows belong to another event."""
    return phase == "live" and bool(live) and bool(pre) and not stale


@dataclass(frozen=True)
class PredictionsView:
    source: Source
    rows: list[PredictionEntry]
    toggle_label: Optional[str] = None
    event_name: Optional[str] = None
    stale: bool = False  # only ever set on pre-tournament views

    @property
    def is_empty(self) -> bool:
        return not self.rows


class PredictionsToggle:
    """
    Local view state for the predictions table.

    The toggle is only offered while a tournament is live, both prediction
    sets are populated and the pre-tournament set is for the displayed event.
    Switching never refetches; it just re-slices the other set.
    """

    def __init__(
        self,
        pre: list[PredictionEntry],
        live: list[PredictionEntry],
        phase: Phase,
        event_name: Optional[str] = None,
        stale: bool = False,
    ):
        self.pre = pre
        self.live = live
        self.phase = phase
        self.event_name = event_name
        self.stale = stale
        self.state: Source = "live" if self.offered else active_source(phase, pre, live)

    @property
    def offered(self) -> bool:
        return toggle_offered(self.phase, self.pre, self.live, self.stale)

    def toggle(self) -> PredictionsView:
        if self.offered:
            self.state = "pre" if self.state == "live" else "live"
        return self.view()

    def select(self, source: Source) -> PredictionsView:
        if self.offered:
            self.state = source
        return self.view()

    def view(self) -> PredictionsView:
        entries = self.live if self.state == "live" else self.pre
        return PredictionsView(
            source=self.state,
            rows=entries[:MAX_ROWS],
            toggle_label=TOGGLE_LABELS[self.state] if self.offered else None,
            event_name=self.event_name,
            stale=self.stale and self.state == "pre",
        )


@dataclass(frozen=True)
class PredictionsBundle:
    """Both prediction sets for one load cycle."""

    pre: list[PredictionEntry] = field(default_factory=list)
    live: list[PredictionEntry] = field(default_factory=list)
    phase: Phase = "pre"
    event_name: Optional[str] = None
    stale: bool = False

    def toggle(self) -> PredictionsToggle:
        return PredictionsToggle(self.pre, self.live, self.phase, self.event_name, self.stale)

    def default_view(self) -> PredictionsView:
        return self.toggle().view()
