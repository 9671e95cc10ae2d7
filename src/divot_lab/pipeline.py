"""
Load cycles: fetch every feed, then derive the lab's read-only state.

A cycle fetches all sources concurrently and waits for every one of them
before deriving anything, so a slow response can never leave a half-updated
result behind. Each source fails on its own: its payload becomes None and the
normalisers treat that as "no data". Results are immutable; LabState keeps
whichever cycle finished deriving last.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

import requests

from .charts import ChartSet, build_charts
from .client import DataGolfClient
from .field_strength import FALLBACK_FIELD_STRENGTH, analyze
from .leaderboard import LeaderboardRow, build_leaderboard
from .models import FieldStrength, Player, TournamentInfo
from .predictions import (
    PredictionsBundle,
    normalize_live,
    normalize_pre_tournament,
    prediction_event_name,
    predictions_are_stale,
)
from .roster import build_roster, parse_skill_ratings, prediction_estimates, ranking_estimates
from .tournament import (
    DEFAULT_EVENT_NAME,
    event_names_match,
    parse_field_snapshot,
    parse_schedule,
    resolve_tournament,
)

logger = logging.getLogger(__name__)

SOURCES = ("schedule", "field", "pre_tournament", "live", "skill_ratings", "rankings")


@dataclass(frozen=True)
class LoadCycleResult:
    tournament: TournamentInfo
    field_strength: FieldStrength
    predictions: PredictionsBundle
    charts: ChartSet
    roster: tuple[Player, ...] = ()
    leaderboard: tuple[LeaderboardRow, ...] = ()
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sources_ok: tuple[str, ...] = ()
    is_fallback: bool = False


def derive(
    schedule: Any = None,
    field_updates: Any = None,
    pre_tournament: Any = None,
    live: Any = None,
    skill_ratings: Any = None,
    rankings: Any = None,
    today: Optional[date] = None,
    sources_ok: tuple[str, ...] = (),
) -> LoadCycleResult:
    """Build a LoadCycleResult from raw payloads. Any payload may be None."""
    entries = parse_schedule(schedule)
    snapshot = parse_field_snapshot(field_updates)
    tournament = resolve_tournament(entries, snapshot, today)

    pre = normalize_pre_tournament(pre_tournament)
    pre_event = prediction_event_name(pre_tournament)

    live_rows = normalize_live(live)
    live_event = prediction_event_name(live)
    if live_rows and live_event and not event_names_match(live_event, tournament.event_name):
        logger.info(
            "Ignoring in-play feed for %r while showing %r", live_event, tournament.event_name
        )
        live_rows = []
    leaderboard = build_leaderboard(live) if live_rows else ()

    predictions = PredictionsBundle(
        pre=pre,
        live=live_rows,
        phase=tournament.phase,
        event_name=tournament.event_name,
        stale=predictions_are_stale(pre_event, tournament.event_name),
    )

    roster = build_roster(
        snapshot.field,
        parse_skill_ratings(skill_ratings),
        predicted=prediction_estimates(pre_tournament, live),
        ranked=ranking_estimates(rankings),
    )
    strength = analyze(roster)

    logger.info(
        "Derived %s (%s, label=%s): %d players, rating %s, %d pre / %d live predictions, %d on leaderboard",
        tournament.event_name,
        tournament.phase,
        tournament.label,
        len(roster),
        strength.rating_display,
        len(pre),
        len(live_rows),
        len(leaderboard),
    )
    return LoadCycleResult(
        tournament=tournament,
        field_strength=strength,
        predictions=predictions,
        charts=build_charts(roster),
        roster=tuple(roster),
        leaderboard=leaderboard,
        sources_ok=sources_ok,
    )


def fallback_result() -> LoadCycleResult:
    """Placeholder state used when no feed could be loaded at all."""
    return LoadCycleResult(
        tournament=TournamentInfo(event_name=DEFAULT_EVENT_NAME),
        field_strength=FALLBACK_FIELD_STRENGTH,
        predictions=PredictionsBundle(),
        charts=ChartSet(),
        is_fallback=True,
    )


class LabDataLoader:
    """Runs load cycles against DataGolf."""

    def __init__(self, client: DataGolfClient, tour: str = "pga", max_workers: int = len(SOURCES)):
        self.client = client
        self.tour = tour
        self.max_workers = max_workers

    def _fetchers(self) -> dict[str, Callable[[], Any]]:
        return {
            "schedule": lambda: self.client.get_schedule(tour=self.tour),
            "field": lambda: self.client.get_field_updates(tour=self.tour),
            "pre_tournament": lambda: self.client.get_pre_tournament_predictions(tour=self.tour),
            "live": lambda: self.client.get_in_play_predictions(tour=self.tour),
            "skill_ratings": lambda: self.client.get_skill_ratings(),
            "rankings": lambda: self.client.get_dg_rankings(),
        }

    @staticmethod
    def _safe_fetch(name: str, fetch: Callable[[], Any]) -> Any:
        try:
            return fetch()
        except requests.RequestException as e:
            logger.warning("Failed to fetch %s: %s", name, e)
            return None
        except Exception as e:
            logger.error("Failed to load %s: %s: %s", name, type(e).__name__, e)
            return None

    def fetch_all(self) -> dict[str, Any]:
        fetchers = self._fetchers()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {name: pool.submit(self._safe_fetch, name, fn) for name, fn in fetchers.items()}
            return {name: fut.result() for name, fut in futures.items()}

    def load(self, today: Optional[date] = None) -> LoadCycleResult:
        payloads = self.fetch_all()
        ok = tuple(name for name in SOURCES if payloads.get(name) is not None)
        if not ok:
            logger.error("Every feed failed; serving placeholder lab data")
            return fallback_result()
        return derive(
            schedule=payloads.get("schedule"),
            field_updates=payloads.get("field"),
            pre_tournament=payloads.get("pre_tournament"),
            live=payloads.get("live"),
            skill_ratings=payloads.get("skill_ratings"),
            rankings=payloads.get("rankings"),
            today=today,
            sources_ok=ok,
        )


class LabState:
    """Latest published load-cycle result. Last write wins."""

    def __init__(self, initial: Optional[LoadCycleResult] = None):
        self._lock = threading.Lock()
        self._latest = initial

    def publish(self, result: LoadCycleResult) -> None:
        with self._lock:
            self._latest = result

    @property
    def latest(self) -> Optional[LoadCycleResult]:
        with self._lock:
            return self._latest


def refresh(loader: LabDataLoader, state: LabState) -> LoadCycleResult:
    result = loader.load()
    state.publish(result)
    return result


def run_forever(
    loader: LabDataLoader,
    state: LabState,
    interval: float,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """
    Start a load cycle every `interval` seconds until `stop_event` is set.

    Cycles run on their own threads and are never cancelled, so a slow cycle
    may overlap the next one; whichever publishes last is what readers see.
    """
    stop_event = stop_event or threading.Event()
    while not stop_event.is_set():
        threading.Thread(target=refresh, args=(loader, state), daemon=True).start()
        stop_event.wait(interval)
