"""Read-only lab data routes."""
from __future__ import annotations

from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...leaderboard import leaders
from ...models import FieldStrength, PredictionEntry, TournamentInfo
from ...pipeline import LoadCycleResult
from ..deps import get_latest

router = APIRouter(prefix="/lab", tags=["lab"])


class FieldStrengthOut(BaseModel):
    rating: float
    rating_display: str
    label: str
    elite_count: int
    top_tier: int
    field_avg: float
    top20_avg: float

    @classmethod
    def from_model(cls, fs: FieldStrength) -> "FieldStrengthOut":
        return cls(rating_display=fs.rating_display, **fs.model_dump())


class PredictionsOut(BaseModel):
    source: str
    toggle_label: Optional[str]
    event_name: Optional[str]
    stale: bool
    rows: list[PredictionEntry]


class LabSummary(BaseModel):
    tournament: TournamentInfo
    field_strength: FieldStrengthOut
    predictions: PredictionsOut
    charts: dict
    loaded_at: str
    sources_ok: list[str]
    is_fallback: bool


def _predictions_out(result: LoadCycleResult, source: Optional[str] = None) -> PredictionsOut:
    toggle = result.predictions.toggle()
    view = toggle.select(source) if source else toggle.view()
    return PredictionsOut(
        source=view.source,
        toggle_label=view.toggle_label,
        event_name=view.event_name,
        stale=view.stale,
        rows=view.rows,
    )


@router.get("", response_model=LabSummary)
def get_lab(result: LoadCycleResult = Depends(get_latest)):
    """Everything the lab page renders, from the latest load cycle."""
    return LabSummary(
        tournament=result.tournament,
        field_strength=FieldStrengthOut.from_model(result.field_strength),
        predictions=_predictions_out(result),
        charts=asdict(result.charts),
        loaded_at=result.loaded_at.isoformat(),
        sources_ok=list(result.sources_ok),
        is_fallback=result.is_fallback,
    )


@router.get("/tournament", response_model=TournamentInfo)
def get_tournament(result: LoadCycleResult = Depends(get_latest)):
    return result.tournament


@router.get("/field-strength", response_model=FieldStrengthOut)
def get_field_strength(result: LoadCycleResult = Depends(get_latest)):
    return FieldStrengthOut.from_model(result.field_strength)


@router.get("/predictions", response_model=PredictionsOut)
def get_predictions(
    result: LoadCycleResult = Depends(get_latest),
    source: Optional[Literal["live", "pre"]] = Query(
        default=None, description="Switch source when the toggle is offered"
    ),
):
    """Bounded predictions table. `source` only applies while the toggle is offered."""
    return _predictions_out(result, source)


@router.get("/charts")
def get_charts(result: LoadCycleResult = Depends(get_latest)):
    return asdict(result.charts)


class LeaderboardOut(BaseModel):
    live: bool
    event_name: Optional[str]
    leaders: list[dict]
    rows: list[dict]


@router.get("/leaderboard", response_model=LeaderboardOut)
def get_leaderboard(result: LoadCycleResult = Depends(get_latest)):
    """Live leaderboard; empty with `live=false` until the in-play feed carries scores."""
    rows = [asdict(r) for r in result.leaderboard]
    return LeaderboardOut(
        live=bool(rows),
        event_name=result.tournament.event_name,
        leaders=[asdict(r) for r in leaders(result.leaderboard)],
        rows=rows,
    )
