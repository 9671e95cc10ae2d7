from .client import DataGolfClient
from .charts import ChartSet, build_charts, hit_test, PlotArea
from .field_strength import analyze, playing_style
from .leaderboard import LeaderboardRow, build_leaderboard, leaders
from .models import (
    FieldSnapshot,
    FieldStrength,
    Player,
    PredictionEntry,
    ScheduleEntry,
    TournamentInfo,
)
from .pipeline import LabDataLoader, LabState, LoadCycleResult, derive
from .predictions import PredictionsToggle, PredictionsView, normalize_live, normalize_pre_tournament
from .roster import build_roster
from .tournament import compute_label, phase, resolve_tournament, select_event

__all__ = [
    "DataGolfClient",
    "ChartSet",
    "build_charts",
    "hit_test",
    "PlotArea",
    "analyze",
    "playing_style",
    "LeaderboardRow",
    "build_leaderboard",
    "leaders",
    "FieldSnapshot",
    "FieldStrength",
    "Player",
    "PredictionEntry",
    "ScheduleEntry",
    "TournamentInfo",
    "LabDataLoader",
    "LabState",
    "LoadCycleResult",
    "derive",
    "PredictionsToggle",
    "PredictionsView",
    "normalize_live",
    "normalize_pre_tournament",
    "build_roster",
    "compute_label",
    "phase",
    "resolve_tournament",
    "select_event",
]
