from __future__ import annotations
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Phase = Literal["pre", "live", "post"]
Label = Literal["UPCOMING", "LIVE"]
StrengthLabel = Literal["Weak", "Moderate", "Strong", "Elite"]
# Where a roster player's SG numbers were filled from; None means the field feed itself
SkillSource = Literal["ratings", "predictions", "rankings"]

SG_COMPONENTS = ("sg_ott", "sg_app", "sg_arg", "sg_putt")


def to_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_iso_date(value) -> Optional[date]:
    """Parse 'YYYY-MM-DD' (or the date part of an ISO datetime). None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


class ScheduleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_name: str
    course: str = ""
    start_date: Optional[str] = None
    event_id: Optional[int] = None

    def parsed_start(self) -> Optional[date]:
        return parse_iso_date(self.start_date)


class Player(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_name: str
    dg_id: Optional[int] = None
    country: str = ""
    sg_total: Optional[float] = None
    sg_ott: Optional[float] = None
    sg_app: Optional[float] = None
    sg_arg: Optional[float] = None
    sg_putt: Optional[float] = None
    skill_source: Optional[SkillSource] = None

    @field_validator("sg_total", "sg_ott", "sg_app", "sg_arg", "sg_putt", mode="before")
    @classmethod
    def _coerce_sg(cls, v):
        return to_float(v)

    @field_validator("country", mode="before")
    @classmethod
    def _coerce_country(cls, v):
        return v or ""

    def sg(self, key: str) -> float:
        """Strokes-gained value for `key`; missing values count as 0."""
        value = getattr(self, key)
        return value if value is not None else 0.0

    @property
    def has_skill_data(self) -> bool:
        return any(getattr(self, k) is not None for k in ("sg_total",) + SG_COMPONENTS)


class FieldSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_name: Optional[str] = None
    course: str = ""
    current_round: Optional[int] = None
    event_completed: bool = False
    field: list[Player] = Field(default_factory=list)

    @property
    def phase(self) -> Phase:
        if self.event_completed:
            return "post"
        if not self.current_round:
            return "pre"
        if 1 <= self.current_round <= 4:
            return "live"
        return "post"


class PredictionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_name: str = Field(min_length=1)
    dg_id: Optional[int] = None
    win: float = Field(ge=0.0, le=1.0)
    top_10: float = Field(ge=0.0, le=1.0)
    top_5: float = Field(default=0.0, ge=0.0, le=1.0)
    top_20: float = Field(default=0.0, ge=0.0, le=1.0)
    make_cut: float = Field(default=0.0, ge=0.0, le=1.0)


class TournamentInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_name: str
    course: str = ""
    start_date: Optional[str] = None
    label: Optional[Label] = None
    phase: Phase = "pre"
    current_round: Optional[int] = None
    field_size: int = 0


class FieldStrength(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: float = Field(ge=0.0, le=10.0)
    label: StrengthLabel
    elite_count: int = 0
    top_tier: int = 0
    # Same-pass aggregates
    field_avg: float = 0.0
    top20_avg: float = 0.0

    @property
    def rating_display(self) -> str:
        return f"{self.rating:.1f}"
