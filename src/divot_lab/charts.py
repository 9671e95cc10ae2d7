"""
Chart projections for the lab page.

Each projection turns the roster into coordinate-ready data; drawing is left to
the caller. Radar, bar and line outputs are in normalised units ([-1, 1] or
[0, 1]); the scatter keeps data units and pairs with PlotArea for pixel
mapping and hover hit-testing. Every builder returns None for an empty roster.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import Player, SG_COMPONENTS

RADAR_PLAYERS = 5
SCATTER_PLAYERS = 15
BAR_PLAYERS = 10
LINE_PLAYERS = 10

AXIS_LABELS = {
    "sg_ott": "Off-the-Tee",
    "sg_app": "Approach",
    "sg_arg": "Around Green",
    "sg_putt": "Putting",
}

POSITIVE_COLOR = "#5BBF85"
NEGATIVE_COLOR = "#E76F51"

HIT_RADIUS_PX = 10.0


def top_by_total(players: Sequence[Player], n: int) -> list[Player]:
    """Top `n` players by SG: Total; sorted() is stable so ties keep source order."""
    return sorted(players, key=lambda p: p.sg("sg_total"), reverse=True)[:n]


def _scale(values: Sequence[float]) -> float:
    peak = max((abs(v) for v in values), default=0.0)
    return peak if peak > 0 else 1.0


def _clamp(value: float, lo: float = -1.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


# ──────────────────────────────────────────────
# Skill radar
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class RadarSeries:
    player_name: str
    values: tuple[float, ...]
    radii: tuple[float, ...]
    points: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class RadarProjection:
    axes: tuple[str, ...]
    labels: tuple[str, ...]
    angles: tuple[float, ...]
    scale: float
    series: tuple[RadarSeries, ...]


def skill_radar(players: Sequence[Player]) -> Optional[RadarProjection]:
    top = top_by_total(players, RADAR_PLAYERS)
    if not top:
        return None

    n = len(SG_COMPONENTS)
    angles = tuple(i * 2 * math.pi / n - math.pi / 2 for i in range(n))
    # One scale shared by every axis and player
    scale = _scale([p.sg(k) for p in top for k in SG_COMPONENTS])

    series = []
    for p in top:
        values = tuple(p.sg(k) for k in SG_COMPONENTS)
        radii = tuple(_clamp(v / scale) for v in values)
        points = tuple(
            (r * math.cos(a), r * math.sin(a)) for r, a in zip(radii, angles)
        )
        series.append(RadarSeries(p.player_name, values, radii, points))

    return RadarProjection(
        axes=SG_COMPONENTS,
        labels=tuple(AXIS_LABELS[k] for k in SG_COMPONENTS),
        angles=angles,
        scale=scale,
        series=tuple(series),
    )


# ──────────────────────────────────────────────
# Putting vs tee-to-green scatter
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ScatterPoint:
    player_name: str
    rank: int
    x: float
    y: float

    @property
    def tier(self) -> str:
        if self.rank <= 3:
            return "1-3"
        if self.rank <= 10:
            return "4-10"
        return "11-15"


@dataclass(frozen=True)
class ScatterProjection:
    points: tuple[ScatterPoint, ...]
    x_range: tuple[float, float]
    y_range: tuple[float, float]


def scatter(players: Sequence[Player]) -> Optional[ScatterProjection]:
    top = top_by_total(players, SCATTER_PLAYERS)
    if not top:
        return None

    points = tuple(
        ScatterPoint(
            player_name=p.player_name,
            rank=i,
            x=p.sg("sg_putt"),
            y=p.sg("sg_ott") + p.sg("sg_app") + p.sg("sg_arg"),
        )
        for i, p in enumerate(top, 1)
    )
    xs = [pt.x for pt in points]
    ys = [pt.y for pt in points]
    # At least ±1 so the zero lines always sit inside the plot
    return ScatterProjection(
        points=points,
        x_range=(min(min(xs), -1.0), max(max(xs), 1.0)),
        y_range=(min(min(ys), -1.0), max(max(ys), 1.0)),
    )


@dataclass(frozen=True)
class PlotArea:
    """Plot rectangle in CSS pixels, with padding around the data region."""

    width: float = 460.0
    height: float = 340.0
    pad_left: float = 55.0
    pad_right: float = 25.0
    pad_top: float = 45.0
    pad_bottom: float = 45.0

    def to_pixels(
        self,
        x: float,
        y: float,
        x_range: tuple[float, float],
        y_range: tuple[float, float],
    ) -> tuple[float, float]:
        inner_w = self.width - self.pad_left - self.pad_right
        inner_h = self.height - self.pad_top - self.pad_bottom
        x_lo, x_hi = x_range
        y_lo, y_hi = y_range
        px = self.pad_left + (x - x_lo) / (x_hi - x_lo) * inner_w
        py = self.pad_top + inner_h - (y - y_lo) / (y_hi - y_lo) * inner_h
        return px, py


def hit_test(
    projection: Optional[ScatterProjection],
    area: PlotArea,
    css_x: float,
    css_y: float,
    pixel_ratio: float = 1.0,
    radius_px: float = HIT_RADIUS_PX,
) -> Optional[ScatterPoint]:
    """
    Nearest scatter point to a pointer position, or None outside the radius.

    Pointer and point positions are converted from CSS to device pixels and
    `radius_px` is a device-pixel distance, so at a pixel ratio of 2 the
    pointer must land within half as many CSS pixels of a point.
    """
    if projection is None or not projection.points:
        return None
    ratio = pixel_ratio if pixel_ratio > 0 else 1.0
    mx, my = css_x * ratio, css_y * ratio

    best: Optional[ScatterPoint] = None
    best_dist = math.inf
    for pt in projection.points:
        px, py = area.to_pixels(pt.x, pt.y, projection.x_range, projection.y_range)
        dist = math.hypot(px * ratio - mx, py * ratio - my)
        if dist <= radius_px and dist < best_dist:
            best, best_dist = pt, dist
    return best


# ──────────────────────────────────────────────
# SG: Total ranking bars
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class RankingBar:
    player_name: str
    value: float
    height: float  # value / scale, in [-1, 1]

    @property
    def positive(self) -> bool:
        return self.value >= 0

    @property
    def color(self) -> str:
        return POSITIVE_COLOR if self.positive else NEGATIVE_COLOR


@dataclass(frozen=True)
class RankingBarProjection:
    bars: tuple[RankingBar, ...]
    scale: float


def ranking_bars(players: Sequence[Player]) -> Optional[RankingBarProjection]:
    top = top_by_total(players, BAR_PLAYERS)
    if not top:
        return None
    scale = _scale([p.sg("sg_total") for p in top])
    bars = tuple(
        RankingBar(p.player_name, p.sg("sg_total"), _clamp(p.sg("sg_total") / scale))
        for p in top
    )
    return RankingBarProjection(bars=bars, scale=scale)


# ──────────────────────────────────────────────
# Category averages line
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class CategoryPoint:
    category: str
    label: str
    average: float
    x: float  # band centre in [0, 1]
    y: float  # average / bound, in [-1, 1]


@dataclass(frozen=True)
class CategoryLineProjection:
    points: tuple[CategoryPoint, ...]
    bound: float

    @property
    def y_range(self) -> tuple[float, float]:
        return (-self.bound, self.bound)


def category_line(players: Sequence[Player]) -> Optional[CategoryLineProjection]:
    top = top_by_total(players, LINE_PLAYERS)
    if not top:
        return None
    averages = [sum(p.sg(k) for p in top) / len(top) for k in SG_COMPONENTS]
    bound = _scale(averages)
    n = len(SG_COMPONENTS)
    points = tuple(
        CategoryPoint(
            category=k,
            label=AXIS_LABELS[k],
            average=avg,
            x=(i + 0.5) / n,
            y=avg / bound,
        )
        for i, (k, avg) in enumerate(zip(SG_COMPONENTS, averages))
    )
    return CategoryLineProjection(points=points, bound=bound)


# ──────────────────────────────────────────────
# Bundle
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ChartSet:
    radar: Optional[RadarProjection] = None
    scatter: Optional[ScatterProjection] = None
    ranking: Optional[RankingBarProjection] = None
    categories: Optional[CategoryLineProjection] = None


def build_charts(players: Sequence[Player]) -> ChartSet:
    return ChartSet(
        radar=skill_radar(players),
        scatter=scatter(players),
        ranking=ranking_bars(players),
        categories=category_line(players),
    )
