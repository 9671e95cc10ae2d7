"""Tests for chart projections."""
from __future__ import annotations

import math

import pytest

from divot_lab.charts import (
    NEGATIVE_COLOR,
    POSITIVE_COLOR,
    PlotArea,
    build_charts,
    category_line,
    hit_test,
    ranking_bars,
    scatter,
    skill_radar,
    top_by_total,
)
from divot_lab.models import Player


def _player(name, total, ott=0.0, app=0.0, arg=0.0, putt=0.0) -> Player:
    return Player(player_name=name, sg_total=total, sg_ott=ott, sg_app=app, sg_arg=arg, sg_putt=putt)


@pytest.fixture
def roster():
    # Not sorted by sg_total on purpose
    return [
        _player("Schauffele, Xander", 2.1, 0.5, 0.8, 0.3, 0.5),
        _player("Scheffler, Scottie", 3.0, 0.7, 1.4, 0.4, 0.5),
        _player("Morikawa, Collin", 1.6, 0.2, 1.2, 0.1, 0.1),
        _player("McIlroy, Rory", 2.4, 1.2, 0.8, 0.2, 0.2),
        _player("Spieth, Jordan", 0.9, -0.3, 0.3, 0.4, 0.5),
        _player("Day, Jason", 0.7, 0.0, 0.2, 0.1, -1.6),
        _player("Fowler, Rickie", -0.4, -0.2, -0.1, 0.0, -0.1),
    ] + [_player(f"Depth {i}", -0.5 - i * 0.1, -0.2, -0.2, -0.1, 0.0) for i in range(12)]


class TestTopByTotal:
    def test_ties_keep_source_order(self):
        players = [_player("A", 1.0), _player("B", 2.0), _player("C", 1.0)]
        assert [p.player_name for p in top_by_total(players, 3)] == ["B", "A", "C"]

    def test_missing_total_sorts_as_zero(self):
        players = [Player(player_name="None"), _player("Neg", -0.5), _player("Pos", 0.5)]
        assert [p.player_name for p in top_by_total(players, 3)] == ["Pos", "None", "Neg"]

    def test_does_not_mutate(self, roster):
        before = [p.player_name for p in roster]
        top_by_total(roster, 5)
        assert [p.player_name for p in roster] == before


class TestSkillRadar:
    def test_top_five_by_total(self, roster):
        radar = skill_radar(roster)
        assert [s.player_name for s in radar.series] == [
            "Scheffler, Scottie",
            "McIlroy, Rory",
            "Schauffele, Xander",
            "Morikawa, Collin",
            "Spieth, Jordan",
        ]
        assert radar.axes == ("sg_ott", "sg_app", "sg_arg", "sg_putt")
        assert radar.labels == ("Off-the-Tee", "Approach", "Around Green", "Putting")

    def test_shared_scale(self, roster):
        radar = skill_radar(roster)
        # Largest absolute value across all five players and axes
        assert radar.scale == pytest.approx(1.4)
        scheffler = radar.series[0]
        assert scheffler.radii[1] == pytest.approx(1.0)
        assert scheffler.radii[0] == pytest.approx(0.5)

    def test_negative_values_scale_toward_centre(self, roster):
        spieth = skill_radar(roster).series[4]
        assert spieth.radii[0] == pytest.approx(-0.3 / 1.4)
        # First axis points straight up (angle -pi/2)
        x, y = spieth.points[0]
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(0.3 / 1.4)

    def test_angles(self, roster):
        angles = skill_radar(roster).angles
        assert angles[0] == pytest.approx(-math.pi / 2)
        assert angles[1] == pytest.approx(0.0)

    def test_all_zero_components(self):
        radar = skill_radar([Player(player_name="Blank", sg_total=1.0)])
        assert radar.scale == 1.0
        assert radar.series[0].radii == (0.0, 0.0, 0.0, 0.0)


class TestScatter:
    def test_top_fifteen(self, roster):
        sc = scatter(roster)
        assert len(sc.points) == 15
        assert sc.points[0].player_name == "Scheffler, Scottie"
        assert [p.rank for p in sc.points] == list(range(1, 16))

    def test_coordinates(self, roster):
        pt = scatter(roster).points[0]
        assert pt.x == pytest.approx(0.5)
        assert pt.y == pytest.approx(0.7 + 1.4 + 0.4)

    def test_ranges_at_least_unit(self):
        sc = scatter([_player("Tiny", 0.1, 0.05, 0.05, 0.0, 0.1)])
        assert sc.x_range == (-1.0, 1.0)
        assert sc.y_range == (-1.0, 1.0)

    def test_ranges_extend_with_data(self, roster):
        sc = scatter(roster)
        assert sc.x_range[0] == pytest.approx(-1.6)
        assert sc.y_range[1] == pytest.approx(2.5)

    def test_tiers(self, roster):
        tiers = [p.tier for p in scatter(roster).points]
        assert tiers[:3] == ["1-3"] * 3
        assert tiers[3:10] == ["4-10"] * 7
        assert tiers[10:] == ["11-15"] * 5


class TestHitTest:
    @pytest.fixture
    def projection(self):
        return scatter([_player("Centre", 1.0), _player("Corner", 0.5, 1.0, 0.0, 0.0, 1.0)])

    def test_to_pixels_corners(self):
        area = PlotArea(width=200, height=100, pad_left=0, pad_right=0, pad_top=0, pad_bottom=0)
        assert area.to_pixels(-1, -1, (-1, 1), (-1, 1)) == (0, 100)
        assert area.to_pixels(1, 1, (-1, 1), (-1, 1)) == (200, 0)

    def test_hits_nearest(self, projection):
        area = PlotArea()
        px, py = area.to_pixels(0.0, 0.0, projection.x_range, projection.y_range)
        assert hit_test(projection, area, px + 3, py - 2).player_name == "Centre"

    def test_miss_outside_radius(self, projection):
        area = PlotArea()
        px, py = area.to_pixels(0.0, 0.0, projection.x_range, projection.y_range)
        assert hit_test(projection, area, px + 30, py) is None

    @pytest.mark.parametrize("ratio", [1.0, 1.5, 2.0, 3.0])
    def test_close_pointer_hits_at_any_ratio(self, projection, ratio):
        area = PlotArea()
        px, py = area.to_pixels(1.0, 1.0, projection.x_range, projection.y_range)
        assert hit_test(projection, area, px - 2, py + 1, pixel_ratio=ratio).player_name == "Corner"
        assert hit_test(projection, area, px - 20, py, pixel_ratio=ratio) is None

    def test_radius_is_in_device_pixels(self, projection):
        area = PlotArea()
        px, py = area.to_pixels(1.0, 1.0, projection.x_range, projection.y_range)
        assert hit_test(projection, area, px - 7, py, pixel_ratio=1.0).player_name == "Corner"
        assert hit_test(projection, area, px - 7, py, pixel_ratio=2.0) is None
        assert hit_test(projection, area, px - 4, py, pixel_ratio=2.0).player_name == "Corner"

    def test_non_positive_ratio_treated_as_one(self, projection):
        area = PlotArea()
        px, py = area.to_pixels(1.0, 1.0, projection.x_range, projection.y_range)
        assert hit_test(projection, area, px - 7, py, pixel_ratio=0).player_name == "Corner"

    def test_empty_projection(self):
        assert hit_test(None, PlotArea(), 10, 10) is None


class TestRankingBars:
    def test_top_ten_scaled(self, roster):
        proj = ranking_bars(roster)
        assert len(proj.bars) == 10
        assert proj.scale == pytest.approx(3.0)
        assert proj.bars[0].height == pytest.approx(1.0)
        assert proj.bars[1].height == pytest.approx(2.4 / 3.0)

    def test_sign_colors(self, roster):
        bars = ranking_bars(roster).bars
        fowler = next(b for b in bars if b.player_name == "Fowler, Rickie")
        assert not fowler.positive
        assert fowler.color == NEGATIVE_COLOR
        assert fowler.height < 0
        assert bars[0].color == POSITIVE_COLOR

    def test_negative_scale(self):
        proj = ranking_bars([_player("A", -0.2), _player("B", -0.8)])
        assert proj.scale == pytest.approx(0.8)
        assert proj.bars[1].height == pytest.approx(-1.0)


class TestCategoryLine:
    def test_averages_over_top_ten(self, roster):
        proj = category_line(roster)
        top10 = top_by_total(roster, 10)
        expected_putt = sum(p.sg_putt for p in top10) / 10
        putt = proj.points[3]
        assert putt.category == "sg_putt"
        assert putt.average == pytest.approx(expected_putt)

    def test_symmetric_bound(self, roster):
        proj = category_line(roster)
        peak = max(abs(p.average) for p in proj.points)
        assert proj.bound == pytest.approx(peak)
        assert proj.y_range == (-proj.bound, proj.bound)
        assert max(abs(p.y) for p in proj.points) == pytest.approx(1.0)

    def test_even_spacing(self, roster):
        xs = [p.x for p in category_line(roster).points]
        assert xs == [0.125, 0.375, 0.625, 0.875]


class TestEmptyRoster:
    def test_all_projections_noop(self):
        assert skill_radar([]) is None
        assert scatter([]) is None
        assert ranking_bars([]) is None
        assert category_line([]) is None

    def test_chart_set(self):
        charts = build_charts([])
        assert charts.radar is None and charts.scatter is None
        assert charts.ranking is None and charts.categories is None
