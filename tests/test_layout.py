from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import replace
from datetime import datetime

import pytest

from planisphere.astromath import H2R
from planisphere.astrotime import DateRingMode, jd_time
from planisphere.config import PlanisphereSettings
from planisphere.layout import compute_layout
from planisphere.models import ObserverFrame, PlanisphereLayout, StarRecord
from planisphere.projection import AzimuthalProjection
from tests.conftest import angle_gap, seoul, sydney

WHEN = datetime(2024, 6, 21, 21, 0)


@pytest.fixture(scope="module")
def seoul_layout() -> PlanisphereLayout:
    return compute_layout(seoul(), WHEN)


@pytest.fixture(scope="module")
def sydney_layout() -> PlanisphereLayout:
    return compute_layout(sydney(), WHEN)


def _projection(layout: PlanisphereLayout) -> AzimuthalProjection:
    return AzimuthalProjection(layout.screen_radius, layout.declination_limit, layout.southern)


def test_times_are_consistent(seoul_layout: PlanisphereLayout) -> None:
    assert seoul_layout.when == WHEN
    assert seoul_layout.year == 2024
    assert jd_time(seoul_layout.lct) == pytest.approx(21.0, abs=1e-6)
    assert seoul_layout.lct - seoul_layout.ut == pytest.approx(9 / 24)
    assert (seoul_layout.lst - seoul_layout.gst) * 24 == pytest.approx(126.98 / 15)


def test_rotation_puts_local_sidereal_time_on_meridian(seoul_layout: PlanisphereLayout) -> None:
    lst_deg = jd_time(seoul_layout.lst) * 15
    assert (lst_deg + seoul_layout.rotation_deg) % 360 == pytest.approx(90.0)


def test_declination_limit_follows_latitude(seoul_layout: PlanisphereLayout) -> None:
    assert math.degrees(seoul_layout.declination_limit) == pytest.approx(-(90 - 37.57 + 5))
    assert not seoul_layout.southern


def test_configured_declination_limit() -> None:
    settings = replace(PlanisphereSettings(), declination_limit=-70.0)
    layout = compute_layout(seoul(), WHEN, settings)
    assert math.degrees(layout.declination_limit) == pytest.approx(-70.0)


def test_stars_are_culled_to_disc(seoul_layout: PlanisphereLayout) -> None:
    names = {s.star.name for s in seoul_layout.stars}
    assert "Polaris" in names
    assert "Acrux" not in names
    for s in seoul_layout.stars:
        assert s.point.distance() <= seoul_layout.screen_radius + 1e-9


def test_polaris_is_near_the_centre(seoul_layout: PlanisphereLayout) -> None:
    polaris = next(s for s in seoul_layout.stars if s.star.name == "Polaris")
    assert polaris.point.distance() < 5.0


def test_star_display_buckets(seoul_layout: PlanisphereLayout) -> None:
    by_name = {s.star.name: s for s in seoul_layout.stars}
    assert (by_name["Sirius"].radius, by_name["Sirius"].opacity) == (7.0, 1.0)
    assert (by_name["Vega"].radius, by_name["Vega"].opacity) == (5.0, 1.0)
    assert (by_name["Polaris"].radius, by_name["Polaris"].opacity) == (4.0, 1.0)


def test_magnitude_limit_thins_the_disc() -> None:
    faint = compute_layout(seoul(), WHEN)
    bright = compute_layout(seoul(), WHEN, replace(PlanisphereSettings(), magnitude_limit=2.0))
    assert len(bright.stars) < len(faint.stars)
    assert all(s.star.magnitude <= 2.0 for s in bright.stars)
    assert all(s.star.magnitude <= 6.0 for s in faint.stars)


def test_explicit_star_list() -> None:
    stars = (
        StarRecord("Faint", 3.0, 40.0, 5.5, "G"),
        StarRecord("Deep south", 3.0, -80.0, 1.0, "B"),
    )
    layout = compute_layout(seoul(), WHEN, stars=stars, segments=(), names=())
    assert [s.star.name for s in layout.stars] == ["Faint"]
    assert (layout.stars[0].radius, layout.stars[0].opacity) == (0.5, 0.5)
    assert layout.segments == ()
    assert layout.constellation_labels == ()


def test_segments_and_labels_stay_inside(seoul_layout: PlanisphereLayout) -> None:
    r = seoul_layout.screen_radius
    assert seoul_layout.segments
    for seg in seoul_layout.segments:
        assert seg.start.distance() <= r + 1e-9
        assert seg.end.distance() <= r + 1e-9
    assert "Cru" not in {seg.constellation for seg in seoul_layout.segments}
    for label in seoul_layout.constellation_labels:
        assert label.point.distance() <= r - 30 + 1e-9


def test_grid(seoul_layout: PlanisphereLayout) -> None:
    assert [s.hours for s in seoul_layout.ra_spokes] == list(range(0, 24, 2))
    for spoke in seoul_layout.ra_spokes:
        assert spoke.end.distance() == pytest.approx(seoul_layout.screen_radius)
    assert [c.dec_deg for c in seoul_layout.dec_circles] == [-30.0, 0.0, 30.0, 60.0]
    assert [c.is_equator for c in seoul_layout.dec_circles] == [False, True, False, False]


def test_date_ring_ticks(seoul_layout: PlanisphereLayout) -> None:
    ticks = seoul_layout.date_ticks
    assert len(ticks) == 366
    kinds = Counter(t.kind for t in ticks)
    assert kinds["month"] == 12
    assert kinds["tenth"] == 35
    assert kinds["fifth"] == 36
    assert [m.month for m in seoul_layout.month_labels] == list(range(1, 13))


def test_date_ring_advances_about_one_degree_per_day(seoul_layout: PlanisphereLayout) -> None:
    ticks = seoul_layout.date_ticks
    for a, b in zip(ticks, ticks[1:]):
        step = math.degrees((b.angle - a.angle) % (2 * math.pi))
        assert 0.5 < step < 1.5


def test_date_ring_mode_shifts_the_ring() -> None:
    noon = compute_layout(seoul(), WHEN)
    midnight = compute_layout(
        seoul(), WHEN, replace(PlanisphereSettings(), date_ring_mode=DateRingMode.LAMN)
    )
    gap = angle_gap(noon.date_ticks[0].angle, midnight.date_ticks[0].angle)
    assert math.degrees(gap) == pytest.approx(180.0, abs=2.0)


def test_horizon_is_closed_and_on_disc(seoul_layout: PlanisphereLayout) -> None:
    horizon = seoul_layout.horizon
    assert len(horizon) == 630
    assert horizon[0].x == pytest.approx(horizon[-1].x)
    assert horizon[0].y == pytest.approx(horizon[-1].y)
    assert all(p.distance() < seoul_layout.screen_radius for p in horizon)


def test_horizon_north_point_sits_at_pole_altitude(seoul_layout: PlanisphereLayout) -> None:
    proj = _projection(seoul_layout)
    # due north on the horizon is 90 - latitude degrees of declination
    expected = proj.radius_for(math.radians(90 - 37.57))
    assert seoul_layout.horizon[0].distance() == pytest.approx(expected)


def test_cardinal_marks(seoul_layout: PlanisphereLayout) -> None:
    keys = [m.key for m in seoul_layout.cardinal_marks]
    assert keys == ["dir_n", "dir_ne", "dir_e", "dir_se", "dir_s", "dir_sw", "dir_w", "dir_nw"]
    south = seoul_layout.cardinal_marks[4]
    # south lies on the meridian, straight out from the pole at the LST angle
    assert angle_gap(south.point.angle(), jd_time(seoul_layout.lst) * H2R) < 1e-6


def test_hour_ring(seoul_layout: PlanisphereLayout) -> None:
    ticks = seoul_layout.hour_ticks
    assert len(ticks) == 24 * 12
    assert all(0 <= t.angle < 2 * math.pi for t in ticks)
    assert (ticks[0].hour, ticks[0].minute) == (1, 0)
    assert (ticks[-1].hour, ticks[-1].minute) == (24, 55)


def _date_and_hour_gap(layout: PlanisphereLayout) -> float:
    date = next(t for t in layout.date_ticks if (t.month, t.day) == (WHEN.month, WHEN.day))
    hour = next(t for t in layout.hour_ticks if (t.hour, t.minute) == (WHEN.hour, 0))
    return math.degrees(angle_gap(date.angle, hour.angle))


def test_current_hour_lines_up_with_current_date(seoul_layout: PlanisphereLayout) -> None:
    assert _date_and_hour_gap(seoul_layout) < 3.0


def test_southern_layout(sydney_layout: PlanisphereLayout) -> None:
    assert sydney_layout.southern
    assert math.degrees(sydney_layout.declination_limit) == pytest.approx(90 - 33.87 + 5)
    names = {s.star.name for s in sydney_layout.stars}
    assert "Acrux" in names
    assert "Polaris" not in names
    lst_deg = jd_time(sydney_layout.lst) * 15
    assert (sydney_layout.rotation_deg - lst_deg) % 360 == pytest.approx(90.0)
    assert _date_and_hour_gap(sydney_layout) < 3.0


def test_layout_logs_a_debug_line(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="planisphere.layout"):
        compute_layout(seoul(), WHEN)
    assert any("Layout 2024-06-21T21:00:00" in r.getMessage() for r in caplog.records)


def test_invalid_frame_never_reaches_layout() -> None:
    with pytest.raises(ValueError):
        compute_layout(ObserverFrame.from_degrees(0.0, 0.0, 3.0), WHEN)
