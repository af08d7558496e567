from __future__ import annotations

import math
import random

import pytest

from planisphere.astrotime import jd_time, julian_day
from planisphere.vector import Vector3


def test_from_spherical_is_unit_length() -> None:
    rng = random.Random(5)
    for _ in range(50):
        v = Vector3.from_spherical(rng.uniform(0, 2 * math.pi), rng.uniform(-1.5, 1.5))
        assert v.length() == pytest.approx(1.0)


def test_spherical_round_trip() -> None:
    v = Vector3.from_spherical(4.0, -0.7)
    assert v.lon() == pytest.approx(4.0)
    assert v.lat() == pytest.approx(-0.7)


def test_lon_is_non_negative() -> None:
    assert Vector3(1.0, -1.0, 0.0).lon() == pytest.approx(7 * math.pi / 4)
    assert 0 <= Vector3(1.0, -1e-300, 0.0).lon() < 2 * math.pi


def test_lat_uses_actual_length() -> None:
    assert Vector3(0.0, 3.0, 3.0).lat() == pytest.approx(math.pi / 4)


def test_pole_and_zero_vector_conventions() -> None:
    assert Vector3(0.0, 0.0, 1.0).lon() == 0.0
    assert Vector3(0.0, 0.0, -2.0).lat() == pytest.approx(-math.pi / 2)
    assert math.isnan(Vector3().lat())


def test_normalizing_the_zero_vector_gives_nan() -> None:
    v = Vector3().normalized()
    assert math.isnan(v.x) and math.isnan(v.y) and math.isnan(v.z)
    assert Vector3(0.0, 3.0, 4.0).normalized() == Vector3(0.0, 0.6, 0.8)


def test_transforms_do_not_mutate_receiver() -> None:
    v = Vector3.from_spherical(1.0, 0.5)
    before = (v.x, v.y, v.z)
    v.equ_to_hor(julian_day(2024, 6, 21, 12), 0.6)
    assert (v.x, v.y, v.z) == before


def test_zenith_is_at_local_sidereal_time_and_latitude() -> None:
    lst = julian_day(2024, 6, 21, 15, 30)
    lat = math.radians(37.57)
    zenith = Vector3.from_spherical(0.0, math.pi / 2).hor_to_equ(lst, lat)
    assert zenith.lon() == pytest.approx(jd_time(lst) * math.pi / 12)
    assert zenith.lat() == pytest.approx(lat)


def test_equatorial_horizontal_round_trip() -> None:
    lst = julian_day(2024, 1, 5, 3, 0)
    lat = math.radians(-33.87)
    v = Vector3.from_spherical(2.5, -0.4)
    back = v.equ_to_hor(lst, lat).hor_to_equ(lst, lat)
    assert back.lon() == pytest.approx(v.lon())
    assert back.lat() == pytest.approx(v.lat())


def test_ecliptic_pole_sits_at_obliquity_from_celestial_pole() -> None:
    jd = julian_day(2000, 1, 1, 12)
    pole = Vector3(0.0, 0.0, 1.0).ecl_to_equ(jd)
    assert math.degrees(math.pi / 2 - pole.lat()) == pytest.approx(23.4393, abs=1e-3)
    # the ecliptic pole lies at RA 18h
    assert pole.lon() == pytest.approx(3 * math.pi / 2)


def test_galactic_north_pole() -> None:
    # B1950 pole: RA 12h49m, Dec +27.4
    ngp = Vector3(0.0, 0.0, 1.0).gal_to_equ()
    assert math.degrees(ngp.lon()) == pytest.approx(192.25, abs=0.01)
    assert math.degrees(ngp.lat()) == pytest.approx(27.40, abs=0.01)
    assert ngp.equ_to_gal().lat() == pytest.approx(math.pi / 2, abs=1e-5)


def test_normalized() -> None:
    assert Vector3(3.0, 4.0, 0.0).normalized() == Vector3(0.6, 0.8, 0.0)
