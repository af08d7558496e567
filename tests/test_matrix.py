from __future__ import annotations

import math
import random

import numpy as np
import pytest

from planisphere.astrotime import julian_day
from planisphere.matrix import Matrix3, obliquity


def _random_pairs(n: int = 20) -> list[tuple[float, float]]:
    rng = random.Random(2024)
    return [
        (julian_day(2024, 1, 1) + rng.uniform(0, 3650), rng.uniform(-math.pi / 2, math.pi / 2))
        for _ in range(n)
    ]


def _assert_identity(m: Matrix3) -> None:
    np.testing.assert_allclose(m.as_array(), np.eye(3), atol=1e-6)


@pytest.mark.parametrize(("lst", "lat"), _random_pairs())
def test_equ_hor_inverse_pair(lst: float, lat: float) -> None:
    forward = Matrix3.equ_to_hor(lst, lat)
    inverse = Matrix3.hor_to_equ(lst, lat)
    _assert_identity(forward @ inverse)
    _assert_identity(inverse @ forward)
    np.testing.assert_allclose(forward.transpose().as_array(), inverse.as_array(), atol=1e-12)


@pytest.mark.parametrize(("jd", "_lat"), _random_pairs())
def test_equ_ecl_inverse_pair(jd: float, _lat: float) -> None:
    forward = Matrix3.equ_to_ecl(jd)
    inverse = Matrix3.ecl_to_equ(jd)
    _assert_identity(forward @ inverse)
    np.testing.assert_allclose(forward.transpose().as_array(), inverse.as_array(), atol=1e-12)


def test_galactic_matrix_is_orthogonal() -> None:
    _assert_identity(Matrix3.equ_to_gal() @ Matrix3.gal_to_equ())
    assert np.linalg.det(Matrix3.equ_to_gal().as_array()) == pytest.approx(1.0, abs=1e-6)


def test_obliquity_at_epoch() -> None:
    assert math.degrees(obliquity(2451543.5)) == pytest.approx(23.4393)
    # drifts by about 0.013 degrees per century
    century = obliquity(2451543.5 + 36525)
    assert math.degrees(obliquity(2451543.5) - century) == pytest.approx(3.563e-7 * 36525)


def test_matrix_is_read_only() -> None:
    m = Matrix3.identity()
    with pytest.raises(ValueError):
        m.as_array()[0, 0] = 2.0


def test_matrix_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError, match="3x3"):
        Matrix3([[1.0, 0.0], [0.0, 1.0]])


def test_apply_many_matches_apply() -> None:
    from planisphere.vector import Vector3

    m = Matrix3.hor_to_equ(julian_day(2024, 6, 21, 12), math.radians(37.57))
    vectors = [Vector3.from_spherical(az, alt) for az, alt in [(0.1, 0.2), (2.0, -0.3), (4.0, 1.0)]]
    batch = m.apply_many(np.array([[v.x, v.y, v.z] for v in vectors]))
    for row, v in zip(batch, vectors):
        single = m.apply(v)
        np.testing.assert_allclose(row, [single.x, single.y, single.z], atol=1e-12)


def test_gal_to_hor_composes() -> None:
    lst, lat = julian_day(2024, 6, 21, 12), math.radians(37.57)
    expected = Matrix3.equ_to_hor(lst, lat).as_array() @ Matrix3.gal_to_equ().as_array()
    np.testing.assert_allclose(Matrix3.gal_to_hor(lst, lat).as_array(), expected)
