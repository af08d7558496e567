"""3×3 rotation matrices between equatorial, horizontal, ecliptic and galactic frames.

A matrix is built once per parameter set (sidereal time, latitude, epoch)
and then applied to many points, so the trigonometry is paid once per redraw
rather than once per star. Vectors are columns: ``result = M · v``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from planisphere.astromath import D2R, H2R
from planisphere.astrotime import JulianMoment, jd_time

if TYPE_CHECKING:
    from planisphere.vector import Vector3

# Equatorial → galactic for the B1950 galactic pole (RA 192.25°, Dec +27.4°).
_EQU_TO_GAL = np.array(
    [
        [-0.0669887, -0.8727558, -0.4835389],
        [0.4927285, -0.4503470, 0.7445846],
        [-0.8676008, -0.1883746, 0.4601998],
    ]
)


def obliquity(jd: JulianMoment) -> float:
    """Obliquity of the ecliptic in radians, linear in days from 1999-12-31 0h."""
    d = jd - 2451543.5
    return (23.4393 - 3.563e-7 * d) * D2R


def _sidereal_angle(lst: JulianMoment) -> float:
    return jd_time(lst) * H2R


class Matrix3:
    """Immutable 3×3 matrix.

    Args:
        values: Any 3×3 array-like; copied.
    """

    __slots__ = ("_m",)

    def __init__(self, values: npt.ArrayLike) -> None:
        m = np.array(values, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"expected a 3x3 matrix, got shape {m.shape}")
        m.setflags(write=False)
        self._m = m

    def __repr__(self) -> str:
        return f"Matrix3({self._m.tolist()!r})"

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._m[index])

    def __matmul__(self, other: Matrix3) -> Matrix3:
        return Matrix3(self._m @ other._m)

    def as_array(self) -> np.ndarray:
        return self._m

    def transpose(self) -> Matrix3:
        return Matrix3(self._m.T)

    def apply(self, vector: Vector3) -> Vector3:
        """Rotate one vector."""
        from planisphere.vector import Vector3

        x, y, z = self._m @ (vector.x, vector.y, vector.z)
        return Vector3(float(x), float(y), float(z))

    def apply_many(self, xyz: np.ndarray) -> np.ndarray:
        """Rotate an ``(N, 3)`` array of row vectors, returning ``(N, 3)``."""
        return np.asarray(xyz, dtype=float) @ self._m.T

    # --- builders ---

    @classmethod
    def identity(cls) -> Matrix3:
        return cls(np.eye(3))

    @classmethod
    def equ_to_hor(cls, lst: JulianMoment, lat: float) -> Matrix3:
        """Equatorial → horizontal (azimuth from north through east).

        Args:
            lst: Local sidereal time as a JulianMoment.
            lat: Observer latitude (radians).
        """
        theta = _sidereal_angle(lst)
        cos_lst, sin_lst = math.cos(theta), math.sin(theta)
        cos_lat, sin_lat = math.cos(lat), math.sin(lat)
        return cls(
            [
                [-sin_lat * cos_lst, -sin_lat * sin_lst, cos_lat],
                [-sin_lst, cos_lst, 0.0],
                [cos_lat * cos_lst, cos_lat * sin_lst, sin_lat],
            ]
        )

    @classmethod
    def hor_to_equ(cls, lst: JulianMoment, lat: float) -> Matrix3:
        """Horizontal → equatorial; the transpose of :meth:`equ_to_hor`."""
        theta = _sidereal_angle(lst)
        cos_lst, sin_lst = math.cos(theta), math.sin(theta)
        cos_lat, sin_lat = math.cos(lat), math.sin(lat)
        return cls(
            [
                [-cos_lst * sin_lat, -sin_lst, cos_lst * cos_lat],
                [-sin_lst * sin_lat, cos_lst, sin_lst * cos_lat],
                [cos_lat, 0.0, sin_lat],
            ]
        )

    @classmethod
    def equ_to_ecl(cls, jd: JulianMoment) -> Matrix3:
        e = obliquity(jd)
        cos_e, sin_e = math.cos(e), math.sin(e)
        return cls([[1.0, 0.0, 0.0], [0.0, cos_e, sin_e], [0.0, -sin_e, cos_e]])

    @classmethod
    def ecl_to_equ(cls, jd: JulianMoment) -> Matrix3:
        e = obliquity(jd)
        cos_e, sin_e = math.cos(e), math.sin(e)
        return cls([[1.0, 0.0, 0.0], [0.0, cos_e, -sin_e], [0.0, sin_e, cos_e]])

    @classmethod
    def equ_to_gal(cls) -> Matrix3:
        return cls(_EQU_TO_GAL)

    @classmethod
    def gal_to_equ(cls) -> Matrix3:
        return cls(_EQU_TO_GAL.T)

    @classmethod
    def gal_to_hor(cls, lst: JulianMoment, lat: float) -> Matrix3:
        return cls.equ_to_hor(lst, lat) @ cls.gal_to_equ()

    @classmethod
    def ecl_to_hor(
        cls, lst: JulianMoment, lat: float, jd: JulianMoment | None = None
    ) -> Matrix3:
        """Ecliptic → horizontal.

        The obliquity epoch defaults to ``lst`` itself, which is within a day
        of the true instant; the obliquity drifts ~3.6e-7° per day.
        """
        return cls.equ_to_hor(lst, lat) @ cls.ecl_to_equ(lst if jd is None else jd)
