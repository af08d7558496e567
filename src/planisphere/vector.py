"""Points on the celestial sphere and single-shot frame transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass

from planisphere.astromath import TPI
from planisphere.astrotime import JulianMoment
from planisphere.matrix import Matrix3


@dataclass(frozen=True)
class Vector3:
    """A 3D point, normally on the unit sphere.

    Spherical accessors treat the vector as (longitude, latitude). At the
    poles ``lon()`` is 0 (atan2(0, 0)); for the zero vector ``lat()`` is NaN.
    Transforms return new vectors and never touch the receiver.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_spherical(cls, lon: float, lat: float) -> Vector3:
        """Unit vector at longitude ``lon`` and latitude ``lat`` (radians)."""
        cos_lat = math.cos(lat)
        return cls(cos_lat * math.cos(lon), cos_lat * math.sin(lon), math.sin(lat))

    def lon(self) -> float:
        """Longitude in [0, 2π)."""
        r = math.atan2(self.y, self.x)
        if r < 0:
            r += TPI
        return 0.0 if r >= TPI else r

    def lat(self) -> float:
        """Latitude in [-π/2, π/2]; works for vectors of any nonzero length."""
        r = self.length()
        if r == 0.0:
            return math.nan
        return math.asin(max(-1.0, min(1.0, self.z / r)))

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        """Unit vector in the same direction; all NaN for the zero vector."""
        r = self.length()
        if r == 0.0:
            return Vector3(math.nan, math.nan, math.nan)
        return Vector3(self.x / r, self.y / r, self.z / r)

    def transformed(self, matrix: Matrix3) -> Vector3:
        return matrix.apply(self)

    # --- frame transforms ---

    def equ_to_hor(self, lst: JulianMoment, lat: float) -> Vector3:
        return Matrix3.equ_to_hor(lst, lat).apply(self)

    def hor_to_equ(self, lst: JulianMoment, lat: float) -> Vector3:
        return Matrix3.hor_to_equ(lst, lat).apply(self)

    def equ_to_ecl(self, jd: JulianMoment) -> Vector3:
        return Matrix3.equ_to_ecl(jd).apply(self)

    def ecl_to_equ(self, jd: JulianMoment) -> Vector3:
        return Matrix3.ecl_to_equ(jd).apply(self)

    def equ_to_gal(self) -> Vector3:
        return Matrix3.equ_to_gal().apply(self)

    def gal_to_equ(self) -> Vector3:
        return Matrix3.gal_to_equ().apply(self)

    def ecl_to_hor(self, lst: JulianMoment, lat: float) -> Vector3:
        """Ecliptic → horizontal, using ``lst`` as the obliquity epoch."""
        return self.ecl_to_equ(lst).equ_to_hor(lst, lat)
