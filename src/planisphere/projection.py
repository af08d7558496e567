"""Equidistant azimuthal projection of equatorial coordinates onto the planisphere disc.

The projection pole is the north celestial pole, or the south celestial pole
for a southern disc. Radial distance is linear in angular distance from the
pole, so every declination circle is a concentric circle and the configured
declination limit lands exactly on the disc edge. The southern disc is the
mirror image of the northern one (``y`` flipped), which keeps right
ascension increasing in the same on-screen sense as seen from below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

import numpy as np

from planisphere.astromath import HPI, R2D, normalize
from planisphere.models import ScreenPoint

REFERENCE_ANGLE_DEG = 90.0  # Meridian direction on a y-down screen (bottom)
_EDGE_TOLERANCE = 1e-9  # px; points exactly on the limit stay on the disc


@dataclass(frozen=True)
class AzimuthalProjection:
    """Maps (right ascension, declination) to disc pixels.

    Args:
        screen_radius: Disc radius in pixels.
        declination_limit: Declination (radians) that lands on the disc edge.
            Negative for a northern disc that reaches past the equator.
        southern: Project around the south celestial pole instead.
    """

    screen_radius: float
    declination_limit: float
    southern: bool = False
    celestial_radius_scale: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        span = abs(HPI - self.sign * self.declination_limit)
        if span == 0.0:
            raise ValueError("declination limit coincides with the projection pole")
        object.__setattr__(self, "celestial_radius_scale", self.screen_radius / span)

    @property
    def sign(self) -> int:
        return -1 if self.southern else 1

    def with_radius(self, screen_radius: float) -> AzimuthalProjection:
        return replace(self, screen_radius=screen_radius)

    def with_limit(self, declination_limit: float) -> AzimuthalProjection:
        return replace(self, declination_limit=declination_limit)

    def radius_for(self, dec: float) -> float:
        """Distance from the disc centre for declination ``dec`` (radians)."""
        return (HPI - self.sign * dec) * self.celestial_radius_scale

    def project(self, ra: float, dec: float) -> ScreenPoint:
        """Project one position (radians). Points past the limit fall outside the disc."""
        r = self.radius_for(dec)
        return ScreenPoint(r * math.cos(ra), self.sign * r * math.sin(ra))

    def project_many(
        self, ra: np.ndarray, dec: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        """Vectorised :meth:`project` over radian arrays; returns ``(x, y)``."""
        ra = np.asarray(ra, dtype=float)
        r = (HPI - self.sign * np.asarray(dec, dtype=float)) * self.celestial_radius_scale
        return r * np.cos(ra), self.sign * r * np.sin(ra)

    def contains(self, point: ScreenPoint, margin: float = 0.0) -> bool:
        """True when ``point`` lies within ``screen_radius - margin`` of the centre."""
        return point.distance() <= self.screen_radius - margin + _EDGE_TOLERANCE

    def contains_many(self, xs: np.ndarray, ys: np.ndarray, margin: float = 0.0) -> np.ndarray:
        """Vectorised :meth:`contains` over coordinate arrays."""
        return np.hypot(xs, ys) <= self.screen_radius - margin + _EDGE_TOLERANCE

    def planar_angle(self, ra: float) -> float:
        """Planar angle (radians) at which right ascension ``ra`` is drawn."""
        return self.sign * ra

    def alignment_rotation_deg(self, lst_angle: float) -> float:
        """Disc rotation (degrees, [0, 360)) that brings RA = LST onto the meridian.

        Args:
            lst_angle: Local sidereal time as an angle (radians).
        """
        return normalize(
            REFERENCE_ANGLE_DEG - self.planar_angle(lst_angle) * R2D, 0, 360
        )
