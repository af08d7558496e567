"""Data model definitions — explicit boundaries between observer input, core math, and renderers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from planisphere.astromath import D2R, R2D, R2H

MIN_ABS_LATITUDE_DEG = 10.0  # the disc degenerates numerically near the equator
_DEG_SLACK = 1e-9


class InvalidObserverError(ValueError):
    """Observer parameters rejected at construction."""


@dataclass(frozen=True)
class ObserverFrame:
    """Observer location and clock. Angles in radians.

    Built once per location change and passed explicitly to every
    location-dependent computation.
    """

    utc_offset_hours: float  # Civil time minus UT (hours, +9 for KST)
    longitude: float  # East-positive longitude (radians)
    latitude: float  # North-positive latitude (radians)

    def __post_init__(self) -> None:
        lat_deg = self.latitude * R2D
        # degree round-trips are allowed a hair of slack at both limits
        if not abs(lat_deg) <= 90.0 + _DEG_SLACK:
            raise InvalidObserverError(
                f"latitude must be within [-90, 90] degrees, got {lat_deg:.4f}"
            )
        if abs(lat_deg) < MIN_ABS_LATITUDE_DEG - _DEG_SLACK:
            raise InvalidObserverError(
                f"|latitude| must be at least {MIN_ABS_LATITUDE_DEG} degrees, got {lat_deg:.4f}"
            )

    @classmethod
    def from_degrees(
        cls, utc_offset_hours: float, longitude_deg: float, latitude_deg: float
    ) -> ObserverFrame:
        """Build a frame from degree inputs, wrapping longitude into [-180, 180).

        Raises:
            InvalidObserverError: If the latitude is out of range or too close
                to the equator.
        """
        lon = ((longitude_deg + 180.0) % 360.0 + 360.0) % 360.0 - 180.0
        return cls(
            utc_offset_hours=float(utc_offset_hours),
            longitude=lon * D2R,
            latitude=latitude_deg * D2R,
        )

    @property
    def longitude_deg(self) -> float:
        return self.longitude * R2D

    @property
    def latitude_deg(self) -> float:
        return self.latitude * R2D

    @property
    def longitude_hours(self) -> float:
        return self.longitude * R2H

    @property
    def is_southern(self) -> bool:
        return self.latitude < 0


@dataclass(frozen=True)
class ScreenPoint:
    """Planar pixel offset from the disc centre."""

    x: float
    y: float

    def distance(self) -> float:
        return math.hypot(self.x, self.y)

    def angle(self) -> float:
        """Planar angle in radians, atan2(y, x)."""
        return math.atan2(self.y, self.x)


@dataclass(frozen=True)
class StarRecord:
    """A catalog star, in catalog units."""

    name: str
    ra_hours: float  # Right ascension (hours)
    dec_deg: float  # Declination (degrees)
    magnitude: float  # Apparent magnitude
    spectral: str  # Spectral class letter ("O".."M"), "" when unknown


@dataclass(frozen=True)
class ConstellationSegment:
    """One constellation line between two sky positions."""

    constellation: str  # IAU abbreviation ("Ori", "UMa", etc.)
    ra1_hours: float
    dec1_deg: float
    ra2_hours: float
    dec2_deg: float


@dataclass(frozen=True)
class ConstellationName:
    """Label anchor for a constellation name."""

    constellation: str
    ra_hours: float
    dec_deg: float


@dataclass(frozen=True)
class ProjectedStar:
    """A star placed on the disc, with its display bucket."""

    star: StarRecord
    point: ScreenPoint
    radius: float  # Display radius (px)
    opacity: float


@dataclass(frozen=True)
class ProjectedSegment:
    constellation: str
    start: ScreenPoint
    end: ScreenPoint


@dataclass(frozen=True)
class ProjectedLabel:
    text: str
    point: ScreenPoint
    angle_deg: float  # Text rotation (degrees)


@dataclass(frozen=True)
class DateTick:
    """A day boundary on the date ring."""

    month: int
    day: int
    angle: float  # Planar angle on the disc (radians)
    kind: str  # "month" | "tenth" | "fifth" | "day"


@dataclass(frozen=True)
class MonthLabel:
    month: int
    angle: float  # Planar angle on the disc (radians)


@dataclass(frozen=True)
class HourTick:
    """A tick on the hour ring printed on the horizon cover."""

    hour: int
    minute: int
    angle: float  # Planar angle on the cover (radians)


@dataclass(frozen=True)
class CardinalMark:
    """A compass point label placed just below the horizon."""

    key: str  # i18n key ("dir_n", "dir_ne", ...)
    point: ScreenPoint
    angle_deg: float  # Text rotation so the label faces the zenith


@dataclass(frozen=True)
class RaSpoke:
    hours: int
    end: ScreenPoint  # Spoke from the centre to the disc edge


@dataclass(frozen=True)
class DecCircle:
    dec_deg: float
    radius: float  # Circle radius (px)
    is_equator: bool


@dataclass(frozen=True)
class PlanisphereLayout:
    """The sole input to renderers. Fully computed state for one redraw."""

    frame: ObserverFrame
    when: datetime  # Local civil datetime the layout was computed for
    year: int
    lct: float  # Local civil time (JulianMoment)
    ut: float  # Universal time (JulianMoment)
    gst: float  # Greenwich sidereal time (JulianMoment)
    lst: float  # Local sidereal time (JulianMoment)
    screen_radius: float
    declination_limit: float  # Disc-edge declination (radians)
    southern: bool
    rotation_deg: float  # Whole-disc rotation aligning LST with the meridian
    stars: tuple[ProjectedStar, ...]
    segments: tuple[ProjectedSegment, ...]
    constellation_labels: tuple[ProjectedLabel, ...]
    ra_spokes: tuple[RaSpoke, ...]
    dec_circles: tuple[DecCircle, ...]
    date_ticks: tuple[DateTick, ...]
    month_labels: tuple[MonthLabel, ...]
    horizon: tuple[ScreenPoint, ...]  # Closed horizon polyline
    cardinal_marks: tuple[CardinalMark, ...]
    hour_ticks: tuple[HourTick, ...]
