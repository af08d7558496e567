"""Observer construction — timezone lookup and disc-edge selection from a geographic position."""

import logging
from datetime import datetime
from functools import lru_cache

from pytz import timezone, utc
from timezonefinder import TimezoneFinder

from planisphere.astromath import D2R
from planisphere.models import ObserverFrame

logger = logging.getLogger(__name__)

DEFAULT_LIMIT_MARGIN_DEG = 5.0


class TimezoneLookupError(Exception):
    """No IANA timezone could be found for a position."""


@lru_cache(maxsize=1)
def _finder() -> TimezoneFinder:
    return TimezoneFinder()


def resolve_utc_offset(lat: float, lng: float, local_dt: datetime) -> tuple[float, str]:
    """Find the UTC offset in force at a place and local wall-clock time.

    Args:
        lat: Latitude (decimal degrees).
        lng: Longitude (decimal degrees).
        local_dt: Naive local civil datetime.

    Returns:
        ``(offset_hours, tz_name)``. The offset includes daylight saving time
        when it applies at ``local_dt``.

    Raises:
        TimezoneLookupError: When the position has no timezone (open ocean).
    """
    tz_str = _finder().timezone_at(lat=lat, lng=lng)
    if tz_str is None:
        raise TimezoneLookupError(f"Timezone not found: lat={lat}, lng={lng}")
    local_tz = timezone(tz_str)
    # ambiguous or skipped wall-clock times resolve to standard time
    aware = local_tz.localize(local_dt, is_dst=False)
    offset = aware.utcoffset()
    assert offset is not None
    offset_hours = offset.total_seconds() / 3600.0
    logger.debug(
        "Resolved %s at %s -> UTC%+.2f (%s)",
        (lat, lng),
        local_dt.isoformat(),
        offset_hours,
        aware.astimezone(utc).isoformat(),
    )
    return offset_hours, tz_str


def observer_at(lat: float, lng: float, local_dt: datetime) -> tuple[ObserverFrame, str]:
    """Build an ObserverFrame whose UTC offset is looked up from the position.

    Returns:
        ``(frame, tz_name)``.

    Raises:
        TimezoneLookupError: When no timezone covers the position.
        InvalidObserverError: When the latitude is unusable for a planisphere.
    """
    offset_hours, tz_name = resolve_utc_offset(lat, lng, local_dt)
    return ObserverFrame.from_degrees(offset_hours, lng, lat), tz_name


def declination_limit_for(
    frame: ObserverFrame, margin_deg: float = DEFAULT_LIMIT_MARGIN_DEG
) -> float:
    """Declination (radians) of the disc edge for an observer.

    The edge sits ``margin_deg`` beyond the declination that just grazes the
    horizon on the equator-ward side, so the whole visible sky fits on the
    disc. Northern discs get a negative limit, southern discs a positive one.
    """
    reach = 90.0 - abs(frame.latitude_deg) + margin_deg
    limit_deg = reach if frame.is_southern else -reach
    return limit_deg * D2R
