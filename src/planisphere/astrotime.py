"""Time systems — calendar helpers, Julian Day arithmetic, and civil/universal/sidereal conversions.

Every instant is a ``JulianMoment``: a Julian Day number whose integer part
turns over at 12:00 (astronomical convention). The *time system* a value is
expressed in (LCT, UT, GST or LST) is not carried by the float itself, so
function and variable names always say which one they hold.

Conversions between UT and GST are approximate by construction: the forward
direction uses the sidereal rate 1.00273790935 and the inverse the solar
rate 0.9972695663. The pair round-trips to well under a second except during
the last ~3m56s of a UT day, where the inverse lands on the previous sidereal
date. Disc alignment only needs arc-minute accuracy, so this is kept.
"""

from __future__ import annotations

import math
from enum import Enum

from planisphere.astromath import H2R, J2000, R2H, TPI, normalize
from planisphere.models import ObserverFrame

JulianMoment = float

SIDEREAL_RATE = 1.00273790935
SOLAR_RATE = 0.9972695663


class DateRingMode(str, Enum):
    """Which civil hour of each day the date ring is aligned to."""

    MIDNIGHT = "MIDNIGHT"
    LOCAL_NOON = "LOCAL_NOON"
    LASN = "LASN"  # Local apparent solar noon
    LAMN = "LAMN"  # Local apparent midnight
    LOCAL_21H = "LOCAL_21H"
    UNRECOGNIZED = "UNRECOGNIZED"  # Unknown tag; behaves like MIDNIGHT

    @classmethod
    def coerce(cls, value: DateRingMode | str) -> DateRingMode:
        """Map a tag to a mode, sending unknown tags to ``UNRECOGNIZED``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.UNRECOGNIZED


# --- Calendar helpers ---


def is_leap_year(year: int) -> bool:
    """Gregorian leap-year rule."""
    return year % 400 == 0 or (year % 4 == 0 and year % 100 != 0)


def month_day_counts(year: int) -> list[int]:
    """Days in each month of ``year``, January first."""
    return [31, 29 if is_leap_year(year) else 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def month_mid_day(year: int, month: int) -> int:
    """Middle day of a month: ceil(days / 2)."""
    return math.ceil(month_day_counts(year)[month - 1] / 2)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def day_of_year(year: int, month: int, day: int) -> int:
    """1-based ordinal day. Out-of-range days roll forward arithmetically."""
    return sum(month_day_counts(year)[: month - 1]) + day


# --- Julian Day ---


def julian_day(
    year: int, month: int, day: int, hour: float = 0, minute: float = 0, second: float = 0
) -> JulianMoment:
    """Gregorian calendar date and time to Julian Day.

    Calendar fields are not validated; ``day=32`` yields whatever the
    arithmetic gives (the first of the next month for 31-day months).

    Args:
        year: Calendar year (astronomical numbering).
        month: 1-12.
        day: Day of month.
        hour: Hour of day.
        minute: Minute.
        second: Second, may be fractional.

    Returns:
        Julian Day in the same time system as the inputs.
    """
    if month < 3:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = math.floor(a / 4)
    return (
        math.floor(365.25 * year)
        + 2
        - a
        + b
        + math.floor(30.6 * month - 0.4)
        + day
        + 1721025.5
        + hour / 24.0
        + minute / 1440.0
        + second / 86400.0
    )


def jd_date(jd: JulianMoment) -> JulianMoment:
    """Most recent 0h boundary at or before ``jd`` (fraction is always .5)."""
    return math.floor(jd - 0.5) + 0.5


def jd_time(jd: JulianMoment) -> float:
    """Hours elapsed since ``jd_date(jd)``, in [0, 24): the time of day."""
    return (jd - jd_date(jd)) * 24.0


# --- Sun ---


def equation_of_time_minutes(year: int, month: int, day: int) -> float:
    """Apparent minus mean solar time, in minutes.

    Two-harmonic approximation good to a couple of minutes; enough to place
    the date ring, not for timekeeping.
    """
    n = day_of_year(year, month, day)
    b = TPI * (n - 81) / 365.0
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


# --- UT <-> GST ---


def _sidereal_time_at_0h(ut_date: JulianMoment) -> float:
    """Greenwich sidereal time (hours) at 0h UT of the date containing ``ut_date``."""
    t = (ut_date - J2000) / 36525.0
    return normalize(6.697374558 + 2400.051336 * t + 0.000025862 * t * t, 0, 24)


def ut_to_gst(ut: JulianMoment) -> JulianMoment:
    """Universal time to Greenwich sidereal time."""
    ut_date = jd_date(ut)
    ut_time = (ut - ut_date) * 24.0
    t0 = _sidereal_time_at_0h(ut_date)
    gst_time = normalize(ut_time * SIDEREAL_RATE + t0, 0, 24)
    return ut_date + gst_time / 24.0


def gst_to_ut(gst: JulianMoment) -> JulianMoment:
    """Greenwich sidereal time to universal time.

    Many-to-one near day boundaries: a sidereal date can map onto two UT
    instants, and this returns the one on the same date part.
    """
    gst_date = jd_date(gst)
    gst_time = (gst - gst_date) * 24.0
    t0 = _sidereal_time_at_0h(gst_date)
    ut_time = normalize(gst_time - t0, 0, 24)
    return gst_date + ut_time * SOLAR_RATE / 24.0


class AstroTime:
    """Time conversions bound to one observer.

    Args:
        frame: Observer offset, longitude and latitude.
    """

    def __init__(self, frame: ObserverFrame) -> None:
        self.frame = frame

    @property
    def utc_offset_hours(self) -> float:
        return self.frame.utc_offset_hours

    # civil <-> universal

    def ut_to_lct(self, ut: JulianMoment) -> JulianMoment:
        return ut + self.frame.utc_offset_hours / 24.0

    def lct_to_ut(self, lct: JulianMoment) -> JulianMoment:
        return lct - self.frame.utc_offset_hours / 24.0

    # Greenwich <-> local sidereal

    def gst_to_lst(self, gst: JulianMoment) -> JulianMoment:
        return gst + self.frame.longitude * R2H / 24.0

    def lst_to_gst(self, lst: JulianMoment) -> JulianMoment:
        return lst - self.frame.longitude / TPI

    # composites

    def lct_to_gst(self, lct: JulianMoment) -> JulianMoment:
        return ut_to_gst(self.lct_to_ut(lct))

    def ut_to_lst(self, ut: JulianMoment) -> JulianMoment:
        return self.gst_to_lst(ut_to_gst(ut))

    def lct_to_lst(self, lct: JulianMoment) -> JulianMoment:
        return self.ut_to_lst(self.lct_to_ut(lct))

    def gst_to_lct(self, gst: JulianMoment) -> JulianMoment:
        return self.ut_to_lct(gst_to_ut(gst))

    def lst_to_ut(self, lst: JulianMoment) -> JulianMoment:
        return gst_to_ut(self.lst_to_gst(lst))

    def lst_to_lct(self, lst: JulianMoment) -> JulianMoment:
        return self.gst_to_lct(self.lst_to_gst(lst))

    # solar reference hours

    def local_apparent_solar_noon(
        self, year: int, month: int, day: int, dst_hours: float = 0
    ) -> float:
        """Civil hour of true solar noon, in [0, 24).

        The zone meridian minus the observer longitude shifts mean noon; the
        equation of time then moves it to apparent noon.
        """
        mean_noon_offset = self.frame.utc_offset_hours - self.frame.longitude_hours
        eot_hours = equation_of_time_minutes(year, month, day) / 60.0
        return normalize(12 + mean_noon_offset - eot_hours + dst_hours, 0, 24)

    def local_apparent_midnight(
        self, year: int, month: int, day: int, dst_hours: float = 0
    ) -> float:
        """Civil hour of true solar midnight: apparent noon minus 12 h."""
        return normalize(
            self.local_apparent_solar_noon(year, month, day, dst_hours) - 12, 0, 24
        )

    def hour_for_date_ring(
        self,
        year: int,
        month: int,
        day: int,
        mode: DateRingMode | str = DateRingMode.LASN,
        dst_hours: float = 0,
    ) -> float:
        """Civil hour at which a day's tick is placed on the date ring.

        Unknown modes behave like ``MIDNIGHT``.
        """
        mode = DateRingMode.coerce(mode)
        if mode is DateRingMode.LOCAL_NOON:
            return normalize(12 + dst_hours, 0, 24)
        if mode is DateRingMode.LASN:
            return self.local_apparent_solar_noon(year, month, day, dst_hours)
        if mode is DateRingMode.LAMN:
            return self.local_apparent_midnight(year, month, day, dst_hours)
        if mode is DateRingMode.LOCAL_21H:
            return normalize(21 + dst_hours, 0, 24)
        # MIDNIGHT and UNRECOGNIZED
        return normalize(0 + dst_hours, 0, 24)

    def culmination_offset(self) -> float:
        """Zone meridian minus observer longitude, in radians."""
        return self.frame.utc_offset_hours * H2R - self.frame.longitude

    def hour_angle_for_altitude(self, altitude: float, declination: float) -> float:
        """Hour angle (radians) at which a body of ``declination`` sits at ``altitude``.

        Returns NaN when the body never reaches that altitude from this latitude.
        """
        lat = self.frame.latitude
        cos_h = (math.sin(altitude) - math.sin(lat) * math.sin(declination)) / (
            math.cos(lat) * math.cos(declination)
        )
        if not -1.0 <= cos_h <= 1.0:
            return math.nan
        return math.acos(cos_h)
