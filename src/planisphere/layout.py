"""Layout computation — turns an observer, an instant and the catalog into disc geometry.

Everything is recomputed from scratch on each call: times, projection,
every catalog point, the date ring and the horizon cover. The result is a
:class:`PlanisphereLayout`, the only thing renderers consume.
"""

import logging
import math
from datetime import datetime

import numpy as np

from planisphere.astromath import D2R, H2R, HPI, PI, R2D, TPI, normalize
from planisphere.astrotime import (
    AstroTime,
    days_in_year,
    jd_time,
    julian_day,
    month_day_counts,
    month_mid_day,
    ut_to_gst,
)
from planisphere.catalog import load_constellation_lines, load_constellation_names, load_stars
from planisphere.config import PlanisphereSettings
from planisphere.i18n import CARDINAL_KEYS
from planisphere.matrix import Matrix3
from planisphere.models import (
    CardinalMark,
    ConstellationName,
    ConstellationSegment,
    DateTick,
    DecCircle,
    HourTick,
    MonthLabel,
    ObserverFrame,
    PlanisphereLayout,
    ProjectedLabel,
    ProjectedSegment,
    ProjectedStar,
    RaSpoke,
    ScreenPoint,
    StarRecord,
)
from planisphere.observer import declination_limit_for
from planisphere.projection import AzimuthalProjection
from planisphere.vector import Vector3

logger = logging.getLogger(__name__)

LABEL_MARGIN_PX = 30.0  # Constellation names stay this far inside the edge
CARDINAL_ALTITUDE = -4 * D2R  # Compass labels sit just below the horizon
HOUR_TICK_MINUTES = 5


def _star_display(magnitude: float) -> tuple[float, float]:
    """Map magnitude to (display radius px, opacity) buckets."""
    if magnitude < -1:
        return 7.0, 1.0
    if magnitude < 0:
        return 6.0, 1.0
    if magnitude < 1:
        return 5.0, 1.0
    if magnitude < 2:
        return 4.0, 1.0
    if magnitude < 3:
        return 3.0, 0.8
    if magnitude < 4:
        return 2.0, 0.8
    if magnitude < 5:
        return 1.0, 0.5
    return 0.5, 0.5


def _tick_kind(day: int) -> str:
    if day == 1:
        return "month"
    if day % 10 == 0:
        return "tenth"
    if day % 5 == 0:
        return "fifth"
    return "day"


def _text_angle_deg(point: ScreenPoint) -> float:
    """Rotation that makes text read outward along the radius."""
    return R2D * (point.angle() - HPI)


def civil_julian_day(when: datetime) -> float:
    """Local civil time of a naive datetime as a JulianMoment."""
    return julian_day(
        when.year,
        when.month,
        when.day,
        when.hour,
        when.minute,
        when.second + when.microsecond / 1e6,
    )


def project_stars(
    proj: AzimuthalProjection, stars: tuple[StarRecord, ...]
) -> tuple[ProjectedStar, ...]:
    """Project the catalog in one vectorised pass and drop stars off the disc."""
    if not stars:
        return ()
    ra = np.array([s.ra_hours for s in stars]) * H2R
    dec = np.array([s.dec_deg for s in stars]) * D2R
    xs, ys = proj.project_many(ra, dec)
    inside = proj.contains_many(xs, ys)
    projected: list[ProjectedStar] = []
    for star, x, y, keep in zip(stars, xs, ys, inside):
        if not keep:
            continue
        radius, opacity = _star_display(star.magnitude)
        projected.append(
            ProjectedStar(
                star=star, point=ScreenPoint(float(x), float(y)), radius=radius, opacity=opacity
            )
        )
    return tuple(projected)


def project_segments(
    proj: AzimuthalProjection, segments: tuple[ConstellationSegment, ...]
) -> tuple[ProjectedSegment, ...]:
    """Keep segments whose two ends are both on the disc."""
    result: list[ProjectedSegment] = []
    for seg in segments:
        start = proj.project(seg.ra1_hours * H2R, seg.dec1_deg * D2R)
        end = proj.project(seg.ra2_hours * H2R, seg.dec2_deg * D2R)
        if proj.contains(start) and proj.contains(end):
            result.append(ProjectedSegment(seg.constellation, start, end))
    return tuple(result)


def project_names(
    proj: AzimuthalProjection, names: tuple[ConstellationName, ...]
) -> tuple[ProjectedLabel, ...]:
    result: list[ProjectedLabel] = []
    for name in names:
        point = proj.project(name.ra_hours * H2R, name.dec_deg * D2R)
        if proj.contains(point, margin=LABEL_MARGIN_PX):
            result.append(ProjectedLabel(name.constellation, point, _text_angle_deg(point)))
    return tuple(result)


def grid_lines(
    proj: AzimuthalProjection, ra_interval_hours: int, dec_interval_deg: float
) -> tuple[tuple[RaSpoke, ...], tuple[DecCircle, ...]]:
    """Right-ascension spokes to the disc edge and declination circles that fit on it."""
    spokes = tuple(
        RaSpoke(hours=h, end=proj.project(h * H2R, proj.declination_limit))
        for h in range(0, 24, ra_interval_hours)
    )
    circles: list[DecCircle] = []
    steps = int(180.0 // dec_interval_deg) + 1
    for k in range(steps):
        dec_deg = -90.0 + k * dec_interval_deg
        if dec_deg >= 90.0:
            break
        radius = proj.radius_for(dec_deg * D2R)
        if 0 <= radius < proj.screen_radius:
            circles.append(DecCircle(dec_deg, radius, abs(dec_deg) < 1e-5))
    return spokes, tuple(circles)


def date_ring(
    astro: AstroTime,
    proj: AzimuthalProjection,
    year: int,
    settings: PlanisphereSettings,
) -> tuple[tuple[DateTick, ...], tuple[MonthLabel, ...]]:
    """Day ticks and month labels for ``year``.

    Each day sits where the sidereal time of its reference civil hour points,
    shifted half a day so ticks mark day boundaries rather than centres.
    """
    half_day = TPI / days_in_year(year) / 2

    def ring_angle(month: int, day: int) -> float:
        hour = astro.hour_for_date_ring(
            year, month, day, settings.date_ring_mode, settings.dst_hours
        )
        lst = astro.lct_to_lst(julian_day(year, month, day, hour, 0, 0))
        return proj.project(jd_time(lst) * H2R + half_day, proj.declination_limit).angle()

    ticks = tuple(
        DateTick(month, day, ring_angle(month, day), _tick_kind(day))
        for month, days in enumerate(month_day_counts(year), start=1)
        for day in range(1, days + 1)
    )
    labels = tuple(
        MonthLabel(month, ring_angle(month, month_mid_day(year, month) + 1))
        for month in range(1, 13)
    )
    return ticks, labels


def horizon_polyline(
    proj: AzimuthalProjection, hor_to_equ: Matrix3, step: float
) -> tuple[ScreenPoint, ...]:
    """Project the horizon, sampled every ``step`` radians of azimuth, as a closed ring."""
    az = np.append(np.arange(0.0, TPI, step), TPI)
    hor = np.column_stack([np.cos(az), np.sin(az), np.zeros_like(az)])
    equ = hor_to_equ.apply_many(hor)
    ra = np.mod(np.arctan2(equ[:, 1], equ[:, 0]), TPI)
    dec = np.arcsin(np.clip(equ[:, 2] / np.linalg.norm(equ, axis=1), -1.0, 1.0))
    xs, ys = proj.project_many(ra, dec)
    return tuple(ScreenPoint(float(x), float(y)) for x, y in zip(xs, ys))


def cardinal_marks(
    proj: AzimuthalProjection, hor_to_equ: Matrix3
) -> tuple[CardinalMark, ...]:
    """Compass labels just below the horizon, each turned to face the zenith."""
    zenith = Vector3.from_spherical(0.0, HPI).transformed(hor_to_equ)
    top = proj.project(zenith.lon(), zenith.lat())
    marks: list[CardinalMark] = []
    for i, key in enumerate(CARDINAL_KEYS):
        low = Vector3.from_spherical(i * 45 * D2R, CARDINAL_ALTITUDE).transformed(hor_to_equ)
        point = proj.project(low.lon(), low.lat())
        angle = R2D * (math.atan2(point.y - top.y, point.x - top.x) - HPI)
        marks.append(CardinalMark(key, point, angle))
    return tuple(marks)


def hour_ring(
    astro: AstroTime, proj: AzimuthalProjection, hor_to_equ: Matrix3
) -> tuple[HourTick, ...]:
    """Civil-hour ticks for the cover, every five minutes from 1:00 to 24:55.

    Ticks are anchored on the equator-side meridian point of the horizon:
    due south for a northern disc, due north for a southern one.
    """
    meridian_az = 0.0 if proj.southern else PI
    meridian = Vector3.from_spherical(meridian_az, 0.0).transformed(hor_to_equ)
    base = meridian.lon() + astro.culmination_offset()
    ticks: list[HourTick] = []
    for hour in range(1, 25):
        for minute in range(0, 60, HOUR_TICK_MINUTES):
            t = proj.sign * (base - (hour + minute / 60) * H2R) - PI
            ticks.append(HourTick(hour, minute, normalize(t, 0, TPI)))
    return tuple(ticks)


def compute_layout(
    frame: ObserverFrame,
    when: datetime,
    settings: PlanisphereSettings | None = None,
    *,
    stars: tuple[StarRecord, ...] | None = None,
    segments: tuple[ConstellationSegment, ...] | None = None,
    names: tuple[ConstellationName, ...] | None = None,
) -> PlanisphereLayout:
    """Compute the full disc geometry for one observer and civil instant.

    Args:
        frame: Observer location and UTC offset.
        when: Naive local civil datetime.
        settings: Disc settings; defaults when None.
        stars: Star list; the bundled catalog filtered by magnitude when None.
        segments: Constellation lines; bundled when None.
        names: Constellation name anchors; bundled when None.

    Returns:
        PlanisphereLayout ready for a renderer.
    """
    settings = settings or PlanisphereSettings()
    if stars is None:
        stars = load_stars(magnitude_limit=settings.magnitude_limit)
    if segments is None:
        segments = load_constellation_lines()
    if names is None:
        names = load_constellation_names()

    astro = AstroTime(frame)
    lct = civil_julian_day(when)
    ut = astro.lct_to_ut(lct)
    gst = ut_to_gst(ut)
    lst = astro.gst_to_lst(gst)

    if settings.declination_limit is None:
        limit = declination_limit_for(frame)
    else:
        limit = settings.declination_limit * D2R
    proj = AzimuthalProjection(settings.radius, limit, southern=frame.is_southern)
    rotation = proj.alignment_rotation_deg(jd_time(lst) * H2R)
    hor_to_equ = Matrix3.hor_to_equ(lst, frame.latitude)

    projected_stars = project_stars(proj, stars)
    spokes, circles = grid_lines(proj, settings.ra_interval_hours, settings.dec_interval_deg)
    ticks, month_labels = date_ring(astro, proj, when.year, settings)

    logger.debug(
        "Layout %s lat=%.2f lon=%.2f: lst=%.4fh rotation=%.2f° limit=%.1f° stars=%d/%d",
        when.isoformat(),
        frame.latitude_deg,
        frame.longitude_deg,
        jd_time(lst),
        rotation,
        limit * R2D,
        len(projected_stars),
        len(stars),
    )

    return PlanisphereLayout(
        frame=frame,
        when=when,
        year=when.year,
        lct=lct,
        ut=ut,
        gst=gst,
        lst=lst,
        screen_radius=proj.screen_radius,
        declination_limit=limit,
        southern=proj.southern,
        rotation_deg=rotation,
        stars=projected_stars,
        segments=project_segments(proj, segments),
        constellation_labels=project_names(proj, names),
        ra_spokes=spokes,
        dec_circles=circles,
        date_ticks=ticks,
        month_labels=month_labels,
        horizon=horizon_polyline(proj, hor_to_equ, settings.horizon_step_rad),
        cardinal_marks=cardinal_marks(proj, hor_to_equ),
        hour_ticks=hour_ring(astro, proj, hor_to_equ),
    )
