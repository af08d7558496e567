"""Matplotlib static PNG renderer."""

import logging
import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure
from matplotlib.patches import Circle, PathPatch
from matplotlib.path import Path as MplPath

from planisphere.i18n import month_label, t
from planisphere.models import PlanisphereLayout
from planisphere.renderers.theme import get_theme

logger = logging.getLogger(__name__)

RESULTS_DIR = Path("results")

_RING_WIDTH = 42.5
_TICK_LENGTH = {"month": 15.0, "tenth": 6.0, "fifth": 5.0, "day": 2.0}


def _rotation(layout: PlanisphereLayout) -> np.ndarray:
    a = math.radians(layout.rotation_deg)
    return np.array([[math.cos(a), -math.sin(a)], [math.sin(a), math.cos(a)]])


def _rotate(points: np.ndarray, rot: np.ndarray) -> np.ndarray:
    """Rotate an (N, 2) array of screen points by the disc rotation."""
    return points @ rot.T


def _ring_path(radius: float, n: int = 360) -> np.ndarray:
    a = np.linspace(0.0, 2 * np.pi, n, endpoint=False)
    return np.column_stack([radius * np.cos(a), radius * np.sin(a)])


def _signed_area(points: np.ndarray) -> float:
    x, y = points[:, 0], points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def _cover_path(outer: np.ndarray, window: np.ndarray) -> MplPath:
    """Disc with the horizon window cut out; the window runs against the outer ring."""
    if np.sign(_signed_area(outer)) == np.sign(_signed_area(window)):
        window = window[::-1]
    verts = np.concatenate([outer, outer[:1], window, window[:1]])
    codes = (
        [MplPath.MOVETO]
        + [MplPath.LINETO] * (len(outer) - 1)
        + [MplPath.CLOSEPOLY]
        + [MplPath.MOVETO]
        + [MplPath.LINETO] * (len(window) - 1)
        + [MplPath.CLOSEPOLY]
    )
    return MplPath(verts, codes)


def render_static_chart(
    layout: PlanisphereLayout, theme: str = "default", lang: str = "en", chart_size: int = 10
) -> Figure:
    """Render a PlanisphereLayout as a static matplotlib image.

    Args:
        layout: Fully computed disc geometry.
        theme: Theme name.
        lang: Label language ('ko' or 'en').
        chart_size: Output image size in inches.

    Returns:
        matplotlib Figure object.

    Raises:
        ValueError: If the theme is unknown.
    """
    th = get_theme(theme)
    rot = _rotation(layout)
    r = layout.screen_radius
    extent = r + _RING_WIDTH + 20

    fig, ax = plt.subplots(figsize=(chart_size, chart_size))
    fig.patch.set_facecolor(th.background[0])
    ax.set_facecolor(th.background[0])

    ax.add_patch(Circle((0, 0), r + _RING_WIDTH, color=th.date_ring_bg, zorder=0))
    ax.add_patch(Circle((0, 0), r, color=th.sky, zorder=0))

    # date ring
    angles = np.array([tick.angle for tick in layout.date_ticks])
    lengths = np.array([_TICK_LENGTH[tick.kind] for tick in layout.date_ticks])
    inner = np.column_stack([np.cos(angles), np.sin(angles)]) * (r + 2)
    outer = np.column_stack([np.cos(angles), np.sin(angles)]) * (r + 2 + lengths)[:, None]
    ticks = np.stack([_rotate(inner, rot), _rotate(outer, rot)], axis=1)
    ax.add_collection(LineCollection(ticks, colors=th.date_text, linewidths=0.6, zorder=1))
    for label in layout.month_labels:
        x, y = _rotate(np.array([[math.cos(label.angle), math.sin(label.angle)]]) * (r + 30), rot)[0]
        ax.text(
            x,
            y,
            month_label(label.month, lang),
            color=th.date_text,
            fontsize=8,
            ha="center",
            va="center",
            rotation=-math.degrees(math.atan2(y, x) - math.pi / 2),
        )

    # grid
    for circle in layout.dec_circles:
        color = th.equator_line if circle.is_equator else th.dec_line
        ax.add_patch(
            Circle((0, 0), circle.radius, fill=False, edgecolor=color, linewidth=0.5, zorder=1)
        )
    if layout.ra_spokes:
        ends = _rotate(np.array([[s.end.x, s.end.y] for s in layout.ra_spokes]), rot)
        spokes = np.stack([np.zeros_like(ends), ends], axis=1)
        ax.add_collection(LineCollection(spokes, colors=th.ra_line, linewidths=0.5, zorder=1))

    # constellations and stars
    if layout.segments:
        starts = _rotate(np.array([[s.start.x, s.start.y] for s in layout.segments]), rot)
        ends = _rotate(np.array([[s.end.x, s.end.y] for s in layout.segments]), rot)
        ax.add_collection(
            LineCollection(
                np.stack([starts, ends], axis=1),
                colors=th.con_line,
                linewidths=0.6,
                alpha=th.con_line_opacity,
                zorder=2,
            )
        )
    if layout.stars:
        xy = _rotate(np.array([[s.point.x, s.point.y] for s in layout.stars]), rot)
        sizes = np.array([(2 * s.radius) ** 2 for s in layout.stars])
        colors = [th.star_color(s.star.spectral) for s in layout.stars]
        alphas = np.array([s.opacity for s in layout.stars])
        ax.scatter(xy[:, 0], xy[:, 1], s=sizes, c=colors, alpha=alphas, linewidths=0, zorder=3)
    for label in layout.constellation_labels:
        x, y = _rotate(np.array([[label.point.x, label.point.y]]), rot)[0]
        ax.text(x, y, label.text, color=th.con_name, fontsize=7, ha="center", va="center", zorder=3)

    # horizon cover
    if layout.horizon:
        window = _rotate(np.array([[p.x, p.y] for p in layout.horizon]), rot)
        ax.add_patch(
            PathPatch(
                _cover_path(_ring_path(r), window),
                facecolor=th.cover_bg,
                edgecolor=th.cover_stroke,
                alpha=0.9,
                zorder=4,
            )
        )
    for mark in layout.cardinal_marks:
        x, y = _rotate(np.array([[mark.point.x, mark.point.y]]), rot)[0]
        ax.text(
            x, y, t(mark.key, lang), color=th.cardinal, fontsize=9, ha="center", va="center", zorder=5
        )

    ax.text(
        0,
        extent - 5,
        layout.when.strftime("%Y-%m-%d %H:%M"),
        color=th.legend,
        fontsize=9,
        ha="center",
        va="bottom",
    )

    ax.set_xlim(-extent, extent)
    ax.set_ylim(-extent, extent)
    ax.set_aspect("equal")
    # screen coordinates grow downward
    ax.invert_yaxis()
    ax.axis("off")

    return fig


def save_static_chart(
    layout: PlanisphereLayout,
    output_path: Path | None = None,
    theme: str = "default",
    lang: str = "en",
) -> Path:
    """Save a PlanisphereLayout as a PNG file.

    Args:
        layout: Fully computed disc geometry.
        output_path: Destination path. Auto-generated under results/ if None.
        theme: Theme name.
        lang: Label language.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        frame = layout.frame
        when_str = layout.when.strftime("%Y_%m_%d_%H_%M")
        filename = f"planisphere_{frame.latitude_deg:.2f}_{frame.longitude_deg:.2f}__{when_str}.png"
        output_path = RESULTS_DIR / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(layout, theme=theme, lang=lang)
    fig.savefig(output_path, facecolor=fig.get_facecolor())
    plt.close(fig)
    logger.debug("Saved static chart to %s", output_path)
    return output_path
