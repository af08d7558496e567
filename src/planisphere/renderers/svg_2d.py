"""SVG planisphere renderer.

Produces an ``<svg>`` fragment, or a self-contained HTML page around it,
from a PlanisphereLayout. Layout coordinates are pixels from the disc centre
with y pointing down, so they go into SVG unchanged.

Two groups share the same rotation so the current sidereal time sits on the
meridian:
  sky    date ring, grid, constellations and stars
  cover  horizon mask, hour ring and compass points
The legend is drawn unrotated on top.
"""

from __future__ import annotations

import math
from html import escape

from planisphere.astromath import HPI, R2D
from planisphere.i18n import hour_label, month_label, t
from planisphere.models import PlanisphereLayout
from planisphere.renderers.theme import Theme, get_theme

FONT_FAMILY = "Helvetica, Arial, sans-serif"

# Date ring radii, as offsets beyond the disc edge (px)
_RING_OUTER = 42.5
_RING_DIVIDER = 22.5
_DAY_TICK_START = 2.0
_MONTH_LINE = (17.0, 42.0)
_MONTH_TEXT = 30.0
_DAY_TEXT = 11.0
_DAY_TICK_LENGTH = {"month": 15.0, "tenth": 6.0, "fifth": 5.0, "day": 2.0}

# Hour ring, as offsets inside the cover edge (px)
_HOUR_TICK = 9.0
_HOUR_TEXT = 18.0

_MARGIN = 60.0


def _polar(r: float, angle: float) -> tuple[float, float]:
    return r * math.cos(angle), r * math.sin(angle)


def _radial_rotation(x: float, y: float) -> float:
    """Text rotation (degrees) that lines a label up with its radius."""
    return R2D * (math.atan2(y, x) - HPI)


def _text(x: float, y: float, label: str, fill: str, size: int, rotate: float = 0.0) -> str:
    return (
        f'<text x="{x:.2f}" y="{y:.2f}" fill="{fill}" font-size="{size}"'
        f' text-anchor="middle" dominant-baseline="central"'
        f' transform="rotate({rotate:.2f} {x:.2f} {y:.2f})">{escape(label)}</text>'
    )


def _date_ring(layout: PlanisphereLayout, theme: Theme, lang: str) -> list[str]:
    r = layout.screen_radius
    parts = [
        f'<circle r="{r + _RING_OUTER:.2f}" fill="{theme.date_ring_bg}"'
        f' stroke="{theme.date_ring_stroke}" stroke-width="6"/>',
        f'<circle r="{r:.2f}" fill="{theme.sky}" stroke="{theme.date_ring_stroke}" stroke-width="3"/>',
        f'<circle r="{r + _RING_DIVIDER:.2f}" fill="none" stroke="{theme.date_text}" stroke-width="1"/>',
    ]

    path: list[str] = []
    for tick in layout.date_ticks:
        r1 = r + _DAY_TICK_START
        x1, y1 = _polar(r1, tick.angle)
        x2, y2 = _polar(r1 + _DAY_TICK_LENGTH[tick.kind], tick.angle)
        path.append(f"M{x1:.2f} {y1:.2f} L{x2:.2f} {y2:.2f}")
        if tick.kind == "month":
            x1, y1 = _polar(r + _MONTH_LINE[0], tick.angle)
            x2, y2 = _polar(r + _MONTH_LINE[1], tick.angle)
            path.append(f"M{x1:.2f} {y1:.2f} L{x2:.2f} {y2:.2f}")
        elif tick.kind == "tenth":
            tx, ty = _polar(r + _DAY_TEXT, tick.angle)
            parts.append(_text(tx, ty, str(tick.day), theme.date_text, 10, _radial_rotation(tx, ty)))
    parts.append(
        f'<path d="{" ".join(path)}" fill="none" stroke="{theme.date_text}"'
        f' stroke-width="1" stroke-linecap="round"/>'
    )

    for label in layout.month_labels:
        x, y = _polar(r + _MONTH_TEXT, label.angle)
        parts.append(
            _text(x, y, month_label(label.month, lang), theme.date_text, 11, _radial_rotation(x, y))
        )
    return parts


def _grid(layout: PlanisphereLayout, theme: Theme) -> list[str]:
    parts: list[str] = []
    spokes = " ".join(f"M0 0 L{s.end.x:.2f} {s.end.y:.2f}" for s in layout.ra_spokes)
    if spokes:
        parts.append(f'<path d="{spokes}" fill="none" stroke="{theme.ra_line}" stroke-width="1"/>')
    for circle in layout.dec_circles:
        color = theme.equator_line if circle.is_equator else theme.dec_line
        parts.append(
            f'<circle r="{circle.radius:.2f}" fill="none" stroke="{color}" stroke-width="1"/>'
        )
    for spoke in layout.ra_spokes:
        # hour labels just inside the disc edge
        length = spoke.end.distance()
        if length == 0:
            continue
        scale = (length - 12) / length
        x, y = spoke.end.x * scale, spoke.end.y * scale
        parts.append(_text(x, y, f"{spoke.hours}h", theme.ra_text, 10, _radial_rotation(x, y)))
    return parts


def _constellations(layout: PlanisphereLayout, theme: Theme) -> list[str]:
    parts: list[str] = []
    lines = " ".join(
        f"M{s.start.x:.2f} {s.start.y:.2f} L{s.end.x:.2f} {s.end.y:.2f}" for s in layout.segments
    )
    if lines:
        parts.append(
            f'<path d="{lines}" fill="none" stroke="{theme.con_line}" stroke-width="1"'
            f' stroke-opacity="{theme.con_line_opacity}"/>'
        )
    for label in layout.constellation_labels:
        parts.append(
            _text(label.point.x, label.point.y, label.text, theme.con_name, 10, label.angle_deg)
        )
    return parts


def _stars(layout: PlanisphereLayout, theme: Theme) -> list[str]:
    return [
        f'<circle cx="{s.point.x:.2f}" cy="{s.point.y:.2f}" r="{s.radius}"'
        f' fill="{theme.star_color(s.star.spectral)}" opacity="{s.opacity}">'
        f"<title>{escape(s.star.name)}</title></circle>"
        for s in layout.stars
    ]


def _cover(layout: PlanisphereLayout, theme: Theme, lang: str) -> list[str]:
    r = layout.screen_radius
    ring = f"M{-r:.2f} 0 a{r:.2f},{r:.2f} 0 1,1 {2 * r:.2f},0 a{r:.2f},{r:.2f} 0 1,1 {-2 * r:.2f},0 Z"
    window = "M" + " L".join(f"{p.x:.2f} {p.y:.2f}" for p in layout.horizon) + " Z"
    parts = [
        f'<path d="{ring} {window}" fill="{theme.cover_bg}" fill-rule="evenodd"'
        f' stroke="{theme.cover_stroke}" stroke-width="3"/>'
    ]

    ticks: list[str] = []
    for tick in layout.hour_ticks:
        if tick.minute == 0:
            length = _HOUR_TICK
        elif tick.minute % 30 == 0:
            length = 10.0
        elif tick.minute % 10 == 0:
            length = 6.0
        else:
            length = 3.0
        x1, y1 = _polar(r, tick.angle)
        x2, y2 = _polar(r - length, tick.angle)
        ticks.append(f"M{x1:.2f} {y1:.2f} L{x2:.2f} {y2:.2f}")
        if tick.minute == 0:
            x3, y3 = _polar(r - _HOUR_TEXT, tick.angle)
            parts.append(
                _text(
                    x3,
                    y3,
                    hour_label(tick.hour, lang),
                    theme.time_text,
                    11,
                    _radial_rotation(x3, y3) - 180.0,
                )
            )
    parts.append(
        f'<path d="{" ".join(ticks)}" fill="none" stroke="{theme.time_line}" stroke-width="1"/>'
    )

    for mark in layout.cardinal_marks:
        parts.append(
            _text(mark.point.x, mark.point.y, t(mark.key, lang), theme.cardinal, 12, mark.angle_deg)
        )
    return parts


def render_svg(layout: PlanisphereLayout, theme: str = "default", lang: str = "en") -> str:
    """Render a layout as a standalone ``<svg>`` element.

    Args:
        layout: Fully computed disc geometry.
        theme: Theme name ("default", "dark" or "light").
        lang: Label language ('ko' or 'en').

    Returns:
        SVG markup centred on the disc.

    Raises:
        ValueError: If the theme is unknown.
    """
    th = get_theme(theme)
    half = layout.screen_radius + _RING_OUTER + _MARGIN
    rotation = f"rotate({layout.rotation_deg:.4f})"
    frame = layout.frame
    legend = t(
        "legend_location",
        lang,
        lon=frame.longitude_deg,
        lat=frame.latitude_deg,
        offset=frame.utc_offset_hours,
    )

    sky = (
        _date_ring(layout, th, lang)
        + _grid(layout, th)
        + _constellations(layout, th)
        + _stars(layout, th)
    )
    cover = _cover(layout, th, lang)

    sky_svg = "\n    ".join(sky)
    cover_svg = "\n    ".join(cover)
    return f"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="{-half:.2f} {-half:.2f} {2 * half:.2f} {2 * half:.2f}"
     font-family="{FONT_FAMILY}">
  <defs>
    <linearGradient id="bg" x1="0" y1="0" x2="0" y2="1">
      <stop offset="0%" stop-color="{th.background[0]}"/>
      <stop offset="100%" stop-color="{th.background[1]}"/>
    </linearGradient>
  </defs>
  <rect x="{-half:.2f}" y="{-half:.2f}" width="{2 * half:.2f}" height="{2 * half:.2f}" fill="url(#bg)"/>
  <g id="sky" transform="{rotation}">
    {sky_svg}
  </g>
  <g id="cover" transform="{rotation}">
    {cover_svg}
  </g>
  <g id="legend">
    {_text(0, half - 20, legend, th.legend, 11)}
    {_text(0, half - 36, layout.when.strftime("%Y-%m-%d %H:%M"), th.legend, 11)}
  </g>
</svg>"""


def render_svg_html(layout: PlanisphereLayout, theme: str = "default", lang: str = "en") -> str:
    """Return a self-contained HTML page that fills the viewport with the disc."""
    svg = render_svg(layout, theme=theme, lang=lang)
    bg = get_theme(theme).background[0]
    return f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(t("page_title", lang))}</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    width: 100%;
    height: 100%;
    background: {bg};
    overflow: hidden;
}}
svg {{
    display: block;
    width: 100%;
    height: 100%;
}}
</style>
</head>
<body>
{svg}
</body>
</html>
"""
