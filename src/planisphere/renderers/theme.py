"""Colour themes shared by the SVG and static renderers."""

from dataclasses import dataclass, field

_STAR_COLORS = {
    "O": "#9bb0ff",
    "B": "#aabfff",
    "A": "#cad7ff",
    "F": "#f8f7ff",
    "G": "#fff4ea",
    "K": "#ffd2a1",
    "M": "#ffcc6f",
}


@dataclass(frozen=True)
class Theme:
    """Every colour and stroke a renderer needs."""

    name: str
    background: tuple[str, str]  # Page gradient (top, bottom)
    sky: str
    ra_line: str
    dec_line: str
    equator_line: str
    ra_text: str
    date_ring_bg: str
    date_ring_stroke: str
    date_text: str
    con_name: str
    con_line: str
    con_line_opacity: float
    cover_bg: str
    cover_stroke: str
    time_line: str
    time_text: str
    legend: str
    cardinal: str
    star_colors: dict[str, str] = field(default_factory=lambda: dict(_STAR_COLORS))
    star_default: str = "#fff"

    def star_color(self, spectral: str) -> str:
        return self.star_colors.get(spectral[:1].upper(), self.star_default)


THEMES: dict[str, Theme] = {
    "default": Theme(
        name="default",
        background=("#777794", "#adb2ce"),
        sky="#000",
        ra_line="#aaa",
        dec_line="#aaa",
        equator_line="#facc99",
        ra_text="#fff",
        date_ring_bg="#3d44aa",
        date_ring_stroke="#000",
        date_text="#fff",
        con_name="#AACC00",
        con_line="#f06",
        con_line_opacity=0.7,
        cover_bg="#ffaa00",
        cover_stroke="#000",
        time_line="#000",
        time_text="#000",
        legend="#000",
        cardinal="#000",
    ),
    "dark": Theme(
        name="dark",
        background=("#1a1a1a", "#333333"),
        sky="#000",
        ra_line="#666",
        dec_line="#444",
        equator_line="#777",
        ra_text="#ccc",
        date_ring_bg="#222266",
        date_ring_stroke="#444",
        date_text="#eee",
        con_name="#88cc44",
        con_line="#44cc88",
        con_line_opacity=0.6,
        cover_bg="#333333",
        cover_stroke="#555",
        time_line="#888",
        time_text="#ccc",
        legend="#ccc",
        cardinal="#ccc",
    ),
    "light": Theme(
        name="light",
        background=("#e6e6f0", "#ffffff"),
        sky="#fff",
        ra_line="#444",
        dec_line="#666",
        equator_line="#999",
        ra_text="#000",
        date_ring_bg="#dde5ff",
        date_ring_stroke="#aaa",
        date_text="#000",
        con_name="#224488",
        con_line="#2266cc",
        con_line_opacity=0.7,
        cover_bg="#f2f2f2",
        cover_stroke="#bbb",
        time_line="#444",
        time_text="#000",
        legend="#222",
        cardinal="#222",
        star_colors={
            "O": "#3366ff",
            "B": "#4d7fff",
            "A": "#668cff",
            "F": "#9999ff",
            "G": "#cc9900",
            "K": "#ff6600",
            "M": "#cc0000",
        },
        star_default="#222",
    ),
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name.

    Raises:
        ValueError: If no theme has that name.
    """
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(f"Unknown theme {name!r}; expected one of {sorted(THEMES)}") from None
