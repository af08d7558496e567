"""Settings — defaults overlaid with ``PLANISPHERE_*`` environment variables.

Entry points call ``dotenv.load_dotenv()`` before :func:`load_settings`, so a
``.env`` file in the working directory works the same as exported variables.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from planisphere.astrotime import DateRingMode

ENV_PREFIX = "PLANISPHERE_"

THEMES = ("default", "dark", "light")
LANGS = ("en", "ko")


class ConfigError(ValueError):
    """An environment value could not be used."""


@dataclass(frozen=True)
class PlanisphereSettings:
    """Everything a redraw needs besides the observer and the instant."""

    lon: float = 126.98  # Observer longitude (degrees, east-positive)
    lat: float = 37.57  # Observer latitude (degrees)
    utc_offset: float = 9.0  # Hours
    radius: float = 440.0  # Disc radius (px)
    date_ring_mode: DateRingMode = DateRingMode.LASN
    declination_limit: float | None = None  # Degrees; None derives it from latitude
    magnitude_limit: float = 6.0
    ra_interval_hours: int = 2
    dec_interval_deg: float = 30.0
    horizon_step_rad: float = 0.01  # ~0.6 degrees of azimuth
    dst_hours: float = 0.0
    theme: str = "default"
    lang: str = "en"


def _optional_float(raw: str) -> float | None:
    if raw.strip().lower() in ("", "none", "auto"):
        return None
    return float(raw)


def _date_ring_mode(raw: str) -> DateRingMode:
    mode = DateRingMode.coerce(raw.strip().upper())
    if mode is DateRingMode.UNRECOGNIZED:
        raise ValueError(f"expected one of {[m.value for m in DateRingMode][:-1]}")
    return mode


def _choice(options: tuple[str, ...]) -> Callable[[str], str]:
    def parse(raw: str) -> str:
        value = raw.strip().lower()
        if value not in options:
            raise ValueError(f"expected one of {list(options)}")
        return value

    return parse


def _positive(parse: Callable[[str], Any]) -> Callable[[str], Any]:
    def check(raw: str) -> Any:
        value = parse(raw)
        if not value > 0:
            raise ValueError("must be positive")
        return value

    return check


_PARSERS: dict[str, Callable[[str], Any]] = {
    "lon": float,
    "lat": float,
    "utc_offset": float,
    "radius": _positive(float),
    "date_ring_mode": _date_ring_mode,
    "declination_limit": _optional_float,
    "magnitude_limit": float,
    "ra_interval_hours": _positive(int),
    "dec_interval_deg": _positive(float),
    "horizon_step_rad": _positive(float),
    "dst_hours": float,
    "theme": _choice(THEMES),
    "lang": _choice(LANGS),
}


def load_settings(environ: Mapping[str, str] | None = None) -> PlanisphereSettings:
    """Build settings from defaults and ``PLANISPHERE_<FIELD>`` variables.

    Args:
        environ: Variable source; ``os.environ`` when None.

    Raises:
        ConfigError: If a variable is set but cannot be parsed.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for f in fields(PlanisphereSettings):
        name = ENV_PREFIX + f.name.upper()
        raw = env.get(name)
        if raw is None:
            continue
        try:
            overrides[f.name] = _PARSERS[f.name](raw)
        except ValueError as exc:
            raise ConfigError(f"{name}={raw!r}: {exc}") from exc
    return replace(PlanisphereSettings(), **overrides)
