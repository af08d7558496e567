"""Static catalog loading — naked-eye stars, constellation lines and name anchors.

Catalog files are CSV with a header row. Positions stay in catalog units
(right ascension in hours, declination in degrees); conversion to radians
happens where they are projected.
"""

import csv
import logging
from collections.abc import Callable, Iterator
from functools import lru_cache
from pathlib import Path
from typing import TypeVar

from planisphere.models import ConstellationName, ConstellationSegment, StarRecord

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
STARS_CSV = DATA_DIR / "stars.csv"
LINES_CSV = DATA_DIR / "constellation_lines.csv"
NAMES_CSV = DATA_DIR / "constellation_names.csv"

T = TypeVar("T")


class CatalogError(ValueError):
    """Malformed catalog row."""


def _read_rows(path: Path, parse: Callable[[dict[str, str]], T]) -> Iterator[T]:
    """Parse every data row of a CSV file, naming the file and line on failure."""
    with path.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield parse(row)
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(
                    f"{path.name}:{reader.line_num}: bad row {row!r} ({exc})"
                ) from exc


def _parse_star(row: dict[str, str]) -> StarRecord:
    return StarRecord(
        name=row["name"].strip(),
        ra_hours=float(row["ra_hours"]),
        dec_deg=float(row["dec_deg"]),
        magnitude=float(row["magnitude"]),
        spectral=(row.get("spectral") or "").strip().upper()[:1],
    )


def _parse_segment(row: dict[str, str]) -> ConstellationSegment:
    return ConstellationSegment(
        constellation=row["constellation"].strip(),
        ra1_hours=float(row["ra1_hours"]),
        dec1_deg=float(row["dec1_deg"]),
        ra2_hours=float(row["ra2_hours"]),
        dec2_deg=float(row["dec2_deg"]),
    )


def _parse_name(row: dict[str, str]) -> ConstellationName:
    return ConstellationName(
        constellation=row["constellation"].strip(),
        ra_hours=float(row["ra_hours"]),
        dec_deg=float(row["dec_deg"]),
    )


@lru_cache(maxsize=8)
def _load_stars(path: Path) -> tuple[StarRecord, ...]:
    stars = tuple(_read_rows(path, _parse_star))
    logger.debug("Loaded %d stars from %s", len(stars), path)
    return stars


def load_stars(
    path: Path | None = None, magnitude_limit: float | None = None
) -> tuple[StarRecord, ...]:
    """Load the star list.

    Args:
        path: CSV file; the bundled naked-eye list when None.
        magnitude_limit: Keep only stars at least this bright (magnitude <= limit).

    Returns:
        Tuple of StarRecord in file order.

    Raises:
        CatalogError: On a malformed row.
    """
    stars = _load_stars(Path(path) if path is not None else STARS_CSV)
    if magnitude_limit is None:
        return stars
    return tuple(s for s in stars if s.magnitude <= magnitude_limit)


@lru_cache(maxsize=8)
def load_constellation_lines(path: Path | None = None) -> tuple[ConstellationSegment, ...]:
    """Load constellation line segments (one row per segment)."""
    segments = tuple(_read_rows(Path(path) if path is not None else LINES_CSV, _parse_segment))
    logger.debug("Loaded %d constellation segments", len(segments))
    return segments


@lru_cache(maxsize=8)
def load_constellation_names(path: Path | None = None) -> tuple[ConstellationName, ...]:
    """Load constellation name anchors."""
    return tuple(_read_rows(Path(path) if path is not None else NAMES_CSV, _parse_name))
