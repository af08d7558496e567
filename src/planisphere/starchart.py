"""CLI entry point for planisphere generation.

Configure the observer through ``PLANISPHERE_*`` variables (or a ``.env``
file), then run:
    planisphere-chart [--when "2025-01-15 21:00"] [--lookup-timezone]
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from planisphere.config import PlanisphereSettings, load_settings  # noqa: E402
from planisphere.layout import compute_layout  # noqa: E402
from planisphere.models import ObserverFrame  # noqa: E402
from planisphere.observer import observer_at  # noqa: E402
from planisphere.renderers.static import RESULTS_DIR, save_static_chart  # noqa: E402
from planisphere.renderers.svg_2d import render_svg_html  # noqa: E402

logger = logging.getLogger("planisphere")


def build_frame(
    settings: PlanisphereSettings, when: datetime, lookup_timezone: bool = False
) -> ObserverFrame:
    """Observer frame from settings, optionally taking the UTC offset from the timezone database."""
    if lookup_timezone:
        frame, tz_name = observer_at(settings.lat, settings.lon, when)
        logger.info("Using timezone %s (UTC%+g)", tz_name, frame.utc_offset_hours)
        return frame
    return ObserverFrame.from_degrees(settings.utc_offset, settings.lon, settings.lat)


def write_outputs(
    settings: PlanisphereSettings,
    when: datetime,
    out_dir: Path = RESULTS_DIR,
    lookup_timezone: bool = False,
) -> tuple[Path, Path]:
    """Compute one layout and write it as HTML and PNG.

    Returns:
        ``(html_path, png_path)``.
    """
    frame = build_frame(settings, when, lookup_timezone)
    layout = compute_layout(frame, when, settings)

    stem = f"planisphere__{when.strftime('%Y_%m_%d_%H_%M')}"
    out_dir.mkdir(parents=True, exist_ok=True)
    html_path = out_dir / f"{stem}.html"
    html_path.write_text(
        render_svg_html(layout, theme=settings.theme, lang=settings.lang), encoding="utf-8"
    )
    png_path = save_static_chart(
        layout, out_dir / f"{stem}.png", theme=settings.theme, lang=settings.lang
    )
    return html_path, png_path


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Draw a planisphere for the configured observer.")
    parser.add_argument(
        "--when",
        default=None,
        help='Local civil time "YYYY-MM-DD HH:MM" (default: now)',
    )
    parser.add_argument("--out", type=Path, default=RESULTS_DIR, help="Output directory")
    parser.add_argument(
        "--lookup-timezone",
        action="store_true",
        help="Take the UTC offset from the observer's timezone instead of PLANISPHERE_UTC_OFFSET",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    when = (
        datetime.strptime(args.when, "%Y-%m-%d %H:%M")
        if args.when
        else datetime.now().replace(second=0, microsecond=0)
    )
    settings = load_settings()
    html_path, png_path = write_outputs(settings, when, args.out, args.lookup_timezone)
    print(f"Saved: {html_path}")
    print(f"Saved: {png_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
