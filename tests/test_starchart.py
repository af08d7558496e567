from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from planisphere import starchart
from planisphere.config import ConfigError, PlanisphereSettings
from planisphere.models import ObserverFrame


def test_build_frame_from_settings() -> None:
    frame = starchart.build_frame(PlanisphereSettings(), datetime(2024, 6, 21, 21, 0))
    assert frame == ObserverFrame.from_degrees(9.0, 126.98, 37.57)


def test_build_frame_with_timezone_lookup() -> None:
    settings = PlanisphereSettings(lon=-0.12, lat=51.5, utc_offset=0.0)
    frame = starchart.build_frame(settings, datetime(2024, 7, 1, 22, 0), lookup_timezone=True)
    assert frame.utc_offset_hours == pytest.approx(1.0)


def test_main_writes_html_and_png(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("PLANISPHERE_THEME", "light")
    monkeypatch.setenv("PLANISPHERE_LANG", "ko")
    code = starchart.main(["--when", "2024-06-21 21:00", "--out", str(tmp_path)])
    assert code == 0
    html = tmp_path / "planisphere__2024_06_21_21_00.html"
    png = tmp_path / "planisphere__2024_06_21_21_00.png"
    assert html.exists() and png.exists()
    assert "별자리판" in html.read_text(encoding="utf-8")
    out = capsys.readouterr().out
    assert str(html) in out and str(png) in out


def test_main_rejects_bad_configuration(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLANISPHERE_LAT", "north")
    with pytest.raises(ConfigError, match="PLANISPHERE_LAT"):
        starchart.main(["--when", "2024-06-21 21:00", "--out", str(tmp_path)])
