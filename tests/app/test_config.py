from __future__ import annotations

from pathlib import Path

import pytest

from app.config import AppSettings, PdfSettings, SvgSettings, load_settings
from domain.models import Size


def test_defaults_match_layout_presets() -> None:
    svg = SvgSettings().to_layout_config()
    pdf = PdfSettings().to_layout_config()

    assert svg.scale == 0.5
    assert svg.lane_height == 60.0
    assert svg.min_canvas == Size(600.0, 200.0)
    assert pdf.scale == 0.15
    assert pdf.margin_x == 20.0
    assert pdf.page_size == Size(279.4, 215.9)


def test_nested_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIMELINE_SVG__PIXELS_PER_DAY", "2")
    monkeypatch.setenv("TIMELINE_STORAGE__DATA_DIR", "/srv/timelines")

    settings = AppSettings()

    assert settings.svg.pixels_per_day == 2.0
    assert settings.storage.data_dir == Path("/srv/timelines")


def test_yaml_config_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "timeline.yaml"
    config_path.write_text(
        "title: From YAML\n"
        "pdf:\n"
        "  mm_per_day: 0.3\n"
        "  font_path: ''\n"
    )

    settings = load_settings(config_path)

    assert settings.title == "From YAML"
    assert settings.pdf.mm_per_day == 0.3
    assert settings.pdf.font_path is None


def test_env_wins_over_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "timeline.yaml"
    config_path.write_text("title: From YAML\n")
    monkeypatch.setenv("TIMELINE_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("TIMELINE_TITLE", "From Env")

    assert load_settings().title == "From Env"


def test_missing_config_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")


def test_margin_wider_than_page_is_rejected() -> None:
    with pytest.raises(ValueError):
        PdfSettings(margin=140.0).to_layout_config()
