from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, PdfSettings, StorageSettings, SvgSettings
from domain.models import TimelineSnapshot
from tests.helpers.timeline_fixtures import load_timeline_fixture


def _clear_timeline_env() -> None:
    for key in list(os.environ):
        if key.startswith("TIMELINE_"):
            os.environ.pop(key, None)


_clear_timeline_env()


@pytest.fixture(autouse=True)
def clear_timeline_env() -> Generator[None, None, None]:
    _clear_timeline_env()
    yield
    _clear_timeline_env()


@pytest.fixture
def storage_settings(tmp_path: Path) -> StorageSettings:
    return StorageSettings(
        data_dir=tmp_path / "timelines",
        output_dir=tmp_path / "exports",
    )


@pytest.fixture
def app_settings(storage_settings: StorageSettings) -> AppSettings:
    return AppSettings(
        title="Test Timelines",
        storage=storage_settings,
        svg=SvgSettings(),
        pdf=PdfSettings(),
    )


@pytest.fixture
def app_settings_factory(app_settings: AppSettings) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return app_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def sample_snapshot() -> TimelineSnapshot:
    return load_timeline_fixture("computing-history.json")
