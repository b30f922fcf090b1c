from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.timeline import LayoutConfig
from domain.models import Size

DEFAULT_CONFIG_PATH = Path("config/timeline.yaml")


class StorageSettings(BaseModel):
    data_dir: Path = Path("data/timelines")
    output_dir: Path = Path("data/exports")


class SvgSettings(BaseModel):
    pixels_per_day: float = Field(default=0.5, gt=0)
    lane_height: float = Field(default=60.0, gt=0)
    min_width: float = Field(default=600.0, ge=0)
    min_height: float = Field(default=200.0, ge=0)

    def to_layout_config(self) -> LayoutConfig:
        base = LayoutConfig.vector()
        return replace(
            base,
            scale=self.pixels_per_day,
            lane_height=self.lane_height,
            min_canvas=Size(self.min_width, self.min_height),
        )


class PdfSettings(BaseModel):
    mm_per_day: float = Field(default=0.15, gt=0)
    margin: float = Field(default=20.0, ge=0)
    lane_height: float = Field(default=18.0, gt=0)
    font_path: Path | None = None

    @field_validator("font_path", mode="before")
    @classmethod
    def normalize_font_path(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    def to_layout_config(self) -> LayoutConfig:
        base = LayoutConfig.document()
        page = base.page_size or Size(279.4, 215.9)
        if self.margin * 2 >= page.width:
            msg = "pdf.margin leaves no usable page width"
            raise ValueError(msg)
        return replace(
            base,
            scale=self.mm_per_day,
            margin_x=self.margin,
            lane_inset=self.margin,
            lane_height=self.lane_height,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TIMELINE_", env_nested_delimiter="__")

    title: str = "Timeline Exports"
    storage: StorageSettings = StorageSettings()
    svg: SvgSettings = SvgSettings()
    pdf: PdfSettings = PdfSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("TIMELINE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
