from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.services.layout_options import DEFAULT_SPACER
from domain.services.merge_layouts import DEFAULT_MAX_DEPTH

DEFAULT_CONFIG_PATH = Path("config/cms/app.yaml")


class LayoutSettings(BaseModel):
    title: str = "CMS Layouts"
    store: Literal["filesystem", "memory"] = "filesystem"
    store_path: Path = Path("data/cms/store.json")
    app_layouts_dir: Path = Path("app/views/layouts")
    spacer: str = DEFAULT_SPACER
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    force_css_reload: bool = True
    bootstrap_on_start: bool = False
    log_level: str = "INFO"

    @field_validator("store", mode="before")
    @classmethod
    def normalize_store(cls, value: object) -> str:
        return str(value).strip().lower() if value else "filesystem"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"layouts.log_level must be a logging level name, got {value!r}"
            raise ValueError(msg)
        return level


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CMS_", env_nested_delimiter="__")

    layouts: LayoutSettings = LayoutSettings()

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
    env_path = os.getenv("CMS_CONFIG_PATH")
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
