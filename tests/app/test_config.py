from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as SettingsValidationError

from app.config import AppSettings, LayoutSettings, load_settings


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.layouts.store == "filesystem"
    assert settings.layouts.spacer == ". . "
    assert settings.layouts.max_depth == 64
    assert settings.layouts.force_css_reload is True


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CMS_LAYOUTS__STORE", "Memory")
    monkeypatch.setenv("CMS_LAYOUTS__MAX_DEPTH", "8")
    monkeypatch.setenv("CMS_LAYOUTS__LOG_LEVEL", "debug")

    settings = AppSettings()

    assert settings.layouts.store == "memory"
    assert settings.layouts.max_depth == 8
    assert settings.layouts.log_level == "DEBUG"


def test_yaml_config_is_loaded(tmp_path: Path) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text(
        "layouts:\n  title: From YAML\n  spacer: '-- '\n  bootstrap_on_start: true\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.layouts.title == "From YAML"
    assert settings.layouts.spacer == "-- "
    assert settings.layouts.bootstrap_on_start is True


def test_env_wins_over_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "app.yaml"
    config_path.write_text("layouts:\n  title: From YAML\n", encoding="utf-8")
    monkeypatch.setenv("CMS_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("CMS_LAYOUTS__TITLE", "From env")

    assert load_settings().layouts.title == "From env"


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(SettingsValidationError):
        LayoutSettings(log_level="chatty")
    with pytest.raises(SettingsValidationError):
        LayoutSettings(max_depth=0)
    with pytest.raises(SettingsValidationError):
        LayoutSettings(store="s3")
