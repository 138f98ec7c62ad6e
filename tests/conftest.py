from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from adapters.memory.repositories import ContentRepositories, InMemoryContentState, build_repositories
from adapters.tags.marker_processor import MarkerTagProcessor
from app.config import AppSettings, LayoutSettings
from domain.models import Site
from domain.services.manage_layouts import LayoutManager
from domain.services.merge_layouts import LayoutMerger


def _clear_cms_env() -> None:
    for key in list(os.environ):
        if key.startswith("CMS_"):
            os.environ.pop(key, None)


_clear_cms_env()


@pytest.fixture(autouse=True)
def clear_cms_env() -> Generator[None, None, None]:
    _clear_cms_env()
    yield
    _clear_cms_env()


@pytest.fixture
def layout_settings(tmp_path: Path) -> LayoutSettings:
    return LayoutSettings(
        title="Test Layouts",
        store="memory",
        store_path=tmp_path / "cms" / "store.json",
        app_layouts_dir=tmp_path / "views" / "layouts",
        spacer=". . ",
        max_depth=16,
        force_css_reload=True,
        bootstrap_on_start=False,
        log_level="DEBUG",
    )


@pytest.fixture
def layout_settings_factory(layout_settings: LayoutSettings) -> Callable[..., LayoutSettings]:
    def _factory(**overrides: object) -> LayoutSettings:
        return layout_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(layout_settings: LayoutSettings) -> AppSettings:
    return AppSettings(layouts=layout_settings)


@pytest.fixture
def app_settings_factory(
    layout_settings_factory: Callable[..., LayoutSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(layouts=layout_settings_factory(**overrides))

    return _factory


@pytest.fixture
def state() -> InMemoryContentState:
    return InMemoryContentState()


@pytest.fixture
def repos(state: InMemoryContentState) -> ContentRepositories:
    return build_repositories(state)


@pytest.fixture
def site(repos: ContentRepositories) -> Site:
    site = Site(id="site-1", identifier="main", label="Main")
    repos.sites.save(site)
    return site


@pytest.fixture
def manager(repos: ContentRepositories) -> LayoutManager:
    return LayoutManager(repos.layouts, repos.pages, repos.sites)


@pytest.fixture
def merger(repos: ContentRepositories) -> LayoutMerger:
    return LayoutMerger(repos.layouts, MarkerTagProcessor(), max_depth=16)
