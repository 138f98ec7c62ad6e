from __future__ import annotations

from dataclasses import dataclass

from adapters.filesystem.content_store import FileSystemContentState
from adapters.filesystem.template_discovery import FileSystemTemplateDiscovery
from adapters.memory.repositories import (
    InMemoryContentState,
    InMemoryLayoutRepository,
    InMemoryPageRepository,
    InMemorySiteRepository,
)
from adapters.tags.marker_processor import MarkerTagProcessor
from app.config import AppSettings
from domain.ports.tags import TagProcessor, TemplateDiscovery
from domain.services.bootstrap_app_layouts import BootstrapAppLayouts
from domain.services.invalidate_page_cache import InvalidatePageCache
from domain.services.manage_layouts import LayoutManager
from domain.services.merge_layouts import LayoutMerger
from domain.services.render_page import RenderPage


@dataclass(frozen=True)
class LayoutContext:
    settings: AppSettings
    state: InMemoryContentState
    sites: InMemorySiteRepository
    layouts: InMemoryLayoutRepository
    pages: InMemoryPageRepository
    tags: TagProcessor
    merger: LayoutMerger
    manager: LayoutManager
    invalidator: InvalidatePageCache
    renderer: RenderPage
    bootstrap: BootstrapAppLayouts


def build_content_state(settings: AppSettings) -> InMemoryContentState:
    if settings.layouts.store == "memory":
        return InMemoryContentState()
    return FileSystemContentState(settings.layouts.store_path)


def build_template_discovery(settings: AppSettings) -> TemplateDiscovery:
    return FileSystemTemplateDiscovery(settings.layouts.app_layouts_dir)


def build_context(
    settings: AppSettings,
    state: InMemoryContentState | None = None,
    tags: TagProcessor | None = None,
    discovery: TemplateDiscovery | None = None,
) -> LayoutContext:
    state = state if state is not None else build_content_state(settings)
    tags = tags if tags is not None else MarkerTagProcessor()
    discovery = discovery if discovery is not None else build_template_discovery(settings)

    sites = InMemorySiteRepository(state)
    layouts = InMemoryLayoutRepository(state)
    pages = InMemoryPageRepository(state)
    merger = LayoutMerger(layouts, tags, max_depth=settings.layouts.max_depth)
    manager = LayoutManager(layouts, pages, sites)
    return LayoutContext(
        settings=settings,
        state=state,
        sites=sites,
        layouts=layouts,
        pages=pages,
        tags=tags,
        merger=merger,
        manager=manager,
        invalidator=InvalidatePageCache(layouts, pages),
        renderer=RenderPage(
            layouts,
            pages,
            merger,
            tags,
            force_css_reload=settings.layouts.force_css_reload,
        ),
        bootstrap=BootstrapAppLayouts(layouts, manager, discovery),
    )
