from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

from domain.models import LayoutNode, Page, Site, sort_layouts
from domain.ports.repositories import LayoutRepository, PageRepository, SiteRepository


@dataclass
class InMemoryContentState:
    sites: dict[str, Site] = field(default_factory=dict)
    layouts: dict[str, LayoutNode] = field(default_factory=dict)
    pages: dict[str, Page] = field(default_factory=dict)

    def refresh(self) -> None:
        """Called before every read; durable stores pick up outside writes here."""

    def commit(self) -> None:
        """Called after every mutation; durable stores persist here."""

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self.refresh()
        yield
        self.commit()


class InMemorySiteRepository(SiteRepository):
    def __init__(self, state: InMemoryContentState) -> None:
        self._state = state

    def get(self, site_id: str) -> Site | None:
        self._state.refresh()
        site = self._state.sites.get(site_id)
        return site.model_copy(deep=True) if site else None

    def list_all(self) -> list[Site]:
        self._state.refresh()
        return [site.model_copy(deep=True) for site in self._state.sites.values()]

    def save(self, site: Site) -> None:
        with self._state.transaction():
            self._state.sites[site.id] = site.model_copy(deep=True)


class InMemoryLayoutRepository(LayoutRepository):
    def __init__(self, state: InMemoryContentState) -> None:
        self._state = state

    def get(self, layout_id: str) -> LayoutNode | None:
        self._state.refresh()
        layout = self._state.layouts.get(layout_id)
        return layout.model_copy(deep=True) if layout else None

    def find_by_identifier(self, site_id: str, identifier: str) -> LayoutNode | None:
        self._state.refresh()
        for layout in self._state.layouts.values():
            if layout.site_id == site_id and layout.identifier == identifier:
                return layout.model_copy(deep=True)
        return None

    def list_by_site(self, site_id: str) -> list[LayoutNode]:
        return self._select(lambda layout: layout.site_id == site_id)

    def roots(self, site_id: str) -> list[LayoutNode]:
        return self._select(
            lambda layout: layout.site_id == site_id and layout.parent_id is None
        )

    def children(self, layout_id: str) -> list[LayoutNode]:
        return self._select(lambda layout: layout.parent_id == layout_id)

    def save(self, layout: LayoutNode) -> None:
        with self._state.transaction():
            self._state.layouts[layout.id] = layout.model_copy(deep=True)

    def delete(self, layout_id: str) -> None:
        with self._state.transaction():
            self._state.layouts.pop(layout_id, None)

    def _select(self, predicate) -> list[LayoutNode]:
        self._state.refresh()
        selected = [
            layout.model_copy(deep=True)
            for layout in self._state.layouts.values()
            if predicate(layout)
        ]
        return sort_layouts(selected)


class InMemoryPageRepository(PageRepository):
    def __init__(self, state: InMemoryContentState) -> None:
        self._state = state

    def get(self, page_id: str) -> Page | None:
        self._state.refresh()
        page = self._state.pages.get(page_id)
        return page.model_copy(deep=True) if page else None

    def list_by_layout(self, layout_id: str) -> list[Page]:
        self._state.refresh()
        return [
            page.model_copy(deep=True)
            for page in self._state.pages.values()
            if page.layout_id == layout_id
        ]

    def save(self, page: Page) -> None:
        with self._state.transaction():
            self._state.pages[page.id] = page.model_copy(deep=True)

    def clear_content(self, page_ids: Sequence[str]) -> int:
        cleared = 0
        with self._state.transaction():
            for page_id in page_ids:
                page = self._state.pages.get(page_id)
                if page is None:
                    continue
                page.content = None
                cleared += 1
        return cleared

    def detach_layout(self, layout_id: str) -> int:
        detached = 0
        with self._state.transaction():
            for page in self._state.pages.values():
                if page.layout_id == layout_id:
                    page.layout_id = None
                    detached += 1
        return detached


@dataclass(frozen=True)
class ContentRepositories:
    sites: InMemorySiteRepository
    layouts: InMemoryLayoutRepository
    pages: InMemoryPageRepository


def build_repositories(state: InMemoryContentState) -> ContentRepositories:
    return ContentRepositories(
        sites=InMemorySiteRepository(state),
        layouts=InMemoryLayoutRepository(state),
        pages=InMemoryPageRepository(state),
    )
