from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.models import LayoutNode, Page, Site


class SiteRepository(Protocol):
    def get(self, site_id: str) -> Site | None: ...

    def list_all(self) -> Sequence[Site]: ...

    def save(self, site: Site) -> None: ...


class LayoutRepository(Protocol):
    def get(self, layout_id: str) -> LayoutNode | None: ...

    def find_by_identifier(self, site_id: str, identifier: str) -> LayoutNode | None: ...

    def list_by_site(self, site_id: str) -> Sequence[LayoutNode]: ...

    def roots(self, site_id: str) -> Sequence[LayoutNode]: ...

    def children(self, layout_id: str) -> Sequence[LayoutNode]: ...

    def save(self, layout: LayoutNode) -> None: ...

    def delete(self, layout_id: str) -> None: ...


class PageRepository(Protocol):
    def get(self, page_id: str) -> Page | None: ...

    def list_by_layout(self, layout_id: str) -> Sequence[Page]: ...

    def save(self, page: Page) -> None: ...

    def clear_content(self, page_ids: Sequence[str]) -> int: ...

    def detach_layout(self, layout_id: str) -> int: ...
