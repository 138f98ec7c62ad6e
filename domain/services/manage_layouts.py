from __future__ import annotations

import logging

from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository, PageRepository, SiteRepository
from domain.services.invalidate_page_cache import InvalidatePageCache, InvalidationReport
from domain.services.layout_ordering import LayoutOrdering
from domain.services.validate_layout import LayoutValidator, assign_label

logger = logging.getLogger(__name__)


class LayoutManager:
    """Persists layout changes and keeps dependent page caches in step."""

    def __init__(
        self,
        layouts: LayoutRepository,
        pages: PageRepository,
        sites: SiteRepository | None = None,
    ) -> None:
        self._layouts = layouts
        self._pages = pages
        self._validator = LayoutValidator(layouts, sites)
        self._ordering = LayoutOrdering(layouts)
        self._invalidator = InvalidatePageCache(layouts, pages)

    def save(self, layout: LayoutNode) -> LayoutNode:
        assign_label(layout)
        self._validator.validate(layout)
        if self._layouts.get(layout.id) is None:
            self._ordering.assign_position(layout)
        self._layouts.save(layout)
        logger.info("Saved layout %r (position %d).", layout.identifier, layout.position)
        self._invalidator.cascade(layout)
        return layout

    def move(self, layout: LayoutNode, parent_id: str | None) -> LayoutNode:
        layout.parent_id = parent_id
        layout.position = 0
        assign_label(layout)
        self._validator.validate(layout)
        self._ordering.assign_position(layout)
        self._layouts.save(layout)
        logger.info("Moved layout %r under %r.", layout.identifier, parent_id)
        self._invalidator.cascade(layout)
        return layout

    def destroy(self, layout: LayoutNode) -> InvalidationReport:
        # Pages have to be invalidated while they still point at the layout.
        report = self._invalidator.cascade(layout)
        detached = self._pages.detach_layout(layout.id)
        self._orphan_children(layout)
        self._layouts.delete(layout.id)
        logger.info(
            "Deleted layout %r; detached %d page(s).", layout.identifier, detached
        )
        return report

    def _orphan_children(self, layout: LayoutNode) -> None:
        children = list(self._layouts.children(layout.id))
        if not children or layout.site_id is None:
            return
        for child in children:
            child.parent_id = None
            child.position = 0
            child.position = self._ordering.trailing_position(child)
            self._layouts.save(child)
