from __future__ import annotations

import logging
from dataclasses import dataclass, field

from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository, PageRepository

logger = logging.getLogger(__name__)


@dataclass
class InvalidationReport:
    visited_layout_ids: list[str] = field(default_factory=list)
    cleared_page_ids: list[str] = field(default_factory=list)
    failed_layout_ids: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_layout_ids


class InvalidatePageCache:
    """Clears cached page content for a layout and every layout below it.

    A descendant's merged content depends on all of its ancestors, so the
    whole subtree is walked even when only the top layout changed.
    """

    def __init__(self, layouts: LayoutRepository, pages: PageRepository) -> None:
        self._layouts = layouts
        self._pages = pages

    def cascade(self, layout: LayoutNode) -> InvalidationReport:
        report = InvalidationReport()
        stack = [layout]
        seen: set[str] = set()
        while stack:
            current = stack.pop()
            if current.id in seen:
                continue
            seen.add(current.id)
            report.visited_layout_ids.append(current.id)
            self._clear_pages(current, report)
            stack.extend(reversed(self._children(current, report)))
        if report.failed_layout_ids:
            logger.warning(
                "Page cache invalidation incomplete for %d layout(s) under %r.",
                len(report.failed_layout_ids),
                layout.identifier,
            )
        return report

    def _clear_pages(self, layout: LayoutNode, report: InvalidationReport) -> None:
        try:
            page_ids = [page.id for page in self._pages.list_by_layout(layout.id)]
            if page_ids:
                self._pages.clear_content(page_ids)
        except Exception:
            logger.exception("Failed to clear cached page content for layout %r.", layout.identifier)
            report.failed_layout_ids.append(layout.id)
            return
        report.cleared_page_ids.extend(page_ids)

    def _children(self, layout: LayoutNode, report: InvalidationReport) -> list[LayoutNode]:
        try:
            return list(self._layouts.children(layout.id))
        except Exception:
            logger.exception("Failed to list child layouts of %r.", layout.identifier)
            if layout.id not in report.failed_layout_ids:
                report.failed_layout_ids.append(layout.id)
            return []
