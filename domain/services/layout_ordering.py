from __future__ import annotations

from collections.abc import Iterable

from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository


def next_position(sibling_positions: Iterable[int]) -> int:
    positions = list(sibling_positions)
    return max(positions) + 1 if positions else 0


class LayoutOrdering:
    def __init__(self, layouts: LayoutRepository) -> None:
        self._layouts = layouts

    def assign_position(self, layout: LayoutNode) -> int:
        if layout.position > 0:
            return layout.position
        layout.position = self.trailing_position(layout)
        return layout.position

    def trailing_position(self, layout: LayoutNode) -> int:
        if layout.site_id is None:
            return 0
        if layout.parent_id is None:
            siblings = self._layouts.roots(layout.site_id)
        else:
            siblings = self._layouts.children(layout.parent_id)
        return next_position(
            sibling.position for sibling in siblings if sibling.id != layout.id
        )
