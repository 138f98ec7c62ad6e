from __future__ import annotations

import re

from domain.errors import ValidationError
from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository, SiteRepository

IDENTIFIER_RE = re.compile(r"\A\w[a-z0-9_-]*\Z", re.IGNORECASE | re.ASCII)
_WORD_SPLIT_RE = re.compile(r"[\s_-]+")

BLANK = "can't be blank"
INVALID = "is invalid"
TAKEN = "has already been taken"


def titleize(identifier: str | None) -> str:
    words = [word for word in _WORD_SPLIT_RE.split(str(identifier or "")) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def assign_label(layout: LayoutNode) -> None:
    if not layout.label.strip():
        layout.label = titleize(layout.identifier)


class LayoutValidator:
    def __init__(
        self,
        layouts: LayoutRepository,
        sites: SiteRepository | None = None,
    ) -> None:
        self._layouts = layouts
        self._sites = sites

    def validate(self, layout: LayoutNode) -> None:
        errors: dict[str, list[str]] = {}

        if not layout.site_id:
            errors.setdefault("site_id", []).append(BLANK)
        elif self._sites is not None and self._sites.get(layout.site_id) is None:
            errors.setdefault("site_id", []).append(INVALID)

        if not layout.label.strip():
            errors.setdefault("label", []).append(BLANK)

        for message in self._identifier_errors(layout):
            errors.setdefault("identifier", []).append(message)

        for message in self._parent_errors(layout):
            errors.setdefault("parent_id", []).append(message)

        for message in self._position_errors(layout):
            errors.setdefault("position", []).append(message)

        if errors:
            raise ValidationError(errors)

    def _identifier_errors(self, layout: LayoutNode) -> list[str]:
        identifier = layout.identifier
        if not identifier.strip():
            return [BLANK]
        messages: list[str] = []
        if not IDENTIFIER_RE.match(identifier):
            messages.append(INVALID)
        if layout.site_id:
            existing = self._layouts.find_by_identifier(layout.site_id, identifier)
            if existing is not None and existing.id != layout.id:
                messages.append(TAKEN)
        return messages

    def _parent_errors(self, layout: LayoutNode) -> list[str]:
        if layout.parent_id is None:
            return []
        if layout.parent_id == layout.id:
            return ["can't be the layout itself"]
        parent = self._layouts.get(layout.parent_id)
        if parent is None:
            return ["must reference an existing layout"]
        if parent.site_id != layout.site_id:
            return ["must belong to the same site"]
        if self._is_descendant(parent, layout.id):
            return ["can't be a descendant of the layout"]
        return []

    def _is_descendant(self, candidate: LayoutNode, ancestor_id: str) -> bool:
        seen: set[str] = set()
        current: LayoutNode | None = candidate
        while current is not None and current.id not in seen:
            if current.id == ancestor_id:
                return True
            seen.add(current.id)
            current = self._layouts.get(current.parent_id) if current.parent_id else None
        return current is not None

    def _position_errors(self, layout: LayoutNode) -> list[str]:
        if layout.position <= 0 or not layout.site_id:
            return []
        if layout.parent_id is None:
            siblings = self._layouts.roots(layout.site_id)
        else:
            siblings = self._layouts.children(layout.parent_id)
        for sibling in siblings:
            if sibling.id != layout.id and sibling.position == layout.position:
                return [TAKEN]
        return []
