from __future__ import annotations

import re
from collections.abc import Sequence

from domain.errors import StructuralError
from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository
from domain.ports.tags import TagProcessor
from domain.render_context import CssMemo, RenderContext

# {{ cms:page:content }} in a parent layout marks where the child's content goes.
# If the parent has no such tag its content is dropped from the merge.
PAGE_CONTENT_TAG_RE = re.compile(
    r"\{\{\s*cms:page:content:?(?:(?::text)|(?::rich_text))?\s*\}\}"
)

DEFAULT_MAX_DEPTH = 64


def has_content_tag(text: str) -> bool:
    return PAGE_CONTENT_TAG_RE.search(text) is not None


def merge_into_parent(parent_content: str, content: str) -> str:
    if not has_content_tag(parent_content):
        return content
    return PAGE_CONTENT_TAG_RE.sub(lambda _match: content, parent_content)


def join_head(fragments: Sequence[str]) -> str:
    return "".join(fragments)


class LayoutMerger:
    def __init__(
        self,
        layouts: LayoutRepository,
        tags: TagProcessor,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._layouts = layouts
        self._tags = tags
        self._max_depth = max_depth

    def ancestry(self, layout: LayoutNode) -> list[LayoutNode]:
        """Return the merge chain of ``layout``, root first.

        A ``parent_id`` that no longer resolves ends the chain, the same as a
        root. Cycles and chains deeper than ``max_depth`` raise
        :class:`StructuralError`.
        """
        chain = [layout]
        seen = {layout.id}
        current = layout
        while current.parent_id is not None:
            if current.parent_id in seen:
                msg = f"Cyclic parent chain detected at layout {current.parent_id!r}"
                raise StructuralError(msg)
            if len(chain) >= self._max_depth:
                msg = f"Layout {layout.identifier!r} is nested deeper than {self._max_depth} levels"
                raise StructuralError(msg)
            parent = self._layouts.get(current.parent_id)
            if parent is None:
                break
            seen.add(parent.id)
            chain.append(parent)
            current = parent
        chain.reverse()
        return chain

    def merged_content(self, layout: LayoutNode) -> str:
        chain = self.ancestry(layout)
        merged = chain[0].content_text()
        for node in chain[1:]:
            merged = merge_into_parent(merged, node.content_text())
        return merged

    def merged_head(self, layout: LayoutNode, context: RenderContext) -> list[str]:
        context.ensure_tags()
        fragments: list[str] = []
        # Innermost first, same order a recursive walk would process them in.
        for node in reversed(self.ancestry(layout)):
            fragments.append(self._process(context, node.head_text()))
        fragments.reverse()
        return fragments

    def processed_css(
        self,
        layout: LayoutNode,
        force_reload: bool = True,
        memo: CssMemo | None = None,
    ) -> str:
        if not force_reload and memo is not None and layout.id in memo:
            return memo[layout.id]
        css = self._process(RenderContext(subject=layout, tags=[]), layout.css_text())
        if memo is not None:
            memo[layout.id] = css
        return css

    def _process(self, context: RenderContext, text: str) -> str:
        return self._tags.process(context, self._tags.sanitize(text))
