from __future__ import annotations

from dataclasses import dataclass, field

from domain.models import LayoutNode, Page
from domain.ports.repositories import LayoutRepository, PageRepository
from domain.ports.tags import TagProcessor
from domain.render_context import CssMemo, RenderContext
from domain.services.merge_layouts import LayoutMerger, join_head


@dataclass(frozen=True)
class RenderedPage:
    page_id: str
    layout_id: str | None
    content: str
    head: str
    css: str
    js: str
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "page_id": self.page_id,
            "layout_id": self.layout_id,
            "content": self.content,
            "head": self.head,
            "css": self.css,
            "js": self.js,
            "tags": list(self.tags),
        }


class RenderPage:
    def __init__(
        self,
        layouts: LayoutRepository,
        pages: PageRepository,
        merger: LayoutMerger,
        tags: TagProcessor,
        force_css_reload: bool = True,
    ) -> None:
        self._layouts = layouts
        self._pages = pages
        self._merger = merger
        self._tags = tags
        self._force_css_reload = force_css_reload

    def assigned_layout(self, page: Page) -> LayoutNode | None:
        if page.layout_id is None:
            return None
        return self._layouts.get(page.layout_id)

    def render(self, page: Page, css_memo: CssMemo | None = None) -> RenderedPage:
        layout = self.assigned_layout(page)
        context = RenderContext(subject=page)
        if layout is None:
            return RenderedPage(
                page_id=page.id,
                layout_id=None,
                content="",
                head="",
                css="",
                js="",
                tags=context.ensure_tags(),
            )

        if page.content is None:
            merged = self._merger.merged_content(layout)
            page.content = self._tags.process(context, self._tags.sanitize(merged))
            self._pages.save(page)

        head = join_head(self._merger.merged_head(layout, context))
        css = self._merger.processed_css(
            layout, force_reload=self._force_css_reload, memo=css_memo
        )
        return RenderedPage(
            page_id=page.id,
            layout_id=layout.id,
            content=page.content,
            head=head,
            css=css,
            js=layout.js or "",
            tags=list(context.ensure_tags()),
        )
