from __future__ import annotations

import re
from collections.abc import Mapping

from domain.ports.tags import TagProcessor
from domain.render_context import RenderContext

# {{ cms:page:<name> }} with an optional :<format> suffix (text, rich_text, ...).
PAGE_BLOCK_TAG_RE = re.compile(
    r"\{\{\s*cms:page:(?P<name>[\w-]+)(?::(?P<format>[\w-]*))?\s*\}\}"
)


class MarkerTagProcessor(TagProcessor):
    """Minimal stand-in for the CMS tag engine.

    Page block tags are replaced with the matching entry of the subject's
    ``blocks``; anything else in the text is left alone. Every processed tag
    is recorded on the render context.
    """

    def process(self, context: RenderContext, text: str) -> str:
        tags = context.ensure_tags()
        blocks = _subject_blocks(context)

        def _replace(match: re.Match[str]) -> str:
            name = match.group("name")
            tags.append(f"cms:page:{name}")
            return blocks.get(name, "")

        return PAGE_BLOCK_TAG_RE.sub(_replace, text or "")

    def sanitize(self, text: str) -> str:
        return (text or "").replace("<%", "&lt;%").replace("%>", "%&gt;")


def _subject_blocks(context: RenderContext) -> Mapping[str, str]:
    blocks = getattr(context.subject, "blocks", None)
    return blocks if isinstance(blocks, Mapping) else {}
