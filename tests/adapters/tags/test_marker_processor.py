from __future__ import annotations

from adapters.tags.marker_processor import MarkerTagProcessor
from domain.models import LayoutNode, Page
from domain.render_context import RenderContext


def test_page_blocks_replace_tags_and_are_recorded() -> None:
    context = RenderContext(subject=Page(blocks={"title": "Home", "content": "<p>hi</p>"}))

    result = MarkerTagProcessor().process(
        context, "<h1>{{ cms:page:title }}</h1>{{cms:page:content:rich_text}}{{ cms:page:missing }}"
    )

    assert result == "<h1>Home</h1><p>hi</p>"
    assert context.tags == ["cms:page:title", "cms:page:content", "cms:page:missing"]


def test_layout_subject_has_no_blocks() -> None:
    context = RenderContext(subject=LayoutNode(identifier="default"), tags=[])

    result = MarkerTagProcessor().process(context, "body { } {{ cms:page:content }}")

    assert result == "body { } "
    assert context.tags == ["cms:page:content"]


def test_other_markers_are_left_alone() -> None:
    context = RenderContext(subject=Page())

    result = MarkerTagProcessor().process(context, "{{ cms:snippet:footer }} {{ plain }}")

    assert result == "{{ cms:snippet:footer }} {{ plain }}"
    assert context.tags == []


def test_sanitize_neutralises_erb_markers() -> None:
    processor = MarkerTagProcessor()

    assert processor.sanitize("<%= File.read('x') %>") == "&lt;%= File.read('x') %&gt;"
    assert processor.sanitize("") == ""
