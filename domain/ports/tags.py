from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from domain.render_context import RenderContext


class TagProcessor(Protocol):
    def process(self, context: RenderContext, text: str) -> str: ...

    def sanitize(self, text: str) -> str: ...


class TemplateDiscovery(Protocol):
    def discover(self) -> Sequence[str]: ...
