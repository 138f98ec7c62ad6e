from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from domain.models import LayoutNode, Page

# Processed css keyed by layout id. Owned by one render pass.
CssMemo = Dict[str, str]


@dataclass
class RenderContext:
    """State threaded through one render pass.

    ``subject`` is what placeholder markers are resolved against: the page
    being rendered, or a layout when its css is processed on its own.
    ``tags`` collects whatever the tag processor records while it runs and
    must not be shared between renders of different pages.
    """

    subject: Union[Page, LayoutNode]
    tags: Optional[List[str]] = None

    def ensure_tags(self) -> List[str]:
        if self.tags is None:
            self.tags = []
        return self.tags
