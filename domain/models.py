from __future__ import annotations

import uuid
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_APP_LAYOUT_CONTENT = "{{ cms:page:content:text }}"


def _new_id() -> str:
    return uuid.uuid4().hex


class Site(BaseModel):
    id: str = Field(default_factory=_new_id)
    identifier: str = Field(..., min_length=1)
    label: str = ""


class LayoutNode(BaseModel):
    id: str = Field(default_factory=_new_id)
    site_id: Optional[str] = None
    identifier: str = ""
    label: str = ""
    content: Optional[str] = None
    head: Optional[str] = None
    css: Optional[str] = None
    js: Optional[str] = None
    parent_id: Optional[str] = None
    position: int = 0
    app_layout: Optional[str] = None

    @field_validator("parent_id", "site_id", "app_layout", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def content_text(self) -> str:
        return self.content or ""

    def head_text(self) -> str:
        return self.head or ""

    def css_text(self) -> str:
        return self.css or ""


class Page(BaseModel):
    id: str = Field(default_factory=_new_id)
    site_id: Optional[str] = None
    label: str = ""
    layout_id: Optional[str] = None
    blocks: Dict[str, str] = Field(default_factory=dict)
    # Rendered layout content; None means it has to be rebuilt on next render.
    content: Optional[str] = None


def sort_layouts(layouts: list[LayoutNode]) -> list[LayoutNode]:
    return sorted(layouts, key=lambda layout: (layout.position, layout.identifier))
