from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import orjson
from filelock import FileLock

from adapters.memory.repositories import InMemoryContentState
from domain.models import LayoutNode, Page, Site

logger = logging.getLogger(__name__)

_DUMP_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS


class FileSystemContentState(InMemoryContentState):
    """Content state backed by a single JSON document shared between processes.

    Reads reload the document. Mutations reload, apply and rewrite it while
    holding ``<store>.lock``, so a CLI run and a web server working on the
    same file see each other's writes, cache invalidations included.
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._lock = FileLock(str(path.with_suffix(f"{path.suffix}.lock")))
        self.reload()

    def reload(self) -> None:
        payload = self._read_payload()
        self.sites = {site.id: site for site in _load_models(Site, payload.get("sites"))}
        self.layouts = {
            layout.id: layout for layout in _load_models(LayoutNode, payload.get("layouts"))
        }
        self.pages = {page.id: page for page in _load_models(Page, payload.get("pages"))}

    def refresh(self) -> None:
        with self._lock:
            self.reload()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            self.reload()
            yield
            self.commit()

    def commit(self) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            staging = self.path.with_suffix(f"{self.path.suffix}.tmp")
            staging.write_bytes(orjson.dumps(self.to_dict(), option=_DUMP_OPTIONS))
            staging.replace(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sites": [site.model_dump(mode="json") for site in self.sites.values()],
            "layouts": [layout.model_dump(mode="json") for layout in self.layouts.values()],
            "pages": [page.model_dump(mode="json") for page in self.pages.values()],
        }

    def _read_payload(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug("Content store %s does not exist yet.", self.path)
            return {}
        payload = orjson.loads(self.path.read_bytes())
        return payload if isinstance(payload, dict) else {}


def _load_models(model: Any, raw: Any) -> list[Any]:
    if not isinstance(raw, list):
        return []
    return [model.model_validate(item) for item in raw if isinstance(item, dict)]
