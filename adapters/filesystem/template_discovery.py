from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from domain.ports.tags import TemplateDiscovery

TEMPLATE_GLOB = "**/*.html.*"


class FileSystemTemplateDiscovery(TemplateDiscovery):
    def __init__(self, root: Path) -> None:
        self._root = root

    def discover(self) -> list[str]:
        if not self._root.is_dir():
            return []
        names = {
            name for name in (self._template_name(path) for path in self._iter_paths()) if name
        }
        return sorted(names)

    def _iter_paths(self) -> Iterable[Path]:
        for path in self._root.glob(TEMPLATE_GLOB):
            if path.is_file():
                yield path

    def _template_name(self, path: Path) -> str | None:
        if path.name.startswith("_"):
            return None
        relative = path.relative_to(self._root).as_posix()
        return relative.split(".")[0]
