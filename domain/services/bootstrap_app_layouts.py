from __future__ import annotations

import logging

from domain.models import DEFAULT_APP_LAYOUT_CONTENT, LayoutNode, Site
from domain.ports.repositories import LayoutRepository
from domain.ports.tags import TemplateDiscovery
from domain.services.manage_layouts import LayoutManager

logger = logging.getLogger(__name__)


class BootstrapAppLayouts:
    """Creates one layout per application template so pages always have one to pick.

    Existing layouts matched by identifier keep their label and content; only
    blank fields are filled in.
    """

    def __init__(
        self,
        layouts: LayoutRepository,
        manager: LayoutManager,
        discovery: TemplateDiscovery,
    ) -> None:
        self._layouts = layouts
        self._manager = manager
        self._discovery = discovery

    def app_layout_names(self) -> list[str]:
        return sorted(set(self._discovery.discover()))

    def run(self, site: Site) -> list[LayoutNode]:
        created: list[LayoutNode] = []
        for app_layout in self.app_layout_names():
            logger.debug("Checking application layout: %s.", app_layout)
            layout = self._layouts.find_by_identifier(site.id, app_layout)
            if layout is None:
                # label stays blank so save() titleizes the identifier
                layout = LayoutNode(site_id=site.id, identifier=app_layout)
            elif not layout.label.strip():
                layout.label = app_layout.capitalize()
            layout.app_layout = app_layout
            if not layout.content:
                layout.content = DEFAULT_APP_LAYOUT_CONTENT
            created.append(self._manager.save(layout))
        return created
