from __future__ import annotations

import pytest

from adapters.memory.repositories import ContentRepositories
from domain.errors import StructuralError
from domain.models import LayoutNode, Site
from domain.services.layout_options import options_for_select
from domain.services.manage_layouts import LayoutManager
from tests.helpers.layout_fixtures import store_layout


@pytest.fixture
def tree(site: Site, manager: LayoutManager) -> dict[str, LayoutNode]:
    default = manager.save(LayoutNode(site_id=site.id, identifier="default"))
    nested = manager.save(
        LayoutNode(site_id=site.id, identifier="nested", parent_id=default.id)
    )
    deep = manager.save(LayoutNode(site_id=site.id, identifier="deep", parent_id=nested.id))
    sidebar = manager.save(
        LayoutNode(site_id=site.id, identifier="sidebar", parent_id=default.id)
    )
    blank = manager.save(LayoutNode(site_id=site.id, identifier="blank"))
    return {
        "default": default,
        "nested": nested,
        "deep": deep,
        "sidebar": sidebar,
        "blank": blank,
    }


def test_options_are_depth_first_and_indented(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    options = options_for_select(repos.layouts, site.id)

    assert options == [
        ("Default", tree["default"].id),
        (". . Nested", tree["nested"].id),
        (". . . . Deep", tree["deep"].id),
        (". . Sidebar", tree["sidebar"].id),
        ("Blank", tree["blank"].id),
    ]


def test_excluded_layout_skips_its_subtree(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    options = options_for_select(repos.layouts, site.id, exclude=tree["default"])

    assert options == [("Blank", tree["blank"].id)]


def test_excluding_inner_layout_keeps_siblings(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    options = options_for_select(repos.layouts, site.id, exclude=tree["nested"])

    assert [layout_id for _, layout_id in options] == [
        tree["default"].id,
        tree["sidebar"].id,
        tree["blank"].id,
    ]


def test_explicit_start_depth_and_spacer(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    options = options_for_select(
        repos.layouts, site.id, start=tree["nested"], depth=1, spacer="--"
    )

    assert options == [("--Nested", tree["nested"].id), ("----Deep", tree["deep"].id)]


def test_start_may_be_a_sequence(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    options = options_for_select(repos.layouts, site.id, start=[tree["blank"], tree["deep"]])

    assert options == [("Blank", tree["blank"].id), ("Deep", tree["deep"].id)]


def test_other_sites_are_not_listed(
    repos: ContentRepositories, site: Site, tree: dict[str, LayoutNode]
) -> None:
    assert options_for_select(repos.layouts, "site-2") == []


def test_cycle_reachable_from_start_raises(repos: ContentRepositories, site: Site) -> None:
    layout_a = store_layout(repos.layouts, "a", parent_id="b")
    store_layout(repos.layouts, "b", parent_id="a")

    with pytest.raises(StructuralError):
        options_for_select(repos.layouts, site.id, start=layout_a)
