from __future__ import annotations

from collections.abc import Sequence

from domain.errors import StructuralError
from domain.models import LayoutNode
from domain.ports.repositories import LayoutRepository

DEFAULT_SPACER = ". . "

LayoutOption = tuple[str, str]


def options_for_select(
    layouts: LayoutRepository,
    site_id: str,
    exclude: LayoutNode | None = None,
    start: LayoutNode | Sequence[LayoutNode] | None = None,
    depth: int = 0,
    spacer: str = DEFAULT_SPACER,
) -> list[LayoutOption]:
    """Flatten the layout tree into indented ``(label, id)`` pairs.

    The excluded layout is skipped together with its whole subtree, which is
    what a "parent layout" picker needs when editing that layout.
    """
    if start is None:
        nodes: Sequence[LayoutNode] = layouts.roots(site_id)
    elif isinstance(start, LayoutNode):
        nodes = [start]
    else:
        nodes = start
    excluded_id = exclude.id if exclude is not None else None
    options = _collect(layouts, nodes, excluded_id, depth, spacer, set())
    return [option for option in options if option is not None]


def _collect(
    layouts: LayoutRepository,
    nodes: Sequence[LayoutNode],
    excluded_id: str | None,
    depth: int,
    spacer: str,
    path: set[str],
) -> list[LayoutOption]:
    out: list[LayoutOption] = []
    for node in nodes:
        if node.id == excluded_id:
            continue
        if node.id in path:
            msg = f"Layout {node.identifier!r} is its own ancestor"
            raise StructuralError(msg)
        out.append((f"{spacer * depth}{node.label}", node.id))
        path.add(node.id)
        out.extend(
            _collect(layouts, layouts.children(node.id), excluded_id, depth + 1, spacer, path)
        )
        path.discard(node.id)
    return out
