"""
Structural cleanup of a raw hierarchy.

Both passes return new node lists and are idempotent: running
:func:`normalize_hierarchy` on its own output yields the same output.
"""

from __future__ import annotations

from typing import List, Optional

from content_migration.models.hierarchy import HierarchyNode

_WRAPPER_TYPES = ("item", "container")
_ADOPTED_FIELDS = ("id", "link_url", "image_url", "text")


def _is_wrapper(node: HierarchyNode) -> bool:
    return node.type in _WRAPPER_TYPES and node.title.startswith("container") and bool(node.items)


def unwrap_structural_containers(nodes: Optional[List[HierarchyNode]]) -> List[HierarchyNode]:
    """Replace a node's lone ``container*`` child by that child's items.

    Repeats until the single child is no longer such a wrapper, then recurses
    into the result.
    """
    result: List[HierarchyNode] = []
    for node in nodes or []:
        items = node.items
        while items and len(items) == 1 and _is_wrapper(items[0]):
            items = items[0].items
        items = unwrap_structural_containers(items)
        result.append(node.model_copy(update={"items": items or None}))
    return result


def merge_duplicate_titles(nodes: Optional[List[HierarchyNode]]) -> List[HierarchyNode]:
    """Collapse a node whose only child repeats its title.

    Runs bottom-up.  The parent adopts the child's items, and any of id,
    link, image or text it does not already carry.
    """
    result: List[HierarchyNode] = []
    for node in nodes or []:
        items = merge_duplicate_titles(node.items)
        update = {"items": items or None}
        if len(items) == 1 and items[0].title == node.title:
            child = items[0]
            update["items"] = child.items
            for name in _ADOPTED_FIELDS:
                if getattr(node, name) is None and getattr(child, name) is not None:
                    update[name] = getattr(child, name)
        result.append(node.model_copy(update=update))
    return result


def normalize_hierarchy(nodes: Optional[List[HierarchyNode]]) -> List[HierarchyNode]:
    return merge_duplicate_titles(unwrap_structural_containers(nodes))
