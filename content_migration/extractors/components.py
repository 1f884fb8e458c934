from __future__ import annotations

from typing import Optional

from content_migration.models.trees import TreeNode

COMPONENT_NAMESPACE = "tccc-dam/components"


def component_name(resource_type: Optional[str]) -> str:
    """``tccc-dam/components/custom-button`` -> ``custom-button``."""
    if not resource_type:
        return ""
    return resource_type.rstrip("/").rsplit("/", 1)[-1]


def is_component(node: TreeNode, *names: str) -> bool:
    return component_name(node.resource_type) in names


def is_title_marker(node: TreeNode) -> bool:
    """A title component with a ``jcr:title``: the start of a repository section."""
    return is_component(node, "title") and bool(node.get_str("jcr:title"))
