from __future__ import annotations

from typing import Mapping

from content_migration.models.trees import ComponentNode
from content_migration.utils.logging import get_logger

logger = get_logger(__name__)


def enrich_component_tree(root: ComponentNode, title_to_resource_type: Mapping[str, str]) -> int:
    """Backfill missing resource types on the component tree from repository titles.

    Only nodes without a type of their own are annotated, through
    ``enriched_resource_type``; a type carried by the model always wins.
    Runs once, before building, so later stages see a read-only tree.

    :return: Number of nodes annotated.
    """
    annotated = 0
    stack = [root]
    while stack:
        node = stack.pop()
        for _, child in node.iter_children():
            stack.append(child)
        if node.resource_type or node.enriched_resource_type:
            continue
        title = node.title
        if not title:
            continue
        resource_type = title_to_resource_type.get(title)
        if resource_type:
            node.enriched_resource_type = resource_type
            annotated += 1
    logger.debug("Enriched %d component nodes with repository resource types", annotated)
    return annotated
