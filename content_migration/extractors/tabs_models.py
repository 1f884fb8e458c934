"""
Discovery and combination of tabs component models.

A content store page usually renders several top-level tabs components.  The
caller fetches one ``.model.json`` per tabs path found here, then
:func:`combine_tabs_models` merges them into a single component document.
Each top-level panel is stamped with the repository section it was found
under, which is what the section grouper later relies on.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from content_migration.extractors.components import COMPONENT_NAMESPACE, is_title_marker
from content_migration.extractors.tree_loader import ITEMS_KEY, ORDER_KEY, SECTION_KEY
from content_migration.models.trees import RepositoryNode
from content_migration.utils.logging import get_logger

logger = get_logger(__name__)

COMBINED_TABS_ID = "combined-tabs"


def find_tabs_paths(tree: Optional[RepositoryNode]) -> List[str]:
    """Return every tabs component path as ``/jcr:content/<path>``, in document order."""
    found: List[str] = []

    def _walk(node: RepositoryNode, current: str) -> None:
        for key, child in node.iter_children():
            path = f"{current}/{key}" if current else key
            if "tabs" in (child.resource_type or ""):
                found.append(f"/jcr:content/{path}")
            _walk(child, path)

    if tree is not None:
        _walk(tree, "")
    return found


def top_level_tabs_paths(paths: Sequence[str]) -> List[str]:
    """Keep paths with a single ``/tabs`` segment; nested tabs stay inside their panels."""
    return [p for p in paths if p.count("/tabs") <= 1]


def _first_title(node: RepositoryNode) -> Optional[str]:
    for _, child in node.iter_children():
        if is_title_marker(child):
            return child.get_str("jcr:title")
        found = _first_title(child)
        if found:
            return found
    return None


def section_for_tabs_path(tabs_path: str, tree: Optional[RepositoryNode]) -> Optional[str]:
    """Title of the section a tabs path belongs to.

    The root-level container the path runs through is located (longest
    matching key wins) and the first title component inside it names the
    section.
    """
    if tree is None:
        return None
    root = tree.child("root")
    root_container = root.child("container") if root is not None else None
    if root_container is None:
        return None

    parts = [p for p in tabs_path.split("/") if p and p not in ("jcr:content", "root")]
    root_keys = list(root_container.children)
    matched: Optional[str] = None
    for key in root_keys:
        if key in parts and (matched is None or len(key) > len(matched)):
            matched = key
    if matched is None:
        return None

    container = root_container.child(matched)
    return _first_title(container) if container is not None else None


def combine_tabs_models(
    models: Sequence[Tuple[str, Dict[str, Any]]],
    tree: Optional[RepositoryNode] = None,
) -> Dict[str, Any]:
    """Merge several tabs model documents into one component document.

    :param models: ``(tabs_path, model_document)`` pairs in page order.
    :param tree: The ``jcr:content`` tree used to resolve section provenance.
    :return: A tabs model document whose items are keyed ``<key>__tabs<N>``
        so equal panel keys from different tabs don't overwrite each other.
    """
    combined: Dict[str, Any] = {
        ORDER_KEY: [],
        ITEMS_KEY: {},
        ":type": f"{COMPONENT_NAMESPACE}/tabs",
        "id": COMBINED_TABS_ID,
    }
    for idx, (tabs_path, model) in enumerate(models):
        if not isinstance(model, dict):
            logger.debug("Skipping tabs model %s: not an object", tabs_path)
            continue
        items = model.get(ITEMS_KEY)
        if not isinstance(items, dict):
            continue
        section = section_for_tabs_path(tabs_path, tree)
        order = model.get(ORDER_KEY) or list(items.keys())
        for key in order:
            item = items.get(key)
            if not isinstance(item, dict):
                continue
            entry = dict(item)
            if section:
                entry[SECTION_KEY] = section
            unique_key = f"{key}__tabs{idx}"
            combined[ORDER_KEY].append(unique_key)
            combined[ITEMS_KEY][unique_key] = entry
    return combined


def _component_document(node: RepositoryNode) -> Dict[str, Any]:
    """Rewrite a repository node in the component model's ``:items`` vocabulary."""
    doc: Dict[str, Any] = dict(node.properties)
    keys = [key for key, _ in node.iter_children()]
    if keys:
        doc[ITEMS_KEY] = {key: _component_document(child) for key, child in node.iter_children()}
        doc[ORDER_KEY] = keys
    return doc


def _node_at(tree: RepositoryNode, tabs_path: str) -> Optional[RepositoryNode]:
    node: Optional[RepositoryNode] = tree
    for part in tabs_path.split("/"):
        if not part or part == "jcr:content":
            continue
        node = node.child(part) if node is not None else None
    return node


def tabs_model_from_repository(tree: Optional[RepositoryNode]) -> Optional[Dict[str, Any]]:
    """Build a combined tabs model out of the repository tree alone.

    Used when no component model was fetched for the page.  Every top-level
    tabs component is rewritten as a model document and the results are
    combined as with fetched models, so panels still carry their section.
    Returns ``None`` when the page has no tabs.
    """
    if tree is None:
        return None
    models = []
    for tabs_path in top_level_tabs_paths(find_tabs_paths(tree)):
        node = _node_at(tree, tabs_path)
        if node is not None:
            models.append((tabs_path, _component_document(node)))
    if not models:
        return None
    logger.info("Built %d tabs model(s) from the repository tree", len(models))
    return combine_tabs_models(models, tree)
