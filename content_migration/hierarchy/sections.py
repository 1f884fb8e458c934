"""
Partition of the normalized top-level nodes into named sections.

Sections are discovered in the repository tree: a ``title`` component with a
``jcr:title`` opens a section, and the ``container``/``tabs`` siblings after
it belong to that section.  Membership of hierarchy nodes comes from the
provenance recorded on them while building.  When the repository carries no
markers, or no node matches any marker, nodes are grouped by the first
segment of their own path instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from content_migration.extractors.components import is_component, is_title_marker
from content_migration.models.hierarchy import HierarchyNode, Section
from content_migration.models.trees import RepositoryNode
from content_migration.utils.logging import get_logger
from content_migration.utils.paths import clean_path, has_prefix, join_path, split_path

logger = get_logger(__name__)


@dataclass(frozen=True)
class SectionMarker:
    title: str


def _scan(node: RepositoryNode) -> List[SectionMarker]:
    found: List[SectionMarker] = []
    current: Optional[SectionMarker] = None
    for _, child in node.iter_children():
        if is_title_marker(child):
            if current is not None:
                found.append(current)
            current = SectionMarker(title=child.get_str("jcr:title"))
        if is_component(child, "container"):
            found.extend(_scan(child))
    if current is not None:
        found.append(current)
    return found


def extract_section_markers(repository_root: Optional[RepositoryNode]) -> List[SectionMarker]:
    """Section markers under ``root/container``, first occurrence of each title kept."""
    if repository_root is None:
        return []
    container = repository_root.child("container")
    if container is None:
        return []
    unique: List[SectionMarker] = []
    seen = set()
    for marker in _scan(container):
        if marker.title not in seen:
            seen.add(marker.title)
            unique.append(marker)
    return unique


def prefix_paths(nodes: Optional[List[HierarchyNode]], prefix: str) -> List[HierarchyNode]:
    """Prefix every path with ``prefix`` unless already prefixed, recursively."""
    result: List[HierarchyNode] = []
    for node in nodes or []:
        path = node.path if has_prefix(node.path, prefix) else join_path(prefix, node.path)
        path = clean_path(path) or path
        items = prefix_paths(node.items, path)
        result.append(node.model_copy(update={"path": path, "items": items or None}))
    return result


def _make_section(title: str, items: Optional[List[HierarchyNode]]) -> Section:
    return Section(title=title, path=title, items=prefix_paths(items, title))


def _promote(title: str, member: HierarchyNode) -> Section:
    """The lone member named like its section becomes the section itself."""
    return Section(
        title=title,
        path=title,
        id=member.id,
        link_url=member.link_url,
        image_url=member.image_url,
        text=member.text,
        items=prefix_paths(member.items, title),
    )


def _group_by_markers(
    nodes: List[HierarchyNode], markers: List[SectionMarker]
) -> Tuple[List[Section], List[HierarchyNode]]:
    sections: List[Section] = []
    matched = set()
    for marker in markers:
        members = [(idx, n) for idx, n in enumerate(nodes) if n.section == marker.title]
        if not members:
            continue
        matched.update(idx for idx, _ in members)
        if len(members) == 1 and members[0][1].title.strip() == marker.title.strip():
            sections.append(_promote(marker.title, members[0][1]))
        else:
            sections.append(_make_section(marker.title, [n for _, n in members]))
        logger.info("  - %s (%d)", marker.title, len(members))
    unmatched = [n for idx, n in enumerate(nodes) if idx not in matched]
    return sections, unmatched


def group_by_first_path_segment(nodes: List[HierarchyNode]) -> List[Section]:
    groups: Dict[str, List[HierarchyNode]] = {}
    for node in nodes:
        parts = split_path(node.path)
        key = parts[0] if len(parts) > 1 else node.title
        groups.setdefault(key, []).append(node)
    return [_make_section(title, members) for title, members in groups.items()]


def group_into_sections(
    nodes: Optional[List[HierarchyNode]],
    repository_root: Optional[RepositoryNode],
) -> List[Section]:
    """Group top-level nodes into :class:`Section` objects.

    Parameters
    ----------
    nodes:
        Normalized top-level hierarchy nodes.
    repository_root:
        The ``root`` node of the repository tree, searched for section markers.

    Returns
    -------
    list of Section
        Marker sections in marker order followed by path-grouped sections for
        nodes without a marker; path-grouped sections only when no marker
        matched anything.
    """
    nodes = list(nodes or [])
    markers = extract_section_markers(repository_root)
    if markers:
        logger.info("Repository sections detected: %s", ", ".join(m.title for m in markers))
        sections, unmatched = _group_by_markers(nodes, markers)
        if any(s.items for s in sections):
            if unmatched:
                logger.warning("%d top-level nodes carry no section marker", len(unmatched))
                sections.extend(group_by_first_path_segment(unmatched))
            return sections
    else:
        logger.info("No repository sections detected, grouping by path")
    return group_by_first_path_segment(nodes)
