"""
Sections authored outside any tabs component.

The component model only covers tabs, so titled rows placed directly on the
page (promo strips, button rows, FAQ accordions) are read from the
repository tree here.  A container with a direct ``title`` component opens a
section; the sibling containers after it belong to that section until the
next titled container.  Untitled containers ahead of the first title are
searched for nested sections.

Sections already produced from the component model are skipped by title,
as are sections that hold a carousel.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from content_migration.extractors.components import component_name, is_component, is_title_marker
from content_migration.extractors.repository_indexer import LookupTables, TeaserImage
from content_migration.hierarchy.resolvers import build_teaser_image_url, is_valid_link_url
from content_migration.models.hierarchy import HierarchyNode, Section
from content_migration.models.trees import RepositoryNode
from content_migration.parsers.markup import prettify_key, strip_host, strip_hosts_from_text
from content_migration.utils.logging import get_logger
from content_migration.utils.paths import join_path

logger = get_logger(__name__)

MAX_SCAN_DEPTH = 5
BUTTON_COMPONENTS = ("button", "custom-button")
PANEL_PREFIX = "item_"
TEXT_TITLE = "Text"


@dataclass
class RepositorySection:
    """A titled run of sibling containers, plus any extra titles found beside the first."""

    title: str
    containers: List[Tuple[str, RepositoryNode]] = field(default_factory=list)
    sibling_titles: List[str] = field(default_factory=list)


def deterministic_id(node_type: str, seed: str) -> str:
    """``button`` + ``Shop|button_1`` -> ``button-3f2a9c01d4``; stable across runs."""
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()[:10]
    return f"{node_type}-{digest}"


def direct_titles(node: RepositoryNode) -> List[str]:
    return [child.get_str("jcr:title") for _, child in node.iter_children() if is_title_marker(child)]


def has_carousel(node: RepositoryNode) -> bool:
    return any(is_component(child, "carousel") for _, child in node.iter_children())


def scan_repository_sections(node: RepositoryNode, path: str = "", depth: int = 0) -> List[RepositorySection]:
    """Titled sections among the containers below ``node``, in document order."""
    if depth > MAX_SCAN_DEPTH:
        return []
    found: List[RepositorySection] = []
    current: Optional[RepositorySection] = None
    for key, child in node.iter_children():
        if not is_component(child, "container"):
            continue
        child_path = f"{path}/{key}"
        titles = direct_titles(child)
        if titles:
            if current is not None:
                found.append(current)
            current = RepositorySection(titles[0], [(child_path, child)], titles[1:])
        elif current is not None:
            current.containers.append((child_path, child))
        else:
            found.extend(scan_repository_sections(child, child_path, depth + 1))
    if current is not None:
        found.append(current)
    return found


def collect_titles(nodes: Iterable) -> Set[str]:
    """Every title in a list of sections or nodes, nested items included."""
    titles: Set[str] = set()
    for node in nodes:
        titles.add(node.title)
        titles.update(collect_titles(node.items or []))
    return titles


class RepositorySectionExtractor:
    """Turns titled repository containers into :class:`Section` objects.

    Buttons, accordion panels, teasers and text are read directly from the
    repository; nested containers are searched, while tabs and carousels are
    left alone.
    """

    def __init__(
        self,
        tables: LookupTables,
        *,
        content_path: str = "",
        prefix_image_ids: bool = True,
        strip_text_hosts: bool = True,
    ) -> None:
        self.tables = tables
        self.content_path = content_path
        self.prefix_image_ids = prefix_image_ids
        self.strip_text_hosts = strip_text_hosts
        self._teasers = {t.repository_path: t for t in tables.teaser_image_map.values()}

    def extract(self, repository_root: Optional[RepositoryNode], existing_titles: Iterable[str] = ()) -> List[Section]:
        scanned = self._scan(repository_root)
        skip = set(existing_titles)
        sections: List[Section] = []
        for found in scanned:
            if found.title in skip:
                logger.debug("Skipping repository section %r: already in the hierarchy", found.title)
                continue
            if any(has_carousel(container) for _, container in found.containers):
                logger.debug("Skipping carousel section %r", found.title)
                continue
            items: List[HierarchyNode] = []
            for path, container in found.containers:
                items.extend(self._collect(container, path, found.title))
            if items:
                skip.add(found.title)
                sections.append(Section(title=found.title, path=found.title, items=items))
        if sections:
            logger.info("Sections outside tabs: %s", ", ".join(s.title for s in sections))
        return sections

    def extract_sibling_titles(
        self, repository_root: Optional[RepositoryNode], existing_titles: Iterable[str] = ()
    ) -> List[Section]:
        """Title-only sections for containers that hold several titles side by side."""
        skip = set(existing_titles)
        sections: List[Section] = []
        for found in self._scan(repository_root):
            if not found.sibling_titles:
                continue
            for title in [found.title] + found.sibling_titles:
                if title not in skip:
                    skip.add(title)
                    sections.append(Section(title=title, path=title))
        return sections

    def _scan(self, repository_root: Optional[RepositoryNode]) -> List[RepositorySection]:
        container = repository_root.child("container") if repository_root is not None else None
        if container is None:
            return []
        return scan_repository_sections(container, "/container")

    def _collect(self, node: RepositoryNode, path: str, section_title: str) -> List[HierarchyNode]:
        items: List[HierarchyNode] = []
        for key, child in node.iter_children():
            child_path = f"{path}/{key}"
            name = component_name(child.resource_type)
            if name in BUTTON_COMPONENTS:
                items.append(self._button(key, child, section_title))
            elif name == "accordion":
                items.extend(self._accordion_panels(child, section_title))
            elif name == "teaser":
                items.append(self._teaser(key, child, child_path, section_title))
            elif name == "text" and child.text:
                items.append(self._text(key, child.text, section_title))
            elif name == "container":
                text = self._only_text(child)
                if text:
                    items.append(self._text(key, text, section_title))
                else:
                    items.extend(self._collect(child, child_path, section_title))
        return items

    def _link(self, url: Optional[str]) -> Optional[str]:
        if not is_valid_link_url(url):
            return None
        if self.strip_text_hosts:
            relative = strip_host(url)
            if is_valid_link_url(relative):
                return relative
        return url

    def _rich_text(self, text: Optional[str]) -> Optional[str]:
        if text and self.strip_text_hosts:
            return strip_hosts_from_text(text)
        return text

    def _button(self, key: str, node: RepositoryNode, section_title: str) -> HierarchyNode:
        title = node.get_str("jcr:title") or prettify_key(key) or key
        return HierarchyNode(
            title=title,
            path=join_path(section_title, title),
            type="button",
            id=deterministic_id("button", f"{title}|{key}"),
            link_url=self._link(node.get_str("searchLink") or node.get_str("linkURL")),
        )

    def _accordion_panels(self, node: RepositoryNode, section_title: str) -> List[HierarchyNode]:
        panels: List[HierarchyNode] = []
        for key, panel in node.iter_children():
            if not key.startswith(PANEL_PREFIX):
                continue
            title = panel.title or prettify_key(key) or key
            parts = [child.text for k, child in panel.iter_children() if k.startswith("text") and child.text]
            panels.append(
                HierarchyNode(
                    title=title,
                    path=join_path(section_title, title),
                    type="accordion",
                    id=deterministic_id("accordion", f"{title}|{key}"),
                    text=self._rich_text("\n".join(parts)) if parts else None,
                )
            )
        return panels

    def _teaser(self, key: str, node: RepositoryNode, path: str, section_title: str) -> HierarchyNode:
        title = node.get_str("jcr:title") or prettify_key(key) or key
        node_id = deterministic_id("teaser", f"{title}|{key}")
        return HierarchyNode(
            title=title,
            path=join_path(section_title, title),
            type="teaser",
            id=node_id,
            link_url=self._link(node.get_str("linkURL")),
            image_url=self._teaser_image(self._teasers.get(path), node_id),
        )

    def _teaser_image(self, teaser: Optional[TeaserImage], node_id: str) -> Optional[str]:
        if teaser is None or not teaser.has_image:
            return None
        return build_teaser_image_url(
            self.content_path,
            teaser.repository_path,
            teaser.file_name,
            teaser.last_modified,
            node_id if self.prefix_image_ids else None,
        )

    def _text(self, key: str, text: str, section_title: str) -> HierarchyNode:
        return HierarchyNode(
            title=TEXT_TITLE,
            path=join_path(section_title, TEXT_TITLE),
            type="text",
            id=deterministic_id("text", f"{section_title}|{key}"),
            text=self._rich_text(text),
        )

    @staticmethod
    def _only_text(node: RepositoryNode) -> Optional[str]:
        """Joined text of a container whose typed children are all text components."""
        parts: List[str] = []
        for _, child in node.iter_children():
            if is_component(child, "text") and child.text:
                parts.append(child.text)
            elif child.resource_type:
                return None
        return "\n".join(parts) if parts else None


def extract_repository_sections(
    repository_root: Optional[RepositoryNode],
    tables: LookupTables,
    existing_titles: Iterable[str] = (),
    **options,
) -> List[Section]:
    """Functional form of :meth:`RepositorySectionExtractor.extract`."""
    return RepositorySectionExtractor(tables, **options).extract(repository_root, existing_titles)
