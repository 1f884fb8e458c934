"""
Hierarchy builder: component tree + lookup tables -> raw hierarchy.

The component tree decides ordering and nesting; everything it lacks (links,
text, teaser images) is recovered from the repository lookup tables through
context keys.  Two paths are carried through the descent:

``key_path``
    ``/``-joined component keys, used to match repository context.  Keys keep
    structural segments (``tabs``, ``container_*``) so lookups stay scoped.
``display_path``
    Titles joined by :data:`PATH_SEPARATOR`, without structural or repeated
    titles.  This becomes :attr:`HierarchyNode.path`.

Per-node anomalies never raise: a node that cannot be titled or classified
degrades to a spliced subtree or to type ``item``.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Set, Tuple

from content_migration.extractors.components import component_name
from content_migration.extractors.repository_indexer import (
    ROOT_PARENT_KEY,
    LookupTables,
    TeaserImage,
    parse_timestamp,
)
from content_migration.hierarchy.resolvers import (
    build_teaser_image_url,
    first_resolved,
    is_valid_link_url,
    lookup,
)
from content_migration.models.hierarchy import HierarchyNode
from content_migration.models.trees import ComponentNode
from content_migration.parsers.markup import (
    has_markup,
    markup_to_text,
    prettify_key,
    strip_host,
    strip_hosts_from_text,
)
from content_migration.utils.logging import get_logger
from content_migration.utils.paths import (
    is_generic_container_title,
    is_structural_name,
    join_path,
    key_path_segments,
    split_path,
)

logger = get_logger(__name__)

_TABS_SUFFIX_RE = re.compile(r"__tabs\d+$")
_ID_PREFIX_TYPES = {"button", "accordion", "tabs", "container", "text"}
MAX_TITLE_LENGTH = 200

Children = Iterable[Tuple[str, ComponentNode]]


def model_key(key: str) -> str:
    """Strip the ``__tabsN`` suffix added when tabs models are combined."""
    return _TABS_SUFFIX_RE.sub("", key)


def classify_node(key: str, node: ComponentNode) -> str:
    resource_type = node.effective_resource_type
    for needle in ("tabs", "accordion", "container", "text"):
        if needle in resource_type:
            return needle
    if key.startswith("teaser") or "teaser" in resource_type:
        return "teaser"
    if "button" in resource_type:
        return "button"

    # No usable resource type: fall back to the id prefix.
    ident = node.id or ""
    if ident.startswith("custom-button-"):
        return "button"
    prefix = ident.split("-")[0]
    if prefix in _ID_PREFIX_TYPES:
        return prefix
    return "item"


def _is_text_child(key: str, node: ComponentNode) -> bool:
    if not node.text:
        return False
    return key == "text" or key.startswith("text_") or component_name(node.effective_resource_type) == "text"


def _with_section(node: HierarchyNode, section: Optional[str]) -> HierarchyNode:
    if section and not node.section:
        return node.model_copy(update={"section": section})
    return node


def child_display_path(parent_display: str, title: str) -> str:
    """Append ``title`` unless it is structural or already part of the path."""
    if is_structural_name(title) or title in split_path(parent_display):
        return parent_display
    return join_path(parent_display, title)


class HierarchyBuilder:
    """Recursive descent over an enriched component tree.

    :param tables: Lookup tables from :func:`index_repository`.
    :param content_path: Content path prefix used in teaser image URLs.
    :param prefix_image_ids: Prefix image file names with the component id.
    :param strip_text_hosts: Make absolute links inside rich text host-relative
        and resolved links host-relative when the path alone is still a valid link.
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

    def build(self, root: Optional[ComponentNode]) -> List[HierarchyNode]:
        if not isinstance(root, ComponentNode):
            return []
        return self._build_children(root.iter_children(), "", "")

    def _build_children(self, children: Children, key_path: str, display_path: str) -> List[HierarchyNode]:
        result: List[HierarchyNode] = []
        for key, node in children:
            if isinstance(node, ComponentNode):
                result.extend(self._build_node(key, node, key_path, display_path))
        return result

    def _build_node(self, key: str, node: ComponentNode, parent_key_path: str, display_path: str) -> List[HierarchyNode]:
        name = model_key(key)
        key_path = f"{parent_key_path}/{name}"
        raw_title = node.title or node.text

        # Untitled tabs are pure structure: splice their panels in place.
        if not raw_title and (name == "tabs" or name.startswith("tabs_")):
            return self._build_children(node.iter_children(), key_path, display_path)

        title = raw_title or name
        if not title:
            return []

        if has_markup(title):
            if "text" not in node.effective_resource_type:
                return self._build_children(node.iter_children(), key_path, display_path)
            cleaned = markup_to_text(title)
            title = cleaned if cleaned and len(cleaned) < MAX_TITLE_LENGTH else (prettify_key(name) or name)

        # Synthetic button grouping wrapper: promote its buttons, keeping provenance.
        if name.startswith("button_container_") and title == name:
            children = self._build_children(node.iter_children(), key_path, display_path)
            return [_with_section(child, node.section) for child in children]

        node_type = classify_node(name, node)
        own_display = child_display_path(display_path, title)
        segments = list(key_path_segments(key_path))
        parent_key = segments[-2] if len(segments) > 1 else ROOT_PARENT_KEY
        teaser = self.tables.teaser_image_map.get(key_path)

        link_url = self._resolve_link(name, node, node_type, title, parent_key, teaser)
        text, consumed = self._resolve_text(name, node, node_type, title, parent_key, key_path)
        image_url = self._resolve_image(node, node_type, teaser) if node_type == "teaser" else None

        remaining = [(k, child) for k, child in node.iter_children() if k not in consumed]
        items = self._build_children(remaining, key_path, own_display)

        if node_type == "container" and is_generic_container_title(title) and not text:
            return [_with_section(child, node.section) for child in items]

        return [
            HierarchyNode(
                title=title,
                path=own_display or title,
                type=node_type,
                id=node.id,
                link_url=link_url,
                image_url=image_url,
                text=text,
                items=items or None,
                section=node.section,
            )
        ]

    def _resolve_link(
        self,
        key: str,
        node: ComponentNode,
        node_type: str,
        title: str,
        parent_key: str,
        teaser: Optional[TeaserImage],
    ) -> Optional[str]:
        resolvers = [
            lambda: node.get_str("linkURL"),
            lambda: node.nested_url("buttonLink"),
            lambda: node.nested_url("link"),
            lambda: node.get_str("searchLink"),
            lambda: teaser.link_url if teaser is not None else None,
        ]
        if node_type == "button":
            links = self.tables.context_link_map
            resolvers += [
                lookup(links, f"{title}|{parent_key}"),
                lookup(links, key),
                lookup(links, title),
            ]
        link = first_resolved(resolvers, accept=is_valid_link_url)
        if link and self.strip_text_hosts:
            relative = strip_host(link)
            if is_valid_link_url(relative):
                return relative
        return link

    def _resolve_text(
        self,
        key: str,
        node: ComponentNode,
        node_type: str,
        title: str,
        parent_key: str,
        key_path: str,
    ) -> Tuple[Optional[str], Set[str]]:
        consumed: Set[str] = set()
        text: Optional[str] = None

        if node_type == "text" and node.text:
            text = node.text
        else:
            text_children = [(k, child) for k, child in node.iter_children() if _is_text_child(k, child)]
            if text_children:
                text = "\n".join(child.text for _, child in text_children)
                consumed = {k for k, _ in text_children}

        if not text:
            texts = self.tables.context_text_map
            if node_type == "container" and parent_key.startswith("accordion") and key == "item_1":
                # Accordion panels often share one title; only path-scoped keys are trusted here.
                text = self._best_accordion_text(title, parent_key, key_path)
            else:
                resolvers = [
                    lookup(texts, f"{title}|{parent_key}|{key_path}"),
                    lookup(texts, f"{title}|{parent_key}"),
                    lookup(texts, key),
                    lookup(texts, f"{key}|{parent_key}"),
                ]
                if key.startswith("container"):
                    resolvers.append(lambda: self._orphaned_child_text(key))
                text = first_resolved(resolvers)

        if text and self.strip_text_hosts:
            text = strip_hosts_from_text(text)
        return text, consumed

    def _best_accordion_text(self, title: str, parent_key: str, key_path: str) -> Optional[str]:
        texts = self.tables.context_text_map
        marker = f"|{parent_key}|"
        segments = list(key_path_segments(key_path))
        best_key: Optional[str] = None
        best_score = -1
        for candidate in texts:
            if not candidate.startswith(f"{title}|") or marker not in candidate:
                continue
            repository_path = candidate.split(marker, 1)[1]
            if "/" not in repository_path:
                continue
            score = sum(1 for seg in segments if f"/{seg}" in repository_path)
            if score > best_score:
                best_key, best_score = candidate, score
        return texts[best_key] if best_key is not None else None

    def _orphaned_child_text(self, key: str) -> Optional[str]:
        suffix = f"|{key}"
        texts = self.tables.context_text_map
        for candidate, value in texts.items():
            if candidate.endswith(suffix):
                return value
        return None

    def _resolve_image(self, node: ComponentNode, node_type: str, teaser: Optional[TeaserImage]) -> Optional[str]:
        resolved = first_resolved(
            [lambda: teaser],
            accept=lambda t: (t.has_image or t.has_link) and bool(t.file_name),
        )
        if resolved is None:
            return None
        last_modified = resolved.last_modified
        own = node.image_resource
        if own.get("fileName") == resolved.file_name:
            own_stamp = parse_timestamp(own.get("jcr:lastModified"))
            if own_stamp is not None:
                last_modified = own_stamp
        if last_modified is None:
            logger.debug("Teaser %s has no image timestamp", resolved.repository_path)
            return None
        return build_teaser_image_url(
            self.content_path,
            resolved.repository_path,
            resolved.file_name,
            last_modified,
            node.id if self.prefix_image_ids else None,
        )


def build_hierarchy(
    root: Optional[ComponentNode],
    tables: LookupTables,
    **options,
) -> List[HierarchyNode]:
    """Functional form of :meth:`HierarchyBuilder.build`."""
    return HierarchyBuilder(tables, **options).build(root)
