from __future__ import annotations

from typing import Any, Dict, Optional

from content_migration.extractors.banner_images import extract_banner_images
from content_migration.extractors.repository_indexer import index_repository
from content_migration.extractors.tabs_models import tabs_model_from_repository
from content_migration.extractors.tree_loader import (
    component_tree_from_document,
    repository_root,
    repository_tree_from_document,
)
from content_migration.hierarchy.builder import HierarchyBuilder
from content_migration.hierarchy.enricher import enrich_component_tree
from content_migration.hierarchy.normalizer import normalize_hierarchy
from content_migration.hierarchy.repository_sections import RepositorySectionExtractor, collect_titles
from content_migration.hierarchy.sections import group_into_sections
from content_migration.models.hierarchy import HierarchyDocument
from content_migration.utils.logging import get_logger

logger = get_logger(__name__)


def reconcile(
    content_doc: Optional[Dict[str, Any]],
    model_doc: Optional[Dict[str, Any]],
    *,
    content_path: str = "",
    prefix_image_ids: bool = True,
    strip_text_hosts: bool = True,
) -> HierarchyDocument:
    """Run index, enrich, build, normalize and group over two loaded documents.

    ``content_doc`` is the ``jcr:content`` document and ``model_doc`` the
    (possibly combined) component model.  Without a model the tabs found in
    the repository are read in its place.  Sections authored outside tabs
    come first, then the tabs sections, then title-only sections that are
    still missing.  Malformed input yields an empty document, never an
    exception; callers decide whether that is an error.
    """
    repository_tree = repository_tree_from_document(content_doc)
    root = repository_root(repository_tree)
    if model_doc is None:
        model_doc = tabs_model_from_repository(repository_tree)
    component_tree = component_tree_from_document(model_doc)

    tables = index_repository(root)
    if component_tree is not None:
        enrich_component_tree(component_tree, tables.title_to_resource_type)

    options = dict(
        content_path=content_path,
        prefix_image_ids=prefix_image_ids,
        strip_text_hosts=strip_text_hosts,
    )
    raw = HierarchyBuilder(tables, **options).build(component_tree)
    nodes = normalize_hierarchy(raw)
    tabs_sections = group_into_sections(nodes, root)

    extractor = RepositorySectionExtractor(tables, **options)
    existing = collect_titles(tabs_sections)
    outside_tabs = extractor.extract(root, existing)
    existing |= collect_titles(outside_tabs)
    title_only = extractor.extract_sibling_titles(root, existing)
    sections = outside_tabs + tabs_sections + title_only

    banners = extract_banner_images(repository_tree, content_path)
    logger.info(
        "Reconciled %d top-level nodes into %d sections (%d outside tabs, %d banner images)",
        len(nodes), len(sections), len(outside_tabs), len(banners),
    )
    return HierarchyDocument(sections=sections, banner_images=banners)
