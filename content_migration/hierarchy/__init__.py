"""
Reconciliation of the component tree against the repository lookup tables.

Stages run in order: :func:`enrich_component_tree`, :class:`HierarchyBuilder`,
:func:`normalize_hierarchy` and :func:`group_into_sections`; sections authored
outside tabs come from :class:`RepositorySectionExtractor`.
:func:`reconcile` chains them over two loaded documents.
"""

from .builder import HierarchyBuilder, build_hierarchy, classify_node
from .enricher import enrich_component_tree
from .normalizer import merge_duplicate_titles, normalize_hierarchy, unwrap_structural_containers
from .pipeline import reconcile
from .repository_sections import RepositorySectionExtractor, extract_repository_sections
from .resolvers import build_teaser_image_url, first_resolved, is_valid_link_url
from .sections import SectionMarker, extract_section_markers, group_into_sections

__all__ = [
    "HierarchyBuilder",
    "RepositorySectionExtractor",
    "SectionMarker",
    "build_hierarchy",
    "build_teaser_image_url",
    "classify_node",
    "enrich_component_tree",
    "extract_repository_sections",
    "extract_section_markers",
    "first_resolved",
    "group_into_sections",
    "is_valid_link_url",
    "merge_duplicate_titles",
    "normalize_hierarchy",
    "reconcile",
    "unwrap_structural_containers",
]
