"""
Extractors for the CMS source documents.

This subpackage converts the repository and component documents into node
trees, indexes the repository tree into lookup tables, combines tabs models
and discovers banner images.  None of these functions fetch anything; the
documents must already be loaded.
"""

from .banner_images import extract_banner_images
from .repository_indexer import LookupTables, TeaserImage, index_repository
from .tabs_models import (
    combine_tabs_models,
    find_tabs_paths,
    section_for_tabs_path,
    tabs_model_from_repository,
    top_level_tabs_paths,
)
from .tree_loader import (
    component_tree_from_document,
    load_json_document,
    repository_root,
    repository_tree_from_document,
)

__all__ = [
    "LookupTables",
    "TeaserImage",
    "combine_tabs_models",
    "component_tree_from_document",
    "extract_banner_images",
    "find_tabs_paths",
    "index_repository",
    "load_json_document",
    "repository_root",
    "repository_tree_from_document",
    "section_for_tabs_path",
    "tabs_model_from_repository",
    "top_level_tabs_paths",
]
