"""
Data models shared by every stage.

Input trees are plain dataclasses (:mod:`.trees`); the canonical output is a
set of frozen pydantic models (:mod:`.hierarchy`).
"""

from .hierarchy import BannerImage, HierarchyDocument, HierarchyNode, NodeType, Section
from .trees import ComponentNode, RepositoryNode, TreeNode

__all__ = [
    "BannerImage",
    "ComponentNode",
    "HierarchyDocument",
    "HierarchyNode",
    "NodeType",
    "RepositoryNode",
    "Section",
    "TreeNode",
]
