"""
Node kinds for the two input trees.

Both trees are nested key/value documents.  They are modelled here as one
tagged node type with two kinds, each carrying its scalar ``properties`` and
an explicit ordered ``children`` mapping, so traversal code never has to guess
which dictionary entries are child nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, Optional, Tuple


@dataclass
class TreeNode:
    key: str
    properties: Dict[str, Any] = field(default_factory=dict)
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    kind: ClassVar[str] = "node"
    TITLE_FIELDS: ClassVar[Tuple[str, ...]] = ("cq:panelTitle", "jcr:title", "title")

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def get_str(self, name: str) -> Optional[str]:
        """Return property ``name`` as a non-empty string, or ``None``."""
        value = self.properties.get(name)
        if value is None or isinstance(value, (dict, list)):
            return None
        text = str(value)
        return text if text else None

    @property
    def title(self) -> Optional[str]:
        for name in self.TITLE_FIELDS:
            value = self.get_str(name)
            if value:
                return value
        return None

    @property
    def resource_type(self) -> Optional[str]:
        return self.get_str("sling:resourceType")

    @property
    def text(self) -> Optional[str]:
        value = self.properties.get("text")
        return value if isinstance(value, str) and value else None

    def iter_children(self) -> Iterator[Tuple[str, "TreeNode"]]:
        return iter(self.children.items())

    def child(self, key: str) -> Optional["TreeNode"]:
        return self.children.get(key)


@dataclass
class RepositoryNode(TreeNode):
    """A node of the raw content repository (``jcr:content``) tree."""

    kind: ClassVar[str] = "repository"


@dataclass
class ComponentNode(TreeNode):
    """A node of the component (Sling model) tree.

    ``enriched_resource_type`` is the only attribute written after loading;
    it is filled by the enricher when the model itself carries no type.
    ``section`` is the provenance marker naming the repository section the
    node was rendered under, when known.
    """

    enriched_resource_type: Optional[str] = None
    section: Optional[str] = None

    kind: ClassVar[str] = "component"
    TITLE_FIELDS: ClassVar[Tuple[str, ...]] = ("cq:panelTitle", "title", "jcr:title")

    @property
    def resource_type(self) -> Optional[str]:
        # The model's ``:type`` takes priority over the stored resource type.
        return self.get_str(":type") or self.get_str("sling:resourceType")

    @property
    def effective_resource_type(self) -> str:
        return self.resource_type or self.enriched_resource_type or ""

    @property
    def id(self) -> Optional[str]:
        return self.get_str("id")

    def nested_url(self, name: str) -> Optional[str]:
        """Return ``properties[name]["url"]`` for link-like objects."""
        value = self.properties.get(name)
        if isinstance(value, dict):
            url = value.get("url")
            if isinstance(url, str) and url:
                return url
        return None

    @property
    def image_resource(self) -> Dict[str, Any]:
        value = self.properties.get("imageResource")
        return value if isinstance(value, dict) else {}
