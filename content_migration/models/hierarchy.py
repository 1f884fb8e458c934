from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NodeType = Literal[
    "tabs",
    "accordion",
    "container",
    "teaser",
    "button",
    "text",
    "link",
    "item",
    "dropdown",
    "section",
]


class HierarchyNode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(..., min_length=1)
    path: str
    type: NodeType = "item"
    id: Optional[str] = None
    link_url: Optional[str] = Field(None, alias="linkURL")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    text: Optional[str] = None
    items: Optional[List["HierarchyNode"]] = None
    # Provenance only, never serialized.
    section: Optional[str] = Field(None, exclude=True)

    @property
    def children(self) -> List["HierarchyNode"]:
        return list(self.items or [])

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Section(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(..., min_length=1)
    path: str
    type: Literal["section"] = "section"
    id: Optional[str] = None
    link_url: Optional[str] = Field(None, alias="linkURL")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    text: Optional[str] = None
    items: List[HierarchyNode] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class BannerImage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    file_name: str = Field(..., alias="fileName")
    image_url: str = Field(..., alias="imageUrl")
    alt: Optional[str] = None
    resource_type: Optional[str] = Field(None, alias="resourceType")
    last_modified: Optional[Any] = Field(None, alias="lastModified")
    timestamp: Optional[int] = None


class HierarchyDocument(BaseModel):
    """Top-level result handed to the document generation step."""

    model_config = ConfigDict(populate_by_name=True)

    sections: List[Section] = Field(default_factory=list)
    banner_images: List[BannerImage] = Field(default_factory=list, alias="bannerImages")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


HierarchyNode.model_rebuild()
