"""
Lookup tables derived from the content repository tree.

The repository tree is authoritative for resource classification, button
links, inline text and teaser image metadata, but it shares no primary key
with the component tree.  :func:`index_repository` walks it once and records
each of those facts under context keys of decreasing specificity so the
builder can match component nodes back to their repository counterparts:

``title|parentKey|path``
    Unique per repository node (text only).
``title|parentKey``
    Disambiguates equal titles under different parents.
``key`` / ``title``
    Last-resort keys; the first node to claim one keeps it.

Only facts that are present are recorded: a button without a link leaves no
entry at all, so a same-titled button elsewhere that does have a link is not
shadowed by an empty value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from content_migration.models.trees import RepositoryNode
from content_migration.utils.logging import get_logger

logger = get_logger(__name__)

ROOT_PARENT_KEY = "root"
TEASER_PREFIX = "teaser"
MODEL_ITEM_PREFIX = "item_"
_REPOSITORY_DATE_FORMAT = "%a %b %d %Y %H:%M:%S GMT%z"


@dataclass(frozen=True)
class TeaserImage:
    """Image and link payload of one repository teaser."""

    model_path: str
    repository_path: str
    key: str
    file_name: Optional[str] = None
    last_modified: Optional[int] = None
    link_url: Optional[str] = None
    title: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.file_name) and self.last_modified is not None

    @property
    def has_link(self) -> bool:
        return bool(self.link_url)


def _frozen(data: Dict[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class LookupTables:
    """Read-only maps built once per run and shared by every later stage."""

    title_to_resource_type: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    context_link_map: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    context_text_map: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    teaser_image_map: Mapping[str, TeaserImage] = field(default_factory=lambda: _frozen({}))


def parse_timestamp(value: Any) -> Optional[int]:
    """Convert a repository date to epoch milliseconds.

    Accepts epoch numbers, numeric strings, ISO-8601 strings and the
    ``Wed Aug 14 2024 12:34:56 GMT-0400`` form used by ``infinity.json``.
    Returns ``None`` for anything else.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.isdigit():
        return int(raw)
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        # Drop a trailing "(Time Zone Name)" if present.
        raw = raw.split(" (", 1)[0]
        try:
            parsed = datetime.strptime(raw, _REPOSITORY_DATE_FORMAT)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def teaser_model_path(parent_path: str, key: str) -> str:
    """Translate a repository path into the component model's path vocabulary.

    The model tree starts at the tab panels (``item_*``), so everything above
    the first ``item_*`` ancestor is trimmed.
    """
    parts = parent_path.split("/")
    for idx, part in enumerate(parts):
        if part.startswith(MODEL_ITEM_PREFIX):
            return "/" + "/".join(parts[idx:] + [key])
    return f"{parent_path}/{key}"


def _is_text_key(key: str) -> bool:
    return key == "text" or key.startswith("text_")


def node_text(node: RepositoryNode) -> Optional[str]:
    """Inline text of a text node, or its ``text``/``text_*`` children joined."""
    if "text" in (node.resource_type or "") and node.text:
        return node.text
    parts = [child.text for key, child in node.iter_children() if _is_text_key(key) and child.text]
    return "\n".join(parts) if parts else None


class RepositoryIndexer:
    """Single depth-first pass over a repository tree."""

    def __init__(self) -> None:
        self._types: Dict[str, str] = {}
        self._links: Dict[str, str] = {}
        self._texts: Dict[str, str] = {}
        self._teasers: Dict[str, TeaserImage] = {}

    def index(self, root: Optional[RepositoryNode]) -> LookupTables:
        if isinstance(root, RepositoryNode):
            self._visit(root, "", "")
        pruned = self._prune_teasers()
        logger.debug(
            "Indexed %d titles, %d link keys, %d text keys, %d teasers (%d pruned)",
            len(self._types), len(self._links), len(self._texts), len(self._teasers), pruned,
        )
        return LookupTables(
            title_to_resource_type=_frozen(self._types),
            context_link_map=_frozen(self._links),
            context_text_map=_frozen(self._texts),
            teaser_image_map=_frozen(self._teasers),
        )

    def _visit(self, node: RepositoryNode, parent_path: str, parent_key: str) -> None:
        for key, child in node.iter_children():
            if not isinstance(child, RepositoryNode):
                continue
            context = parent_key or ROOT_PARENT_KEY
            self._record_type(child)
            self._record_link(key, child, parent_path, context)
            self._record_text(key, child, parent_path, context)
            self._record_teaser(key, child, parent_path)
            self._visit(child, f"{parent_path}/{key}", key)

    def _record_type(self, node: RepositoryNode) -> None:
        title, rt = node.title, node.resource_type
        if title and rt:
            self._types.setdefault(title, rt)

    def _record_link(self, key: str, node: RepositoryNode, parent_path: str, parent_key: str) -> None:
        if "button" not in (node.resource_type or ""):
            return
        link = node.get_str("linkURL")
        if not link:
            return
        self._links[f"{parent_path}/{key}"] = link
        self._links.setdefault(key, link)
        title = node.title
        if title:
            self._links.setdefault(f"{title}|{parent_key}", link)
            self._links.setdefault(title, link)

    def _record_text(self, key: str, node: RepositoryNode, parent_path: str, parent_key: str) -> None:
        text = node_text(node)
        if not text:
            return
        title = node.title
        if title:
            self._texts.setdefault(f"{title}|{parent_key}|{parent_path}/{key}", text)
            self._texts.setdefault(f"{title}|{parent_key}", text)
            self._texts.setdefault(title, text)
        elif "text" in (node.resource_type or ""):
            self._texts.setdefault(f"{key}|{parent_key}", text)
            self._texts.setdefault(key, text)

    def _record_teaser(self, key: str, node: RepositoryNode, parent_path: str) -> None:
        if not key.startswith(TEASER_PREFIX):
            return
        file_name = node.get_str("fileName")
        last_modified = None
        if file_name:
            stamp = node.get("jcr:lastModified")
            file_node = node.child("file")
            if stamp is None and file_node is not None:
                stamp = file_node.get("jcr:lastModified") or file_node.get("jcr:created")
            last_modified = parse_timestamp(stamp)
        model_path = teaser_model_path(parent_path, key)
        self._teasers.setdefault(
            model_path,
            TeaserImage(
                model_path=model_path,
                repository_path=f"{parent_path}/{key}",
                key=key,
                file_name=file_name,
                last_modified=last_modified,
                link_url=node.get_str("linkURL"),
                title=node.get_str("jcr:title"),
            ),
        )

    def _prune_teasers(self) -> int:
        empty = [path for path, teaser in self._teasers.items() if not teaser.has_image and not teaser.has_link]
        for path in empty:
            del self._teasers[path]
        return len(empty)


def index_repository(root: Optional[RepositoryNode]) -> LookupTables:
    """Build the :class:`LookupTables` for ``root`` (usually the ``root`` child of ``jcr:content``)."""
    return RepositoryIndexer().index(root)
