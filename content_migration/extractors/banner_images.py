from __future__ import annotations

from typing import List, Optional

from content_migration.extractors.components import is_component
from content_migration.extractors.repository_indexer import parse_timestamp
from content_migration.models.hierarchy import BannerImage
from content_migration.models.trees import RepositoryNode
from content_migration.parsers.markup import sanitize_file_name


def extract_banner_images(tree: Optional[RepositoryNode], content_path: str) -> List[BannerImage]:
    """Collect image components of the page as banner image descriptors.

    Images without a usable timestamp are skipped since their rendition URL
    cannot be built.
    """
    results: List[BannerImage] = []

    def _walk(node: RepositoryNode, current: str) -> None:
        for key, child in node.iter_children():
            path = f"{current}/{key}" if current else key
            file_name = child.get_str("fileName")
            if is_component(child, "image") and file_name:
                file_node = child.child("file")
                stamp = child.get("jcr:lastModified")
                if stamp is None and file_node is not None:
                    stamp = file_node.get("jcr:lastModified") or file_node.get("jcr:created")
                timestamp = parse_timestamp(stamp)
                if timestamp is not None:
                    jcr_path = "_jcr_content/" + path if path.startswith("root") else path
                    dot = file_name.rfind(".")
                    extension = file_name[dot + 1:] if dot > 0 else "png"
                    results.append(
                        BannerImage(
                            path=path,
                            file_name=file_name,
                            image_url=(
                                f"{content_path}/{jcr_path}.coreimg.{extension}"
                                f"/{timestamp}/{sanitize_file_name(file_name)}"
                            ),
                            alt=child.get_str("alt"),
                            resource_type=child.resource_type,
                            last_modified=stamp,
                            timestamp=timestamp,
                        )
                    )
            _walk(child, path)

    if tree is not None:
        _walk(tree, "")
    return results
