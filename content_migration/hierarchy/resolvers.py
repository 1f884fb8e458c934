"""
Ordered-candidate resolution shared by link, text and teaser lookups.

Every lookup in the builder has the shape "try A, else B, else C".  Each
candidate is a zero-argument callable returning an optional value;
:func:`first_resolved` evaluates them lazily and returns the first non-empty
value accepted by the optional ``accept`` predicate.  Rejected candidates are
discarded, never propagated.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

Resolver = Callable[[], Optional[T]]

IMAGE_RENDITION = "coreimg.85.1600"


def first_resolved(
    resolvers: Iterable[Resolver[T]],
    accept: Optional[Callable[[T], bool]] = None,
) -> Optional[T]:
    for resolve in resolvers:
        value = resolve()
        if not value:
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


def lookup(mapping, key: Optional[str]) -> Resolver:
    """Resolver reading ``mapping[key]``; a missing key resolves to ``None``."""
    return lambda: mapping.get(key) if key else None


def is_valid_link_url(url: Optional[str]) -> bool:
    """True for ``http(s)://`` URLs and absolute paths longer than four characters."""
    if not url or not isinstance(url, str):
        return False
    if url.startswith(("http://", "https://")):
        return True
    return url.startswith("/") and len(url) >= 5


def file_extension(file_name: str) -> str:
    dot = file_name.rfind(".")
    return file_name[dot + 1:] if dot >= 0 else ""


def build_teaser_image_url(
    content_path: str,
    repository_path: str,
    file_name: str,
    last_modified: int,
    component_id: Optional[str] = None,
) -> str:
    """Build the rendition URL of a teaser image.

    ``<content>/_jcr_content/root<repo path>.coreimg.85.1600.<ext>/<timestamp>/<file>``,
    where ``<file>`` is prefixed with the component id when one is given.
    """
    rendition = f"{IMAGE_RENDITION}.{file_extension(file_name)}"
    final_name = file_name
    if component_id:
        dot = file_name.rfind(".")
        if dot > 0:
            final_name = f"{component_id}-{file_name[:dot]}{file_name[dot:]}"
        else:
            final_name = f"{component_id}-{file_name}"
    base = f"{content_path.rstrip('/')}/_jcr_content/root{repository_path}"
    return f"{base}.{rendition}/{last_modified}/{final_name}"
