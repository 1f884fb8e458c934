"""
Helpers for the display paths carried by hierarchy nodes.

A display path is the chain of ancestor titles joined by
:data:`PATH_SEPARATOR`.  ``' > '`` is used instead of ``'/'`` because titles
routinely contain slashes.
"""

from __future__ import annotations

from typing import Iterable, List

PATH_SEPARATOR = " > "

STRUCTURAL_NAMES = ("container", "accordion", "tabs")


def is_structural_name(title: str) -> bool:
    """True for generic grouping names such as ``container`` or ``tabs_copy``."""
    if not title:
        return False
    return any(title == name or title.startswith(f"{name}_") for name in STRUCTURAL_NAMES)


def is_generic_container_title(title: str) -> bool:
    return bool(title) and (title.startswith("container_") or title.lower() == "container")


def split_path(path: str) -> List[str]:
    return path.split(PATH_SEPARATOR) if path else []


def join_path(*segments: str) -> str:
    return PATH_SEPARATOR.join(s for s in segments if s)


def clean_path(path: str) -> str:
    """Drop repeated and structural segments, keeping first-seen order."""
    seen: List[str] = []
    for part in split_path(path):
        if part in seen or is_structural_name(part):
            continue
        seen.append(part)
    return join_path(*seen)


def has_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(f"{prefix}{PATH_SEPARATOR}")


def key_path_segments(key_path: str) -> Iterable[str]:
    return (seg for seg in key_path.split("/") if seg)
