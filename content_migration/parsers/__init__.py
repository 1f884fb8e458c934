"""
Markup helpers used while building the hierarchy.

Titles authored as rich text are reduced to plain text with BeautifulSoup and
absolute links inside rich text are made host-relative.
"""

from .markup import (
    has_markup,
    markup_to_text,
    prettify_key,
    sanitize_file_name,
    strip_host,
    strip_hosts_from_text,
)

__all__ = [
    "has_markup",
    "markup_to_text",
    "prettify_key",
    "sanitize_file_name",
    "strip_host",
    "strip_hosts_from_text",
]
