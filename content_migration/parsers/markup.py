from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup


def has_markup(value: str) -> bool:
    return "<" in (value or "")


def markup_to_text(html: str) -> str:
    """Return the visible text of an HTML fragment on a single line.

    Whitespace is collapsed and any stray ``<``/``>``
    left by malformed markup is removed.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    text = soup.get_text(" ")
    text = text.replace("\xa0", " ")
    text = re.sub(r"[<>]", "", text)
    return re.sub(r"\s+", " ", text).strip()


def prettify_key(key: str) -> str:
    """``text_copy_1`` -> ``Text Copy 1``."""
    spaced = (key or "").replace("_", " ").strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def strip_host(url: Optional[str]) -> Optional[str]:
    """Drop scheme and host from an absolute URL, keeping path, query and fragment."""
    if not url:
        return url
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return url
    out = parts.path or "/"
    if parts.query:
        out += f"?{parts.query}"
    if parts.fragment:
        out += f"#{parts.fragment}"
    return out


def strip_hosts_from_text(text: Optional[str]) -> Optional[str]:
    """Make absolute ``href`` targets inside rich text host-relative.

    Only ``http://`` and ``https://`` targets are rewritten.  Text without
    such a link is returned untouched; otherwise the fragment is serialized
    back by BeautifulSoup.
    """
    if not text or "href" not in text.lower():
        return text
    soup = BeautifulSoup(text, "html.parser")
    changed = False
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href.lower().startswith(("http://", "https://")):
            anchor["href"] = strip_host(href)
            changed = True
    return str(soup) if changed else text


def sanitize_file_name(file_name: str) -> str:
    """Lowercase, hyphenate spaces and replace unsafe characters, keeping the extension."""
    dot = file_name.rfind(".")
    extension = file_name[dot:] if dot > 0 else ""
    stem = file_name[:dot] if dot > 0 else file_name
    stem = re.sub(r"\s+", "-", stem.strip().lower())
    return re.sub(r"[^a-zA-Z0-9.-]", "_", stem) + extension
