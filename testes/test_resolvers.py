import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from content_migration.hierarchy.resolvers import (
    build_teaser_image_url,
    file_extension,
    first_resolved,
    is_valid_link_url,
    lookup,
)


def test_first_resolved_is_lazy_and_ordered():
    calls = []

    def make(value):
        def resolve():
            calls.append(value)
            return value
        return resolve

    assert first_resolved([make(None), make(""), make("hit"), make("later")]) == "hit"
    assert calls == [None, "", "hit"]


def test_first_resolved_skips_rejected_values():
    resolvers = [lambda: "#", lambda: "/content/page"]
    assert first_resolved(resolvers, accept=is_valid_link_url) == "/content/page"
    assert first_resolved([lambda: "#"], accept=is_valid_link_url) is None


def test_lookup_resolver():
    table = {"a|b": "x"}
    assert lookup(table, "a|b")() == "x"
    assert lookup(table, "missing")() is None
    assert lookup(table, None)() is None


@pytest.mark.parametrize(
    "url, valid",
    [
        ("https://example.com", True),
        ("http://x", True),
        ("/abcd", True),
        ("/abc", False),
        ("#", False),
        ("mailto:someone@example.com", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_link_url(url, valid):
    assert is_valid_link_url(url) is valid


def test_build_teaser_image_url():
    url = build_teaser_image_url("/content/store/", "/container/teaser", "pic.jpeg", 42, "teaser-1")
    assert url == "/content/store/_jcr_content/root/container/teaser.coreimg.85.1600.jpeg/42/teaser-1-pic.jpeg"
    assert build_teaser_image_url("", "/t", "noext", 1).endswith(".coreimg.85.1600./1/noext")
    assert file_extension("a.b.png") == "png"
