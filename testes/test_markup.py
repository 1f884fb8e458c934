import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from bs4 import BeautifulSoup

from content_migration.parsers.markup import (
    has_markup,
    markup_to_text,
    prettify_key,
    sanitize_file_name,
    strip_host,
    strip_hosts_from_text,
)


def test_markup_to_text_collapses_whitespace_and_entities():
    assert markup_to_text("<p>Hello&nbsp;<b>world</b></p>") == "Hello world"
    assert markup_to_text("<div>\n  Line one\n\n<span>two</span></div>") == "Line one two"
    assert markup_to_text("") == ""


def test_has_markup():
    assert has_markup("<p>x</p>")
    assert not has_markup("Plain title")
    assert not has_markup("")


def test_prettify_key():
    assert prettify_key("text_copy_1") == "Text Copy 1"
    assert prettify_key("teaser") == "Teaser"


def test_strip_host_keeps_path_query_and_fragment():
    assert strip_host("https://example.com/a/b?x=1#top") == "/a/b?x=1#top"
    assert strip_host("https://example.com") == "/"
    assert strip_host("/local/path") == "/local/path"
    assert strip_host(None) is None


def test_strip_hosts_from_text_only_rewrites_absolute_hrefs():
    html = '<a href="https://www.example.com/p">x</a> <a href=\'/rel/page\'>y</a>'
    assert strip_hosts_from_text(html) == '<a href="/p">x</a> <a href="/rel/page">y</a>'
    assert strip_hosts_from_text(None) is None


def test_strip_hosts_from_text_leaves_text_without_absolute_links_alone():
    html = "<p>Visit <a href='/rel/page'>us</a><br>today</p>"
    assert strip_hosts_from_text(html) == html
    assert strip_hosts_from_text("plain text") == "plain text"


def test_strip_hosts_from_text_handles_unquoted_and_mixed_quote_hrefs():
    assert strip_hosts_from_text("<a href=https://x.com/a>go</a>") == '<a href="/a">go</a>'

    html = "<p><a href=\"https://x.com/it's?q=1\">one</a> <a href='https://x.com/b'>two</a></p>"
    soup = BeautifulSoup(strip_hosts_from_text(html), "html.parser")
    assert [a["href"] for a in soup.find_all("a")] == ["/it's?q=1", "/b"]


def test_sanitize_file_name():
    assert sanitize_file_name("My Banner Image.png") == "my-banner-image.png"
    assert sanitize_file_name("promo(1).jpg") == "promo_1_.jpg"
