import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
pytest.importorskip("bs4")

from content_migration.extractors.repository_indexer import LookupTables, TeaserImage, index_repository
from content_migration.extractors.tree_loader import (
    component_tree_from_document,
    repository_root,
    repository_tree_from_document,
)
from content_migration.hierarchy.builder import HierarchyBuilder, build_hierarchy, classify_node, model_key

BUTTON = "tccc-dam/components/button"
CONTAINER = "tccc-dam/components/container"
TEXT = "tccc-dam/components/text"


def build(model, tables=None, **options):
    return build_hierarchy(component_tree_from_document(model), tables or LookupTables(), **options)


def titles(nodes):
    return [n.title for n in nodes]


def test_classify_node():
    tree = component_tree_from_document({
        ":items": {
            "acc": {":type": "tccc-dam/components/accordion"},
            "teaser_1": {},
            "cta": {"id": "custom-button-123"},
            "copy": {"id": "text-abc"},
            "custom": {":type": "tccc-dam/components/custom-button"},
            "plain": {"id": "image-1"},
        }
    })
    kinds = {key: classify_node(key, node) for key, node in tree.iter_children()}
    assert kinds == {
        "acc": "accordion",
        "teaser_1": "teaser",
        "cta": "button",
        "copy": "text",
        "custom": "button",
        "plain": "item",
    }


def test_model_key_strips_combined_tabs_suffix():
    assert model_key("item_1__tabs3") == "item_1"
    assert model_key("item_1") == "item_1"


def test_untitled_tabs_are_spliced():
    nodes = build({
        ":items": {
            "tabs": {
                ":items": {
                    "item_1": {
                        "cq:panelTitle": "A",
                        ":items": {"tabs_copy": {":items": {"item_1": {"cq:panelTitle": "B"}}}},
                    }
                }
            }
        }
    })
    assert titles(nodes) == ["A"]
    assert nodes[0].path == "A"
    assert titles(nodes[0].items) == ["B"]
    assert nodes[0].items[0].path == "A > B"


def test_markup_titles_on_text_nodes_are_cleaned():
    nodes = build({
        ":items": {
            "text_1": {":type": TEXT, "text": "<p>Hello <b>there</b></p>"},
            "text_copy": {":type": TEXT, "text": "<p>" + "x" * 250 + "</p>"},
        }
    })
    assert titles(nodes) == ["Hello there", "Text Copy"]
    assert nodes[0].type == "text"
    assert nodes[0].text == "<p>Hello <b>there</b></p>"


def test_markup_titles_on_other_nodes_splice_children():
    nodes = build({":items": {"weird": {"title": "<b>x</b>", ":items": {"child": {"title": "C"}}}}})
    assert titles(nodes) == ["C"]
    assert nodes[0].path == "C"


def test_repeated_and_structural_titles_left_out_of_paths():
    nodes = build({
        ":items": {
            "brands": {
                "title": "Brands",
                ":items": {
                    "again": {"title": "Brands", ":items": {"coke": {"title": "Coke"}}},
                },
            }
        }
    })
    again = nodes[0].items[0]
    assert again.path == "Brands"
    assert again.items[0].path == "Brands > Coke"


def test_link_candidates_are_validated_in_order():
    nodes = build({
        ":items": {
            "a": {"title": "A", "linkURL": "#", "buttonLink": {"url": "/content/store/page"}},
            "b": {"title": "B", "link": {"url": "https://example.com/b"}},
            "c": {"title": "C", "linkURL": "javascript:void(0)"},
            "d": {"title": "D", "searchLink": "/content/search"},
        }
    })
    assert [n.link_url for n in nodes] == ["/content/store/page", "https://example.com/b", None, "/content/search"]


def _repository_tables(root_doc):
    return index_repository(repository_root(repository_tree_from_document({"root": root_doc})))


def test_buttons_resolve_links_from_their_own_context():
    tables = _repository_tables({
        "container": {
            "section_a": {"button": {"sling:resourceType": BUTTON, "jcr:title": "Shop", "linkURL": "/content/a/shop"}},
            "section_b": {"button": {"sling:resourceType": BUTTON, "jcr:title": "Shop", "linkURL": "/content/b/shop"}},
        }
    })
    nodes = build(
        {
            ":items": {
                "section_a": {"title": "Section A", ":items": {"button": {":type": BUTTON, "title": "Shop"}}},
                "section_b": {"title": "Section B", ":items": {"button": {":type": BUTTON, "title": "Shop"}}},
            }
        },
        tables,
    )
    assert nodes[0].items[0].link_url == "/content/a/shop"
    assert nodes[1].items[0].link_url == "/content/b/shop"
    assert nodes[0].link_url is None


def test_direct_text_children_are_consumed():
    nodes = build({
        ":items": {
            "card": {
                "title": "Card",
                ":items": {
                    "text": {":type": TEXT, "text": "<p>Body</p>"},
                    "text_1": {":type": TEXT, "text": "<p>More</p>"},
                    "button": {":type": BUTTON, "title": "Go", "linkURL": "/content/go"},
                },
            }
        }
    })
    card = nodes[0]
    assert card.text == "<p>Body</p>\n<p>More</p>"
    assert titles(card.items) == ["Go"]


def test_text_lookup_falls_back_through_context_keys():
    tables = LookupTables(context_text_map={
        "Intro|root": "<p>by title</p>",
        "container_9|wrapper": "<p>by key</p>",
    })
    nodes = build(
        {
            ":items": {
                "intro": {"title": "Intro"},
                "wrapper": {"title": "Wrapper", ":items": {"container_9": {"title": "Nine"}}},
            }
        },
        tables,
    )
    assert nodes[0].text == "<p>by title</p>"
    assert nodes[1].items[0].text == "<p>by key</p>"


def test_accordion_panels_use_best_scoring_path_key():
    tables = LookupTables(context_text_map={
        "FAQ|accordion|/container/other/accordion/item_1": "wrong",
        "FAQ|accordion|/container/faq/accordion/item_1": "right",
        "FAQ": "title only",
    })
    nodes = build(
        {
            ":items": {
                "faq": {
                    "title": "Help",
                    ":items": {
                        "accordion": {
                            ":type": "tccc-dam/components/accordion",
                            ":items": {"item_1": {":type": CONTAINER, "cq:panelTitle": "FAQ"}},
                        }
                    },
                }
            }
        },
        tables,
    )
    panel = nodes[0].items[0].items[0]
    assert panel.title == "FAQ"
    assert panel.text == "right"


def test_generic_containers_are_dropped_keeping_children():
    nodes = build({
        ":items": {
            "container_1": {
                ":type": CONTAINER,
                "__jcrSection": "Brands",
                ":items": {"x": {"title": "X"}, "y": {"title": "Y", "__jcrSection": "Other"}},
            }
        }
    })
    assert titles(nodes) == ["X", "Y"]
    assert nodes[0].path == "X"
    assert nodes[0].section == "Brands"
    assert nodes[1].section == "Other"


def test_button_container_wrappers_pass_section_down():
    nodes = build({
        ":items": {
            "button_container_1": {
                "__jcrSection": "Brands",
                ":items": {"button": {":type": BUTTON, "title": "Go", "linkURL": "/content/go"}},
            }
        }
    })
    assert titles(nodes) == ["Go"]
    assert nodes[0].type == "button"
    assert nodes[0].section == "Brands"


def _teaser_tables():
    return LookupTables(teaser_image_map={
        "/item_1/teaser_x": TeaserImage(
            model_path="/item_1/teaser_x",
            repository_path="/container/tabs/item_1/teaser_x",
            key="teaser_x",
            file_name="pic.png",
            last_modified=555,
        )
    })


TEASER_MODEL = {
    ":items": {
        "item_1__tabs0": {
            "cq:panelTitle": "Panel",
            ":items": {
                "teaser_x": {
                    "id": "teaser-abc",
                    "title": "Promo",
                    "imageResource": {"fileName": "pic.png", "jcr:lastModified": 1000},
                }
            },
        }
    }
}


def test_teaser_image_url_uses_component_timestamp():
    nodes = build(TEASER_MODEL, _teaser_tables(), content_path="/content/store", prefix_image_ids=False)
    teaser = nodes[0].items[0]
    assert teaser.type == "teaser"
    assert teaser.image_url == (
        "/content/store/_jcr_content/root/container/tabs/item_1/teaser_x.coreimg.85.1600.png/1000/pic.png"
    )


def test_teaser_image_url_is_id_prefixed_by_default():
    nodes = build(TEASER_MODEL, _teaser_tables(), content_path="/content/store")
    assert nodes[0].items[0].image_url.endswith("/1000/teaser-abc-pic.png")


def test_teaser_without_descriptor_has_no_image():
    nodes = build(TEASER_MODEL, LookupTables())
    assert nodes[0].items[0].image_url is None


def test_rich_text_hosts_are_stripped_when_enabled():
    model = {":items": {"text": {":type": TEXT, "title": "Copy", "text": '<a href="https://www.example.com/x">x</a>'}}}
    assert build(model)[0].text == '<a href="/x">x</a>'
    assert build(model, strip_text_hosts=False)[0].text == '<a href="https://www.example.com/x">x</a>'


def test_builder_ignores_missing_root():
    assert HierarchyBuilder(LookupTables()).build(None) == []


def test_resolved_links_lose_their_host_when_stripping_is_enabled():
    model = {
        ":items": {
            "shop": {"title": "Shop", "linkURL": "https://www.example.com/content/shop?x=1"},
            "home": {"title": "Home", "linkURL": "https://www.example.com/b"},
        }
    }
    assert [n.link_url for n in build(model)] == ["/content/shop?x=1", "https://www.example.com/b"]
    assert [n.link_url for n in build(model, strip_text_hosts=False)] == [
        "https://www.example.com/content/shop?x=1",
        "https://www.example.com/b",
    ]
