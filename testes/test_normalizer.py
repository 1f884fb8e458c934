import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from content_migration.hierarchy.normalizer import (
    merge_duplicate_titles,
    normalize_hierarchy,
    unwrap_structural_containers,
)
from content_migration.models.hierarchy import HierarchyNode


def node(title, path=None, items=None, **fields):
    return HierarchyNode(title=title, path=path or title, items=items, **fields)


def test_duplicate_title_collapses_into_parent():
    coke = node("Coke", "Brands > Coke")
    brands = node(
        "Brands",
        type="container",
        items=[node("Brands", type="item", link_url="/content/brands", text="<p>All</p>", items=[coke])],
    )
    [merged] = normalize_hierarchy([brands])
    assert merged.title == "Brands"
    assert merged.type == "container"
    assert merged.link_url == "/content/brands"
    assert merged.text == "<p>All</p>"
    assert merged.items == [coke]


def test_merge_keeps_parent_attributes():
    parent = node("Shop", link_url="/content/parent", items=[node("Shop", link_url="/content/child")])
    [merged] = merge_duplicate_titles([parent])
    assert merged.link_url == "/content/parent"
    assert merged.items is None


def test_merge_runs_bottom_up():
    deep = node("A", items=[node("A", items=[node("A", items=[node("leaf")])])])
    [merged] = merge_duplicate_titles([deep])
    assert [c.title for c in merged.items] == ["leaf"]


def test_lone_container_wrappers_are_unwrapped():
    b, c = node("B"), node("C")
    wrapped = node(
        "A",
        items=[node("container_1", type="container", items=[node("container_2", type="item", items=[b, c])])],
    )
    [unwrapped] = unwrap_structural_containers([wrapped])
    assert unwrapped.items == [b, c]


def test_tabs_and_siblings_are_not_unwrapped():
    tabs = node("container_tabs", type="tabs", items=[node("X")])
    a = node("A", items=[tabs])
    assert unwrap_structural_containers([a])[0].items == [tabs]

    siblings = node("A", items=[node("container_1", type="container", items=[node("X")]), node("Y")])
    assert [c.title for c in unwrap_structural_containers([siblings])[0].items] == ["container_1", "Y"]


def test_normalize_is_idempotent():
    tree = [
        node(
            "Brands",
            type="container",
            items=[
                node(
                    "Brands",
                    items=[node("container_3", type="container", items=[node("Coke"), node("Sprite")])],
                )
            ],
        ),
        node("Solo", items=[node("container_1", type="container", items=[node("Solo", text="<p>x</p>")])]),
    ]
    once = normalize_hierarchy(tree)
    assert normalize_hierarchy(once) == once
    assert unwrap_structural_containers(once) == once
    assert merge_duplicate_titles(once) == once
    assert [c.title for c in once[0].items] == ["Coke", "Sprite"]
    assert once[1].text == "<p>x</p>"


def test_normalize_handles_empty_input():
    assert normalize_hierarchy(None) == []
    assert normalize_hierarchy([]) == []
