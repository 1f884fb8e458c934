import json
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from content_migration.extractors.tree_loader import (
    component_tree_from_document,
    load_json_document,
    repository_root,
    repository_tree_from_document,
)
from content_migration.models.trees import ComponentNode, RepositoryNode
from content_migration.utils.errors import InputTreeError


def test_repository_tree_splits_properties_and_children():
    doc = {
        "jcr:primaryType": "cq:PageContent",
        ":meta": {"ignored": True},
        "root": {"container": {"sling:resourceType": "tccc-dam/components/container"}},
    }
    tree = repository_tree_from_document(doc)
    assert isinstance(tree, RepositoryNode)
    assert tree.key == "jcr:content"
    assert tree.get("jcr:primaryType") == "cq:PageContent"
    assert list(tree.children) == ["root"]
    root = repository_root(tree)
    assert root.key == "root"
    assert root.child("container").resource_type == "tccc-dam/components/container"


def test_repository_tree_rejects_non_objects():
    assert repository_tree_from_document(["not", "a", "tree"]) is None
    assert repository_root(None) is None


def test_repository_root_falls_back_to_tree():
    tree = repository_tree_from_document({"container": {}})
    assert repository_root(tree) is tree


def test_component_tree_follows_items_order_and_section():
    doc = {
        ":type": "tccc-dam/components/tabs",
        ":itemsOrder": ["b", "a"],
        ":items": {
            "a": {"title": "A", "__jcrSection": "Brands"},
            "b": {"title": "B"},
            "c": "not an object",
        },
    }
    tree = component_tree_from_document(doc)
    assert isinstance(tree, ComponentNode)
    assert list(tree.children) == ["b", "a"]
    assert tree.resource_type == "tccc-dam/components/tabs"
    assert tree.child("a").section == "Brands"
    assert tree.child("b").section is None
    assert "__jcrSection" not in tree.child("a").properties


def test_component_tree_without_order_uses_document_order():
    tree = component_tree_from_document({":items": {"x": {}, "y": {}}})
    assert list(tree.children) == ["x", "y"]


def test_load_json_document(tmp_path):
    good = tmp_path / "page.json"
    good.write_text(json.dumps({"root": {}}), encoding="utf-8")
    assert load_json_document(str(good)) == {"root": {}}

    with pytest.raises(InputTreeError) as exc:
        load_json_document(str(tmp_path / "missing.json"))
    assert exc.value.reason == "file not found"

    bad = tmp_path / "list.json"
    bad.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(InputTreeError):
        load_json_document(str(bad))

    broken = tmp_path / "broken.json"
    broken.write_text("{nope", encoding="utf-8")
    with pytest.raises(InputTreeError):
        load_json_document(str(broken))
