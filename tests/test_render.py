"""Tests for labels, renderers and the explorer session."""

from __future__ import annotations

import json

from conftest import ORDER, ORDER_PKG

from conceptzoom.builder import TreeBuilder
from conceptzoom.concepts import CATALOG, ConceptSet
from conceptzoom.explorer import ConceptExplorer
from conceptzoom.model import ElementKind, SourceElement
from conceptzoom.renderer.data import render_json
from conceptzoom.renderer.labels import concept_label, element_label, node_text, status_message
from conceptzoom.renderer.text import render_text
from conceptzoom.snapshot import SnapshotOracle
from conceptzoom.tree import TreeNode

SHOP_TEXT = """\
shop
└── src/main/java
    └── com.acme.order <BoundedContext>
        ├── Invoice.java
        │   └── Invoice <AggregateRoot, Entity>
        ├── LineItem.java
        │   └── LineItem <Entity>
        ├── Order.java
        │   └── Order <AggregateRoot>
        │       └── - id <Identity>
        └── OrderPlaced.java
            └── OrderPlaced <DomainEvent>"""


class TestLabels:
    def test_concept_label_is_sorted(self, shop):
        tree = TreeBuilder(shop).build(shop.project)
        invoice = tree.find_node(shop.element(ORDER_PKG + "/Invoice.java/Invoice"))
        assert concept_label(invoice.concepts) == "<AggregateRoot, Entity>"

    def test_special_element_labels(self):
        default = TreeNode(SourceElement(ElementKind.PACKAGE, "p/src/", ""))
        root = TreeNode(SourceElement(ElementKind.SOURCE_ROOT, "p/", ""))
        assert element_label(default) == "(default package)"
        assert element_label(root) == "<project root>"

    def test_node_text_with_visibility(self, shop):
        tree = TreeBuilder(shop).build(shop.project)
        identity = tree.find_node(shop.element(ORDER + "/id"))
        assert node_text(identity) == "id <Identity>"
        assert node_text(identity, shop) == "- id <Identity>"

    def test_status_message(self, shop):
        tree = TreeBuilder(shop).build(shop.project)
        assert status_message(tree) == "shop [expresses 5 concepts from 2 categories]"

    def test_status_message_without_concepts(self):
        oracle = SnapshotOracle.from_dict({"project": {"name": "empty"}})
        tree = TreeBuilder(oracle).build(oracle.project)
        assert status_message(tree) == "empty [expresses no concepts]"

    def test_status_message_singular(self):
        project = SourceElement(ElementKind.PROJECT, "p", "p")
        node = TreeNode(None, None, [TreeNode(project, ConceptSet([CATALOG[0]]))])
        assert status_message(node) == "p [expresses 1 concept from 1 category]"


class TestRenderers:
    def test_render_text(self, shop):
        tree = TreeBuilder(shop).build(shop.project)
        assert render_text(tree, shop) == SHOP_TEXT

    def test_render_json(self, shop):
        tree = TreeBuilder(shop).build(shop.project)
        data = json.loads(render_json(tree))
        assert data["status"] == "shop [expresses 5 concepts from 2 categories]"
        assert data["concepts"] == ["AggregateRoot", "BoundedContext", "Entity", "Identity", "DomainEvent"]
        project = data["tree"]
        assert project["kind"] == "project"
        package = project["children"][0]["children"][0]
        assert package["concepts"] == [{"name": "BoundedContext", "category": "DDD"}]
        assert [c["name"] for c in package["children"]] == [
            "Invoice.java",
            "LineItem.java",
            "Order.java",
            "OrderPlaced.java",
        ]


class TestExplorer:
    def test_update_builds_once_and_locates(self, shop):
        builds = []

        class CountingBuilder(TreeBuilder):
            def build(self, project):
                builds.append(project)
                return super().build(project)

        explorer = ConceptExplorer(CountingBuilder(shop))
        assert explorer.status() is None

        order = explorer.update(shop.element(ORDER))
        assert order.concepts.names() == ["AggregateRoot"]
        assert explorer.update(shop.element(ORDER + "/id")).concepts.names() == ["Identity"]
        assert len(builds) == 1
        assert explorer.status() == "shop [expresses 5 concepts from 2 categories]"

    def test_update_returns_none_for_pruned_elements(self, shop):
        explorer = ConceptExplorer(TreeBuilder(shop))
        assert explorer.update(shop.element(ORDER_PKG + "/Helper.java/Helper")) is None
        assert explorer.tree is not None

    def test_reset_forces_rebuild(self, shop):
        explorer = ConceptExplorer(TreeBuilder(shop))
        explorer.update(shop.project)
        old = explorer.tree
        explorer.reset()
        assert explorer.tree is None
        explorer.update(shop.project)
        assert explorer.tree is not old
        assert explorer.tree == old
