"""Serialize a concept tree to plain dicts / JSON."""

from __future__ import annotations

import json

from conceptzoom.renderer.labels import element_label, sort_children, status_message
from conceptzoom.tree import TreeNode


def _node_to_dict(node: TreeNode) -> dict:
    d: dict = {}
    if node.source is not None:
        d["name"] = element_label(node)
        d["kind"] = node.source.kind.value
        d["handle"] = node.source.handle
    if not node.concepts.is_empty():
        d["concepts"] = [
            {"name": c.name, "category": c.category.label} for c in node.concepts.sorted()
        ]
    if node.children:
        d["children"] = [_node_to_dict(c) for c in sort_children(node.children)]
    return d


def tree_to_dict(tree: TreeNode) -> dict:
    """Nested dict for *tree*, with the project summary at the top."""
    project = tree.children[0] if tree.source is None else tree
    return {
        "status": status_message(tree),
        "concepts": project.collect_concepts().names(),
        "tree": _node_to_dict(project),
    }


def render_json(tree: TreeNode, indent: int | None = 2) -> str:
    return json.dumps(tree_to_dict(tree), indent=indent)

