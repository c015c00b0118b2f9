"""Render a concept tree as an ASCII diagram."""

from __future__ import annotations

from conceptzoom.oracle import ElementOracle
from conceptzoom.renderer.labels import node_text, sort_children
from conceptzoom.tree import TreeNode


def render_text(tree: TreeNode, oracle: ElementOracle | None = None) -> str:
    """Format *tree* as an indented diagram.

    Example::

        shop
        └── src/main/java
            └── com.acme.order <BoundedContext>
                └── Order.java
                    └── Order <AggregateRoot>
    """
    lines: list[str] = []

    def _format_level(node: TreeNode, pfx: str) -> None:
        children = sort_children(node.children)
        for i, child in enumerate(children):
            is_last = i == len(children) - 1
            connector = "└── " if is_last else "├── "
            lines.append(f"{pfx}{connector}{node_text(child, oracle)}")
            _format_level(child, pfx + ("    " if is_last else "│   "))

    roots = tree.children if tree.source is None else [tree]
    for root in roots:
        lines.append(node_text(root, oracle))
        _format_level(root, "")
    return "\n".join(lines)
