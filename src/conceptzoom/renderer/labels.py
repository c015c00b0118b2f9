"""Display text and ordering for concept tree nodes."""

from __future__ import annotations

from typing import Iterable

from conceptzoom.concepts import ConceptSet
from conceptzoom.model import ElementKind, Visibility
from conceptzoom.oracle import ElementOracle
from conceptzoom.tree import TreeNode

DEFAULT_PACKAGE = "(default package)"
PROJECT_ROOT = "<project root>"

_VISIBILITY_MARKERS = {
    Visibility.PUBLIC: "+",
    Visibility.PROTECTED: "#",
    Visibility.PACKAGE: "~",
    Visibility.PRIVATE: "-",
}

# Presentation order of element kinds among siblings.
_KIND_RANK = {
    ElementKind.PROJECT: 0,
    ElementKind.SOURCE_ROOT: 1,
    ElementKind.PACKAGE: 2,
    ElementKind.PACKAGE_DECLARATION: 3,
    ElementKind.COMPILATION_UNIT: 4,
    ElementKind.TYPE: 5,
    ElementKind.FIELD: 6,
    ElementKind.METHOD: 7,
}


def concept_label(concepts: ConceptSet) -> str:
    """``<A, B>`` with names in category-then-name order."""
    return "<" + ", ".join(concepts.names()) + ">"


def element_label(node: TreeNode) -> str:
    source = node.source
    if source is None:
        return ""
    if source.kind is ElementKind.PACKAGE and not source.name:
        return DEFAULT_PACKAGE
    if source.kind is ElementKind.SOURCE_ROOT and source.name in ("", "."):
        return PROJECT_ROOT
    return source.name


def node_text(node: TreeNode, oracle: ElementOracle | None = None) -> str:
    """Label for *node*: element name, then its own concepts if any.

    With an *oracle*, fields and methods get a UML visibility marker.
    """
    text = element_label(node)
    source = node.source
    if (
        oracle is not None
        and source is not None
        and source.kind in (ElementKind.FIELD, ElementKind.METHOD)
    ):
        text = f"{_VISIBILITY_MARKERS[oracle.visibility(source)]} {text}"
    if not node.concepts.is_empty():
        text = f"{text} {concept_label(node.concepts)}"
    return text


def sort_children(nodes: Iterable[TreeNode]) -> list[TreeNode]:
    """Order sibling nodes by element kind, then name."""

    def key(node: TreeNode) -> tuple[int, str]:
        if node.source is None:
            return (-1, "")
        return (_KIND_RANK[node.source.kind], node.source.name.lower())

    return sorted(nodes, key=key)


def status_message(tree: TreeNode) -> str:
    """Summary of the concepts a whole project expresses.

    *tree* is a built tree; its first child is the project node.
    """
    project = tree.children[0] if tree.source is None else tree
    concepts = project.collect_concepts()
    name = project.source.name if project.source is not None else ""

    count = len(concepts)
    if count == 0:
        return f"{name} [expresses no concepts]"

    categories = len(concepts.categories())
    return (
        f"{name} [expresses {count} concept{'' if count == 1 else 's'} "
        f"from {categories} categor{'y' if categories == 1 else 'ies'}]"
    )
