"""Keep a published concept tree in step with the element a caller selects."""

from __future__ import annotations

import logging

from conceptzoom.builder import TreeBuilder
from conceptzoom.model import ElementKind, SourceElement
from conceptzoom.oracle import enclosing
from conceptzoom.renderer.labels import status_message
from conceptzoom.tree import TreeNode

logger = logging.getLogger(__name__)


class ConceptExplorer:
    """Caches the tree of one project and re-locates selected elements in it.

    The tree is rebuilt from scratch when none is cached or the selected
    element belongs to a project the cached tree does not contain.  A new tree
    replaces the old one in a single assignment; readers holding the old tree
    keep a consistent view.
    """

    def __init__(self, builder: TreeBuilder) -> None:
        self.builder = builder
        self.tree: TreeNode | None = None

    def update(self, element: SourceElement) -> TreeNode | None:
        """Return the node for *element*, rebuilding the tree if needed."""
        project = enclosing(self.builder.oracle, element, ElementKind.PROJECT)
        if project is None:
            raise ValueError(f"{element.handle!r} does not belong to a project")

        tree = self.tree
        if tree is None or tree.find_node(project) is None:
            logger.debug("Rebuilding concept tree for %s", project.handle)
            tree = self.builder.build(project)
            self.tree = tree

        return tree.find_node(element)

    def reset(self) -> None:
        self.tree = None

    def status(self) -> str | None:
        if self.tree is None:
            return None
        return status_message(self.tree)
