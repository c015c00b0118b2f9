"""Pruned concept tree."""

from __future__ import annotations

from typing import Iterable, Iterator

from conceptzoom.concepts import ConceptSet
from conceptzoom.model import SourceElement


class TreeNode:
    """One retained element of a concept tree.

    Constructing a node makes it the parent of each of *children*; parent
    links are never reassigned afterwards.  Equality and hashing look at
    ``source``, ``concepts`` and ``children`` only, never at ``parent``.
    """

    __slots__ = ("source", "concepts", "_children", "_parent")

    def __init__(
        self,
        source: SourceElement | None,
        concepts: ConceptSet | None = None,
        children: Iterable[TreeNode] = (),
    ) -> None:
        self.source = source
        self.concepts = concepts if concepts is not None else ConceptSet.empty()
        self._children: tuple[TreeNode, ...] = tuple(children)
        self._parent: TreeNode | None = None
        for child in self._children:
            if child._parent is not None:
                raise ValueError(f"{child!r} already belongs to another tree")
            child._parent = self

    @property
    def children(self) -> tuple[TreeNode, ...]:
        return self._children

    @property
    def parent(self) -> TreeNode | None:
        return self._parent

    def has_children(self) -> bool:
        return bool(self._children)

    def has_parent(self) -> bool:
        return self._parent is not None

    def find_node(self, element: SourceElement) -> TreeNode | None:
        """Return the first node, depth-first, whose source equals *element*."""
        for node in self.walk():
            if node.source == element:
                return node
        return None

    def collect_concepts(self) -> ConceptSet:
        """Concepts of this node merged with those of every descendant."""
        return self.concepts.merge(*(child.collect_concepts() for child in self._children))

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and its descendants in pre-order."""
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreeNode):
            return NotImplemented
        return (
            self.source == other.source
            and self.concepts == other.concepts
            and self._children == other._children
        )

    def __hash__(self) -> int:
        return hash((self.source, self.concepts, self._children))

    def __repr__(self) -> str:
        name = self.source.handle if self.source is not None else "<root>"
        return f"TreeNode({name!r}, {self.concepts.names()!r}, children={len(self._children)})"
