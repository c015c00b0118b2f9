"""Build a pruned concept tree from a project's source model."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from conceptzoom.concepts import Concept, ConceptMatcher, ConceptSet
from conceptzoom.errors import BuildCancelled, OracleQueryFailure
from conceptzoom.model import ElementKind, SourceElement
from conceptzoom.oracle import ElementOracle
from conceptzoom.tree import TreeNode

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ("skip", "raise")


@dataclass(frozen=True)
class BuildFailure:
    """A subtree dropped from a build because the oracle failed on it."""

    element: SourceElement
    error: OracleQueryFailure


class TreeBuilder:
    """Walk a project and keep only elements that express concepts.

    A node is kept when it expresses at least one concept or has at least one
    kept child.  The project node is always kept and is wrapped in a super-root
    whose source is None.

    With ``on_error="skip"`` an oracle failure inside a subtree drops that
    subtree and is recorded in :attr:`failures`; with ``on_error="raise"`` it
    propagates.  *should_cancel* is polled before descending into every
    composite element.
    """

    def __init__(
        self,
        oracle: ElementOracle,
        concepts: Iterable[Concept] | None = None,
        *,
        on_error: str = "skip",
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(f"on_error must be one of {ON_ERROR_CHOICES}, not {on_error!r}")
        self.oracle = oracle
        self.concepts = tuple(concepts) if concepts is not None else None
        self.on_error = on_error
        self.should_cancel = should_cancel
        self.failures: list[BuildFailure] = []
        self.matcher = ConceptMatcher(oracle, self.concepts)
        self._visitors: dict[ElementKind, Callable[[SourceElement], TreeNode | None]] = {
            ElementKind.SOURCE_ROOT: self._source_root,
            ElementKind.PACKAGE: self._package,
            ElementKind.COMPILATION_UNIT: self._compilation_unit,
            ElementKind.TYPE: self._type,
            ElementKind.FIELD: self._member,
            ElementKind.METHOD: self._member,
        }

    def build(self, project: SourceElement) -> TreeNode:
        """Return a fresh tree for *project*."""
        if project.kind is not ElementKind.PROJECT:
            raise ValueError(f"Expected a project, got {project.kind.value} {project.handle!r}")

        self.failures = []
        # Fresh evidence caches for every pass.
        self.matcher = ConceptMatcher(self.oracle, self.concepts)

        self._check_cancelled(project)
        roots = [c for c in self.oracle.children(project) if c.kind is ElementKind.SOURCE_ROOT]
        children = self._visit_all(r for r in roots if self._is_source_root(r))
        project_node = TreeNode(project, ConceptSet.empty(), children)

        logger.debug(
            "Built tree for %s: %d nodes, %d failures",
            project.handle,
            sum(1 for _ in project_node.walk()),
            len(self.failures),
        )
        return TreeNode(None, ConceptSet.empty(), [project_node])

    # -- per-kind visitors --------------------------------------------------

    def _source_root(self, source: SourceElement) -> TreeNode | None:
        self._check_cancelled(source)
        packages = self._children_of(source, ElementKind.PACKAGE)
        return _keep(source, ConceptSet.empty(), self._visit_all(packages))

    def _package(self, source: SourceElement) -> TreeNode | None:
        self._check_cancelled(source)
        units = self._children_of(source, ElementKind.COMPILATION_UNIT)
        children = self._visit_all(u for u in units if not u.is_package_info)

        concepts = ConceptSet.empty()
        package_info = next((u for u in units if u.is_package_info), None)
        if package_info is not None:
            declaration = next(
                iter(self._children_of(package_info, ElementKind.PACKAGE_DECLARATION)), None
            )
            if declaration is not None:
                concepts = self._expresses(declaration)

        return _keep(source, concepts, children)

    def _compilation_unit(self, source: SourceElement) -> TreeNode | None:
        self._check_cancelled(source)
        types = self._children_of(source, ElementKind.TYPE)
        return _keep(source, ConceptSet.empty(), self._visit_all(types))

    def _type(self, source: SourceElement) -> TreeNode | None:
        self._check_cancelled(source)
        members = self.oracle.children(source)
        # Nested types first, then fields, then methods.
        ordered = [
            m
            for kind in (ElementKind.TYPE, ElementKind.FIELD, ElementKind.METHOD)
            for m in members
            if m.kind is kind
        ]
        children = self._visit_all(ordered)
        return _keep(source, self._expresses(source), children)

    def _member(self, source: SourceElement) -> TreeNode | None:
        return _keep(source, self._expresses(source), [])

    # -- helpers -------------------------------------------------------------

    def _visit_all(self, elements: Iterable[SourceElement]) -> list[TreeNode]:
        nodes = []
        for element in elements:
            node = self._visit(element)
            if node is not None:
                nodes.append(node)
        return nodes

    def _visit(self, element: SourceElement) -> TreeNode | None:
        visitor = self._visitors[element.kind]
        try:
            return visitor(element)
        except OracleQueryFailure as e:
            if self.on_error == "raise":
                raise
            logger.warning("Skipping %s: %s", element.handle, e)
            self.failures.append(BuildFailure(element=element, error=e))
            return None

    def _children_of(self, source: SourceElement, kind: ElementKind) -> list[SourceElement]:
        return [c for c in self.oracle.children(source) if c.kind is kind]

    def _is_source_root(self, root: SourceElement) -> bool:
        try:
            return self.oracle.is_source_root(root)
        except OracleQueryFailure as e:
            if self.on_error == "raise":
                raise
            logger.warning("Skipping %s: %s", root.handle, e)
            self.failures.append(BuildFailure(element=root, error=e))
            return False

    def _expresses(self, element: SourceElement) -> ConceptSet:
        return self.matcher.expresses(element)

    def _check_cancelled(self, element: SourceElement) -> None:
        if self.should_cancel is not None and self.should_cancel():
            logger.debug("Build cancelled at %s", element.handle)
            raise BuildCancelled(f"Build cancelled at {element.handle}")


def _keep(source: SourceElement, concepts: ConceptSet, children: list[TreeNode]) -> TreeNode | None:
    """Return a node for *source* unless it has neither concepts nor children."""
    if not children and concepts.is_empty():
        return None
    return TreeNode(source, concepts, children)
