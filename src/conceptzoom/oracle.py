"""Oracle protocol — the source model conceptzoom classifies."""

from __future__ import annotations

from typing import Protocol

from conceptzoom.model import (
    AnnotationRef,
    ElementKind,
    ImportDeclaration,
    SourceElement,
    TypeInfo,
    Visibility,
)


class ElementOracle(Protocol):
    """Protocol for source models.

    Every method may raise :class:`~conceptzoom.errors.OracleQueryFailure`
    (or :class:`~conceptzoom.errors.StaleHandle`) for the element it was asked
    about.
    """

    def children(self, element: SourceElement) -> list[SourceElement]:
        """Return the ordered children of *element*."""
        ...

    def parent(self, element: SourceElement) -> SourceElement | None:
        """Return the parent of *element*, or None for a project."""
        ...

    def is_source_root(self, element: SourceElement) -> bool:
        """Return True if *element* is a source (not binary) root."""
        ...

    def annotations(self, element: SourceElement) -> list[AnnotationRef]:
        """Return the annotations on a type, field, method or package declaration."""
        ...

    def imports(self, compilation_unit: SourceElement) -> list[ImportDeclaration]:
        """Return the import declarations of *compilation_unit*."""
        ...

    def type_info(self, element: SourceElement) -> TypeInfo:
        """Return the classification of a type element."""
        ...

    def supertypes_of(self, fqn: str) -> list[str]:
        """Return direct supertypes of the type named *fqn* (empty when unknown)."""
        ...

    def visibility(self, element: SourceElement) -> Visibility:
        """Return the visibility of a type, field or method."""
        ...


def enclosing(
    oracle: ElementOracle, element: SourceElement, kind: ElementKind
) -> SourceElement | None:
    """Walk up from *element* (inclusive) to the nearest element of *kind*."""
    current: SourceElement | None = element
    while current is not None and current.kind is not kind:
        current = oracle.parent(current)
    return current
