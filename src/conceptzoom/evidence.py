"""Cached evidence lookup over an element oracle."""

from __future__ import annotations

import logging

from conceptzoom.analysis import SupertypeClosure
from conceptzoom.model import (
    AnnotationRef,
    ElementKind,
    ImportDeclaration,
    SourceElement,
    TypeInfo,
)
from conceptzoom.oracle import ElementOracle, enclosing

logger = logging.getLogger(__name__)


class Evidence:
    """Answers evidence questions about elements, caching oracle results.

    One instance lives for one classification pass.  Oracle failures are not
    caught here; they reach whoever asked.
    """

    def __init__(self, oracle: ElementOracle) -> None:
        self.oracle = oracle
        self._annotations: dict[SourceElement, tuple[AnnotationRef, ...]] = {}
        self._imports: dict[SourceElement, tuple[ImportDeclaration, ...]] = {}
        self._type_info: dict[SourceElement, TypeInfo] = {}
        self._closure = SupertypeClosure(oracle.supertypes_of)

    def annotations(self, element: SourceElement) -> tuple[AnnotationRef, ...]:
        if element not in self._annotations:
            self._annotations[element] = tuple(self.oracle.annotations(element))
        return self._annotations[element]

    def imports(self, element: SourceElement) -> tuple[ImportDeclaration, ...]:
        """Imports of the compilation unit enclosing *element*."""
        unit = enclosing(self.oracle, element, ElementKind.COMPILATION_UNIT)
        if unit is None:
            return ()
        if unit not in self._imports:
            self._imports[unit] = tuple(self.oracle.imports(unit))
        return self._imports[unit]

    def type_info(self, element: SourceElement) -> TypeInfo:
        if element not in self._type_info:
            self._type_info[element] = self.oracle.type_info(element)
        return self._type_info[element]

    def supertypes(self, element: SourceElement) -> frozenset[str]:
        """Flat set of fully-qualified supertype names of a type element."""
        info = self.type_info(element)
        return self._closure.closure_for(info.fqn, info.supertypes)

    def is_annotated(self, element: SourceElement, fqn: str) -> bool:
        """Return True if *element* carries the annotation *fqn*.

        Matches when an annotation resolves (or is written) as *fqn*.  When
        the host model left an annotation unresolved, falls back to comparing
        simple names provided the compilation unit has any import from the
        declaring package of *fqn*: the type itself, a sibling type, the
        package on demand or one of its subpackages.  That fallback is
        best-effort.  Importing ``a.b.Other`` is taken as evidence that a bare
        ``@X`` means ``a.b.X``, which is not always true.
        """
        annotations = self.annotations(element)
        if any(a.fqn == fqn or a.name == fqn for a in annotations):
            return True

        package, _, simple_name = fqn.rpartition(".")
        candidates = [
            a for a in annotations if a.fqn is None and a.name == simple_name
        ]
        if not candidates:
            return False

        return any(
            i.name == package or i.name.startswith(package + ".")
            for i in self.imports(element)
        )
