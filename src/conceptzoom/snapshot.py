"""Element oracle backed by a JSON snapshot of a project's source model.

A snapshot is the element model exported by an IDE or build tool: a nested
``project`` object whose elements carry a ``kind``, a ``name``, optional
``children`` and, depending on kind, ``annotations``, ``imports``, ``fqn``,
``flavor``, ``supertypes`` and ``visibility``.  An optional top-level
``library_types`` object maps fully-qualified names of types outside the
project to their direct supertypes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from conceptzoom.errors import OracleQueryFailure, SnapshotError, StaleHandle
from conceptzoom.model import (
    AnnotationRef,
    ElementKind,
    ImportDeclaration,
    SourceElement,
    TypeFlavor,
    TypeInfo,
    Visibility,
)

logger = logging.getLogger(__name__)

_ANNOTATABLE = {
    ElementKind.PACKAGE_DECLARATION,
    ElementKind.TYPE,
    ElementKind.FIELD,
    ElementKind.METHOD,
}

# Kinds each kind may contain.
_CHILD_KINDS = {
    ElementKind.PROJECT: {ElementKind.SOURCE_ROOT},
    ElementKind.SOURCE_ROOT: {ElementKind.PACKAGE},
    ElementKind.PACKAGE: {ElementKind.COMPILATION_UNIT},
    ElementKind.COMPILATION_UNIT: {ElementKind.PACKAGE_DECLARATION, ElementKind.TYPE},
    ElementKind.PACKAGE_DECLARATION: set(),
    ElementKind.TYPE: {ElementKind.TYPE, ElementKind.FIELD, ElementKind.METHOD},
    ElementKind.FIELD: set(),
    ElementKind.METHOD: set(),
}


@dataclass
class _Record:
    """Everything the snapshot knows about one element."""

    element: SourceElement
    parent: SourceElement | None = None
    children: list[SourceElement] = field(default_factory=list)
    annotations: list[AnnotationRef] = field(default_factory=list)
    imports: list[ImportDeclaration] = field(default_factory=list)
    type_info: TypeInfo | None = None
    visibility: Visibility | None = None
    binary: bool = False


class SnapshotOracle:
    """Answer oracle queries from an in-memory snapshot."""

    def __init__(
        self,
        project: SourceElement,
        records: dict[SourceElement, _Record],
        library_types: dict[str, list[str]] | None = None,
    ) -> None:
        self.project = project
        self._records = records
        self._supertypes: dict[str, list[str]] = dict(library_types or {})
        for record in records.values():
            if record.type_info is not None:
                self._supertypes[record.type_info.fqn] = list(record.type_info.supertypes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotOracle:
        if not isinstance(data, dict) or not isinstance(data.get("project"), dict):
            raise SnapshotError("Snapshot must be an object with a 'project' object")

        records: dict[SourceElement, _Record] = {}
        project = _load_element(data["project"], None, None, "", records)
        if project.kind is not ElementKind.PROJECT:
            raise SnapshotError(f"Top-level element must be a project, not {project.kind.value}")

        library_types = data.get("library_types") or {}
        if not isinstance(library_types, dict):
            raise SnapshotError("'library_types' must map type names to supertype lists")
        supertypes = {
            name: _strings(value, f"library_types[{name!r}]")
            for name, value in library_types.items()
        }

        logger.debug("Snapshot %s: %d elements", project.name, len(records))
        return cls(project, records, supertypes)

    # -- lookup --------------------------------------------------------------

    def element(self, handle: str) -> SourceElement | None:
        """Return the element with *handle*, if the snapshot has one."""
        for element in self._records:
            if element.handle == handle:
                return element
        return None

    # -- ElementOracle -------------------------------------------------------

    def children(self, element: SourceElement) -> list[SourceElement]:
        return list(self._record(element, "children").children)

    def parent(self, element: SourceElement) -> SourceElement | None:
        return self._record(element, "parent").parent

    def is_source_root(self, element: SourceElement) -> bool:
        record = self._record(element, "is_source_root")
        return element.kind is ElementKind.SOURCE_ROOT and not record.binary

    def annotations(self, element: SourceElement) -> list[AnnotationRef]:
        record = self._record(element, "annotations")
        if element.kind not in _ANNOTATABLE:
            raise OracleQueryFailure(element, "annotations", f"{element.kind.value} is not annotatable")
        return list(record.annotations)

    def imports(self, compilation_unit: SourceElement) -> list[ImportDeclaration]:
        record = self._record(compilation_unit, "imports")
        if compilation_unit.kind is not ElementKind.COMPILATION_UNIT:
            raise OracleQueryFailure(compilation_unit, "imports", "not a compilation unit")
        return list(record.imports)

    def type_info(self, element: SourceElement) -> TypeInfo:
        record = self._record(element, "type_info")
        if record.type_info is None:
            raise OracleQueryFailure(element, "type_info", "not a type")
        return record.type_info

    def supertypes_of(self, fqn: str) -> list[str]:
        return list(self._supertypes.get(fqn, ()))

    def visibility(self, element: SourceElement) -> Visibility:
        record = self._record(element, "visibility")
        if record.visibility is None:
            raise OracleQueryFailure(element, "visibility", f"{element.kind.value} has no visibility")
        return record.visibility

    def _record(self, element: SourceElement, query: str) -> _Record:
        record = self._records.get(element)
        if record is None:
            raise StaleHandle(element, query)
        return record


def load_snapshot(path: Path) -> SnapshotOracle:
    """Read a snapshot document from *path*."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise SnapshotError(f"{path} is not UTF-8: {e}") from e
    return SnapshotOracle.from_dict(data)


def _load_element(
    raw: Any,
    parent: _Record | None,
    package: str | None,
    outer_type: str,
    records: dict[SourceElement, _Record],
) -> SourceElement:
    if not isinstance(raw, dict):
        raise SnapshotError(f"Element must be an object, got {type(raw).__name__}")

    kind = _enum(ElementKind, raw.get("kind", "project" if parent is None else None), "kind")
    name = _string(raw, "name", "")
    if parent is not None and kind not in _CHILD_KINDS[parent.element.kind]:
        raise SnapshotError(
            f"A {parent.element.kind.value} cannot contain a {kind.value} ({name!r})"
        )

    handle = _string(raw, "handle", "") or (f"{parent.element.handle}/{name}" if parent else name)
    element = SourceElement(kind=kind, handle=handle, name=name)
    if element in records:
        raise SnapshotError(f"Duplicate element handle {handle!r}")

    record = _Record(
        element=element,
        parent=parent.element if parent else None,
        binary=bool(raw.get("binary", False)),
    )
    records[element] = record

    if kind in _ANNOTATABLE:
        record.annotations = [_annotation(a) for a in _list(raw, "annotations")]
    if kind is ElementKind.COMPILATION_UNIT:
        imports = _strings(raw.get("imports", []), "imports")
        record.imports = [ImportDeclaration.parse(i) for i in imports]
    if kind is ElementKind.PACKAGE:
        package = name
    if kind in (ElementKind.TYPE, ElementKind.FIELD, ElementKind.METHOD):
        record.visibility = _enum(Visibility, raw.get("visibility", "package"), "visibility")
    if kind is ElementKind.TYPE:
        qualified = f"{outer_type}.{name}" if outer_type else name
        default_fqn = f"{package}.{qualified}" if package else qualified
        record.type_info = TypeInfo(
            fqn=_string(raw, "fqn", default_fqn),
            flavor=_enum(TypeFlavor, raw.get("flavor", "class"), "flavor"),
            visibility=record.visibility,
            supertypes=tuple(_strings(raw.get("supertypes", []), "supertypes")),
        )
        outer_type = qualified

    for child in _list(raw, "children"):
        record.children.append(_load_element(child, record, package, outer_type, records))

    return element


def _annotation(raw: Any) -> AnnotationRef:
    if isinstance(raw, str):
        return AnnotationRef(name=raw)
    if isinstance(raw, dict) and isinstance(raw.get("name"), str):
        fqn = raw.get("fqn")
        if fqn is None or isinstance(fqn, str):
            return AnnotationRef(name=raw["name"], fqn=fqn)
    raise SnapshotError(f"Invalid annotation {raw!r}")


def _string(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        raise SnapshotError(f"'{key}' must be a string, got {value!r}")
    return value


def _list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        raise SnapshotError(f"'{key}' must be a list, got {value!r}")
    return value


def _strings(value: Any, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SnapshotError(f"'{what}' must be a list of strings, got {value!r}")
    return list(value)


def _enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise SnapshotError(f"Invalid {what} {value!r}") from None
