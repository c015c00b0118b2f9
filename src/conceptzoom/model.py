"""Language-agnostic data model for source elements and their evidence."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ElementKind(Enum):
    """Kinds of source elements, outermost first."""

    PROJECT = "project"
    SOURCE_ROOT = "source_root"
    PACKAGE = "package"
    PACKAGE_DECLARATION = "package_declaration"
    COMPILATION_UNIT = "compilation_unit"
    TYPE = "type"
    FIELD = "field"
    METHOD = "method"


class TypeFlavor(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ANNOTATION = "annotation"


class Visibility(Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"  # no modifier = package-private
    PRIVATE = "private"


PACKAGE_INFO = "package-info.java"


@dataclass(frozen=True)
class SourceElement:
    """A handle to one element of the host source model.

    Two handles are equal when they have the same kind and handle string, no
    matter which oracle call produced them or what name they carry.
    """

    kind: ElementKind
    handle: str
    name: str = field(default="", compare=False)

    @property
    def is_package_info(self) -> bool:
        return self.kind is ElementKind.COMPILATION_UNIT and self.name == PACKAGE_INFO


@dataclass(frozen=True)
class AnnotationRef:
    """An annotation as written on an element.

    *name* is the name as it appears in source (simple or qualified); *fqn*
    is the resolved fully-qualified name when the host model could resolve it.
    """

    name: str
    fqn: str | None = None

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class ImportDeclaration:
    """An import of a compilation unit: ``a.b.C`` or ``a.b.*`` (on demand)."""

    name: str
    on_demand: bool = False

    @property
    def package(self) -> str:
        """Package an on-demand import opens, or the declaring package of a single-type import."""
        if self.on_demand:
            return self.name
        return self.name.rsplit(".", 1)[0] if "." in self.name else ""

    @classmethod
    def parse(cls, text: str) -> ImportDeclaration:
        """Build from source form, e.g. ``"org.example.*"``."""
        text = text.strip()
        if text.endswith(".*"):
            return cls(name=text[:-2], on_demand=True)
        return cls(name=text)


@dataclass(frozen=True)
class TypeInfo:
    """Classification of a type declaration."""

    fqn: str
    flavor: TypeFlavor = TypeFlavor.CLASS
    visibility: Visibility = Visibility.PACKAGE
    supertypes: tuple[str, ...] = ()  # direct superclass and interfaces, fully qualified

    @property
    def is_annotation(self) -> bool:
        return self.flavor is TypeFlavor.ANNOTATION

    @property
    def is_interface(self) -> bool:
        return self.flavor is TypeFlavor.INTERFACE

    @property
    def is_class(self) -> bool:
        return self.flavor is TypeFlavor.CLASS

    @property
    def is_enum(self) -> bool:
        return self.flavor is TypeFlavor.ENUM
