"""jMolecules concept catalog and matcher.

Each concept is a named, categorised rule made of one or more detection
rules OR'd together.  The built-in catalog is a plain list, so a new concept
is one more entry in :data:`CATALOG`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Iterable, Iterator, Protocol

from conceptzoom.evidence import Evidence
from conceptzoom.model import ElementKind, SourceElement
from conceptzoom.oracle import ElementOracle

logger = logging.getLogger(__name__)


class Category(Enum):
    """Concept categories, in display order."""

    DDD = "DDD"
    EVENTS = "Events"
    CQRS_ARCHITECTURE = "CQRS-Architecture"
    LAYERED_ARCHITECTURE = "Layered-Architecture"
    ONION_ARCHITECTURE = "Onion-Architecture"

    @property
    def label(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _CATEGORY_RANK[self]

    @classmethod
    def from_label(cls, label: str) -> Category:
        for category in cls:
            if label in (category.value, category.name):
                return category
        raise ValueError(f"Unknown concept category: {label!r}")


_CATEGORY_RANK = {category: i for i, category in enumerate(Category)}


class Scope(Enum):
    """Declaration contexts an annotation rule looks at."""

    TYPE = "type"  # any type declaration, annotation types included
    ANNOTATION_TYPE = "annotation_type"
    FIELD = "field"
    METHOD = "method"
    PACKAGE = "package"  # the package declaration of a package-info unit


class Rule(Protocol):
    def matches(self, element: SourceElement, evidence: Evidence) -> bool: ...


@dataclass(frozen=True)
class AnnotationRule:
    """Element in one of *scopes* carries the annotation *target*."""

    target: str
    scopes: frozenset[Scope]

    def matches(self, element: SourceElement, evidence: Evidence) -> bool:
        if not self._in_scope(element, evidence):
            return False
        return evidence.is_annotated(element, self.target)

    def _in_scope(self, element: SourceElement, evidence: Evidence) -> bool:
        kind = element.kind
        if kind is ElementKind.FIELD:
            return Scope.FIELD in self.scopes
        if kind is ElementKind.METHOD:
            return Scope.METHOD in self.scopes
        if kind is ElementKind.PACKAGE_DECLARATION:
            return Scope.PACKAGE in self.scopes
        if kind is ElementKind.TYPE:
            if Scope.TYPE in self.scopes:
                return True
            return Scope.ANNOTATION_TYPE in self.scopes and evidence.type_info(element).is_annotation
        return False


@dataclass(frozen=True)
class SupertypeRule:
    """Type element has *target* among its transitive supertypes."""

    target: str

    def matches(self, element: SourceElement, evidence: Evidence) -> bool:
        if element.kind is not ElementKind.TYPE:
            return False
        return self.target in evidence.supertypes(element)


@total_ordering
@dataclass(frozen=True)
class Concept:
    """A named structural pattern.

    Identity is ``(category, name)``: rule variants sharing both are the same
    concept.
    """

    name: str
    category: Category
    rules: tuple[Rule, ...] = field(default=(), compare=False, repr=False)

    def matches(self, element: SourceElement, evidence: Evidence) -> bool:
        return any(rule.matches(element, evidence) for rule in self.rules)

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.category.rank, self.name)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Concept):
            return NotImplemented
        return self.sort_key < other.sort_key


class ConceptSet:
    """Immutable, de-duplicated set of concepts expressed by one element."""

    __slots__ = ("_concepts",)

    def __init__(self, concepts: Iterable[Concept] = ()) -> None:
        self._concepts = frozenset(concepts)

    @classmethod
    def empty(cls) -> ConceptSet:
        return _EMPTY

    def is_empty(self) -> bool:
        return not self._concepts

    def categories(self) -> set[Category]:
        return {c.category for c in self._concepts}

    def sorted(self) -> list[Concept]:
        return sorted(self._concepts)

    def names(self) -> list[str]:
        return [c.name for c in self.sorted()]

    def merge(self, *others: ConceptSet) -> ConceptSet:
        collected = set(self._concepts)
        for other in others:
            collected.update(other._concepts)
        return ConceptSet(collected)

    def __contains__(self, concept: object) -> bool:
        return concept in self._concepts

    def __iter__(self) -> Iterator[Concept]:
        return iter(self._concepts)

    def __len__(self) -> int:
        return len(self._concepts)

    def __bool__(self) -> bool:
        return bool(self._concepts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConceptSet):
            return NotImplemented
        return self._concepts == other._concepts

    def __hash__(self) -> int:
        return hash(self._concepts)

    def __repr__(self) -> str:
        return f"ConceptSet({self.names()!r})"


_EMPTY = ConceptSet()


# ---------------------------------------------------------------------------
# Built-in catalog
# ---------------------------------------------------------------------------

_DDD_ANNOTATION = "org.jmolecules.ddd.annotation."
_DDD_TYPES = "org.jmolecules.ddd.types."
_EVENT_ANNOTATION = "org.jmolecules.event.annotation."
_CQRS_ANNOTATION = "org.jmolecules.architecture.cqrs.annotation."
_LAYERED = "org.jmolecules.architecture.layered."
_ONION_CLASSICAL = "org.jmolecules.architecture.onion.classical."
_ONION_SIMPLIFIED = "org.jmolecules.architecture.onion.simplified."

_TYPE = frozenset({Scope.TYPE})
_PACKAGE_OR_TYPE = frozenset({Scope.PACKAGE, Scope.TYPE})
_PACKAGE_OR_ANNOTATION = frozenset({Scope.PACKAGE, Scope.ANNOTATION_TYPE})
_METHOD_OR_ANNOTATION = frozenset({Scope.METHOD, Scope.ANNOTATION_TYPE})
_MEMBER_OR_ANNOTATION = frozenset({Scope.FIELD, Scope.METHOD, Scope.ANNOTATION_TYPE})


def _concept(name: str, category: Category, *rules: Rule) -> Concept:
    return Concept(name=name, category=category, rules=rules)


def _annotated(fqn: str, scopes: frozenset[Scope] = _TYPE) -> AnnotationRule:
    return AnnotationRule(target=fqn, scopes=scopes)


CATALOG: list[Concept] = [
    # DDD
    _concept(
        "AggregateRoot",
        Category.DDD,
        _annotated(_DDD_ANNOTATION + "AggregateRoot"),
        SupertypeRule(_DDD_TYPES + "AggregateRoot"),
    ),
    _concept("Association", Category.DDD, SupertypeRule(_DDD_TYPES + "Association")),
    _concept("BoundedContext", Category.DDD, _annotated(_DDD_ANNOTATION + "BoundedContext", _PACKAGE_OR_ANNOTATION)),
    _concept(
        "Entity",
        Category.DDD,
        _annotated(_DDD_ANNOTATION + "Entity"),
        SupertypeRule(_DDD_TYPES + "Entity"),
    ),
    _concept("Factory", Category.DDD, _annotated(_DDD_ANNOTATION + "Factory")),
    _concept("Identity", Category.DDD, _annotated(_DDD_ANNOTATION + "Identity", _MEMBER_OR_ANNOTATION)),
    _concept("Module", Category.DDD, _annotated(_DDD_ANNOTATION + "Module", _PACKAGE_OR_ANNOTATION)),
    _concept("Repository", Category.DDD, _annotated(_DDD_ANNOTATION + "Repository")),
    _concept("Service", Category.DDD, _annotated(_DDD_ANNOTATION + "Service")),
    _concept("ValueObject", Category.DDD, _annotated(_DDD_ANNOTATION + "ValueObject")),
    # Events
    _concept("DomainEvent", Category.EVENTS, _annotated(_EVENT_ANNOTATION + "DomainEvent")),
    _concept("DomainEventHandler", Category.EVENTS, _annotated(_EVENT_ANNOTATION + "DomainEventHandler", _METHOD_OR_ANNOTATION)),
    _concept("DomainEventPublisher", Category.EVENTS, _annotated(_EVENT_ANNOTATION + "DomainEventPublisher", _METHOD_OR_ANNOTATION)),
    # CQRS architecture
    _concept("Command", Category.CQRS_ARCHITECTURE, _annotated(_CQRS_ANNOTATION + "Command")),
    _concept("CommandDispatcher", Category.CQRS_ARCHITECTURE, _annotated(_CQRS_ANNOTATION + "CommandDispatcher", _METHOD_OR_ANNOTATION)),
    _concept("CommandHandler", Category.CQRS_ARCHITECTURE, _annotated(_CQRS_ANNOTATION + "CommandHandler", _METHOD_OR_ANNOTATION)),
    _concept("QueryModel", Category.CQRS_ARCHITECTURE, _annotated(_CQRS_ANNOTATION + "QueryModel")),
    # Layered architecture
    _concept("ApplicationLayer", Category.LAYERED_ARCHITECTURE, _annotated(_LAYERED + "ApplicationLayer", _PACKAGE_OR_TYPE)),
    _concept("DomainLayer", Category.LAYERED_ARCHITECTURE, _annotated(_LAYERED + "DomainLayer", _PACKAGE_OR_TYPE)),
    _concept("InfrastructureLayer", Category.LAYERED_ARCHITECTURE, _annotated(_LAYERED + "InfrastructureLayer", _PACKAGE_OR_TYPE)),
    _concept("InterfaceLayer", Category.LAYERED_ARCHITECTURE, _annotated(_LAYERED + "InterfaceLayer", _PACKAGE_OR_TYPE)),
    # Onion architecture (classical and simplified)
    _concept("ApplicationServiceRing", Category.ONION_ARCHITECTURE, _annotated(_ONION_CLASSICAL + "ApplicationServiceRing", _PACKAGE_OR_TYPE)),
    _concept("DomainModelRing", Category.ONION_ARCHITECTURE, _annotated(_ONION_CLASSICAL + "DomainModelRing", _PACKAGE_OR_TYPE)),
    _concept("DomainServiceRing", Category.ONION_ARCHITECTURE, _annotated(_ONION_CLASSICAL + "DomainServiceRing", _PACKAGE_OR_TYPE)),
    _concept("ApplicationRing", Category.ONION_ARCHITECTURE, _annotated(_ONION_SIMPLIFIED + "ApplicationRing", _PACKAGE_OR_TYPE)),
    _concept("DomainRing", Category.ONION_ARCHITECTURE, _annotated(_ONION_SIMPLIFIED + "DomainRing", _PACKAGE_OR_TYPE)),
    _concept(
        "InfrastructureRing",
        Category.ONION_ARCHITECTURE,
        _annotated(_ONION_CLASSICAL + "InfrastructureRing", _PACKAGE_OR_TYPE),
        _annotated(_ONION_SIMPLIFIED + "InfrastructureRing", _PACKAGE_OR_TYPE),
    ),
]


def select_catalog(categories: Iterable[Category] | None = None) -> list[Concept]:
    """Return the built-in catalog, optionally restricted to *categories*."""
    if categories is None:
        return list(CATALOG)
    wanted = set(categories)
    return [c for c in CATALOG if c.category in wanted]


class ConceptMatcher:
    """Evaluates a concept catalog against source elements."""

    def __init__(
        self, oracle: ElementOracle, concepts: Iterable[Concept] | None = None
    ) -> None:
        self.concepts: tuple[Concept, ...] = tuple(CATALOG if concepts is None else concepts)
        self.evidence = Evidence(oracle)

    def expresses(self, element: SourceElement) -> ConceptSet:
        """Return the concepts *element* expresses.

        Raises :class:`~conceptzoom.errors.OracleQueryFailure` if the oracle
        cannot supply evidence for *element*.
        """
        matched = [c for c in self.concepts if c.matches(element, self.evidence)]
        if matched:
            logger.debug("%s expresses %s", element.handle, [c.name for c in matched])
        return ConceptSet(matched) if matched else ConceptSet.empty()
