"""conceptzoom — find the jMolecules concepts a Java project expresses."""

from conceptzoom.builder import BuildFailure, TreeBuilder
from conceptzoom.concepts import (
    CATALOG,
    Category,
    Concept,
    ConceptMatcher,
    ConceptSet,
    select_catalog,
)
from conceptzoom.errors import (
    BuildCancelled,
    ConceptzoomError,
    OracleQueryFailure,
    SnapshotError,
    StaleHandle,
)
from conceptzoom.explorer import ConceptExplorer
from conceptzoom.model import ElementKind, SourceElement
from conceptzoom.snapshot import SnapshotOracle, load_snapshot
from conceptzoom.tree import TreeNode

__all__ = [
    "BuildCancelled",
    "BuildFailure",
    "CATALOG",
    "Category",
    "Concept",
    "ConceptExplorer",
    "ConceptMatcher",
    "ConceptSet",
    "ConceptzoomError",
    "ElementKind",
    "OracleQueryFailure",
    "SnapshotError",
    "SnapshotOracle",
    "SourceElement",
    "StaleHandle",
    "TreeBuilder",
    "TreeNode",
    "load_snapshot",
    "select_catalog",
]
