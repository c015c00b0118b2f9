"""Shared fixtures: a small project snapshot and helpers to build others."""

from __future__ import annotations

import copy

import pytest

from conceptzoom.snapshot import SnapshotOracle

DDD = "org.jmolecules.ddd.annotation."
TYPES = "org.jmolecules.ddd.types."
EVENTS = "org.jmolecules.event.annotation."

SHOP = {
    "project": {
        "kind": "project",
        "name": "shop",
        "children": [
            {
                "kind": "source_root",
                "name": "src/main/java",
                "children": [
                    {
                        "kind": "package",
                        "name": "com.acme.order",
                        "children": [
                            {
                                "kind": "compilation_unit",
                                "name": "package-info.java",
                                "imports": [DDD + "*"],
                                "children": [
                                    {
                                        "kind": "package_declaration",
                                        "name": "com.acme.order",
                                        "annotations": ["BoundedContext"],
                                    }
                                ],
                            },
                            {
                                "kind": "compilation_unit",
                                "name": "Order.java",
                                "imports": [DDD + "AggregateRoot", DDD + "Identity"],
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "Order",
                                        "visibility": "public",
                                        "annotations": [
                                            {"name": "AggregateRoot", "fqn": DDD + "AggregateRoot"}
                                        ],
                                        "children": [
                                            {
                                                "kind": "field",
                                                "name": "id",
                                                "visibility": "private",
                                                "annotations": ["Identity"],
                                            },
                                            {"kind": "field", "name": "total", "visibility": "private"},
                                            {"kind": "method", "name": "place()", "visibility": "public"},
                                        ],
                                    }
                                ],
                            },
                            {
                                "kind": "compilation_unit",
                                "name": "OrderPlaced.java",
                                "imports": [EVENTS + "DomainEvent"],
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "OrderPlaced",
                                        "annotations": ["DomainEvent"],
                                    }
                                ],
                            },
                            {
                                "kind": "compilation_unit",
                                "name": "Helper.java",
                                "children": [{"kind": "type", "name": "Helper"}],
                            },
                            {
                                "kind": "compilation_unit",
                                "name": "LineItem.java",
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "LineItem",
                                        "supertypes": [TYPES + "Entity"],
                                    }
                                ],
                            },
                            {
                                "kind": "compilation_unit",
                                "name": "Invoice.java",
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "Invoice",
                                        "supertypes": [TYPES + "AggregateRoot"],
                                    }
                                ],
                            },
                        ],
                    },
                    {
                        "kind": "package",
                        "name": "com.acme.util",
                        "children": [
                            {
                                "kind": "compilation_unit",
                                "name": "Strings.java",
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "Strings",
                                        "children": [{"kind": "method", "name": "trim(String)"}],
                                    }
                                ],
                            }
                        ],
                    },
                    {"kind": "package", "name": ""},
                ],
            },
            {
                "kind": "source_root",
                "name": "lib/jmolecules.jar",
                "binary": True,
                "children": [
                    {
                        "kind": "package",
                        "name": "org.example",
                        "children": [
                            {
                                "kind": "compilation_unit",
                                "name": "Sample.class",
                                "children": [
                                    {
                                        "kind": "type",
                                        "name": "Sample",
                                        "annotations": [
                                            {"name": "AggregateRoot", "fqn": DDD + "AggregateRoot"}
                                        ],
                                    }
                                ],
                            }
                        ],
                    }
                ],
            },
        ],
    },
    "library_types": {
        TYPES + "AggregateRoot": [TYPES + "Entity"],
        TYPES + "Entity": [TYPES + "Identifiable"],
    },
}

ROOT = "shop/src/main/java"
ORDER_PKG = ROOT + "/com.acme.order"
ORDER = ORDER_PKG + "/Order.java/Order"


@pytest.fixture
def shop_data():
    return copy.deepcopy(SHOP)


@pytest.fixture
def shop(shop_data):
    return SnapshotOracle.from_dict(shop_data)


def single_type_project(type_spec: dict, imports: list[str] | None = None) -> SnapshotOracle:
    """Snapshot with one package holding one compilation unit with *type_spec*."""
    return SnapshotOracle.from_dict(
        {
            "project": {
                "name": "p",
                "children": [
                    {
                        "kind": "source_root",
                        "name": "src",
                        "children": [
                            {
                                "kind": "package",
                                "name": "pkg",
                                "children": [
                                    {
                                        "kind": "compilation_unit",
                                        "name": type_spec["name"] + ".java",
                                        "imports": imports or [],
                                        "children": [dict(type_spec, kind="type")],
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        }
    )


def type_handle(name: str) -> str:
    return f"p/src/pkg/{name}.java/{name}"


def all_elements(oracle: SnapshotOracle, element=None) -> list:
    """Every element reachable from *element* (the project by default), pre-order."""
    element = element or oracle.project
    found = [element]
    for child in oracle.children(element):
        found.extend(all_elements(oracle, child))
    return found
