"""Exceptions raised by conceptzoom."""

from __future__ import annotations

from conceptzoom.model import SourceElement


class ConceptzoomError(Exception):
    """Base class for all conceptzoom errors."""


class OracleQueryFailure(ConceptzoomError):
    """The source model could not answer *query* for *element*."""

    def __init__(self, element: SourceElement | None, query: str, reason: str = "") -> None:
        self.element = element
        self.query = query
        self.reason = reason
        where = element.handle if element is not None else "<none>"
        message = f"{query} failed for {where}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StaleHandle(OracleQueryFailure):
    """The handle refers to an element that no longer exists."""

    def __init__(self, element: SourceElement, query: str) -> None:
        super().__init__(element, query, "element does not exist")


class SnapshotError(ConceptzoomError):
    """A snapshot document is unreadable or malformed."""


class BuildCancelled(ConceptzoomError):
    """A tree build was cancelled before it completed."""
