"""Type hierarchy analysis (transitive supertype closure)."""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)


class SupertypeClosure:
    """Memoised transitive closure over direct-supertype edges.

    *direct_supertypes* maps a fully-qualified type name to the names of its
    direct superclass and interfaces.  The closure of a type is the flat set
    of every name reachable through those edges, excluding the type itself
    unless it is part of a cycle.
    """

    def __init__(self, direct_supertypes: Callable[[str], list[str]]) -> None:
        self._direct = direct_supertypes
        self._cache: dict[str, frozenset[str]] = {}

    def closure_of(self, fqn: str) -> frozenset[str]:
        cached = self._cache.get(fqn)
        if cached is not None:
            return cached

        seen: set[str] = set()
        queue: deque[str] = deque(self._direct(fqn))
        while queue:
            name = queue.popleft()
            if name in seen:
                continue
            seen.add(name)
            known = self._cache.get(name)
            if known is not None:
                # Already complete; no need to expand further.
                seen.update(known)
                continue
            queue.extend(self._direct(name))

        result = frozenset(seen)
        self._cache[fqn] = result
        logger.debug("supertypes of %s: %d", fqn, len(result))
        return result

    def closure_for(self, fqn: str, direct: tuple[str, ...] | list[str]) -> frozenset[str]:
        """Closure of a type whose direct supertypes are already known."""
        cached = self._cache.get(fqn)
        if cached is not None:
            return cached
        names: set[str] = set(direct)
        for name in direct:
            names.update(self.closure_of(name))
        result = frozenset(names)
        self._cache[fqn] = result
        return result
