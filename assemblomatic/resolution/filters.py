"""
Include/exclude filtering on ``group:artifact`` coordinates.

Patterns are compared as exact strings, never as globs. A pattern that is
not a well-formed ``group:artifact`` pair (or a longer ``group:artifact:type``
dependency id) simply never matches.

Matching is *transitive*: callers pass the coordinates of the candidate's
parent chain (its "trail") and a pattern matching any trail element counts
as a match for the candidate itself. Excluding a module therefore excludes
its whole subtree.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

__all__ = ["CoordinateFilter", "is_wellformed"]

log = logging.getLogger(__name__)


def is_wellformed(pattern: str) -> bool:
    """Return *True* for ``a:b`` style patterns with non-empty segments."""
    parts = pattern.split(":")
    return len(parts) >= 2 and all(p.strip() for p in parts)


class CoordinateFilter:
    """Stateful include/exclude filter that remembers which patterns fired.

    Args:
        includes: Keep only candidates matching one of these. Empty keeps all.
        excludes: Drop candidates matching one of these.
    """

    def __init__(
        self,
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> None:
        self.includes = [p.strip() for p in (includes or ()) if p.strip()]
        self.excludes = [p.strip() for p in (excludes or ()) if p.strip()]
        self._triggered: set[str] = set()

    def _first_match(self, patterns: Sequence[str], ids: Sequence[str]) -> str | None:
        for pattern in patterns:
            if not is_wellformed(pattern):
                continue
            if pattern in ids:
                self._triggered.add(pattern)
                return pattern
        return None

    def allows(self, ids: Sequence[str], trail: Sequence[str] = ()) -> bool:
        """Decide whether a candidate passes the filter.

        Args:
            ids: Identifiers of the candidate (``group:artifact`` first).
            trail: Coordinates of the candidate's ancestors.

        Returns:
            *False* when an exclude matches the candidate or its trail, or
            when includes exist and none matches the candidate or its trail.
        """
        everything = list(ids) + list(trail)
        if self._first_match(self.excludes, everything) is not None:
            return False
        if not self.includes:
            return True
        return self._first_match(self.includes, everything) is not None

    @property
    def untriggered(self) -> list[str]:
        return [p for p in self.includes + self.excludes if p not in self._triggered]

    def report_untriggered(self, logger: logging.Logger | None = None, *, what: str = "module") -> None:
        """Warn about patterns that never matched anything."""
        missing = self.untriggered
        if missing:
            (logger or log).warning(
                "The following %s patterns were never triggered: %s",
                what,
                ", ".join(missing),
            )
