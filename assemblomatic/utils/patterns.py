"""
Ant-style include/exclude matching for archive entry paths.

Patterns use ``/`` as separator and support

* ``*`` and ``?`` inside a single path segment (via :mod:`fnmatch`),
* ``**`` for zero or more whole segments,
* a trailing ``/`` as shorthand for ``/**``.

Excludes are applied to the entry path *and* each of its parent directories,
so excluding ``workdir`` drops the whole ``workdir/`` subtree. Includes only
look at the entry path itself.

All helpers are pure string functions; nothing touches the file-system.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from functools import lru_cache
from typing import Iterable, Sequence

__all__ = [
    "DEFAULT_EXCLUDES",
    "PathMatcher",
    "match_path",
    "normalize_path",
]

#: VCS and editor droppings that never belong in an archive.
DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.DS_Store",
    "**/CVS/**",
    "**/.cvsignore",
    "**/.svn/**",
    "**/.git/**",
    "**/.gitignore",
    "**/.gitattributes",
    "**/.hg/**",
    "**/.hgignore",
    "**/.bzr/**",
    "**/.bzrignore",
    "**/__pycache__/**",
)


def normalize_path(path: str) -> str:
    """Return *path* with forward slashes and no leading ``./`` or ``/``."""
    text = path.replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text.lstrip("/")


@lru_cache(maxsize=1024)
def _split_pattern(pattern: str) -> tuple[str, ...]:
    text = normalize_path(pattern.strip())
    if text.endswith("/"):
        text += "**"
    parts: list[str] = []
    for seg in text.split("/"):
        if not seg:
            continue
        # collapse runs of '**'
        if seg == "**" and parts and parts[-1] == "**":
            continue
        parts.append(seg)
    return tuple(parts)


def _match_parts(pat: Sequence[str], parts: Sequence[str]) -> bool:
    if not pat:
        return not parts
    head = pat[0]
    if head == "**":
        rest = pat[1:]
        return any(_match_parts(rest, parts[i:]) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatchcase(parts[0], head) and _match_parts(pat[1:], parts[1:])


def match_path(pattern: str, path: str) -> bool:
    """Return *True* when *path* matches the Ant-style *pattern*.

    Examples::

        >>> match_path("**/*.txt", "a/b/c.txt")
        True
        >>> match_path("sub/**", "sub")
        True
        >>> match_path("*.txt", "a/b.txt")
        False
    """
    pat = _split_pattern(pattern)
    if not pat:
        return False
    parts = tuple(p for p in normalize_path(path).split("/") if p)
    return _match_parts(pat, parts)


class PathMatcher:
    """Combined include/exclude predicate for relative entry paths.

    Args:
        includes: Patterns an entry must match. Empty means "everything".
        excludes: Patterns removing an entry (or a parent directory of it).
        use_default_excludes: Also apply :data:`DEFAULT_EXCLUDES`.
    """

    def __init__(
        self,
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
        *,
        use_default_excludes: bool = True,
    ) -> None:
        self.includes: tuple[str, ...] = tuple(p for p in (includes or ()) if p.strip())
        excl = [p for p in (excludes or ()) if p.strip()]
        if use_default_excludes:
            excl.extend(DEFAULT_EXCLUDES)
        self.excludes: tuple[str, ...] = tuple(excl)

    def is_included(self, path: str) -> bool:
        if not self.includes:
            return True
        return any(match_path(p, path) for p in self.includes)

    def is_excluded(self, path: str) -> bool:
        parts = [p for p in normalize_path(path).split("/") if p]
        for depth in range(len(parts), 0, -1):
            candidate = "/".join(parts[:depth])
            if any(match_path(p, candidate) for p in self.excludes):
                return True
        return False

    def matches(self, path: str) -> bool:
        """Return *True* when *path* is included and not excluded."""
        return self.is_included(path) and not self.is_excluded(path)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"PathMatcher(includes={self.includes!r}, excludes={self.excludes!r})"
