"""Custom exceptions raised while building an assembly archive.

Every fatal condition aborts the current assembly run, so the hierarchy is
flat and rooted at :class:`AssemblyError`. Callers that only care about
"did the assembly fail" catch the base class; the CLI maps it onto a
:class:`click.ClickException`.
"""

from __future__ import annotations


class AssemblyError(RuntimeError):
    """Base class for unrecoverable assembly failures."""

    pass


class InvalidAssemblerConfigurationError(AssemblyError):
    """Raised when the descriptor asks for something the reactor cannot supply.

    Example: a module binaries section names an attachment classifier that no
    attached artifact of a selected module carries.
    """

    pass


class AssemblyFormattingError(AssemblyError):
    """Raised when an output-directory or file-name template cannot be rendered."""

    pass


class DependencyResolutionError(AssemblyError):
    """Raised by a dependency resolver that cannot produce the requested artifacts."""

    pass


class ArchiveCreationError(AssemblyError):
    """Raised when content cannot be added to the archive (e.g. missing artifact file)."""

    pass


class ArchiverError(AssemblyError):
    """Raised by archive writers for I/O failures and duplicate-entry violations."""

    pass
