"""
Public façade for the *utils* package.

Only dependency-free helpers are re-exported here; interpolation and
logging live in their own modules.
"""

from __future__ import annotations

# ─── errors ──────────────────────────────────────────────────────────────
from .errors import (
    ArchiveCreationError,
    ArchiverError,
    AssemblyError,
    AssemblyFormattingError,
    DependencyResolutionError,
    InvalidAssemblerConfigurationError,
)

# ─── modes & patterns ────────────────────────────────────────────────────
from .modes import UNSET_MODE, mode_to_int, mode_to_string
from .patterns import PathMatcher, match_path

# ─── CLI output ──────────────────────────────────────────────────────────
from .display import echo_banner, echo_section, echo_success

__all__: list[str] = [
    "ArchiveCreationError",
    "ArchiverError",
    "AssemblyError",
    "AssemblyFormattingError",
    "DependencyResolutionError",
    "InvalidAssemblerConfigurationError",
    "UNSET_MODE",
    "mode_to_int",
    "mode_to_string",
    "PathMatcher",
    "match_path",
    "echo_banner",
    "echo_section",
    "echo_success",
]
