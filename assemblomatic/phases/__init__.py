"""
Assembly phases.

:func:`default_phases` returns the standard sequence: file sets, single
files, dependency sets, module sets.
"""

from __future__ import annotations

import logging

from .base import AssemblyPhase
from .dependency_set import DependencySetAssemblyPhase
from .file_set import FileItemAssemblyPhase, FileSetAssemblyPhase
from .module_set import ModuleSetAssemblyPhase
from ..resolution.dependencies import DependencyResolver

__all__ = [
    "AssemblyPhase",
    "DependencySetAssemblyPhase",
    "FileItemAssemblyPhase",
    "FileSetAssemblyPhase",
    "ModuleSetAssemblyPhase",
    "default_phases",
]


def default_phases(
    dependency_resolver: DependencyResolver,
    logger: logging.Logger | None = None,
) -> list[AssemblyPhase]:
    """Return the standard phases sorted by their ``order``."""
    phases: list[AssemblyPhase] = [
        FileSetAssemblyPhase(logger),
        FileItemAssemblyPhase(logger),
        DependencySetAssemblyPhase(dependency_resolver, logger),
        ModuleSetAssemblyPhase(dependency_resolver, logger),
    ]
    return sorted(phases, key=lambda p: p.order)
