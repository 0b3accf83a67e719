"""
Module graph resolution: which reactor projects a module set selects.

The candidate universe is every strict descendant of the root project (by
walking parent handles through the :class:`~assemblomatic.models.Reactor`).
Include/exclude coordinates are then applied transitively, so excluding a
module also drops everything below it even when a descendant would match an
include on its own.
"""

from __future__ import annotations

import logging
from typing import Iterable

from assemblomatic.config.schema import ModuleSet
from assemblomatic.models import Project, Reactor
from assemblomatic.resolution.filters import CoordinateFilter

__all__ = ["filter_projects", "get_module_projects"]

log = logging.getLogger(__name__)


def filter_projects(
    projects: Iterable[Project],
    reactor: Reactor,
    includes: Iterable[str] | None,
    excludes: Iterable[str] | None,
    logger: logging.Logger | None = None,
) -> set[Project]:
    """Apply coordinate *includes*/*excludes* to *projects*.

    A project's trail is the coordinate list of its ancestors in *reactor*.
    """
    logger = logger or log
    flt = CoordinateFilter(includes, excludes)
    selected: set[Project] = set()
    for project in projects:
        trail = [a.coordinate for a in reactor.ancestors(project)]
        if flt.allows([project.coordinate], trail):
            selected.add(project)
        else:
            logger.debug("Module %s filtered out of module set", project.id)
    flt.report_untriggered(logger)
    return selected


def get_module_projects(
    module_set: ModuleSet,
    reactor: Reactor,
    root: Project | None = None,
    logger: logging.Logger | None = None,
) -> set[Project]:
    """Return the projects selected by *module_set*.

    Args:
        module_set: Selection rule.
        reactor: Every project of the build run.
        root: Project whose descendants are candidates. Defaults to the
            reactor's first project.
        logger: Optional logger.

    Returns:
        A set of projects; empty when nothing qualifies. Never raises for
        malformed patterns.

    Notes:
        ``use_all_reactor_projects`` re-roots the search at the first reactor
        project; combined with ``include_sub_modules=False`` the whole reactor
        list (root included) becomes the candidate set.
    """
    logger = logger or log
    if not len(reactor):
        return set()

    root = root or reactor.root
    candidates: list[Project] | None = None

    if module_set.use_all_reactor_projects:
        if not module_set.include_sub_modules:
            candidates = reactor.projects
        root = reactor.root

    if candidates is None:
        candidates = reactor.descendants(root, recursive=module_set.include_sub_modules)

    logger.debug(
        "Module set rooted at %s has %d candidate(s)", root.id, len(candidates)
    )
    return filter_projects(
        candidates, reactor, module_set.includes, module_set.excludes, logger
    )
