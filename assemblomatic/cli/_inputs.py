"""Helpers shared by sub-commands that read a descriptor and a reactor."""

from __future__ import annotations

from pathlib import Path

import click

from assemblomatic.config import load_descriptor, load_reactor
from assemblomatic.config.schema import Assembly
from assemblomatic.models import Project, Reactor


def load_inputs(descriptor: Path, reactor_file: Path) -> tuple[Assembly, Reactor]:
    """Load both YAML files, turning loader failures into Click errors."""
    try:
        return load_descriptor(descriptor), load_reactor(reactor_file)
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc


def select_project(reactor: Reactor, project_id: str | None) -> Project:
    """Return the project named by *project_id* (full id or ``group:artifact``).

    Falls back to the reactor root when *project_id* is omitted.
    """
    if not len(reactor):
        raise click.ClickException("The reactor file lists no projects")
    if not project_id:
        return reactor.root
    project = reactor.get(project_id)
    if project is None:
        matches = [p for p in reactor if p.coordinate == project_id]
        project = matches[0] if len(matches) == 1 else None
    if project is None:
        raise click.ClickException(f"Project {project_id} is not part of the reactor")
    return project


def parse_defines(defines: tuple[str, ...]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` pairs into a mapping."""
    props: dict[str, str] = {}
    for item in defines:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="-D")
        props[key.strip()] = value
    return props
