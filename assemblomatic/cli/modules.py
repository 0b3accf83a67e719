"""List the reactor projects each module set of a descriptor selects."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import structlog

from assemblomatic.cli import configure_logging
from assemblomatic.cli._inputs import load_inputs, select_project
from assemblomatic.resolution.modules import get_module_projects
from assemblomatic.utils.display import echo_section

log = structlog.get_logger()


@click.command(name="modules", context_settings=dict(show_default=True))
@click.argument(
    "descriptor",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--reactor",
    "reactor_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML listing the projects of the build.",
)
@click.option(
    "--project",
    "project_id",
    help="Project whose descendants are candidates. Defaults to the reactor root.",
)
@click.pass_obj
def cli(obj, descriptor: Path, reactor_file: Path, project_id: str | None) -> None:
    """Print the projects selected by every module set of DESCRIPTOR."""
    assembly, reactor = load_inputs(descriptor, reactor_file)
    project = select_project(reactor, project_id)
    configure_logging(obj, project.basedir / "target")

    if not assembly.module_sets:
        click.echo("No module sets defined.")
        return

    for idx, module_set in enumerate(assembly.module_sets, start=1):
        echo_section(f"module set {idx}")
        selected = get_module_projects(
            module_set, reactor, project, logging.getLogger("assemblomatic.modules")
        )
        log.debug("modules.selected", module_set=idx, count=len(selected))
        if not selected:
            click.echo("  (none)")
        for p in sorted(selected, key=lambda p: p.id):
            click.echo(f"  • {p.id}  {p.basedir}")
