"""
Build the archive(s) described by one assembly descriptor.

Example
-------
Assemble ``dist.yaml`` for the reactor root and print nothing but the
resulting paths::

    assemblomatic-cli single dist.yaml --reactor reactor.yaml -o target

``--dry-run`` swaps the real writers for recording ones and lists every
addition instead of writing archives.
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from assemblomatic.archiver.base import DuplicateBehavior
from assemblomatic.archiver.tracking import TrackingArchiver
from assemblomatic.archiver.writers import create_writer
from assemblomatic.assembler import AssemblyArchiver
from assemblomatic.cli import configure_logging
from assemblomatic.cli._inputs import load_inputs, parse_defines, select_project
from assemblomatic.config.schema import SUPPORTED_FORMATS
from assemblomatic.config.source import ConfigurationSource
from assemblomatic.utils.display import echo_banner, echo_success
from assemblomatic.utils.errors import AssemblyError
from assemblomatic.utils.modes import mode_to_string

log = structlog.get_logger()


@click.command(name="single", context_settings=dict(show_default=True))
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
    help="Project the assembly is built for (id or group:artifact). Defaults to the reactor root.",
)
@click.option(
    "-F",
    "--format",
    "formats",
    multiple=True,
    type=click.Choice(SUPPORTED_FORMATS),
    help="Archive format; repeatable. Defaults to the descriptor's formats.",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving the archives. Defaults to <project>/target.",
)
@click.option("--final-name", help="Archive base name; may use ${...} expressions.")
@click.option(
    "--append-assembly-id/--no-append-assembly-id",
    default=True,
    help="Append '-<assembly id>' to the archive name.",
)
@click.option(
    "--working-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Staging directory never copied into archives. Defaults to <output>/archive-tmp.",
)
@click.option(
    "--on-duplicate",
    type=click.Choice([b.value for b in DuplicateBehavior]),
    default=DuplicateBehavior.SKIP.value,
    help="What to do when two files map onto the same entry.",
)
@click.option(
    "-D",
    "--define",
    "defines",
    multiple=True,
    metavar="KEY=VALUE",
    help="Property available to ${...} expressions; repeatable.",
)
@click.option("--dry-run", is_flag=True, help="List additions instead of writing archives.")
@click.pass_obj
def cli(
    obj,
    descriptor: Path,
    reactor_file: Path,
    project_id: str | None,
    formats: tuple[str, ...],
    output_dir: Path | None,
    final_name: str | None,
    append_assembly_id: bool,
    working_dir: Path | None,
    on_duplicate: str,
    defines: tuple[str, ...],
    dry_run: bool,
) -> None:
    """Assemble DESCRIPTOR for a project of the reactor."""
    assembly, reactor = load_inputs(descriptor, reactor_file)
    project = select_project(reactor, project_id)

    output_dir = (output_dir or project.basedir / "target").expanduser().resolve()
    working_dir = (working_dir or output_dir / "archive-tmp").expanduser().resolve()
    configure_logging(obj, output_dir)

    config_source = ConfigurationSource(
        project=project,
        reactor=reactor,
        output_directory=output_dir,
        working_directory=working_dir,
        final_name=final_name,
        append_assembly_id=append_assembly_id,
        properties=parse_defines(defines),
    )

    writers: list[TrackingArchiver] = []

    def _tracking_factory(fmt, dest_file, **_):
        writer = TrackingArchiver(dest_file)
        writers.append(writer)
        return writer

    assembler = AssemblyArchiver(
        writer_factory=_tracking_factory if dry_run else create_writer,
        duplicate_behavior=DuplicateBehavior(on_duplicate),
    )

    echo_banner(f"Assembly {assembly.id} for {project.id}")
    log.info("assembly.start", assembly=assembly.id, project=project.id, dry_run=dry_run)
    if not dry_run:
        output_dir.mkdir(parents=True, exist_ok=True)
    try:
        archives = assembler.create_archives(
            assembly, config_source, formats=list(formats) or None
        )
    except AssemblyError as exc:
        log.error("assembly.failed", assembly=assembly.id, error=str(exc))
        raise click.ClickException(str(exc)) from exc

    if dry_run:
        for writer in writers:
            click.echo(f"{writer.dest_file}:")
            for add in writer.added:
                mode = mode_to_string(add.file_mode)
                click.echo(f"  {add.kind:<9} {add.source} -> {add.dest or '.'} [{mode}]")
        return

    for archive in archives:
        echo_success(f"Wrote {archive}")
