"""
Run-time configuration handed to the assembly phases.

:class:`ConfigurationSource` bundles what the phases need from the
surrounding build: the project the assembly is built for, the reactor, the
output and staging directories, the final name and user properties used by
template interpolation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from assemblomatic.models import Project, Reactor
from assemblomatic.utils.interpolation import interpolate, project_values

__all__ = ["ConfigurationSource"]


@dataclass(frozen=True)
class ConfigurationSource:
    """Read-only inputs of one assembly run.

    Attributes:
        project: Project the assembly is built for (the module-set root).
        reactor: Every project of the build run.
        output_directory: Directory receiving the finished archives.
        working_directory: Staging directory of the archiver. Never archived.
        final_name: Archive base name; defaults to the project's final name.
            May contain ``${…}`` expressions.
        append_assembly_id: Append ``-<assembly id>`` to the archive name.
        properties: User properties available to templates.
    """

    project: Project
    reactor: Reactor
    output_directory: Path
    working_directory: Path
    final_name: Optional[str] = None
    append_assembly_id: bool = True
    properties: Mapping[str, str] = field(default_factory=dict)

    @property
    def reactor_projects(self) -> list[Project]:
        return self.reactor.projects

    def _base_values(self) -> dict[str, str]:
        values = dict(self.properties)
        values.update(project_values("project", self.project))
        values.update(project_values("pom", self.project))
        return values

    def get_final_name(self) -> str:
        """Return the rendered final name of the archive."""
        if self.final_name:
            return interpolate(self.final_name, self._base_values())
        return self.project.build_final_name

    def interpolation_values(self) -> dict[str, str]:
        """Values available to every output template."""
        values = self._base_values()
        values["finalName"] = self.get_final_name()
        values["build.finalName"] = values["finalName"]
        return values

    def dest_file(self, assembly_id: str, fmt: str) -> Path:
        """Return the archive path for *assembly_id* in format *fmt*."""
        name = self.get_final_name()
        if self.append_assembly_id and assembly_id:
            name = f"{name}-{assembly_id}"
        return self.output_directory / f"{name}.{fmt}"
