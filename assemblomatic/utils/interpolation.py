"""
``${…}`` template rendering for output directories and file-name mappings.

Supported expressions
---------------------
* ``${finalName}``                    – final name of the root project.
* ``${project.<field>}``              – fields of the root project.
* ``${module.<field>}``               – fields of the module being added
  (coordinates come from the selected module artifact when there is one).
* ``${artifact.<field>}``             – fields of the artifact being added.
* ``${dashClassifier}``               – ``-<classifier>`` or empty.
* ``${<property>}``                   – user properties of the configuration
  source.

A trailing ``?`` (``${dashClassifier?}``) marks an expression as optional:
it renders as the empty string when no value is known. Any other unknown
expression raises :class:`~assemblomatic.utils.errors.AssemblyFormattingError`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Mapping, Optional

from assemblomatic.models import Artifact, Project
from assemblomatic.utils.errors import AssemblyFormattingError

if TYPE_CHECKING:  # pragma: no cover
    from assemblomatic.config.source import ConfigurationSource

__all__ = [
    "artifact_values",
    "format_file_name",
    "format_output_directory",
    "interpolate",
    "normalize_output_directory",
    "project_values",
]

_EXPR_RE = re.compile(r"\$\{([^}]*)\}")


def interpolate(template: str, values: Mapping[str, str]) -> str:
    """Replace every ``${key}`` in *template* with ``values[key]``.

    Raises:
        AssemblyFormattingError: When a non-optional expression is unknown
            or the template contains an empty ``${}``.
    """

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        optional = key.endswith("?")
        if optional:
            key = key[:-1].strip()
        if not key:
            raise AssemblyFormattingError(f"Empty expression in template {template!r}")
        value = values.get(key)
        if value is not None:
            return str(value)
        if optional:
            return ""
        raise AssemblyFormattingError(
            f"Cannot resolve expression '${{{key}}}' in template {template!r}"
        )

    return _EXPR_RE.sub(_sub, template)


def artifact_values(prefix: str, artifact: Artifact) -> dict[str, str]:
    """Return ``<prefix>.<field>`` keys describing *artifact*."""
    values = {
        "groupId": artifact.group_id,
        "artifactId": artifact.artifact_id,
        "version": artifact.version,
        "baseVersion": artifact.version,
        "type": artifact.type,
        "extension": artifact.extension,
        "classifier": artifact.classifier or "",
        "scope": artifact.scope,
        "id": artifact.id,
    }
    if artifact.file is not None:
        values["file"] = str(artifact.file)
        values["fileName"] = artifact.file.name
    return {f"{prefix}.{k}": v for k, v in values.items()}


def project_values(prefix: str, project: Project) -> dict[str, str]:
    """Return ``<prefix>.<field>`` keys describing *project*."""
    values = {
        "groupId": project.group_id,
        "artifactId": project.artifact_id,
        "version": project.version,
        "packaging": project.packaging,
        "basedir": str(project.basedir),
        "id": project.id,
        "build.finalName": project.build_final_name,
    }
    return {f"{prefix}.{k}": v for k, v in values.items()}


def _context(
    config_source: Optional["ConfigurationSource"],
    *,
    module_project: Project | None = None,
    module_artifact: Artifact | None = None,
    artifact: Artifact | None = None,
) -> dict[str, str]:
    values: dict[str, str] = {}
    if config_source is not None:
        values.update(config_source.interpolation_values())

    if module_project is not None:
        values.update(project_values("module", module_project))
        values["module.extension"] = module_project.packaging
    if module_artifact is not None:
        values.update(artifact_values("module", module_artifact))
    if artifact is not None:
        values.update(artifact_values("artifact", artifact))

    classified = artifact or module_artifact
    classifier = classified.classifier if classified is not None else None
    values["dashClassifier"] = f"-{classifier}" if classifier else ""
    return values


def normalize_output_directory(value: str | None) -> str:
    """Return *value* as a relative archive directory with a trailing ``/``.

    ``None``, ``""``, ``"."`` and ``"/"`` all mean the archive root and yield
    the empty string.
    """
    if not value:
        return ""
    text = value.replace("\\", "/").strip()
    while text.startswith("./"):
        text = text[2:]
    text = text.lstrip("/")
    if text in {"", "."}:
        return ""
    if not text.endswith("/"):
        text += "/"
    return text


def format_output_directory(
    template: str | None,
    config_source: Optional["ConfigurationSource"] = None,
    *,
    module_project: Project | None = None,
    module_artifact: Artifact | None = None,
    artifact: Artifact | None = None,
) -> str:
    """Render and normalise an output-directory template."""
    if not template:
        return ""
    values = _context(
        config_source,
        module_project=module_project,
        module_artifact=module_artifact,
        artifact=artifact,
    )
    return normalize_output_directory(interpolate(template, values))


def format_file_name(
    mapping: str,
    config_source: Optional["ConfigurationSource"] = None,
    *,
    module_project: Project | None = None,
    module_artifact: Artifact | None = None,
    artifact: Artifact | None = None,
) -> str:
    """Render an output file-name mapping.

    Raises:
        AssemblyFormattingError: When the mapping renders to an empty name.
    """
    values = _context(
        config_source,
        module_project=module_project,
        module_artifact=module_artifact,
        artifact=artifact,
    )
    name = interpolate(mapping, values).replace("\\", "/").strip().lstrip("/")
    if not name:
        raise AssemblyFormattingError(f"File-name mapping {mapping!r} rendered empty")
    return name
