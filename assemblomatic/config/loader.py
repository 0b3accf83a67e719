"""
YAML loaders for assembly descriptors and reactor listings.

Both loaders read YAML with :func:`yaml.safe_load`, normalise the document
and hand it to pydantic. Any failure surfaces as a ``RuntimeError`` naming
the file, so callers deal with one exception type for bad input.

Reactor file layout
-------------------
::

    projects:
      - groupId: org.example
        artifactId: parent
        version: "1.0"
        packaging: pom
        basedir: .
        modules: [core]
      - groupId: org.example
        artifactId: core
        version: "1.0"
        basedir: core
        parent: org.example:parent        # or the full id with version
        artifact: {file: core/target/core-1.0.jar}
        attachedArtifacts:
          - {classifier: tests, type: test-jar, file: core/target/core-1.0-tests.jar}
        dependencies:
          - {groupId: org.lib, artifactId: lib, version: "2", file: libs/lib-2.jar}

Relative paths are resolved against the directory holding the reactor file.
Artifact coordinates omitted on ``artifact``/``attachedArtifacts`` default to
the project's own (``type`` defaults to the packaging).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from assemblomatic.models import Artifact, Project, Reactor

from .schema import Assembly

__all__ = ["load_descriptor", "load_reactor"]

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _snake_keys(raw: dict) -> dict:
    return {_snake(str(k)): v for k, v in raw.items()}


def _load_yaml(path: Path) -> Any:
    """Read a YAML document; an empty file yields ``{}``."""
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _resolve(base: Path, value: Any) -> Path | None:
    if value in (None, ""):
        return None
    p = Path(str(value)).expanduser()
    return p if p.is_absolute() else (base / p).resolve()


# --------------------------------------------------------------------------- #
# Descriptor
# --------------------------------------------------------------------------- #
def load_descriptor(path: str | Path) -> Assembly:
    """Return the validated :class:`Assembly` stored in *path*.

    The document may be either the bare assembly mapping or wrapped in a
    top-level ``assembly:`` key.

    Raises:
        RuntimeError: On unreadable YAML or a schema violation.
    """
    path = Path(path).expanduser().resolve()
    try:
        raw = _load_yaml(path)
        if isinstance(raw, dict) and set(raw) == {"assembly"}:
            raw = raw["assembly"] or {}
        return Assembly.model_validate(raw)
    except Exception as exc:  # pydantic.ValidationError, yaml.YAMLError, OSError
        raise RuntimeError(f"Invalid assembly descriptor {path} – {exc}") from exc


# --------------------------------------------------------------------------- #
# Reactor
# --------------------------------------------------------------------------- #
def _coordinates(data: dict) -> dict:
    for key in ("group_id", "artifact_id", "version"):
        if key in data:
            data[key] = str(data[key])
    return data


def _artifact(raw: dict, base: Path, project: dict, *, default_type: str) -> Artifact:
    data = _coordinates(_snake_keys(raw))
    data.setdefault("group_id", project["group_id"])
    data.setdefault("artifact_id", project["artifact_id"])
    data.setdefault("version", project["version"])
    data.setdefault("type", default_type)
    data["file"] = _resolve(base, data.get("file"))
    return Artifact(**data)


def _project(raw: dict, base: Path) -> dict:
    data = _coordinates(_snake_keys(raw))
    data["basedir"] = _resolve(base, data.get("basedir", ".")) or base
    packaging = data.get("packaging", "jar")

    if data.get("artifact") is not None:
        data["artifact"] = _artifact(data["artifact"], base, data, default_type=packaging)
    elif packaging != "pom":
        data["artifact"] = Artifact(
            group_id=data["group_id"],
            artifact_id=data["artifact_id"],
            version=data["version"],
            type=packaging,
        )
    data["attached_artifacts"] = tuple(
        _artifact(a, base, data, default_type=packaging)
        for a in data.get("attached_artifacts") or ()
    )
    data["dependencies"] = tuple(
        Artifact(**{**_coordinates(_snake_keys(d)), "file": _resolve(base, d.get("file"))})
        for d in data.get("dependencies") or ()
    )
    return data


def _link_parents(projects: list[dict]) -> None:
    """Expand ``group:artifact`` parent handles to full project ids."""
    by_coordinate = {f"{p['group_id']}:{p['artifact_id']}": p for p in projects}
    for p in projects:
        parent = p.get("parent")
        if parent and str(parent).count(":") == 1 and parent in by_coordinate:
            target = by_coordinate[parent]
            p["parent"] = f"{target['group_id']}:{target['artifact_id']}:{target['version']}"


def load_reactor(path: str | Path) -> Reactor:
    """Return the :class:`Reactor` described by *path*.

    The first listed project is the reactor root.

    Raises:
        RuntimeError: On unreadable YAML, invalid projects, duplicate ids or
            cyclic parent chains.
    """
    path = Path(path).expanduser().resolve()
    base = path.parent
    try:
        raw = _load_yaml(path)
        entries = raw.get("projects") if isinstance(raw, dict) else raw
        data = [_project(entry, base) for entry in entries or ()]
        _link_parents(data)
        return Reactor(Project(**d) for d in data)
    except Exception as exc:
        raise RuntimeError(f"Invalid reactor file {path} – {exc}") from exc
