"""Shared fixtures for the assemblomatic test-suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from assemblomatic.config.source import ConfigurationSource
from assemblomatic.models import Project, Reactor


@pytest.fixture
def jar_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a small placeholder file under ``tmp_path/files``."""

    def _make(name: str, content: str = "payload") -> Path:
        path = tmp_path / "files" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _make


@pytest.fixture
def source_for(tmp_path: Path) -> Callable[..., ConfigurationSource]:
    """Factory building a :class:`ConfigurationSource` around a reactor."""

    def _make(
        project: Project,
        reactor: Reactor | None = None,
        **kwargs,
    ) -> ConfigurationSource:
        return ConfigurationSource(
            project=project,
            reactor=reactor or Reactor([project]),
            output_directory=kwargs.pop("output_directory", tmp_path / "target"),
            working_directory=kwargs.pop(
                "working_directory", tmp_path / "target" / "archive-tmp"
            ),
            **kwargs,
        )

    return _make
