"""Command-line tests using Click's runner."""

import zipfile
from pathlib import Path
from textwrap import dedent

import pytest
from click.testing import CliRunner

from assemblomatic.cli import main


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    """Small two-module build with a descriptor and a reactor file."""
    monkeypatch.setenv("ASSEMBLOMATIC_LOG_DIR", str(tmp_path / "logs"))
    (tmp_path / "core" / "target").mkdir(parents=True)
    (tmp_path / "core" / "target" / "core-1.0.jar").write_text("jar")
    (tmp_path / "README.md").write_text("readme")
    (tmp_path / "reactor.yaml").write_text(
        dedent(
            """
            projects:
              - {groupId: org.example, artifactId: dist, version: "1.0", packaging: pom, modules: [core]}
              - groupId: org.example
                artifactId: core
                version: "1.0"
                basedir: core
                parent: org.example:dist
                artifact: {file: core/target/core-1.0.jar}
            """
        )
    )
    (tmp_path / "assembly.yaml").write_text(
        dedent(
            """
            id: bin
            formats: [zip]
            files:
              - source: README.md
            moduleSets:
              - binaries:
                  outputDirectory: lib
                  unpack: false
                  includeDependencies: false
            """
        )
    )
    return tmp_path


def test_single_builds_archive(workspace: Path):
    """The single command writes the archive into the output directory."""
    out = workspace / "out"
    result = CliRunner().invoke(
        main,
        [
            "single",
            str(workspace / "assembly.yaml"),
            "--reactor",
            str(workspace / "reactor.yaml"),
            "-o",
            str(out),
        ],
    )

    assert result.exit_code == 0, result.output
    archive = out / "dist-1.0-bin.zip"
    assert archive.exists()
    with zipfile.ZipFile(archive) as zf:
        assert set(zf.namelist()) >= {"dist-1.0/README.md", "dist-1.0/lib/core-1.0.jar"}


def test_single_dry_run_lists_additions(workspace: Path):
    """--dry-run prints additions and writes nothing."""
    out = workspace / "out"
    result = CliRunner().invoke(
        main,
        [
            "single",
            str(workspace / "assembly.yaml"),
            "--reactor",
            str(workspace / "reactor.yaml"),
            "-o",
            str(out),
            "--dry-run",
            "--final-name",
            "preview",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "preview/lib/core-1.0.jar" in result.output
    assert not (out / "preview-bin.zip").exists()


def test_single_reports_assembly_errors(workspace: Path):
    """Assembly failures become a non-zero exit with the message."""
    (workspace / "core" / "target" / "core-1.0.jar").unlink()
    (workspace / "reactor.yaml").write_text(
        "projects:\n"
        "  - {groupId: g, artifactId: dist, version: '1', packaging: pom}\n"
        "  - {groupId: g, artifactId: core, version: '1', basedir: core, parent: 'g:dist'}\n"
    )
    result = CliRunner().invoke(
        main,
        [
            "single",
            str(workspace / "assembly.yaml"),
            "--reactor",
            str(workspace / "reactor.yaml"),
            "-o",
            str(workspace / "out"),
        ],
    )

    assert result.exit_code != 0
    assert "does not have an artifact with a file" in result.output


def test_modules_lists_selection(workspace: Path):
    """The modules command prints the selected project ids."""
    result = CliRunner().invoke(
        main,
        [
            "modules",
            str(workspace / "assembly.yaml"),
            "--reactor",
            str(workspace / "reactor.yaml"),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "org.example:core:1.0" in result.output
    assert "org.example:dist:1.0" not in result.output


def test_invalid_define_is_rejected(workspace: Path):
    """-D values must be KEY=VALUE."""
    result = CliRunner().invoke(
        main,
        [
            "single",
            str(workspace / "assembly.yaml"),
            "--reactor",
            str(workspace / "reactor.yaml"),
            "-D",
            "novalue",
        ],
    )
    assert result.exit_code != 0
