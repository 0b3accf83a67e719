"""End-to-end tests of :class:`AssemblyArchiver`."""

import zipfile
from pathlib import Path

import pytest

from assemblomatic.archiver.tracking import TrackingArchiver
from assemblomatic.assembler import AssemblyArchiver
from assemblomatic.config.schema import Assembly
from assemblomatic.models import Reactor
from assemblomatic.utils.errors import ArchiveCreationError
from tests.factories import make_project


def _reactor(tmp_path: Path, jar_file) -> Reactor:
    root_dir = tmp_path / "root"
    (root_dir / "docs").mkdir(parents=True)
    (root_dir / "docs" / "guide.txt").write_text("guide")
    (root_dir / "LICENSE").write_text("license")
    root = make_project(root_dir, "dist", version="1.0", packaging="pom", modules=("core",))
    core_dir = root_dir / "core"
    (core_dir / "src").mkdir(parents=True)
    (core_dir / "src" / "Core.java").write_text("class Core {}")
    core = make_project(
        core_dir, "core", version="1.0", parent=root, artifact_file=jar_file("core-1.0.jar")
    )
    return Reactor([root, core])


def _assembly() -> Assembly:
    return Assembly.model_validate(
        {
            "id": "bin",
            "formats": ["zip"],
            "fileSets": [{"directory": "docs", "outputDirectory": "doc"}],
            "files": [{"source": "LICENSE", "destName": "LICENSE.txt"}],
            "moduleSets": [
                {
                    "binaries": {
                        "outputDirectory": "lib",
                        "unpack": False,
                        "includeDependencies": False,
                    },
                    "sources": {"fileSets": [{"directory": "src"}]},
                }
            ],
        }
    )


def test_zip_contains_every_phase(tmp_path: Path, jar_file, source_for):
    """File sets, files and module sets all land below the base directory."""
    reactor = _reactor(tmp_path, jar_file)
    config_source = source_for(reactor.root, reactor)

    (archive,) = AssemblyArchiver().create_archives(_assembly(), config_source)

    assert archive == tmp_path / "target" / "dist-1.0-bin.zip"
    with zipfile.ZipFile(archive) as zf:
        names = set(zf.namelist())
    assert {
        "dist-1.0/doc/guide.txt",
        "dist-1.0/LICENSE.txt",
        "dist-1.0/lib/core-1.0.jar",
        "dist-1.0/core/Core.java",
    } <= names


def test_selectors_and_base_directory_toggle(tmp_path: Path, jar_file, source_for):
    """Selectors veto entries and include_base_directory=False drops the prefix."""
    reactor = _reactor(tmp_path, jar_file)
    config_source = source_for(reactor.root, reactor)
    assembly = _assembly().model_copy(update={"include_base_directory": False})

    archive = AssemblyArchiver().create_archive(
        assembly,
        "zip",
        config_source,
        selectors=[lambda info: not info.name.endswith(".java")],
    )

    with zipfile.ZipFile(archive) as zf:
        names = zf.namelist()
    assert "lib/core-1.0.jar" in names
    assert not any(n.endswith(".java") for n in names)


def test_failure_leaves_no_archive(tmp_path: Path, source_for):
    """A fatal error aborts before the archive is written."""
    root = make_project(tmp_path, "dist", packaging="pom")
    core = make_project(tmp_path / "core", "core", parent=root)  # never built
    reactor = Reactor([root, core])
    config_source = source_for(root, reactor)

    with pytest.raises(ArchiveCreationError):
        AssemblyArchiver().create_archives(_assembly(), config_source)
    assert not (tmp_path / "target" / "dist-1-bin.zip").exists()


def test_writer_factory_is_pluggable(tmp_path: Path, jar_file, source_for):
    """Custom writer factories receive the format and destination."""
    reactor = _reactor(tmp_path, jar_file)
    config_source = source_for(reactor.root, reactor, final_name="custom")
    seen = []

    def factory(fmt, dest, **_):
        seen.append((fmt, dest))
        return TrackingArchiver(dest)

    AssemblyArchiver(writer_factory=factory).create_archives(
        _assembly(), config_source, formats=["tar.gz"]
    )

    assert seen == [("tar.gz", tmp_path / "target" / "custom-bin.tar.gz")]


def test_working_directory_is_never_archived(tmp_path: Path, jar_file, source_for):
    """Files staged in the working directory stay out of the archive."""
    reactor = _reactor(tmp_path, jar_file)
    root_dir = reactor.root.basedir
    staging = root_dir / "docs" / "tmp"
    staging.mkdir()
    (staging / "scratch.txt").write_text("scratch")
    config_source = source_for(reactor.root, reactor, working_directory=staging)

    archive = AssemblyArchiver().create_archive(_assembly(), "zip", config_source)

    with zipfile.ZipFile(archive) as zf:
        assert not any("scratch" in n for n in zf.namelist())
