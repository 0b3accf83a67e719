"""Tests for the selector-gated proxy archiver."""

import zipfile
from pathlib import Path

from assemblomatic.archiver.base import FileInfo, FileSet
from assemblomatic.archiver.proxy import AssemblyProxyArchiver
from assemblomatic.archiver.tracking import TrackingArchiver
from assemblomatic.archiver.writers import ZipArchiver


class CounterSelector:
    """Selector accepting everything while counting its invocations."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.count = 0
        self.names: list[str] = []

    def __call__(self, info: FileInfo) -> bool:
        self.count += 1
        self.names.append(info.name)
        return self.answer


def test_file_set_of_working_directory_is_skipped(tmp_path: Path):
    """Adding the working directory itself is a no-op."""
    workdir = tmp_path / "workdir"
    workdir.mkdir()
    tracker = TrackingArchiver()
    proxy = AssemblyProxyArchiver("", tracker, working_directory=workdir)

    proxy.add_file_set(FileSet(directory=workdir))

    assert tracker.added == []


def test_file_set_containing_working_directory_excludes_it(tmp_path: Path):
    """A parent of the working directory gets exactly one extra exclude."""
    source = tmp_path / "source"
    workdir = source / "workdir"
    workdir.mkdir(parents=True)
    tracker = TrackingArchiver()
    proxy = AssemblyProxyArchiver("", tracker, working_directory=workdir)

    proxy.add_file_set(FileSet(directory=source))

    assert len(tracker.added) == 1
    assert tracker.added[0].excludes == ("workdir",)


def test_unrelated_file_set_is_forwarded_unchanged(tmp_path: Path):
    """Only the prefix changes for file sets away from the working directory."""
    source = tmp_path / "source"
    source.mkdir()
    tracker = TrackingArchiver()
    proxy = AssemblyProxyArchiver(
        "base", tracker, working_directory=tmp_path / "target" / "tmp"
    )

    proxy.add_file_set(FileSet(directory=source, prefix="docs/", excludes=("*.bak",)))

    (added,) = tracker.added
    assert added.dest == "base/docs/"
    assert added.excludes == ("*.bak",)


def test_add_file_calls_selectors_once(tmp_path: Path):
    """A single file passes through the selector chain exactly once."""
    file = tmp_path / "file.txt"
    file.write_text("This is a test file.")
    counter = CounterSelector()
    delegate = ZipArchiver(tmp_path / "out.zip")
    proxy = AssemblyProxyArchiver("", delegate, selectors=[counter])

    proxy.add_file(file, "file")
    proxy.create_archive()

    assert counter.count == 1


def test_add_directory_calls_selectors_once_per_file(tmp_path: Path):
    """Files added through a directory are checked once each."""
    sources = tmp_path / "sources"
    sources.mkdir()
    (sources / "file.txt").write_text("This is a test file.")
    counter = CounterSelector()
    dest = tmp_path / "out.zip"
    proxy = AssemblyProxyArchiver("", ZipArchiver(dest), selectors=[counter])

    proxy.add_directory(sources)
    proxy.create_archive()

    assert counter.count == 1
    assert counter.names == ["file.txt"]
    with zipfile.ZipFile(dest) as zf:
        assert zf.namelist() == ["file.txt"]


def test_rejected_file_is_not_added(tmp_path: Path):
    """A selector returning False keeps the entry out of the delegate."""
    file = tmp_path / "file.txt"
    file.write_text("x")
    tracker = TrackingArchiver()
    proxy = AssemblyProxyArchiver("", tracker, selectors=[CounterSelector(answer=False)])

    proxy.add_file(file, "file.txt")

    assert tracker.added == []


def test_root_prefix_and_forwarded_state(tmp_path: Path):
    """Entries gain the root prefix and archiver settings reach the delegate."""
    file = tmp_path / "file.txt"
    file.write_text("x")
    tracker = TrackingArchiver(tmp_path / "out.zip")
    proxy = AssemblyProxyArchiver("dist-1.0", tracker)

    proxy.forced = False
    proxy.override_file_mode = 0o600
    proxy.add_file(file, "bin/file.txt", 0o755)

    assert tracker.forced is False
    assert tracker.override_file_mode == 0o600
    assert tracker.added[0].dest == "dist-1.0/bin/file.txt"
    assert tracker.added[0].file_mode == 0o755
    assert proxy.create_archive() == tmp_path / "out.zip"
    assert tracker.created
