"""Tests for the reactor arena and project/artifact identities."""

from pathlib import Path

import pytest

from assemblomatic.models import Artifact, Reactor
from tests.factories import make_project


def test_artifact_identities():
    """Conflict id and extension follow type and classifier."""
    a = Artifact(group_id="g", artifact_id="a", version="1", type="test-jar", classifier="tests")
    assert a.coordinate == "g:a"
    assert a.dependency_conflict_id == "g:a:test-jar:tests"
    assert a.id == "g:a:test-jar:tests:1"
    assert a.extension == "jar"


def test_navigation(tmp_path: Path):
    """Parent handles resolve through the reactor in both directions."""
    root = make_project(tmp_path, "root", packaging="pom")
    mid = make_project(tmp_path / "mid", "mid", parent=root)
    leaf = make_project(tmp_path / "mid" / "leaf", "leaf", parent=mid)
    reactor = Reactor([root, mid, leaf])

    assert reactor.root == root
    assert reactor.parent_of(leaf) == mid
    assert list(reactor.ancestors(leaf)) == [mid, root]
    assert reactor.children(root) == [mid]
    assert reactor.descendants(root) == [mid, leaf]
    assert reactor.descendants(root, recursive=False) == [mid]
    assert leaf in reactor and len(reactor) == 3


def test_unknown_parent_is_treated_as_root(tmp_path: Path):
    """A parent outside the reactor ends the ancestor chain."""
    orphan = make_project(tmp_path, "orphan").model_copy(update={"parent": "x:y:1"})
    reactor = Reactor([orphan])
    assert reactor.parent_of(orphan) is None
    assert list(reactor.ancestors(orphan)) == []


def test_duplicate_and_cyclic_projects_are_rejected(tmp_path: Path):
    """Reactor construction validates ids and parent chains."""
    a = make_project(tmp_path, "a")
    with pytest.raises(ValueError, match="Duplicate"):
        Reactor([a, a])

    b = make_project(tmp_path, "b").model_copy(update={"parent": "group:c:1"})
    c = make_project(tmp_path, "c").model_copy(update={"parent": "group:b:1"})
    with pytest.raises(ValueError, match="Cyclic"):
        Reactor([b, c])


def test_projects_are_hashable(tmp_path: Path):
    """Frozen projects can be collected in sets."""
    a = make_project(tmp_path, "a")
    assert {a, make_project(tmp_path, "a")} == {a}
