"""Tests for module-set project selection."""

import logging
from pathlib import Path

from assemblomatic.config.schema import ModuleSet
from assemblomatic.models import Reactor
from assemblomatic.resolution.filters import CoordinateFilter
from assemblomatic.resolution.modules import get_module_projects
from tests.factories import make_project


def test_only_current_project_selects_nothing(tmp_path: Path):
    """A reactor with just the root yields no modules."""
    project = make_project(tmp_path, "artifact", packaging="pom")
    reactor = Reactor([project])
    assert get_module_projects(ModuleSet(), reactor, project) == set()


def test_sibling_projects_are_not_modules(tmp_path: Path):
    """Projects outside the root's subtree are never candidates."""
    project = make_project(tmp_path, "artifact", packaging="pom")
    sibling = make_project(tmp_path / "sib", "sibling")
    reactor = Reactor([project, sibling])
    assert get_module_projects(ModuleSet(), reactor, project) == set()


def test_child_module_is_selected(tmp_path: Path):
    """A direct child of the root is selected."""
    project = make_project(tmp_path, "artifact", packaging="pom")
    child = make_project(tmp_path / "child", "child", parent=project)
    reactor = Reactor([project, child])
    assert get_module_projects(ModuleSet(), reactor, project) == {child}


def test_descendants_are_selected(tmp_path: Path):
    """Grandchildren are selected when sub-modules are included."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a, packaging="pom")
    c = make_project(tmp_path / "B" / "C", "C", parent=b)
    reactor = Reactor([a, b, c])
    assert get_module_projects(ModuleSet(), reactor, a) == {b, c}


def test_exclusion_is_transitive(tmp_path: Path):
    """Excluding a module also drops everything below it."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a, packaging="pom")
    c = make_project(tmp_path / "B" / "C", "C", parent=b)
    reactor = Reactor([a, b, c])
    module_set = ModuleSet(excludes=["group:B"])
    assert get_module_projects(module_set, reactor, a) == set()


def test_inclusion_is_transitive(tmp_path: Path):
    """Including a module also keeps its descendants."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a, packaging="pom")
    c = make_project(tmp_path / "B" / "C", "C", parent=b)
    d = make_project(tmp_path / "D", "D", parent=a)
    reactor = Reactor([a, b, c, d])
    module_set = ModuleSet(includes=["group:B"])
    assert get_module_projects(module_set, reactor, a) == {b, c}


def test_without_sub_modules_only_children(tmp_path: Path):
    """include_sub_modules=False stops at immediate children."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a, packaging="pom")
    c = make_project(tmp_path / "B" / "C", "C", parent=b)
    reactor = Reactor([a, b, c])
    module_set = ModuleSet(include_sub_modules=False)
    assert get_module_projects(module_set, reactor, a) == {b}


def test_use_all_reactor_projects_reroots_search(tmp_path: Path):
    """Selection starts at the reactor root regardless of the current project."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a)
    c = make_project(tmp_path / "C", "C", parent=a)
    reactor = Reactor([a, b, c])

    assert get_module_projects(ModuleSet(), reactor, b) == set()
    assert get_module_projects(ModuleSet(use_all_reactor_projects=True), reactor, b) == {b, c}
    flat = ModuleSet(use_all_reactor_projects=True, include_sub_modules=False)
    assert get_module_projects(flat, reactor, b) == {a, b, c}


def test_malformed_pattern_never_matches(tmp_path: Path, caplog):
    """Patterns without a group:artifact shape are inert and reported."""
    a = make_project(tmp_path, "A", packaging="pom")
    b = make_project(tmp_path / "B", "B", parent=a)
    reactor = Reactor([a, b])
    logger = logging.getLogger("test.modules")

    with caplog.at_level(logging.WARNING, logger="test.modules"):
        selected = get_module_projects(ModuleSet(excludes=["B"]), reactor, a, logger)
    assert selected == {b}
    assert "never triggered" in caplog.text
    assert get_module_projects(ModuleSet(includes=[":B"]), reactor, a) == set()


def test_coordinate_filter_tracks_triggers():
    """Only patterns that matched something count as triggered."""
    flt = CoordinateFilter(includes=["g:a", "g:missing"], excludes=["g:x"])
    assert flt.allows(["g:a"])
    assert not flt.allows(["g:x"], trail=["g:a"])
    assert flt.untriggered == ["g:missing"]
