"""
Pydantic models that mirror the assembly descriptor.

The descriptor is immutable once loaded: every model is frozen so that the
assembly phases can share it freely. Field names are snake_case in Python;
the YAML may use either snake_case or the camelCase spelling
(``outputDirectory``, ``includeSubModules`` …).

Notes:
* Coordinates in ``includes``/``excludes`` of module and dependency sets are
  ``group:artifact`` pairs, not globs.
* Paths in file-set ``includes``/``excludes`` are Ant-style globs, see
  :mod:`assemblomatic.utils.patterns`.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "Assembly",
    "DependencySet",
    "FileItem",
    "FileSet",
    "ModuleBinaries",
    "ModuleSet",
    "ModuleSources",
    "SUPPORTED_FORMATS",
]

#: Archive formats the bundled writers can produce.
SUPPORTED_FORMATS: tuple[str, ...] = ("zip", "jar", "tar", "tar.gz", "tgz")

DEFAULT_DEPENDENCY_FILE_NAME_MAPPING = (
    "${artifact.artifactId}-${artifact.version}${dashClassifier?}.${artifact.extension}"
)
DEFAULT_MODULE_FILE_NAME_MAPPING = (
    "${module.artifactId}-${module.version}${dashClassifier?}.${module.extension}"
)


class _DescriptorModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


# --------------------------------------------------------------------------- #
# 1.  Leaf models                                                             #
# --------------------------------------------------------------------------- #


class FileSet(_DescriptorModel):
    """Directory plus Ant-style filters copied into the archive.

    Attributes:
        directory: Source directory, relative to the owning project's basedir.
            ``None`` means the basedir itself.
        output_directory: Target directory inside the archive (templated).
        includes: Patterns to include; empty means everything.
        excludes: Patterns to exclude.
        file_mode: Octal mode applied to files (e.g. ``"0644"``).
        directory_mode: Octal mode applied to directories.
        use_default_excludes: Drop VCS/editor files.
    """

    directory: Optional[str] = None
    output_directory: Optional[str] = None
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)
    file_mode: Optional[str] = None
    directory_mode: Optional[str] = None
    use_default_excludes: bool = True


class FileItem(_DescriptorModel):
    """A single file copied into the archive, optionally renamed."""

    source: str
    output_directory: Optional[str] = None
    dest_name: Optional[str] = None
    file_mode: Optional[str] = None


class DependencySet(_DescriptorModel):
    """Selection of a project's dependency artifacts.

    Attributes:
        output_directory: Directory template for the artifacts.
        output_file_name_mapping: File-name template per artifact.
        includes / excludes: ``group:artifact`` coordinates.
        use_project_artifact: Also add the project's own primary artifact.
        unpack: Expand each artifact instead of copying it.
        scope: Resolution scope (``runtime``, ``compile``, ``test``,
            ``provided``, ``system``).
    """

    output_directory: Optional[str] = None
    output_file_name_mapping: str = DEFAULT_DEPENDENCY_FILE_NAME_MAPPING
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)
    use_project_artifact: bool = True
    unpack: bool = False
    scope: str = "runtime"
    file_mode: Optional[str] = None
    directory_mode: Optional[str] = None

    @field_validator("scope")
    @classmethod
    def _known_scope(cls, v: str) -> str:
        if v not in {"compile", "provided", "runtime", "system", "test"}:
            raise ValueError(f"Unknown dependency scope: {v}")
        return v


# --------------------------------------------------------------------------- #
# 2.  Module sets                                                             #
# --------------------------------------------------------------------------- #


class ModuleSources(_DescriptorModel):
    """What to copy from each selected module's source tree.

    With ``include_module_directory`` every file set is nested below the
    rendered ``output_directory_mapping`` (the module's artifactId by
    default).

    ``output_directory``, ``includes`` and ``excludes`` at this level are the
    legacy single-file-set spelling. They still work (they describe one
    implicit file set rooted at the module basedir) but new descriptors
    should use ``file_sets``.
    """

    file_sets: List[FileSet] = Field(default_factory=list)
    include_module_directory: bool = True
    output_directory_mapping: str = "${module.artifactId}"
    exclude_sub_module_directories: bool = True
    use_default_excludes: bool = True

    # legacy structural fields
    output_directory: Optional[str] = None
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)

    # legacy-compatible, non-structural
    file_mode: Optional[str] = None
    directory_mode: Optional[str] = None


class ModuleBinaries(_DescriptorModel):
    """What to copy from each selected module's build output.

    Attributes:
        output_directory: Directory template for the module artifact.
        output_file_name_mapping: File-name template for the module artifact.
        file_mode / directory_mode: Octal modes; unset inherits the
            archiver's defaults.
        unpack: Expand the artifact into the archive instead of copying it.
        include_dependencies: Also add the module's dependency artifacts.
        attachment_classifier: Use the attached artifact with this classifier
            instead of the primary one.
        dependency_sets: Explicit dependency sets; when empty and
            ``include_dependencies`` is set a default set is derived from
            this section.
        includes / excludes: ``group:artifact`` filters for dependencies.
    """

    output_directory: Optional[str] = None
    output_file_name_mapping: str = DEFAULT_MODULE_FILE_NAME_MAPPING
    file_mode: Optional[str] = None
    directory_mode: Optional[str] = None
    unpack: bool = True
    include_dependencies: bool = True
    attachment_classifier: Optional[str] = None
    dependency_sets: List[DependencySet] = Field(default_factory=list)
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)


class ModuleSet(_DescriptorModel):
    """Rule selecting reactor modules plus what to contribute from them."""

    use_all_reactor_projects: bool = False
    include_sub_modules: bool = True
    includes: List[str] = Field(default_factory=list)
    excludes: List[str] = Field(default_factory=list)
    sources: Optional[ModuleSources] = None
    binaries: Optional[ModuleBinaries] = None


# --------------------------------------------------------------------------- #
# 3.  Top-level model                                                         #
# --------------------------------------------------------------------------- #


class Assembly(_DescriptorModel):
    """Root descriptor object consumed by the assembly phases.

    Attributes:
        id: Assembly identifier; appended to the archive name.
        formats: Archive formats to produce.
        include_base_directory: Nest every entry below a base directory.
        base_directory: Base directory template; defaults to the final name.
        file_sets / files / dependency_sets / module_sets: Content sources.
    """

    id: str
    formats: List[str] = Field(default_factory=lambda: ["zip"])
    include_base_directory: bool = True
    base_directory: Optional[str] = None
    file_sets: List[FileSet] = Field(default_factory=list)
    files: List[FileItem] = Field(default_factory=list)
    dependency_sets: List[DependencySet] = Field(default_factory=list)
    module_sets: List[ModuleSet] = Field(default_factory=list)

    @field_validator("formats")
    @classmethod
    def _formats_are_supported(cls, v: List[str]) -> List[str]:
        unknown = [f for f in v if f not in SUPPORTED_FORMATS]
        if unknown:
            raise ValueError("Unsupported format(s): " + ", ".join(unknown))
        return v
