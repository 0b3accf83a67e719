"""Archive writers and the selector-gated proxy placed in front of them."""

from .base import (  # noqa: F401
    ArchivedFileSet,
    Archiver,
    DuplicateBehavior,
    FileInfo,
    FileSelector,
    FileSet,
)
from .proxy import AssemblyProxyArchiver  # noqa: F401
from .tracking import TrackingArchiver  # noqa: F401
from .writers import TarArchiver, ZipArchiver, create_writer  # noqa: F401

__all__: list[str] = [
    "ArchivedFileSet",
    "Archiver",
    "AssemblyProxyArchiver",
    "DuplicateBehavior",
    "FileInfo",
    "FileSelector",
    "FileSet",
    "TarArchiver",
    "TrackingArchiver",
    "ZipArchiver",
    "create_writer",
]
