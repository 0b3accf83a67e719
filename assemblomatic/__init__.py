"""
assemblomatic package initialisation.

1. **Expose the version string**
   ``assemblomatic.__version__`` is resolved from the installed distribution
   metadata so every runtime context reports the same value.

2. **Re-export the public entry points**
   The YAML loaders and the archive driver are importable from the top
   level::

       from assemblomatic import AssemblyArchiver, load_descriptor, load_reactor

Module attributes
-----------------
__version__ : str
    Semantic version derived from the installed wheel.
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("assemblomatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
from .config import load_descriptor, load_reactor  # noqa: E402
from .assembler import AssemblyArchiver  # noqa: E402

__all__: list[str] = ["AssemblyArchiver", "load_descriptor", "load_reactor", "__version__"]
