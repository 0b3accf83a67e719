"""
Configuration package façade.

* :func:`load_descriptor` – Parse and validate an assembly descriptor.
* :func:`load_reactor` – Parse a reactor listing into a :class:`Reactor`.
* :class:`Assembly` – Root pydantic model of a descriptor.
* :class:`ConfigurationSource` – Run-time inputs handed to the phases.
"""

from .loader import load_descriptor, load_reactor  # noqa: F401
from .schema import Assembly  # noqa: F401
from .source import ConfigurationSource  # noqa: F401

__all__: list[str] = ["Assembly", "ConfigurationSource", "load_descriptor", "load_reactor"]
