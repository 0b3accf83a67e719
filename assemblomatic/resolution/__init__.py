"""Reactor project selection and dependency resolution."""

from .dependencies import DependencyResolver, ReactorDependencyResolver  # noqa: F401
from .filters import CoordinateFilter  # noqa: F401
from .modules import filter_projects, get_module_projects  # noqa: F401

__all__: list[str] = [
    "CoordinateFilter",
    "DependencyResolver",
    "ReactorDependencyResolver",
    "filter_projects",
    "get_module_projects",
]
