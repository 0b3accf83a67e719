"""Abstract base for assembly phases."""

from __future__ import annotations

from abc import ABC, abstractmethod

from assemblomatic.archiver.base import Archiver
from assemblomatic.config.schema import Assembly
from assemblomatic.config.source import ConfigurationSource


class AssemblyPhase(ABC):
    """One step of archive construction.

    Phases run in ascending :pyattr:`order`. Each receives the full
    descriptor, the (proxied) archiver and the configuration source, and
    contributes whatever part of the descriptor it is responsible for.
    """

    #: Position in the phase sequence.
    order: int = 0

    @abstractmethod
    def execute(
        self,
        assembly: Assembly,
        archiver: Archiver,
        config_source: ConfigurationSource,
    ) -> None:
        """Add this phase's content to *archiver*.

        Raises:
            AssemblyError: Any fatal condition; the run is aborted.
        """
        raise NotImplementedError
