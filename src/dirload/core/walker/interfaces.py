"""
Abstract interfaces for the collaborators the walker and resolver call into.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .models import Format


class ArtifactLoaderInterface(ABC):
    """
    The two loading primitives behind one capability.

    Implementations must raise ArtifactNotFoundError carrying the exact
    requested path when that path is not an existing file. Every other
    failure propagates unchanged.
    """

    @abstractmethod
    def load_static(self, path: Path) -> Any:
        """Load a file immediately."""
        pass

    @abstractmethod
    async def load_dynamic(self, path: Path) -> Any:
        """Load a file with a suspending load that may await nested loads."""
        pass

    async def load_artifact(self, path: Path, fmt: Format) -> Any:
        """
        Load a file with the given strategy.

        This is the only entry point the walker and resolver use, so neither
        has to branch on the strategy itself.
        """
        if fmt == Format.DYNAMIC:
            return await self.load_dynamic(path)
        return self.load_static(path)


class ManifestReaderInterface(ABC):
    """Looks up the ambient default format governing a directory."""

    @abstractmethod
    def read_format(self, directory: Path) -> Format:
        """
        Return the default format declared by the nearest ancestor manifest.

        Must return Format.STATIC when no manifest exists or it is malformed.
        """
        pass
