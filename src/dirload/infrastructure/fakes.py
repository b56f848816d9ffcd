"""
Fake implementations for testing.

Provides in-memory implementations of the loading and manifest interfaces
so engine tests can count calls and inject failures without executing code.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dirload.core.errors import ArtifactNotFoundError
from dirload.core.walker.interfaces import ArtifactLoaderInterface, ManifestReaderInterface
from dirload.core.walker.models import Format


class FakeArtifactLoader(ArtifactLoaderInterface):
    """
    In-memory artifact loader.

    Values are looked up by absolute path. A value that is an exception
    instance is raised instead of returned. Every attempted load is recorded
    in ``calls`` as ``(path, format)``.
    """

    def __init__(self, artifacts: Mapping[Path | str, Any] | None = None):
        self._artifacts: dict[Path, Any] = {
            Path(path): value for path, value in (artifacts or {}).items()
        }
        self.calls: list[tuple[Path, Format]] = []

    def add(self, path: Path | str, value: Any) -> None:
        self._artifacts[Path(path)] = value

    def _lookup(self, path: Path) -> Any:
        if path not in self._artifacts:
            raise ArtifactNotFoundError(path)
        value = self._artifacts[path]
        if isinstance(value, BaseException):
            raise value
        return value

    def load_static(self, path: Path) -> Any:
        path = Path(path)
        self.calls.append((path, Format.STATIC))
        return self._lookup(path)

    async def load_dynamic(self, path: Path) -> Any:
        path = Path(path)
        self.calls.append((path, Format.DYNAMIC))
        await asyncio.sleep(0)
        return self._lookup(path)


class FakeManifestReader(ManifestReaderInterface):
    """
    Manifest reader backed by a directory -> format mapping.

    The nearest mapped ancestor wins, mirroring the on-disk lookup. Each
    call is recorded in ``lookups``.
    """

    def __init__(self, formats: Mapping[Path | str, Format] | None = None):
        self._formats: dict[Path, Format] = {
            Path(path): Format(fmt) for path, fmt in (formats or {}).items()
        }
        self.lookups: list[Path] = []

    def read_format(self, directory: Path) -> Format:
        directory = Path(directory)
        self.lookups.append(directory)
        for candidate in (directory, *directory.parents):
            if candidate in self._formats:
                return self._formats[candidate]
        return Format.STATIC
