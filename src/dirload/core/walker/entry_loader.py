"""
Loading of a single directory entry followed by the visitor call.
"""

import inspect
import logging
from pathlib import Path

from .formats import FormatRegistry, extension_of
from .interfaces import ArtifactLoaderInterface
from .models import DirEntry, ExtensionKind, Format, LoadResult, Visitor
from .scope import FormatScopeCache

logger = logging.getLogger(__name__)


class EntryLoader:
    """
    Loads one file with the strategy its extension and scope select, then visits it.

    Load and visitor failures are not caught here; they abort the walk.
    """

    def __init__(
        self,
        loader: ArtifactLoaderInterface,
        registry: FormatRegistry,
        scopes: FormatScopeCache,
        visit: Visitor,
    ):
        self._loader = loader
        self._registry = registry
        self._scopes = scopes
        self._visit = visit

    async def detect(self, dir_path: Path, name: str) -> Format:
        # Only ambiguous extensions need the manifest lookup
        default = Format.STATIC
        if self._registry.kind_of(extension_of(name)) == ExtensionKind.AMBIGUOUS:
            default = await self._scopes.default_for(dir_path)
        return self._registry.detect(name, default)

    async def load(self, dir_path: str, entry: DirEntry) -> LoadResult:
        directory = Path(dir_path)
        full_path = directory / entry.name
        fmt = await self.detect(directory, entry.name)

        logger.debug(f"Loading {full_path} ({fmt.value})")
        value = await self._loader.load_artifact(full_path, fmt)
        return LoadResult(value=value, path=full_path, name=entry.name, format=fmt)

    async def load_and_visit(self, dir_path: str, entry: DirEntry) -> None:
        result = await self.load(dir_path, entry)
        outcome = self._visit(result)
        if inspect.isawaitable(outcome):
            await outcome
