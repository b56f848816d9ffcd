"""
Concurrent directory walker.

Each directory is listed, classified and then either short-circuited to its
single index file or fanned out to every eligible file and subdirectory at
once. A directory's walk finishes only when all of its loads, visitor calls
and subdirectory walks have finished.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Iterable
from pathlib import Path

from dirload.core.errors import ConfigurationError
from dirload.core.path_utils import normalize_extensions, resolve_against
from dirload.infrastructure.loaders import DefaultArtifactLoader
from dirload.infrastructure.manifest import PyprojectManifestReader

from .classifier import classify
from .entry_loader import EntryLoader
from .formats import FormatRegistry, get_default_registry
from .interfaces import ArtifactLoaderInterface, ManifestReaderInterface
from .models import (
    DEFAULT_EXTENSIONS,
    DirEntry,
    Format,
    PathPredicate,
    Visitor,
    WalkConfig,
    exclude_none,
    include_all,
)
from .scope import FormatScopeCache

logger = logging.getLogger(__name__)


def _scan_directory(dir_path: str) -> list[DirEntry]:
    with os.scandir(dir_path) as it:
        return [DirEntry(name=e.name, is_directory=e.is_dir(follow_symlinks=False)) for e in it]


async def list_directory(dir_path: str) -> list[DirEntry]:
    """Read a directory's immediate entries without blocking the event loop."""
    return await asyncio.to_thread(_scan_directory, dir_path)


async def join_all(operations: Iterable[Awaitable[None]]) -> None:
    """
    Run operations concurrently and wait for all of them.

    The first failure (in launch order among those that failed) is re-raised
    unchanged once the remaining operations have been cancelled.
    """
    tasks = [asyncio.ensure_future(op) for op in operations]
    if not tasks:
        return

    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # Retrieve every exception so none is reported as unhandled
    errors = [task.exception() for task in tasks if task in done and not task.cancelled()]
    for error in errors:
        if error is not None:
            raise error


class DirectoryWalker:
    """Walks a directory tree for one WalkConfig."""

    def __init__(
        self,
        config: WalkConfig,
        loader: ArtifactLoaderInterface,
        registry: FormatRegistry,
        scopes: FormatScopeCache,
    ):
        self._config = config
        self._entry_loader = EntryLoader(loader, registry, scopes, config.visit)

    async def walk(self, root: Path | str) -> None:
        await self._walk_directory(str(root))

    async def _walk_directory(self, dir_path: str) -> None:
        entries = await list_directory(dir_path)
        classified = classify(dir_path, entries, self._config)
        logger.debug(
            f"{dir_path}: {len(classified.eligible_files)} files, "
            f"{len(classified.subdirectories)} directories, "
            f"{len(classified.index_files)} index files"
        )

        if self._config.stop_at_indexes and classified.index_files:
            if len(classified.index_files) > 1:
                names = ", ".join(sorted(entry.name for entry in classified.index_files))
                raise ConfigurationError(f"Multiple index entries found in {dir_path}: {names}.")

            logger.debug(f"Stopping at index file {classified.index_files[0].name} in {dir_path}")
            await self._entry_loader.load_and_visit(dir_path, classified.index_files[0])
            return

        operations: list[Awaitable[None]] = [
            self._entry_loader.load_and_visit(dir_path, entry)
            for entry in classified.eligible_files
        ]
        if self._config.recursive:
            operations.extend(
                self._walk_directory(os.path.join(dir_path, entry.name))
                for entry in classified.subdirectories
            )

        await join_all(operations)


def coerce_format(value: Format | str | None) -> Format | None:
    """Accept a Format, its string value, or None."""
    if value is None:
        return None
    try:
        return Format(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown format {value!r}; expected one of: {', '.join(f.value for f in Format)}"
        ) from e


async def walk(
    root: Path | str,
    *,
    visit: Visitor,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    include: PathPredicate | None = None,
    exclude: PathPredicate | None = None,
    recursive: bool = True,
    stop_at_indexes: bool = True,
    default_format: Format | str | None = None,
    relative_to: Path | str | None = None,
    loader: ArtifactLoaderInterface | None = None,
    registry: FormatRegistry | None = None,
    manifest_reader: ManifestReaderInterface | None = None,
) -> None:
    """
    Load every eligible file under root and hand each one to visit.

    Args:
        root: Directory to walk; relative paths resolve against relative_to
        visit: Called with a LoadResult per loaded file; may be a coroutine function
        extensions: Allowed extensions, with or without the leading dot
        include: Predicate (full_path, name) a file must satisfy (default: always)
        exclude: Predicate (full_path, name) a file must not satisfy (default: never)
        recursive: Descend into subdirectories
        stop_at_indexes: In a directory holding an index file, load only that file
        default_format: Ambient format for ambiguous extensions; looked up from
                        the nearest pyproject.toml per directory when None
        relative_to: File or directory anchoring a relative root (e.g. __file__)
        loader: Loading primitives (default: DefaultArtifactLoader)
        registry: Extension registry (default: the packaged formats)
        manifest_reader: Manifest lookup (default: PyprojectManifestReader)

    Raises:
        ConfigurationError: visit is not callable, an unknown format was given,
            or a directory holds several index files while stop_at_indexes is set
        OSError: a directory cannot be listed
        Exception: any load or visitor failure, unchanged
    """
    if not callable(visit):
        raise ConfigurationError("Please specify visit as a callable.")

    config = WalkConfig(
        visit=visit,
        extensions=normalize_extensions(extensions),
        include=include or include_all,
        exclude=exclude or exclude_none,
        recursive=recursive,
        stop_at_indexes=stop_at_indexes,
        default_format=coerce_format(default_format),
    )
    root_path = resolve_against(root, relative_to)
    scopes = FormatScopeCache(
        manifest_reader or PyprojectManifestReader(), override=config.default_format
    )
    walker = DirectoryWalker(
        config,
        loader or DefaultArtifactLoader(),
        registry or get_default_registry(),
        scopes,
    )

    logger.debug(f"Walking {root_path}")
    await walker.walk(root_path)


def walk_sync(root: Path | str, **kwargs) -> None:
    """Run walk() to completion from synchronous code."""
    asyncio.run(walk(root, **kwargs))
