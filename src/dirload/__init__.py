"""
dirload - load every artifact in a directory tree, or resolve a single one.

    >>> import asyncio, dirload
    >>> asyncio.run(dirload.walk("plugins", relative_to=__file__, visit=print))
"""

from dirload.core.errors import ArtifactNotFoundError, ConfigurationError, DirloadError
from dirload.core.path_utils import predicate_from_patterns
from dirload.core.walker import (
    DEFAULT_EXTENSIONS,
    ExtensionKind,
    Format,
    FormatRegistry,
    LoadResult,
    ResolvedArtifact,
    get_default_registry,
    resolve,
    resolve_sync,
    walk,
    walk_sync,
)
from dirload.infrastructure import DefaultArtifactLoader, PyprojectManifestReader

__version__ = "0.1.0"

__all__ = [
    "walk",
    "walk_sync",
    "resolve",
    "resolve_sync",
    "predicate_from_patterns",
    "DEFAULT_EXTENSIONS",
    "ExtensionKind",
    "Format",
    "FormatRegistry",
    "get_default_registry",
    "LoadResult",
    "ResolvedArtifact",
    "DefaultArtifactLoader",
    "PyprojectManifestReader",
    "DirloadError",
    "ConfigurationError",
    "ArtifactNotFoundError",
]
