"""
Directory walker module for dirload.

Provides concurrent directory walking with extension and predicate
filtering, index-file short-circuiting, per-file strategy detection and
best-effort resolution of bare paths.
"""

from .classifier import classify, is_eligible, is_index_name
from .entry_loader import EntryLoader
from .formats import FormatRegistry, detect_format, extension_of, get_default_registry
from .interfaces import ArtifactLoaderInterface, ManifestReaderInterface
from .models import (
    DEFAULT_EXTENSIONS,
    INDEX_NAME,
    ClassifiedEntries,
    DirEntry,
    ExtensionKind,
    Format,
    LoadResult,
    ResolvedArtifact,
    WalkConfig,
)
from .resolver import Candidate, Failed, Found, NotFound, Resolver, resolve, resolve_sync
from .scope import FormatScopeCache
from .walker import DirectoryWalker, join_all, list_directory, walk, walk_sync

__all__ = [
    # Entry points
    "walk",
    "walk_sync",
    "resolve",
    "resolve_sync",
    # Components
    "DirectoryWalker",
    "EntryLoader",
    "Resolver",
    "FormatScopeCache",
    "classify",
    "is_eligible",
    "is_index_name",
    "list_directory",
    "join_all",
    # Formats
    "FormatRegistry",
    "get_default_registry",
    "detect_format",
    "extension_of",
    # Interfaces
    "ArtifactLoaderInterface",
    "ManifestReaderInterface",
    # Models
    "ClassifiedEntries",
    "DirEntry",
    "ExtensionKind",
    "Format",
    "LoadResult",
    "ResolvedArtifact",
    "WalkConfig",
    "Candidate",
    "Found",
    "NotFound",
    "Failed",
    # Constants
    "DEFAULT_EXTENSIONS",
    "INDEX_NAME",
]
