"""
Data models and constants for the directory walker.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class Format(str, Enum):
    """Loading strategy applied to a single file."""

    STATIC = "static"
    DYNAMIC = "dynamic"


class ExtensionKind(str, Enum):
    """How an extension constrains the loading strategy."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    AMBIGUOUS = "ambiguous"


# Base name (extension stripped) that marks a file as the value for its directory
INDEX_NAME = "index"

# Extensions walked when the caller does not pass an allow-list
DEFAULT_EXTENSIONS: tuple[str, ...] = ("py", "apy", "json")

PathPredicate = Callable[[str, str], bool]
Visitor = Callable[["LoadResult"], Optional[Awaitable[None]]]


def include_all(path: str, name: str) -> bool:
    return True


def exclude_none(path: str, name: str) -> bool:
    return False


@dataclass(frozen=True)
class DirEntry:
    """A single entry read from a directory listing."""

    name: str
    is_directory: bool


@dataclass(frozen=True)
class LoadResult:
    """
    A loaded file handed to the visitor.

    Attributes:
        value: Whatever the loading strategy produced (module object or parsed data)
        path: Absolute path of the loaded file
        name: Bare file name (directory entry name)
        format: Strategy that loaded the file
    """

    value: Any
    path: Path
    name: str
    format: Format


@dataclass(frozen=True)
class ResolvedArtifact:
    """The first candidate that loaded during resolution."""

    value: Any
    path: Path
    format: Format


@dataclass
class ClassifiedEntries:
    """Partition of one directory listing."""

    subdirectories: list[DirEntry] = field(default_factory=list)
    eligible_files: list[DirEntry] = field(default_factory=list)
    index_files: list[DirEntry] = field(default_factory=list)


@dataclass(frozen=True)
class WalkConfig:
    """
    Configuration for one walk call.

    Attributes:
        visit: Callback receiving each LoadResult; may return an awaitable
        extensions: Allowed extensions, without the leading dot (case-sensitive)
        include: Predicate (full_path, name) a file must satisfy
        exclude: Predicate (full_path, name) a file must not satisfy
        recursive: Descend into subdirectories
        stop_at_indexes: Load only the index file of a directory that has one
        default_format: Explicit ambient format; None means look it up per directory
    """

    visit: Visitor
    extensions: frozenset[str] = frozenset(DEFAULT_EXTENSIONS)
    include: PathPredicate = include_all
    exclude: PathPredicate = exclude_none
    recursive: bool = True
    stop_at_indexes: bool = True
    default_format: Format | None = None
