"""
Path helpers shared by the walker, the resolver and the CLI.
"""

import os
from collections.abc import Callable, Iterable
from pathlib import Path

import pathspec

PathPredicate = Callable[[str, str], bool]


def resolve_against(path: Path | str, relative_to: Path | str | None = None) -> Path:
    """
    Resolve a possibly relative path to an absolute one.

    Args:
        path: Path to resolve. Absolute paths are returned normalized.
        relative_to: A file (typically a caller's ``__file__``) or directory
                     whose location relative paths are anchored to.
                     Defaults to the current working directory.
    """
    if relative_to is None:
        base = Path.cwd()
    else:
        base = Path(relative_to).resolve()
        if not base.is_dir():
            base = base.parent
    return (base / path).resolve()


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Strip leading dots so '.py' and 'py' name the same extension."""
    if isinstance(extensions, str):
        extensions = [extensions]
    return frozenset(ext[1:] if ext.startswith(".") else ext for ext in extensions)


def predicate_from_patterns(root: Path | str, patterns: Iterable[str]) -> PathPredicate:
    """
    Build an include/exclude predicate from gitignore-style patterns.

    Patterns are matched against the file path relative to root, using
    forward slashes on every platform.
    """
    root = str(root)
    spec = pathspec.GitIgnoreSpec.from_lines(list(patterns))

    def matches(path: str, name: str) -> bool:
        try:
            rel_path = os.path.relpath(path, root)
        except ValueError:
            rel_path = name
        return spec.match_file(rel_path.replace(os.sep, "/"))

    return matches
