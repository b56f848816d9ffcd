"""
Classification of one directory listing.
"""

import os
from collections.abc import Iterable

from .formats import extension_of
from .models import INDEX_NAME, ClassifiedEntries, DirEntry, WalkConfig


def is_index_name(name: str) -> bool:
    """True when the name without its extension is exactly the index name."""
    return os.path.splitext(name)[0] == INDEX_NAME


def is_eligible(full_path: str, name: str, config: WalkConfig) -> bool:
    """A file is eligible when its extension is allowed, it is included and not excluded."""
    return (
        extension_of(name) in config.extensions
        and bool(config.include(full_path, name))
        and not config.exclude(full_path, name)
    )


def classify(dir_path: str, entries: Iterable[DirEntry], config: WalkConfig) -> ClassifiedEntries:
    """
    Partition a directory's entries into subdirectories, eligible files and index files.

    Directories are never filtered; extension and include/exclude checks
    apply to files only. Index files are also listed among eligible files.
    """
    classified = ClassifiedEntries()

    for entry in entries:
        if entry.is_directory:
            classified.subdirectories.append(entry)
            continue

        if not is_eligible(os.path.join(dir_path, entry.name), entry.name, config):
            continue

        classified.eligible_files.append(entry)
        if is_index_name(entry.name):
            classified.index_files.append(entry)

    return classified
