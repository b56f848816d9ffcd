"""
Infrastructure Layer - loading primitives and manifest lookup.
"""

from dirload.infrastructure.fakes import FakeArtifactLoader, FakeManifestReader
from dirload.infrastructure.loaders import (
    DEFAULT_DATA_PARSERS,
    DefaultArtifactLoader,
    module_name_for,
)
from dirload.infrastructure.manifest import (
    DEFAULT_MANIFEST_FILENAME,
    DEFAULT_MANIFEST_TABLE,
    PyprojectManifestReader,
)

__all__ = [
    # Loaders
    "DefaultArtifactLoader",
    "DEFAULT_DATA_PARSERS",
    "module_name_for",
    # Manifest
    "PyprojectManifestReader",
    "DEFAULT_MANIFEST_FILENAME",
    "DEFAULT_MANIFEST_TABLE",
    # Fakes
    "FakeArtifactLoader",
    "FakeManifestReader",
]
