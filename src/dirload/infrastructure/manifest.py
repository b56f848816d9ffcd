"""
Ancestor manifest lookup.

The nearest ``pyproject.toml`` above a directory defines that directory's
scope. Its ``[tool.dirload]`` table may declare::

    [tool.dirload]
    format = "dynamic"    # or "static"; ``async = true`` is accepted too
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from dirload.core.walker.interfaces import ManifestReaderInterface
from dirload.core.walker.models import Format

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_FILENAME = "pyproject.toml"
DEFAULT_MANIFEST_TABLE = "dirload"


class PyprojectManifestReader(ManifestReaderInterface):
    """Reads the default format from the nearest ancestor pyproject.toml."""

    def __init__(
        self,
        filename: str = DEFAULT_MANIFEST_FILENAME,
        table: str = DEFAULT_MANIFEST_TABLE,
    ):
        self._filename = filename
        self._table = table

    def find_manifest(self, directory: Path) -> Path | None:
        """Return the nearest manifest at or above directory, if any."""
        directory = Path(directory)
        for candidate_dir in (directory, *directory.parents):
            candidate = candidate_dir / self._filename
            if candidate.is_file():
                return candidate
        return None

    def read_format(self, directory: Path) -> Format:
        manifest = self.find_manifest(directory)
        if manifest is None:
            return Format.STATIC

        try:
            data = tomllib.loads(manifest.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring malformed manifest {manifest}: {e}")
            return Format.STATIC
        except OSError as e:
            logger.warning(f"Cannot read manifest {manifest}: {e}")
            return Format.STATIC

        tool = data.get("tool")
        section = tool.get(self._table) if isinstance(tool, dict) else None
        if section is None:
            return Format.STATIC
        if not isinstance(section, dict):
            logger.warning(f"Ignoring malformed [tool.{self._table}] in {manifest}")
            return Format.STATIC

        return self._declared_format(section, manifest)

    def _declared_format(self, section: dict[str, Any], manifest: Path) -> Format:
        declared = section.get("format")
        if isinstance(declared, str):
            try:
                return Format(declared.strip().lower())
            except ValueError:
                logger.warning(f"Unknown format '{declared}' declared in {manifest}")
                return Format.STATIC

        flag = section.get("async")
        if isinstance(flag, bool):
            return Format.DYNAMIC if flag else Format.STATIC

        if declared is not None or flag is not None:
            logger.warning(f"Ignoring malformed format declaration in {manifest}")
        return Format.STATIC
