"""
Default loading primitives.

Static loads import a file right away through an importlib source loader.
Dynamic loads move file I/O off the event loop and compile Python sources
with top-level ``await`` allowed, so a dynamically loaded module may await
further loads while it initializes.

A module is registered in ``sys.modules`` only while its code runs; the
returned module object is owned by the caller alone.
"""

import ast
import asyncio
import hashlib
import importlib.machinery
import importlib.util
import inspect
import json
import logging
import re
import sys
import tomllib
import types
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml

from dirload.core.errors import ArtifactNotFoundError
from dirload.core.walker.formats import extension_of
from dirload.core.walker.interfaces import ArtifactLoaderInterface

logger = logging.getLogger(__name__)

DataParser = Callable[[str], Any]

# Extensions parsed as data rather than executed as Python source
DEFAULT_DATA_PARSERS: dict[str, DataParser] = {
    "json": json.loads,
    "yaml": yaml.safe_load,
    "yml": yaml.safe_load,
    "toml": tomllib.loads,
}

_UNSAFE_NAME_CHARS = re.compile(r"[^0-9a-zA-Z_]")


def module_name_for(path: Path) -> str:
    """Build a unique, importable module name for a file path."""
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = _UNSAFE_NAME_CHARS.sub("_", path.name.split(".", 1)[0]) or "artifact"
    return f"_dirload_{stem}_{digest}"


class ArtifactSourceLoader(importlib.machinery.SourceFileLoader):
    """
    Source loader for artifacts of any extension.

    Bytecode caches are neither read nor written: ``a.py`` and ``a.cfg`` in
    one directory would share a ``__pycache__`` entry.
    """

    def get_code(self, fullname: str) -> types.CodeType:
        path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(path), path)


def _module_spec(path: Path) -> importlib.machinery.ModuleSpec:
    name = module_name_for(path)
    spec = importlib.util.spec_from_file_location(
        name, path, loader=ArtifactSourceLoader(name, str(path))
    )
    if spec is None:
        raise ImportError(f"Cannot build a module spec for {path}", path=str(path))
    return spec


@contextmanager
def _registered(module: types.ModuleType) -> Iterator[types.ModuleType]:
    """Expose a module in sys.modules while its code runs."""
    sys.modules[module.__name__] = module
    try:
        yield module
    finally:
        sys.modules.pop(module.__name__, None)


class DefaultArtifactLoader(ArtifactLoaderInterface):
    """
    Loads data files and Python sources from disk.

    Data extensions (json, yaml, yml, toml by default) are parsed; any other
    file is executed as a Python module and the module object is returned.
    """

    def __init__(self, parsers: dict[str, DataParser] | None = None):
        """
        Initialize the loader.

        Args:
            parsers: Extra or replacement data parsers keyed by extension
                     (without the leading dot).
        """
        self._parsers: dict[str, DataParser] = dict(DEFAULT_DATA_PARSERS)
        if parsers:
            for extension, parser in parsers.items():
                self.register_parser(extension, parser)

    def register_parser(self, extension: str, parser: DataParser) -> "DefaultArtifactLoader":
        """Parse files with this extension as data instead of executing them."""
        self._parsers[extension.lstrip(".")] = parser
        return self

    def load_static(self, path: Path) -> Any:
        path = Path(path)
        if not path.is_file():
            raise ArtifactNotFoundError(path)

        parser = self._parsers.get(extension_of(path))
        if parser is not None:
            return parser(path.read_text(encoding="utf-8"))

        spec = _module_spec(path)
        module = importlib.util.module_from_spec(spec)
        logger.debug(f"Importing {path} as module {spec.name}")
        with _registered(module):
            spec.loader.exec_module(module)
        return module

    async def load_dynamic(self, path: Path) -> Any:
        path = Path(path)
        if not await asyncio.to_thread(path.is_file):
            raise ArtifactNotFoundError(path)

        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
        parser = self._parsers.get(extension_of(path))
        if parser is not None:
            return parser(source)

        code = compile(source, str(path), "exec", flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT)
        spec = _module_spec(path)
        module = importlib.util.module_from_spec(spec)
        logger.debug(f"Evaluating {path} as module {spec.name}")
        with _registered(module):
            # Sources using top-level await evaluate to a coroutine
            outcome = eval(code, module.__dict__)
            if inspect.iscoroutine(outcome):
                await outcome
        return module
