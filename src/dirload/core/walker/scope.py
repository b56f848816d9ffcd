"""
Per-call cache of ambient default formats.
"""

import asyncio
import logging
from pathlib import Path

from .interfaces import ManifestReaderInterface
from .models import Format

logger = logging.getLogger(__name__)


class FormatScopeCache:
    """
    Caches the default format governing each directory for one walk or resolve call.

    The filesystem is assumed not to change during a call, so a cached
    answer never goes stale within it. Each directory is looked up at most
    once; concurrent callers asking for the same directory share the
    pending lookup, which runs off the event loop.
    """

    def __init__(self, reader: ManifestReaderInterface, override: Format | None = None):
        """
        Args:
            reader: Manifest reader consulted on cache misses
            override: Format returned for every directory without any lookup
        """
        self._reader = reader
        self._override = override
        self._lookups: dict[Path, asyncio.Future[Format]] = {}

    async def default_for(self, directory: Path) -> Format:
        if self._override is not None:
            return self._override

        directory = Path(directory)
        lookup = self._lookups.get(directory)
        if lookup is None:
            lookup = asyncio.ensure_future(self._read(directory))
            self._lookups[directory] = lookup

        # One cancelled caller must not cancel the lookup shared with the others
        return await asyncio.shield(lookup)

    async def _read(self, directory: Path) -> Format:
        fmt = await asyncio.to_thread(self._reader.read_format, directory)
        logger.debug(f"Default format for {directory}: {fmt.value}")
        return fmt

    def __len__(self) -> int:
        return len(self._lookups)
