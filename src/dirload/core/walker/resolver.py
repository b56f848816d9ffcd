"""
Best-effort resolution of a bare path to a loadable artifact.

A stem expands into an ordered list of candidate (path, format) pairs. Each
candidate is probed in turn; only a not-found for exactly that candidate
moves on to the next one. Any other failure stops resolution and is raised.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from dirload.core.errors import ArtifactNotFoundError
from dirload.core.path_utils import resolve_against
from dirload.infrastructure.loaders import DefaultArtifactLoader
from dirload.infrastructure.manifest import PyprojectManifestReader

from .formats import FormatRegistry, extension_of, get_default_registry
from .interfaces import ArtifactLoaderInterface, ManifestReaderInterface
from .models import INDEX_NAME, ExtensionKind, Format, ResolvedArtifact
from .scope import FormatScopeCache
from .walker import coerce_format

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    path: Path
    format: Format


@dataclass(frozen=True)
class Found:
    artifact: ResolvedArtifact


@dataclass(frozen=True)
class NotFound:
    path: Path


@dataclass(frozen=True)
class Failed:
    error: Exception


ProbeOutcome = Found | NotFound | Failed


def _with_extension(path: Path, extension: str) -> Path:
    """Append an extension to the full name (foo.d -> foo.d.py)."""
    return path.with_name(f"{path.name}.{extension}")


class Resolver:
    """Tries the candidate forms of a stem and returns the first that loads."""

    def __init__(
        self,
        loader: ArtifactLoaderInterface,
        registry: FormatRegistry,
        scopes: FormatScopeCache,
    ):
        self._loader = loader
        self._registry = registry
        self._scopes = scopes

    async def candidates(self, stem: Path) -> list[Candidate]:
        """
        Build the ordered candidate list for an absolute stem.

        A stem carrying a dynamic-only extension has exactly one candidate.
        Otherwise the static forms come first (the stem itself, the stem with
        each static extension, the stem's index file under each static
        extension), followed by the dynamic forms (stem, then index file).
        Ambiguous extensions join the static or dynamic forms according to
        the default format governing the file's directory.
        """
        extension = extension_of(stem.name)
        if self._registry.kind_of(extension) == ExtensionKind.DYNAMIC:
            return [Candidate(stem, Format.DYNAMIC)]

        parent_default = await self._scopes.default_for(stem.parent)
        stem_default = await self._scopes.default_for(stem)
        dynamic_exts = self._registry.extensions(ExtensionKind.DYNAMIC)
        ambiguous_exts = self._registry.extensions(ExtensionKind.AMBIGUOUS)

        exact_format = (
            self._registry.detect(stem, parent_default)
            if self._registry.is_registered(extension)
            else Format.STATIC
        )
        candidates = [Candidate(stem, exact_format)]
        candidates += [
            Candidate(_with_extension(stem, ext), Format.STATIC)
            for ext in self._registry.static_extensions(parent_default)
        ]
        candidates += [
            Candidate(stem / f"{INDEX_NAME}.{ext}", Format.STATIC)
            for ext in self._registry.static_extensions(stem_default)
        ]

        candidates += [Candidate(_with_extension(stem, ext), Format.DYNAMIC) for ext in dynamic_exts]
        if parent_default == Format.DYNAMIC:
            candidates += [
                Candidate(_with_extension(stem, ext), Format.DYNAMIC) for ext in ambiguous_exts
            ]
        candidates += [
            Candidate(stem / f"{INDEX_NAME}.{ext}", Format.DYNAMIC) for ext in dynamic_exts
        ]
        if stem_default == Format.DYNAMIC:
            candidates += [
                Candidate(stem / f"{INDEX_NAME}.{ext}", Format.DYNAMIC) for ext in ambiguous_exts
            ]

        return candidates

    async def probe(self, candidate: Candidate) -> ProbeOutcome:
        """Attempt one candidate without raising."""
        try:
            value = await self._loader.load_artifact(candidate.path, candidate.format)
        except ArtifactNotFoundError as e:
            if e.path == candidate.path:
                return NotFound(candidate.path)
            return Failed(e)
        except Exception as e:
            return Failed(e)

        return Found(ResolvedArtifact(value=value, path=candidate.path, format=candidate.format))

    async def resolve(self, stem: Path) -> ResolvedArtifact | None:
        for candidate in await self.candidates(stem):
            outcome = await self.probe(candidate)
            if isinstance(outcome, Found):
                logger.debug(f"Resolved {stem} to {candidate.path} ({candidate.format.value})")
                return outcome.artifact
            if isinstance(outcome, Failed):
                raise outcome.error
            logger.debug(f"No artifact at {candidate.path} ({candidate.format.value})")

        return None


async def resolve(
    stem: Path | str,
    *,
    relative_to: Path | str | None = None,
    default_format: Format | str | None = None,
    loader: ArtifactLoaderInterface | None = None,
    registry: FormatRegistry | None = None,
    manifest_reader: ManifestReaderInterface | None = None,
) -> ResolvedArtifact | None:
    """
    Load the first existing form of a stem.

    Args:
        stem: Path with or without an extension; relative paths resolve against relative_to
        relative_to: File or directory anchoring a relative stem (e.g. __file__)
        default_format: Ambient format for ambiguous extensions; looked up from
                        the nearest pyproject.toml when None
        loader: Loading primitives (default: DefaultArtifactLoader)
        registry: Extension registry (default: the packaged formats)
        manifest_reader: Manifest lookup (default: PyprojectManifestReader)

    Returns:
        The loaded value with its absolute path and format, or None when no
        candidate exists.

    Raises:
        Exception: an existing candidate failed to load, unchanged
    """
    resolver = Resolver(
        loader or DefaultArtifactLoader(),
        registry or get_default_registry(),
        FormatScopeCache(
            manifest_reader or PyprojectManifestReader(),
            override=coerce_format(default_format),
        ),
    )
    return await resolver.resolve(resolve_against(stem, relative_to))


def resolve_sync(stem: Path | str, **kwargs) -> ResolvedArtifact | None:
    """Run resolve() to completion from synchronous code."""
    return asyncio.run(resolve(stem, **kwargs))
