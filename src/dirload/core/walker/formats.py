"""
Format registry and per-file strategy detection.
"""

import logging
import os
from pathlib import Path

import yaml

from .models import ExtensionKind, Format

logger = logging.getLogger(__name__)

# Default path to the formats configuration file
_DEFAULT_FORMATS_CONFIG = Path(__file__).parent.parent / "formats.yaml"


def extension_of(name: str | Path) -> str:
    """Return the extension of a file name without its leading dot ('' when absent)."""
    return os.path.splitext(os.fspath(name))[1][1:]


class FormatRegistry:
    """
    Mapping of file extensions to the loading strategies they allow.

    Each registry is an explicit configuration value handed to a walk or a
    resolve call; registering an extension on one instance never affects
    another.

    Example:
        >>> registry = FormatRegistry()
        >>> registry.register(ExtensionKind.STATIC, ["cfg"])
        >>> registry.kind_of("cfg")
        <ExtensionKind.STATIC: 'static'>
    """

    def __init__(self, load_defaults: bool = True):
        """
        Initialize the registry.

        Args:
            load_defaults: If True, load default mappings from formats.yaml.
        """
        self._extension_to_kind: dict[str, ExtensionKind] = {}

        if load_defaults:
            self._load_from_yaml(_DEFAULT_FORMATS_CONFIG)

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "FormatRegistry":
        """
        Create a FormatRegistry from a YAML configuration file.

        Raises:
            ValueError: If the config file format is invalid
        """
        registry = cls(load_defaults=False)
        registry._load_from_yaml(Path(config_path))
        return registry

    def _load_from_yaml(self, config_path: Path) -> None:
        """
        Load extension mappings from a YAML file.

        Expected format:
            static:
              - json
            dynamic:
              - apy
        """
        if not config_path.exists():
            logger.warning(f"Formats config not found: {config_path}, using empty registry")
            return

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse formats config: {e}")
            raise ValueError(f"Invalid YAML in formats config: {e}") from e

        if data is None:
            return

        if not isinstance(data, dict):
            raise ValueError(f"Invalid formats config format: expected dict, got {type(data)}")

        for kind_name, extensions in data.items():
            try:
                kind = ExtensionKind(kind_name)
            except ValueError:
                logger.warning(f"Unknown extension kind in formats config: {kind_name}")
                continue
            if not isinstance(extensions, list):
                logger.warning(
                    f"Invalid extensions for {kind_name}: expected list, got {type(extensions)}"
                )
                continue
            self.register(kind, [str(ext) for ext in extensions])

    def register(self, kind: ExtensionKind, extensions: list[str]) -> "FormatRegistry":
        """
        Register extensions under a kind, replacing any previous mapping.

        Returns:
            Self for method chaining
        """
        for ext in extensions:
            self._extension_to_kind[ext.lstrip(".")] = ExtensionKind(kind)
        return self

    def unregister(self, extension: str) -> "FormatRegistry":
        """Remove an extension from the registry."""
        self._extension_to_kind.pop(extension.lstrip("."), None)
        return self

    def kind_of(self, extension: str) -> ExtensionKind | None:
        """Return the kind registered for an extension, or None."""
        return self._extension_to_kind.get(extension)

    def is_registered(self, extension: str) -> bool:
        return extension in self._extension_to_kind

    def extensions(self, kind: ExtensionKind | None = None) -> list[str]:
        """Registered extensions in registration order, optionally restricted to a kind."""
        return [
            ext for ext, ext_kind in self._extension_to_kind.items()
            if kind is None or ext_kind == kind
        ]

    def items(self) -> list[tuple[str, ExtensionKind]]:
        return list(self._extension_to_kind.items())

    def copy(self) -> "FormatRegistry":
        """Return an independent registry with the same mappings."""
        registry = FormatRegistry(load_defaults=False)
        registry._extension_to_kind = dict(self._extension_to_kind)
        return registry

    def detect(self, file_path: str | Path, default_format: Format) -> Format:
        """
        Decide which strategy loads a file.

        Dynamic-only extensions always load dynamically. Ambiguous extensions
        follow the ambient default. Everything else, including unregistered
        extensions, loads statically.
        """
        kind = self.kind_of(extension_of(file_path))
        if kind == ExtensionKind.DYNAMIC:
            return Format.DYNAMIC
        if kind == ExtensionKind.AMBIGUOUS:
            return Format(default_format)
        return Format.STATIC

    def static_extensions(self, default_format: Format) -> list[str]:
        """Extensions a bare stem may be completed with under the static strategy."""
        return [
            ext for ext, kind in self._extension_to_kind.items()
            if kind == ExtensionKind.STATIC
            or (kind == ExtensionKind.AMBIGUOUS and default_format == Format.STATIC)
        ]


# Packaged mappings, parsed once and never handed out directly
_packaged_registry = FormatRegistry()


def get_default_registry() -> FormatRegistry:
    """
    Return a new registry holding the packaged mappings.

    Every call gets its own instance, so registering extensions on it never
    changes what another walk or resolve call detects.
    """
    return _packaged_registry.copy()


def detect_format(
    file_path: str | Path,
    default_format: Format,
    registry: FormatRegistry | None = None,
) -> Format:
    """Detect the loading strategy for a file using the given (or default) registry."""
    reg = registry or get_default_registry()
    return reg.detect(file_path, default_format)
