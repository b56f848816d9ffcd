"""
Configuration module for dirload.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    value = section_defaults.get(key, fallback)
    # Copy lists so dataclass instances never share a mutable default
    return list(value) if isinstance(value, list) else value


@dataclass
class WalkDefaults:
    """Default options for walks started from the CLI."""

    extensions: list[str] = field(
        default_factory=lambda: _get_default("walk", "extensions", ["py", "apy", "json"])
    )
    recursive: bool = field(default_factory=lambda: _get_default("walk", "recursive", True))
    stop_at_indexes: bool = field(
        default_factory=lambda: _get_default("walk", "stop_at_indexes", True)
    )
    default_format: Optional[str] = field(
        default_factory=lambda: _get_default("walk", "default_format", None)
    )
    include: list[str] = field(default_factory=lambda: _get_default("walk", "include", []))
    exclude: list[str] = field(default_factory=lambda: _get_default("walk", "exclude", []))


@dataclass
class ManifestConfig:
    """Where the ambient default format is declared."""

    filename: str = field(
        default_factory=lambda: _get_default("manifest", "filename", "pyproject.toml")
    )
    table: str = field(default_factory=lambda: _get_default("manifest", "table", "dirload"))


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def apply(self) -> None:
        """Configure the root logger from this section."""
        logging.basicConfig(level=self.level.upper(), format=self.format, force=True)


@dataclass
class DirloadConfig:
    """Main configuration class for dirload."""

    walk: WalkDefaults = field(default_factory=WalkDefaults)
    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "DirloadConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            DirloadConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "DirloadConfig":
        """Create DirloadConfig from a dictionary."""
        config = cls()

        if "walk" in data:
            config.walk = WalkDefaults(**data["walk"])
        if "manifest" in data:
            config.manifest = ManifestConfig(**data["manifest"])
        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        return config

    def apply_env_overrides(self) -> "DirloadConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: DIRLOAD_<SECTION>_<KEY>
        Examples:
            - DIRLOAD_WALK_EXTENSIONS=py,json
            - DIRLOAD_WALK_STOP_AT_INDEXES=false
            - DIRLOAD_MANIFEST_FILENAME
            - DIRLOAD_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Walk defaults
            "DIRLOAD_WALK_EXTENSIONS": ("walk", "extensions", _parse_list),
            "DIRLOAD_WALK_RECURSIVE": ("walk", "recursive", _parse_bool),
            "DIRLOAD_WALK_STOP_AT_INDEXES": ("walk", "stop_at_indexes", _parse_bool),
            "DIRLOAD_WALK_DEFAULT_FORMAT": ("walk", "default_format", str),
            "DIRLOAD_WALK_INCLUDE": ("walk", "include", _parse_list),
            "DIRLOAD_WALK_EXCLUDE": ("walk", "exclude", _parse_list),
            # Manifest config
            "DIRLOAD_MANIFEST_FILENAME": ("manifest", "filename", str),
            "DIRLOAD_MANIFEST_TABLE": ("manifest", "table", str),
            # Logging config
            "DIRLOAD_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Parse a comma-separated string to a list, dropping empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> DirloadConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        DirloadConfig instance
    """
    if config_path:
        config = DirloadConfig.from_file(config_path)
    else:
        config = DirloadConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
