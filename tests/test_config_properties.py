"""
Property-based tests for DirloadConfig serialization and environment overrides.
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dirload.core.config import (
    DirloadConfig,
    LoggingConfig,
    ManifestConfig,
    WalkDefaults,
    load_config,
)

extension = st.from_regex(r"[a-z]{1,5}", fullmatch=True)

pattern = st.from_regex(r"[a-zA-Z0-9_\-\*\./]+", fullmatch=True)

safe_name = st.from_regex(r"[a-z][a-z0-9_\-\.]{0,20}", fullmatch=True)

log_level = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


@st.composite
def walk_defaults_strategy(draw):
    """Generate valid WalkDefaults instances."""
    return WalkDefaults(
        extensions=draw(st.lists(extension, min_size=1, max_size=6, unique=True)),
        recursive=draw(st.booleans()),
        stop_at_indexes=draw(st.booleans()),
        default_format=draw(st.sampled_from([None, "static", "dynamic"])),
        include=draw(st.lists(pattern, max_size=5)),
        exclude=draw(st.lists(pattern, max_size=5)),
    )


@st.composite
def dirload_config_strategy(draw):
    """Generate valid DirloadConfig instances."""
    return DirloadConfig(
        walk=draw(walk_defaults_strategy()),
        manifest=ManifestConfig(filename=draw(safe_name), table=draw(safe_name)),
        logging=LoggingConfig(level=draw(log_level), format="%(levelname)s %(message)s"),
    )


@given(config=dirload_config_strategy())
@settings(max_examples=50)
def test_config_yaml_round_trip(config: DirloadConfig):
    """Saving to YAML and loading back yields an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yaml_path = Path(tmpdir) / "config.yaml"

        config.save(yaml_path)
        loaded_config = DirloadConfig.from_file(yaml_path)

        assert config.to_dict() == loaded_config.to_dict()


@given(config=dirload_config_strategy())
@settings(max_examples=50)
def test_config_json_round_trip(config: DirloadConfig):
    """Saving to JSON and loading back yields an equivalent configuration."""
    with tempfile.TemporaryDirectory() as tmpdir:
        json_path = Path(tmpdir) / "config.json"

        config.save(json_path)
        loaded_config = DirloadConfig.from_file(json_path)

        assert config.to_dict() == loaded_config.to_dict()


@given(extensions=st.lists(extension, min_size=1, max_size=6, unique=True))
def test_extension_list_env_override(extensions):
    """Comma-separated overrides tolerate blanks and a trailing comma."""
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("DIRLOAD_WALK_EXTENSIONS", " , ".join(extensions) + ",")

        config = load_config()

    assert config.walk.extensions == extensions


def test_defaults_match_packaged_values():
    config = DirloadConfig()

    assert config.walk.extensions == ["py", "apy", "json"]
    assert config.walk.recursive is True
    assert config.walk.stop_at_indexes is True
    assert config.walk.default_format is None
    assert config.manifest.filename == "pyproject.toml"
    assert config.manifest.table == "dirload"
    assert config.logging.level == "WARNING"


def test_instances_do_not_share_lists():
    first = DirloadConfig()
    first.walk.extensions.append("toml")

    assert DirloadConfig().walk.extensions == ["py", "apy", "json"]


@pytest.mark.parametrize(
    "raw, expected",
    [("true", True), ("1", True), ("YES", True), ("on", True), ("false", False), ("0", False)],
)
def test_boolean_env_overrides(monkeypatch, raw, expected):
    monkeypatch.setenv("DIRLOAD_WALK_STOP_AT_INDEXES", raw)
    monkeypatch.setenv("DIRLOAD_WALK_RECURSIVE", raw)

    config = load_config()

    assert config.walk.stop_at_indexes is expected
    assert config.walk.recursive is expected


def test_env_overrides_win_over_file(tmp_path, monkeypatch):
    config_path = tmp_path / "dirload.yaml"
    config_path.write_text(
        "walk:\n  default_format: static\nmanifest:\n  table: mine\n", encoding="utf-8"
    )
    monkeypatch.setenv("DIRLOAD_WALK_DEFAULT_FORMAT", "dynamic")
    monkeypatch.setenv("DIRLOAD_LOGGING_LEVEL", "debug")

    config = load_config(config_path)

    assert config.walk.default_format == "dynamic"
    assert config.manifest.table == "mine"
    assert config.logging.level == "debug"


def test_env_overrides_can_be_skipped(monkeypatch):
    monkeypatch.setenv("DIRLOAD_MANIFEST_FILENAME", "other.toml")

    assert load_config(apply_env=False).manifest.filename == "pyproject.toml"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DirloadConfig.from_file(tmp_path / "absent.yaml")


def test_unsupported_config_format(tmp_path):
    config_path = tmp_path / "dirload.ini"
    config_path.write_text("[walk]\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported"):
        DirloadConfig.from_file(config_path)

    with pytest.raises(ValueError, match="Unsupported"):
        DirloadConfig().save(config_path)
