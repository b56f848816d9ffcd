"""
Integration tests for CLI commands.

Tests the basic functionality of CLI commands and error handling.
"""

import json
import logging

import pytest
from rich.console import Console
from typer.testing import CliRunner

import dirload.cli
from dirload.cli import app
from tests.walk_test_utils import write_tree

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep long temporary paths on one output line."""
    monkeypatch.setattr(dirload.cli, "console", Console(width=300))


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Commands reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def tree(tmp_path):
    return write_tree(
        tmp_path / "root",
        {
            "a.py": "a = 1\n",
            "c.json": json.dumps({"c": 3}),
            "notes.txt": "skip me\n",
            "sub/index.py": "index = True\n",
            "sub/other.py": "other = True\n",
        },
    )


class TestCLIHelp:
    """Test CLI help and usage information."""

    def test_main_help(self):
        """Main help should display available commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "walk" in result.stdout
        assert "resolve" in result.stdout
        assert "formats" in result.stdout

    def test_walk_help(self):
        result = runner.invoke(app, ["walk", "--help"])

        assert result.exit_code == 0
        assert "Directory to walk" in result.stdout
        assert "--stop-at-indexes" in result.stdout
        assert "--exclude" in result.stdout


class TestWalkCommand:
    def test_walk_lists_loaded_artifacts(self, tree):
        result = runner.invoke(app, ["walk", str(tree)])

        assert result.exit_code == 0
        assert "a.py" in result.stdout
        assert "c.json" in result.stdout
        assert "index.py" in result.stdout
        assert "other.py" not in result.stdout
        assert "notes.txt" not in result.stdout
        assert "Loaded 3 artifacts." in result.stdout

    def test_walk_without_index_short_circuit(self, tree):
        result = runner.invoke(app, ["walk", str(tree), "--no-stop-at-indexes"])

        assert result.exit_code == 0
        assert "other.py" in result.stdout
        assert "Loaded 4 artifacts." in result.stdout

    def test_walk_extension_and_exclude_options(self, tree):
        result = runner.invoke(app, ["walk", str(tree), "-e", "py", "--exclude", "sub/"])

        assert result.exit_code == 0
        assert "Loaded 1 artifacts." in result.stdout

    def test_walk_not_recursive(self, tree):
        result = runner.invoke(app, ["walk", str(tree), "--no-recursive"])

        assert result.exit_code == 0
        assert "Loaded 2 artifacts." in result.stdout

    def test_walk_uses_config_file(self, tree, tmp_path):
        config_path = tmp_path / "dirload.yaml"
        config_path.write_text("walk:\n  extensions: [json]\n", encoding="utf-8")

        result = runner.invoke(app, ["walk", str(tree), "--config", str(config_path)])

        assert result.exit_code == 0
        assert "Loaded 1 artifacts." in result.stdout

    def test_walk_empty_directory(self, tmp_path):
        result = runner.invoke(app, ["walk", str(tmp_path)])

        assert result.exit_code == 0
        assert "No artifacts found." in result.stdout

    def test_walk_index_conflict(self, tree):
        (tree / "sub" / "index.json").write_text("{}")

        result = runner.invoke(app, ["walk", str(tree)])

        assert result.exit_code == 1
        assert "Multiple index entries" in result.stdout

    def test_walk_unknown_format(self, tree):
        result = runner.invoke(app, ["walk", str(tree), "--format", "eventually"])

        assert result.exit_code == 1
        assert "Unknown format" in result.stdout

    def test_walk_load_error(self, tree):
        (tree / "broken.py").write_text("raise RuntimeError('broken on purpose')\n")

        result = runner.invoke(app, ["walk", str(tree)])

        assert result.exit_code == 1
        assert "broken on purpose" in result.stdout


class TestResolveCommand:
    def test_resolve_bare_stem(self, tree):
        result = runner.invoke(app, ["resolve", str(tree / "c")])

        assert result.exit_code == 0
        assert "c.json (static)" in result.stdout
        assert "dict (1 keys)" in result.stdout

    def test_resolve_directory_index(self, tree):
        result = runner.invoke(app, ["resolve", str(tree / "sub")])

        assert result.exit_code == 0
        assert "index.py (static)" in result.stdout

    def test_resolve_dynamic_format(self, tree):
        result = runner.invoke(app, ["resolve", str(tree / "a"), "--format", "dynamic"])

        assert result.exit_code == 0
        assert "a.py (dynamic)" in result.stdout

    def test_resolve_nothing_found(self, tree):
        result = runner.invoke(app, ["resolve", str(tree / "missing")])

        assert result.exit_code == 1
        assert "Nothing to load at" in result.stdout


class TestFormatsCommand:
    def test_lists_registered_extensions(self):
        result = runner.invoke(app, ["formats"])

        assert result.exit_code == 0
        assert "apy" in result.stdout
        assert "ambiguous" in result.stdout
        assert "toml" in result.stdout


class TestCLIErrorHandling:
    """Test CLI error handling for invalid inputs."""

    def test_walk_missing_path(self):
        result = runner.invoke(app, ["walk"])

        assert result.exit_code != 0

    def test_walk_nonexistent_root(self, tmp_path):
        result = runner.invoke(app, ["walk", str(tmp_path / "absent")])

        assert result.exit_code == 1
        assert "Error:" in result.stdout
