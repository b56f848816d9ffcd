"""Shared fixtures for dirload tests."""

from pathlib import Path

import pytest

from tests.walk_test_utils import KITCHEN_SINK, write_tree


@pytest.fixture
def kitchen_sink(tmp_path) -> Path:
    """The kitchen-sink tree with every kind of entry the walker handles."""
    return write_tree(tmp_path / "kitchen-sink", KITCHEN_SINK)
