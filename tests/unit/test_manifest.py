"""Unit tests for manifest lookup and the per-call format scope cache."""

import asyncio
import logging

import pytest

from dirload.core.walker import Format, FormatScopeCache
from dirload.infrastructure import FakeManifestReader, PyprojectManifestReader


@pytest.fixture
def reader():
    return PyprojectManifestReader()


class TestPyprojectManifestReader:
    def test_no_manifest_is_static(self, tmp_path, reader):
        assert reader.read_format(tmp_path) == Format.STATIC

    def test_declared_dynamic(self, tmp_path, reader):
        (tmp_path / "pyproject.toml").write_text('[tool.dirload]\nformat = "dynamic"\n')

        assert reader.read_format(tmp_path) == Format.DYNAMIC

    def test_nearest_ancestor_wins(self, tmp_path, reader):
        (tmp_path / "pyproject.toml").write_text('[tool.dirload]\nformat = "dynamic"\n')
        inner = tmp_path / "pkg" / "sub"
        inner.mkdir(parents=True)
        (tmp_path / "pkg" / "pyproject.toml").write_text('[project]\nname = "pkg"\n')

        assert reader.read_format(inner) == Format.STATIC
        assert reader.find_manifest(inner) == tmp_path / "pkg" / "pyproject.toml"

    def test_inherited_from_ancestor(self, tmp_path, reader):
        (tmp_path / "pyproject.toml").write_text('[tool.dirload]\nformat = "DYNAMIC"\n')
        inner = tmp_path / "a" / "b"
        inner.mkdir(parents=True)

        assert reader.read_format(inner) == Format.DYNAMIC

    @pytest.mark.parametrize("flag, expected", [("true", Format.DYNAMIC), ("false", Format.STATIC)])
    def test_async_flag(self, tmp_path, reader, flag, expected):
        (tmp_path / "pyproject.toml").write_text(f"[tool.dirload]\nasync = {flag}\n")

        assert reader.read_format(tmp_path) == expected

    @pytest.mark.parametrize(
        "content",
        [
            "[tool.dirload\nformat = 'dynamic'\n",
            '[tool.dirload]\nformat = "eventually"\n',
            "[tool.dirload]\nformat = 3\n",
            'tool = { dirload = "dynamic" }\n',
        ],
    )
    def test_malformed_manifest_is_static(self, tmp_path, reader, content, caplog):
        (tmp_path / "pyproject.toml").write_text(content)

        with caplog.at_level(logging.WARNING):
            assert reader.read_format(tmp_path) == Format.STATIC

        assert caplog.records

    def test_custom_manifest_names(self, tmp_path):
        (tmp_path / "loader.toml").write_text('[tool.loader]\nformat = "dynamic"\n')

        reader = PyprojectManifestReader(filename="loader.toml", table="loader")

        assert reader.read_format(tmp_path) == Format.DYNAMIC


class TestFormatScopeCache:
    def test_override_skips_lookup(self, tmp_path):
        fake = FakeManifestReader({tmp_path: Format.STATIC})
        cache = FormatScopeCache(fake, override=Format.DYNAMIC)

        assert asyncio.run(cache.default_for(tmp_path)) == Format.DYNAMIC
        assert fake.lookups == []

    def test_concurrent_lookups_share_one_read(self, tmp_path):
        fake = FakeManifestReader({tmp_path: Format.DYNAMIC})
        cache = FormatScopeCache(fake)

        async def run():
            return await asyncio.gather(*(cache.default_for(tmp_path) for _ in range(10)))

        assert asyncio.run(run()) == [Format.DYNAMIC] * 10
        assert fake.lookups == [tmp_path]
        assert len(cache) == 1

    def test_one_entry_per_directory(self, tmp_path):
        fake = FakeManifestReader({tmp_path / "dyn": Format.DYNAMIC})
        cache = FormatScopeCache(fake)

        async def run():
            first = await cache.default_for(tmp_path / "dyn" / "x")
            second = await cache.default_for(tmp_path / "plain")
            again = await cache.default_for(tmp_path / "dyn" / "x")
            return first, second, again

        assert asyncio.run(run()) == (Format.DYNAMIC, Format.STATIC, Format.DYNAMIC)
        assert fake.lookups == [tmp_path / "dyn" / "x", tmp_path / "plain"]
