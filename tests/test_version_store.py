"""
Tests for the version store — listing, the current pointer, switching.
"""

import os
from pathlib import Path

import pytest

from junie_shim.core.models.errors import VersionNotInstalled, VersionStoreError
from junie_shim.core.persistence.version_store import VersionStore

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires symlinks")


class TestListVersions:
    def test_sorted_names(self, settings, make_version):
        make_version("108.1")
        make_version("107.1")
        assert VersionStore(settings).list_versions() == ["107.1", "108.1"]

    def test_ignores_hidden_and_files(self, settings, make_version):
        make_version("1.0")
        (settings.versions_dir / ".1.1.partial-abc").mkdir()
        (settings.versions_dir / "notes.txt").write_text("x")
        assert VersionStore(settings).list_versions() == ["1.0"]

    def test_no_versions_dir(self, tmp_path: Path):
        from junie_shim.core.models.settings import ShimSettings

        store = VersionStore(ShimSettings(data_root=tmp_path / "missing"))
        assert store.list_versions() == []

    def test_has_version(self, settings, make_version):
        make_version("1.0")
        store = VersionStore(settings)
        assert store.has_version("1.0")
        assert not store.has_version("2.0")
        assert not store.has_version("..")


class TestCurrentVersion:
    def test_absent(self, settings):
        assert VersionStore(settings).current_version() is None

    def test_absolute_symlink(self, settings, make_version, point_current):
        make_version("107.1")
        point_current("107.1")
        assert VersionStore(settings).current_version() == "107.1"

    def test_relative_symlink(self, settings, make_version):
        make_version("108.1")
        settings.current_link.symlink_to(Path("versions") / "108.1")
        assert VersionStore(settings).current_version() == "108.1"

    def test_dangling_symlink_still_names_version(self, settings):
        settings.current_link.symlink_to(settings.versions_dir / "gone")
        assert VersionStore(settings).current_version() == "gone"

    def test_legacy_directory_uses_own_name(self, settings):
        settings.current_link.mkdir()
        assert VersionStore(settings).current_version() == "current"


class TestSetCurrent:
    def test_creates_link(self, settings, make_version):
        make_version("1.0")
        store = VersionStore(settings)
        store.set_current("1.0")
        assert settings.current_link.is_symlink()
        assert settings.current_link.resolve() == (settings.versions_dir / "1.0").resolve()
        assert store.current_version() == "1.0"

    def test_replaces_existing_link(self, settings, make_version, point_current):
        make_version("1.0")
        make_version("2.0")
        point_current("1.0")
        store = VersionStore(settings)
        store.set_current("2.0")
        assert store.current_version() == "2.0"

    def test_leaves_no_temp_links(self, settings, make_version):
        make_version("1.0")
        VersionStore(settings).set_current("1.0")
        leftovers = [p.name for p in settings.data_root.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_refuses_legacy_directory(self, settings, make_version):
        make_version("1.0")
        settings.current_link.mkdir()
        with pytest.raises(VersionStoreError, match="is a directory"):
            VersionStore(settings).set_current("1.0")
        assert settings.current_link.is_dir()
        assert not settings.current_link.is_symlink()


class TestSwitch:
    def test_switch_to_installed(self, settings, make_version, point_current):
        make_version("1.0")
        make_version("2.0")
        point_current("1.0")
        store = VersionStore(settings)
        store.switch("2.0")
        assert store.current_version() == "2.0"

    def test_switch_to_missing_keeps_current(self, settings, make_version, point_current):
        make_version("1.0")
        point_current("1.0")
        store = VersionStore(settings)
        with pytest.raises(VersionNotInstalled) as exc_info:
            store.switch("9.9")
        assert exc_info.value.installed == ["1.0"]
        assert store.current_version() == "1.0"

    def test_switch_rejects_path_like_name(self, settings, make_version):
        make_version("1.0")
        with pytest.raises(VersionNotInstalled):
            VersionStore(settings).switch("../versions/1.0")


class TestStaging:
    def test_staging_is_hidden(self, settings):
        staging = VersionStore(settings).create_staging_dir("3.0")
        assert staging.parent == settings.versions_dir
        assert staging.name.startswith(".3.0.partial-")

    def test_install_new(self, settings):
        store = VersionStore(settings)
        staging = store.create_staging_dir("3.0")
        (staging / "junie").write_text("new")
        target = store.install_staged(staging, "3.0")
        assert target == settings.versions_dir / "3.0"
        assert (target / "junie").read_text() == "new"
        assert not staging.exists()

    def test_install_replaces_existing(self, settings, make_version):
        make_version("3.0")
        (settings.versions_dir / "3.0" / "stale.txt").write_text("old")
        store = VersionStore(settings)
        staging = store.create_staging_dir("3.0")
        (staging / "junie").write_text("new")
        store.install_staged(staging, "3.0")
        assert (settings.versions_dir / "3.0" / "junie").read_text() == "new"
        assert not (settings.versions_dir / "3.0" / "stale.txt").exists()
        assert store.list_versions() == ["3.0"]
        assert [p for p in settings.versions_dir.iterdir() if p.name.startswith(".")] == []

    def test_staging_reclaims_leftovers_of_same_version(self, settings):
        stale = settings.versions_dir / ".3.0.partial-dead"
        (stale / "junie").mkdir(parents=True)
        trash = settings.versions_dir / ".3.0.old-dead"
        trash.mkdir()
        other = settings.versions_dir / ".4.0.partial-live"
        other.mkdir()

        staging = VersionStore(settings).create_staging_dir("3.0")

        assert not stale.exists()
        assert not trash.exists()
        assert other.exists()
        assert staging.exists()

    def test_leftover_prefix_is_exact(self, settings, make_version):
        make_version("3.0")
        near_miss = settings.versions_dir / ".3.01.partial-x"
        near_miss.mkdir()
        assert VersionStore(settings).discard_leftovers("3.0") == []
        assert near_miss.exists()
        assert (settings.versions_dir / "3.0").exists()
