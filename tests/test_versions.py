"""
Tests for the version admin use cases — listing and switching.
"""

import os

import pytest

from junie_shim.core.models.errors import VersionNotInstalled
from junie_shim.core.persistence.version_store import VersionStore
from junie_shim.core.use_cases.versions import list_installed, switch_version

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires symlinks")


class TestListInstalled:
    def test_marks_current(self, settings, make_version, point_current):
        make_version("2.0")
        make_version("1.0")
        point_current("2.0")
        listing = list_installed(settings)
        assert listing.versions == ["1.0", "2.0"]
        assert listing.current == "2.0"

    def test_empty(self, settings):
        listing = list_installed(settings)
        assert listing.versions == []
        assert listing.current is None


class TestSwitchVersion:
    def test_success(self, settings, make_version, point_current):
        make_version("1.0")
        make_version("2.0")
        point_current("1.0")
        result = switch_version(settings, "2.0")
        assert result.ok
        assert result.error is None
        assert VersionStore(settings).current_version() == "2.0"

    def test_missing_version_carries_diagnosis(self, settings, make_version, point_current):
        make_version("1.0")
        point_current("1.0")
        result = switch_version(settings, "9.9")
        assert not result.ok
        assert isinstance(result.error, VersionNotInstalled)
        assert "Version 9.9 not found" in result.error.diagnostic_lines()[0]
        assert VersionStore(settings).current_version() == "1.0"
