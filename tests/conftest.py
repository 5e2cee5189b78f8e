"""
Shared test fixtures and configuration.
"""

import hashlib
import json
import stat
import zipfile
from pathlib import Path

import pytest

from junie_shim.core.models.settings import ShimSettings

PRODUCT = "junie"


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Return an empty data root (versions/ and updates/ created)."""
    root = tmp_path / "data"
    (root / "versions").mkdir(parents=True)
    (root / "updates").mkdir()
    return root


@pytest.fixture
def settings(data_root: Path) -> ShimSettings:
    return ShimSettings(data_root=data_root)


@pytest.fixture
def make_version(settings: ShimSettings):
    """Create ``versions/<v>`` with a binary in the requested layout.

    Returns the path to the executable.
    """

    def _make(version: str, layout: str = "flat", executable: bool = True) -> Path:
        version_dir = settings.versions_dir / version
        if layout == "bundle":
            binary = version_dir / "Applications" / f"{PRODUCT}.app" / "Contents" / "MacOS" / PRODUCT
        elif layout == "nested":
            binary = version_dir / PRODUCT / "bin" / PRODUCT
        elif layout == "flat":
            binary = version_dir / PRODUCT
        elif layout == "empty":
            version_dir.mkdir(parents=True, exist_ok=True)
            return version_dir
        else:
            raise ValueError(layout)
        binary.parent.mkdir(parents=True, exist_ok=True)
        binary.write_text("#!/bin/sh\necho junie\n")
        binary.chmod(0o755 if executable else 0o644)
        return binary

    return _make


@pytest.fixture
def point_current(settings: ShimSettings):
    """Point ``current`` at a version the way the installer does (absolute link)."""

    def _point(version: str) -> Path:
        link = settings.current_link
        if link.is_symlink():
            link.unlink()
        link.symlink_to(settings.versions_dir / version, target_is_directory=True)
        return link

    return _point


@pytest.fixture
def make_zip(tmp_path: Path):
    """Build a zip archive from ``{name: (content, mode)}``."""

    def _make(members: dict[str, tuple[str, int]], name: str = "update.zip") -> Path:
        path = tmp_path / "downloads" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            for member, (content, mode) in members.items():
                info = zipfile.ZipInfo(member)
                info.external_attr = (stat.S_IFREG | mode) << 16
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, content)
        return path

    return _make


@pytest.fixture
def write_manifest(settings: ShimSettings):
    """Write ``updates/pending-update.json`` from keyword fields."""

    def _write(**fields) -> Path:
        path = settings.pending_update_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(fields))
        return path

    return _write


@pytest.fixture
def sha256_of():
    """Return a helper computing the hex SHA-256 of a file."""

    def _digest(path: Path) -> str:
        return hashlib.sha256(path.read_bytes()).hexdigest()

    return _digest
