"""
Archive extraction for update packages.

Backends are tried in order; the first one that recognises the archive
extracts it.  Zip is the primary format, tar (optionally gzip/bz2/xz
compressed) is the fallback.

Zip members keep the POSIX permission bits and symlinks recorded in the
archive, the way ``unzip`` restores them, so app bundles and launcher
scripts stay runnable.  Entries that would land outside the target
directory are rejected.
"""

from __future__ import annotations

import importlib.util
import logging
import os
import shutil
import stat
import tarfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path

from junie_shim.core.models.errors import ExtractionFailed, NoExtractorAvailable

logger = logging.getLogger(__name__)


def _zlib_available() -> bool:
    return importlib.util.find_spec("zlib") is not None


class ExtractorBackend(ABC):
    """One archive format."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier (e.g. 'zip', 'tar')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this backend can run in the current interpreter."""

    @abstractmethod
    def recognizes(self, archive_path: Path) -> bool:
        """Whether ``archive_path`` is in this backend's format."""

    @abstractmethod
    def extract(self, archive_path: Path, target_dir: Path) -> int:
        """Extract into ``target_dir``; return the number of entries written."""


class ZipBackend(ExtractorBackend):

    @property
    def name(self) -> str:
        return "zip"

    def is_available(self) -> bool:
        return _zlib_available()

    def recognizes(self, archive_path: Path) -> bool:
        return zipfile.is_zipfile(archive_path)

    def extract(self, archive_path: Path, target_dir: Path) -> int:
        with zipfile.ZipFile(archive_path) as archive:
            return extract_zip_safely(archive, target_dir)


class TarBackend(ExtractorBackend):

    @property
    def name(self) -> str:
        return "tar"

    def is_available(self) -> bool:
        return _zlib_available()

    def recognizes(self, archive_path: Path) -> bool:
        return tarfile.is_tarfile(archive_path)

    def extract(self, archive_path: Path, target_dir: Path) -> int:
        with tarfile.open(archive_path, "r:*") as tar:
            members = tar.getmembers()
            tar.extractall(target_dir, filter="data")
        return len(members)


def select_backends() -> list[ExtractorBackend]:
    """Probe once at startup for the backends usable here."""
    backends: list[ExtractorBackend] = [ZipBackend(), TarBackend()]
    usable = [b for b in backends if b.is_available()]
    if not usable:
        logger.debug("No archive backends available")
    return usable


class ArchiveExtractor:
    """Extract an update archive with the first backend that recognises it."""

    def __init__(self, backends: list[ExtractorBackend] | None = None) -> None:
        self.backends = select_backends() if backends is None else backends

    def extract(self, archive_path: Path, target_dir: Path) -> str:
        """Extract ``archive_path`` into ``target_dir`` (created if absent).

        Returns:
            Name of the backend that handled the archive.

        Raises:
            NoExtractorAvailable: No backend can run at all.
            ExtractionFailed: Unsupported format, corrupt archive, unsafe
                entry, or an I/O error while writing.
        """
        if not self.backends:
            raise NoExtractorAvailable("Error: No extraction tool available (zip or tar)")

        try:
            backend = next((b for b in self.backends if b.recognizes(archive_path)), None)
        except OSError as e:
            raise ExtractionFailed(f"Cannot read {archive_path}: {e}") from e

        if backend is None:
            raise ExtractionFailed(f"Unsupported archive format: {archive_path.name}")

        target_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Extracting %s with %s backend", archive_path, backend.name)

        try:
            count = backend.extract(archive_path, target_dir)
        except ExtractionFailed:
            raise
        except (OSError, zipfile.BadZipFile, tarfile.TarError, EOFError, ValueError) as e:
            raise ExtractionFailed(f"Failed to extract {archive_path.name}: {e}") from e

        logger.debug("Extracted %d entries to %s", count, target_dir)
        return backend.name


# ── Zip internals ───────────────────────────────────────────────


def extract_zip_safely(archive: zipfile.ZipFile, target_dir: Path) -> int:
    """Extract every member, keeping all writes inside ``target_dir``.

    Containment is checked against resolved paths, so a symlink written
    by an earlier member cannot redirect a later one outside the root.
    """
    root = target_dir.resolve()
    written = 0
    for member in archive.infolist():
        name = member.filename
        if not name:
            continue
        path = Path(name)
        if path.is_absolute() or name.startswith(("/", "\\")):
            raise ExtractionFailed(f"Archive contained an absolute path entry: {name}")
        destination = root / path
        _ensure_within(root, destination, name)

        mode = (member.external_attr >> 16) & 0xFFFF

        if member.is_dir():
            _ensure_within(root, destination.resolve(), name)
            destination.mkdir(parents=True, exist_ok=True)
            continue

        parent = destination.parent.resolve()
        _ensure_within(root, parent, name)
        parent.mkdir(parents=True, exist_ok=True)
        destination = parent / destination.name

        if stat.S_ISLNK(mode):
            link_target = archive.read(member).decode("utf-8")
            _ensure_within(root, (parent / link_target).resolve(), name)
            if destination.is_symlink() or destination.is_file():
                destination.unlink()
            os.symlink(link_target, destination)
            written += 1
            continue

        if destination.is_symlink():
            raise ExtractionFailed(f"Archive entry would write through a symlink: {name}")

        with archive.open(member) as source, destination.open("wb") as target:
            shutil.copyfileobj(source, target)

        permissions = stat.S_IMODE(mode)
        if permissions:
            os.chmod(destination, permissions)
        written += 1

    return written


def _ensure_within(root: Path, candidate: Path, name: str) -> None:
    resolved = Path(os.path.normpath(candidate))
    try:
        resolved.relative_to(root)
    except ValueError:
        raise ExtractionFailed(f"Archive contained an unsafe path: {name}") from None
