"""
Version store — the on-disk set of installed versions and the ``current`` pointer.

Layout (under the data root)::

    versions/<version>/     one directory per installed version (write-once)
    current                 symlink -> versions/<version>  (or a legacy directory)

``current`` is the only persisted "current version" state.  It is
repointed with create-then-rename: a temporary symlink is created next
to it and renamed over it, so readers see either the old or the new
target and never a missing link.

Hidden entries in ``versions/`` (staging and trash directories left by
update application) are never reported as versions.
"""

from __future__ import annotations

import logging
import os
import secrets
import shutil
import tempfile
from pathlib import Path

from junie_shim.core.models.errors import VersionNotInstalled, VersionStoreError
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.models.update import is_valid_version_name

logger = logging.getLogger(__name__)


class VersionStore:
    """Read and repoint installed versions for one data root."""

    def __init__(self, settings: ShimSettings) -> None:
        self.settings = settings
        self.versions_dir = settings.versions_dir
        self.current_link = settings.current_link

    # ── Queries ─────────────────────────────────────────────────

    def version_dir(self, version: str) -> Path:
        return self.versions_dir / version

    def has_version(self, version: str) -> bool:
        if not is_valid_version_name(version):
            return False
        return self.version_dir(version).is_dir()

    def list_versions(self) -> list[str]:
        """Installed version names, sorted by name."""
        if not self.versions_dir.is_dir():
            return []
        try:
            entries = list(self.versions_dir.iterdir())
        except OSError as e:
            logger.warning("Cannot list %s: %s", self.versions_dir, e)
            return []
        return sorted(
            entry.name
            for entry in entries
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def current_version(self) -> str | None:
        """Version named by ``current``, or None if there is no default.

        A symlink yields the last component of its target.  A plain
        directory (legacy installs) yields its own resolved name.
        """
        link = self.current_link
        if link.is_symlink():
            try:
                target = os.readlink(link)
            except OSError as e:
                logger.warning("Cannot read %s: %s", link, e)
                return None
            name = Path(target).name
            return name or None
        if link.is_dir():
            return link.resolve().name
        return None

    # ── Mutations ───────────────────────────────────────────────

    def switch(self, version: str) -> None:
        """Point ``current`` at an already-installed version.

        Raises:
            VersionNotInstalled: If ``versions/<version>`` does not exist.
                ``current`` is left untouched.
            VersionStoreError: If the pointer could not be replaced.
        """
        if not self.has_version(version):
            raise VersionNotInstalled(version, self.versions_dir, self.list_versions())
        self.set_current(version)

    def set_current(self, version: str) -> None:
        """Atomically repoint ``current`` at ``versions/<version>``."""
        link = self.current_link

        if link.is_dir() and not link.is_symlink():
            raise VersionStoreError(
                f"{link} is a directory, not a symlink; refusing to replace it"
            )

        link.parent.mkdir(parents=True, exist_ok=True)
        target = Path(self.versions_dir.name) / version
        tmp = link.with_name(f".{link.name}.{os.getpid()}.{secrets.token_hex(4)}.tmp")

        try:
            os.symlink(target, tmp, target_is_directory=True)
        except OSError as e:
            raise VersionStoreError(f"Cannot create symlink {tmp}: {e}") from e

        try:
            os.replace(tmp, link)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise VersionStoreError(f"Cannot repoint {link}: {e}") from e

        logger.debug("%s -> %s", link, target)

    def create_staging_dir(self, version: str) -> Path:
        """Hidden sibling directory to extract a new version into.

        Staging and trash directories left for the same version by an
        interrupted earlier run are removed first.
        """
        self.versions_dir.mkdir(parents=True, exist_ok=True)
        self.discard_leftovers(version)
        return Path(tempfile.mkdtemp(dir=self.versions_dir, prefix=f".{version}.partial-"))

    def discard_leftovers(self, version: str) -> list[Path]:
        """Remove ``.<version>.partial-*`` and ``.<version>.old-*`` entries."""
        prefixes = (f".{version}.partial-", f".{version}.old-")
        removed = []
        try:
            entries = list(self.versions_dir.iterdir())
        except OSError as e:
            logger.warning("Cannot list %s: %s", self.versions_dir, e)
            return removed
        for entry in entries:
            if not entry.name.startswith(prefixes):
                continue
            logger.debug("Removing leftover %s", entry)
            if entry.is_symlink() or not entry.is_dir():
                entry.unlink(missing_ok=True)
            else:
                shutil.rmtree(entry, ignore_errors=True)
            removed.append(entry)
        return removed

    def install_staged(self, staging: Path, version: str) -> Path:
        """Move a fully populated staging directory to ``versions/<version>``.

        An existing directory for the same version is replaced.
        """
        target = self.version_dir(version)

        if not (target.exists() or target.is_symlink()):
            os.replace(staging, target)
            return target

        logger.info("Replacing existing %s", target)
        trash = target.with_name(f".{version}.old-{secrets.token_hex(4)}")
        os.replace(target, trash)
        try:
            os.replace(staging, target)
        except OSError:
            os.replace(trash, target)
            raise
        if trash.is_symlink():
            trash.unlink()
        else:
            shutil.rmtree(trash, ignore_errors=True)
        return target
