"""
Update applier — turn ``updates/pending-update.json`` into an installed version.

Pipeline:

    read manifest → verify checksum → extract into staging → fix permissions
    → move staging to versions/<v> → repoint ``current`` → discard artifacts

Safe to call on every launch: with nothing pending it is a single
existence check.  Expected failures never raise; they come back as a
failed UpdateResult after the artifacts have been cleaned up, so a bad
update is attempted at most once and never blocks a launch.

Extraction happens in a hidden staging directory that is renamed into
place only once fully written, so an interrupted run never leaves a
half-populated ``versions/<v>`` behind and never touches ``current``.
The manifest is deleted only after the outcome is known; a run killed
mid-extraction therefore retries on the next launch.

Concurrent launches are not coordinated: two shells applying the same
pending update at once race on the manifest and archive.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from junie_shim.core.models.errors import (
    ArchiveMissing,
    ChecksumMismatch,
    InvalidManifest,
    UpdateError,
)
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.models.update import UpdateManifest, UpdateResult
from junie_shim.core.persistence.manifest_file import discard, read_manifest
from junie_shim.core.persistence.version_store import VersionStore
from junie_shim.core.services.archive import ArchiveExtractor
from junie_shim.core.services.binary_locator import BinaryLocator
from junie_shim.core.services.checksum import ChecksumVerifier
from junie_shim.core.services.permissions import QuarantineStripper, make_executable

logger = logging.getLogger(__name__)


class UpdateApplier:
    """Apply at most one pending update for a data root."""

    def __init__(
        self,
        settings: ShimSettings,
        *,
        store: VersionStore | None = None,
        verifier: ChecksumVerifier | None = None,
        extractor: ArchiveExtractor | None = None,
        locator: BinaryLocator | None = None,
        quarantine: QuarantineStripper | None = None,
    ) -> None:
        self.settings = settings
        self.manifest_path = settings.pending_update_path
        self.store = store or VersionStore(settings)
        self.verifier = verifier or ChecksumVerifier()
        self.extractor = extractor or ArchiveExtractor()
        self.locator = locator or BinaryLocator(settings.product)
        self.quarantine = quarantine or QuarantineStripper()

    def has_pending(self) -> bool:
        return self.manifest_path.is_file()

    def apply(self) -> UpdateResult:
        """Apply the pending update, if any.

        Returns:
            UpdateResult with status ``noop``, ``applied`` or ``failed``.
        """
        if not self.has_pending():
            return UpdateResult.noop()

        logger.info("Applying pending update...")

        try:
            manifest = read_manifest(self.manifest_path)
        except InvalidManifest as e:
            logger.warning("Invalid pending update manifest, skipping (%s)", e)
            discard(self.manifest_path, e.zip_path)
            return UpdateResult.failed(e.kind, str(e))

        if manifest is None:
            # Removed between the existence check and the read.
            return UpdateResult.noop()

        if not manifest.zip_path.is_file():
            e = ArchiveMissing(f"Update file not found: {manifest.zip_path}")
            logger.warning("%s", e)
            discard(self.manifest_path)
            return UpdateResult.failed(e.kind, str(e), version=manifest.version)

        try:
            verified = self._install(manifest)
        except ChecksumMismatch as e:
            logger.warning("Checksum mismatch, skipping update")
            logger.warning("Expected: %s", e.expected)
            logger.warning("Got: %s", e.actual)
            discard(self.manifest_path, manifest.zip_path)
            return UpdateResult.failed(e.kind, str(e), version=manifest.version)
        except UpdateError as e:
            logger.warning("Update to %s failed: %s", manifest.version, e)
            discard(self.manifest_path, manifest.zip_path)
            return UpdateResult.failed(e.kind, str(e), version=manifest.version)
        except OSError as e:
            logger.warning("Update to %s failed: %s", manifest.version, e)
            discard(self.manifest_path, manifest.zip_path)
            return UpdateResult.failed("io_error", str(e), version=manifest.version)

        discard(manifest.zip_path, self.manifest_path)
        logger.info("Updated to version %s", manifest.version)
        return UpdateResult.applied(manifest.version, verified=verified)

    # ── Steps ───────────────────────────────────────────────────

    def _install(self, manifest: UpdateManifest) -> bool:
        verified = self._verify(manifest)

        staging = self.store.create_staging_dir(manifest.version)
        try:
            logger.info("Extracting to %s...", self.store.version_dir(manifest.version))
            self.extractor.extract(manifest.zip_path, staging)
            self._fix_permissions(staging)
            self.store.install_staged(staging, manifest.version)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        self.store.set_current(manifest.version)
        return verified

    def _verify(self, manifest: UpdateManifest) -> bool:
        if not manifest.sha256:
            return False
        if not self.settings.verify_checksums:
            logger.warning("Checksum verification disabled by configuration")
            return False
        return self.verifier.verify(manifest.zip_path, manifest.sha256)

    def _fix_permissions(self, version_dir: Path) -> None:
        for binary in self.locator.candidates(version_dir):
            make_executable(binary)
        self.quarantine.strip(version_dir)
