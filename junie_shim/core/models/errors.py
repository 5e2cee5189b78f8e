"""
Error taxonomy for the shim.

Two families with opposite propagation rules:

    UpdateError  — raised while applying a pending update.  Always
                   recovered by the update applier: logged, artifacts
                   cleaned up, launch continues.
    LaunchError  — raised while resolving/locating the binary to run.
                   Always fatal for the invocation (exit 1, no exec).

Each error knows how to render itself as diagnostic lines so the
CLI layer can print actionable context without re-deriving it.
"""

from __future__ import annotations

from pathlib import Path


class ShimError(Exception):
    """Base class for all shim errors."""

    kind = "shim_error"

    def diagnostic_lines(self) -> list[str]:
        return [f"Error: {self}"]


# ── Update application ──────────────────────────────────────────


class UpdateError(ShimError):
    """Raised when a pending update cannot be applied."""

    kind = "update_error"


class InvalidManifest(UpdateError):
    """Manifest is unparseable or lacks ``version`` / ``zipPath``."""

    kind = "invalid_manifest"

    def __init__(self, message: str, *, zip_path: Path | None = None) -> None:
        super().__init__(message)
        self.zip_path = zip_path


class ArchiveMissing(UpdateError):
    kind = "archive_missing"


class ChecksumMismatch(UpdateError):
    kind = "checksum_mismatch"

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__("Checksum mismatch")
        self.expected = expected
        self.actual = actual


class ExtractionFailed(UpdateError):
    kind = "extraction_failed"


class NoExtractorAvailable(UpdateError):
    kind = "no_extractor"


class VersionStoreError(UpdateError):
    """The ``current`` pointer could not be repointed."""

    kind = "version_store"


# ── Launch (fatal) ──────────────────────────────────────────────


class LaunchError(ShimError):
    """Raised when no runnable binary can be determined."""

    kind = "launch_error"


class NoVersionFound(LaunchError):
    kind = "no_version"

    def __init__(self, display_name: str, install_hint: str = "") -> None:
        super().__init__(f"No version found. Please reinstall {display_name}.")
        self.install_hint = install_hint

    def diagnostic_lines(self) -> list[str]:
        lines = super().diagnostic_lines()
        if self.install_hint:
            lines.append(self.install_hint)
        return lines


class VersionNotInstalled(LaunchError):
    kind = "version_not_installed"

    def __init__(self, version: str, versions_dir: Path, installed: list[str]) -> None:
        super().__init__(f"Version {version} not found in {versions_dir}")
        self.version = version
        self.versions_dir = versions_dir
        self.installed = installed

    def diagnostic_lines(self) -> list[str]:
        lines = super().diagnostic_lines()
        lines.append("Available versions:")
        if self.installed:
            lines.extend(self.installed)
        else:
            lines.append("  (none)")
        return lines


class BinaryNotFound(LaunchError):
    kind = "binary_not_found"

    def __init__(self, version: str, searched: Path) -> None:
        super().__init__(f"Binary not found or not executable for version {version}")
        self.version = version
        self.searched = searched

    def diagnostic_lines(self) -> list[str]:
        return super().diagnostic_lines() + [f"Looked in: {self.searched}"]


class BinaryNotExecutable(BinaryNotFound):
    """Binary exists but lacks the executable bit.

    Reported identically to BinaryNotFound.
    """

    kind = "binary_not_executable"

    def __init__(self, version: str, searched: Path, binary: Path) -> None:
        super().__init__(version, searched)
        self.binary = binary
