"""
Checksum verification for downloaded update archives.

The digest capability is probed once at startup.  If SHA-256 is not
usable in this interpreter (e.g. a restricted FIPS build) verification
degrades to "unverified" with a warning instead of failing the update.

When a digest IS computed and an expected value was supplied the
comparison is exact and case-insensitive; a mismatch is a hard failure.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from junie_shim.core.models.errors import ChecksumMismatch

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 65536


class DigestCapability(ABC):
    """Strategy for computing a file digest."""

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether this capability can compute digests at all."""

    @abstractmethod
    def digest(self, path: Path) -> str | None:
        """Hex digest of ``path``, or None if unavailable."""


class Sha256Digest(DigestCapability):
    """hashlib-backed SHA-256."""

    @property
    def available(self) -> bool:
        return True

    def digest(self, path: Path) -> str:
        h = hashlib.sha256()
        with path.open("rb") as source:
            for chunk in iter(lambda: source.read(_CHUNK_SIZE), b""):
                h.update(chunk)
        return h.hexdigest()


class UnavailableDigest(DigestCapability):
    """Degraded mode: nothing can be verified."""

    def __init__(self, reason: str = "") -> None:
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    def digest(self, path: Path) -> None:
        return None


def select_digest() -> DigestCapability:
    """Probe the interpreter once for a working SHA-256."""
    try:
        hashlib.new("sha256")
    except ValueError as e:
        logger.debug("SHA-256 unavailable: %s", e)
        return UnavailableDigest(str(e))
    return Sha256Digest()


class ChecksumVerifier:
    """Compare an archive against the digest recorded in its manifest."""

    def __init__(self, capability: DigestCapability | None = None) -> None:
        self.capability = capability or select_digest()

    def digest(self, path: Path) -> str | None:
        return self.capability.digest(path)

    def verify(self, path: Path, expected: str) -> bool:
        """Check ``path`` against ``expected``.

        Returns:
            True if the digest was computed and matched, False if no
            digest capability is available (update proceeds unverified).

        Raises:
            ChecksumMismatch: If the computed digest differs.
        """
        actual = self.digest(path)
        if actual is None:
            logger.warning("Warning: No SHA-256 tool available, skipping checksum verification")
            return False

        if actual.lower() != expected.strip().lower():
            raise ChecksumMismatch(expected=expected, actual=actual)

        logger.debug("Checksum OK for %s", path)
        return True
