"""
Tests for checksum verification and the digest capability probe.
"""

import hashlib
import logging
from pathlib import Path

import pytest

from junie_shim.core.models.errors import ChecksumMismatch
from junie_shim.core.services import checksum
from junie_shim.core.services.checksum import (
    ChecksumVerifier,
    Sha256Digest,
    UnavailableDigest,
    select_digest,
)


@pytest.fixture
def archive(tmp_path: Path) -> Path:
    path = tmp_path / "update.zip"
    path.write_bytes(b"payload" * 20000)
    return path


class TestSha256Digest:
    def test_matches_hashlib(self, archive: Path):
        expected = hashlib.sha256(archive.read_bytes()).hexdigest()
        assert Sha256Digest().digest(archive) == expected

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty"
        path.write_bytes(b"")
        assert Sha256Digest().digest(path) == hashlib.sha256(b"").hexdigest()


class TestSelectDigest:
    def test_default_is_sha256(self):
        cap = select_digest()
        assert isinstance(cap, Sha256Digest)
        assert cap.available

    def test_degrades_when_sha256_unusable(self, monkeypatch):
        def _refuse(name, *args, **kwargs):
            raise ValueError("unsupported hash type")

        monkeypatch.setattr(checksum.hashlib, "new", _refuse)
        cap = select_digest()
        assert isinstance(cap, UnavailableDigest)
        assert not cap.available


class TestChecksumVerifier:
    def test_match(self, archive: Path):
        expected = hashlib.sha256(archive.read_bytes()).hexdigest()
        assert ChecksumVerifier(Sha256Digest()).verify(archive, expected) is True

    def test_match_is_case_insensitive(self, archive: Path):
        expected = hashlib.sha256(archive.read_bytes()).hexdigest().upper()
        assert ChecksumVerifier(Sha256Digest()).verify(archive, expected) is True

    def test_mismatch(self, archive: Path):
        verifier = ChecksumVerifier(Sha256Digest())
        with pytest.raises(ChecksumMismatch) as exc_info:
            verifier.verify(archive, "0" * 64)
        assert exc_info.value.expected == "0" * 64
        assert exc_info.value.actual == hashlib.sha256(archive.read_bytes()).hexdigest()

    def test_prefix_is_not_a_match(self, archive: Path):
        actual = hashlib.sha256(archive.read_bytes()).hexdigest()
        with pytest.raises(ChecksumMismatch):
            ChecksumVerifier(Sha256Digest()).verify(archive, actual[:32])

    def test_unavailable_is_unverified_not_failure(self, archive: Path, caplog):
        verifier = ChecksumVerifier(UnavailableDigest("no sha"))
        with caplog.at_level(logging.WARNING):
            assert verifier.verify(archive, "deadbeef") is False
        assert "skipping checksum verification" in caplog.text
