"""
Update models — the pending-update manifest and the apply result.

UpdateManifest mirrors ``updates/pending-update.json``::

    {"version": "108.1", "zipPath": "/path/to/download.zip", "sha256": "..."}

UpdateResult is what the applier hands back.  Like a Receipt it
never raises for expected failures — the outcome is captured here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def is_valid_version_name(version: str) -> bool:
    """Versions map 1:1 to a directory name under ``versions/``."""
    if not version or version in (".", ".."):
        return False
    if version.startswith("."):
        return False
    return "/" not in version and "\\" not in version and "\0" not in version


class UpdateManifest(BaseModel):
    """A queued, not-yet-applied version."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str = Field(min_length=1)
    zip_path: Path = Field(alias="zipPath")
    sha256: str | None = None

    @field_validator("version")
    @classmethod
    def _version_is_dir_name(cls, v: str) -> str:
        if not is_valid_version_name(v):
            raise ValueError(f"not a usable version name: {v!r}")
        return v

    @field_validator("sha256")
    @classmethod
    def _blank_sha_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class UpdateResult(BaseModel):
    """Outcome of one applyPendingUpdate() call."""

    status: Literal["noop", "applied", "failed"] = "noop"
    version: str | None = None
    error_kind: str | None = None
    error: str | None = None
    verified: bool = False  # checksum was computed and matched

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @classmethod
    def noop(cls) -> UpdateResult:
        return cls(status="noop")

    @classmethod
    def applied(cls, version: str, *, verified: bool = False) -> UpdateResult:
        return cls(status="applied", version=version, verified=verified)

    @classmethod
    def failed(cls, error_kind: str, error: str, *, version: str | None = None) -> UpdateResult:
        return cls(status="failed", version=version, error_kind=error_kind, error=error)
