"""
Version admin use cases — list installed versions, switch ``current``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from junie_shim.core.models.errors import ShimError
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.persistence.version_store import VersionStore


@dataclass
class VersionListing:
    """Installed versions with the current one marked."""

    versions: list[str] = field(default_factory=list)
    current: str | None = None


@dataclass
class SwitchResult:
    version: str
    error: ShimError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def list_installed(settings: ShimSettings) -> VersionListing:
    store = VersionStore(settings)
    return VersionListing(versions=store.list_versions(), current=store.current_version())


def switch_version(settings: ShimSettings, version: str) -> SwitchResult:
    """Repoint ``current``; leaves it untouched on any failure."""
    result = SwitchResult(version=version)
    try:
        VersionStore(settings).switch(version)
    except ShimError as e:
        result.error = e
    return result
