"""
Domain models — settings, update records, launch variants, errors.

All models are re-exported here for convenient access:

    from junie_shim.core.models import ShimSettings, UpdateManifest, UpdateResult
"""

from junie_shim.core.models.errors import (
    ArchiveMissing,
    BinaryNotExecutable,
    BinaryNotFound,
    ChecksumMismatch,
    ExtractionFailed,
    InvalidManifest,
    LaunchError,
    NoExtractorAvailable,
    NoVersionFound,
    ShimError,
    UpdateError,
    VersionNotInstalled,
    VersionStoreError,
)
from junie_shim.core.models.launch import (
    AdminCommand,
    AdminCommandKind,
    BinaryLayout,
    BinaryLocation,
    LaunchPlan,
    ResolvedVersion,
    VersionSource,
)
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.models.update import UpdateManifest, UpdateResult

__all__ = [
    # launch.py
    "AdminCommand",
    "AdminCommandKind",
    # errors.py
    "ArchiveMissing",
    "BinaryLayout",
    "BinaryLocation",
    "BinaryNotExecutable",
    "BinaryNotFound",
    "ChecksumMismatch",
    "ExtractionFailed",
    "InvalidManifest",
    "LaunchError",
    "LaunchPlan",
    "NoExtractorAvailable",
    "NoVersionFound",
    "ResolvedVersion",
    # settings.py
    "ShimSettings",
    "ShimError",
    "UpdateError",
    # update.py
    "UpdateManifest",
    "UpdateResult",
    "VersionNotInstalled",
    "VersionSource",
    "VersionStoreError",
]
