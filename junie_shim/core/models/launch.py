"""
Launch models — closed variants for admin commands, version sources and
binary layouts, plus the derived values a single invocation produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from junie_shim.core.models.update import UpdateResult

# ── Shim-only flags ─────────────────────────────────────────────

SHIM_VERSION_FLAG = "--shim-version"
LIST_VERSIONS_FLAG = "--list-versions"
SWITCH_VERSION_PREFIX = "--switch-version="
USE_VERSION_PREFIX = "--use-version="


class AdminCommandKind(StrEnum):
    """Administrative sub-commands handled by the shim itself."""

    SHIM_VERSION = "shim_version"
    LIST_VERSIONS = "list_versions"
    SWITCH_VERSION = "switch_version"


@dataclass(frozen=True)
class AdminCommand:
    kind: AdminCommandKind
    version: str | None = None  # only for SWITCH_VERSION


def parse_admin_command(args: list[str] | tuple[str, ...]) -> AdminCommand | None:
    """Classify the first argument.  Later arguments are never inspected."""
    if not args:
        return None
    first = args[0]
    if first == SHIM_VERSION_FLAG:
        return AdminCommand(AdminCommandKind.SHIM_VERSION)
    if first == LIST_VERSIONS_FLAG:
        return AdminCommand(AdminCommandKind.LIST_VERSIONS)
    if first.startswith(SWITCH_VERSION_PREFIX):
        return AdminCommand(
            AdminCommandKind.SWITCH_VERSION,
            version=first[len(SWITCH_VERSION_PREFIX):],
        )
    return None


# ── Version resolution ──────────────────────────────────────────


class VersionSource(StrEnum):
    """Where the resolved version came from, highest precedence first."""

    FLAG = "flag"
    ENV = "env"
    CURRENT = "current"


@dataclass(frozen=True)
class ResolvedVersion:
    version: str
    source: VersionSource
    directory: Path


# ── Binary layouts ──────────────────────────────────────────────


class BinaryLayout(StrEnum):
    """Known shapes of an installed version directory, in lookup order."""

    APP_BUNDLE = "app_bundle"  # Applications/<p>.app/Contents/MacOS/<p>
    NESTED_BIN = "nested_bin"  # <p>/bin/<p>
    FLAT = "flat"              # <p>


LAYOUT_ORDER: tuple[BinaryLayout, ...] = (
    BinaryLayout.APP_BUNDLE,
    BinaryLayout.NESTED_BIN,
    BinaryLayout.FLAT,
)


@dataclass(frozen=True)
class BinaryLocation:
    path: Path
    layout: BinaryLayout


# ── Launch plan ─────────────────────────────────────────────────


@dataclass
class LaunchPlan:
    """Everything needed to hand control to the wrapped program."""

    binary: Path
    args: list[str]
    env: dict[str, str]
    resolved: ResolvedVersion
    layout: BinaryLayout
    update: UpdateResult = field(default_factory=UpdateResult.noop)

    @property
    def argv(self) -> list[str]:
        """Full argv including argv[0]."""
        return [str(self.binary), *self.args]
