"""
Version resolver — decide which installed version this invocation runs.

Precedence, first match wins:

    1. ``--use-version=<v>`` anywhere in argv (first occurrence)
    2. ``$JUNIE_VERSION``
    3. the version ``current`` points at

The candidate must exist under ``versions/``; there is never a silent
fallback to another version.  Empty values count as absent.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

from junie_shim.core.config.loader import VERSION_ENV
from junie_shim.core.models.errors import NoVersionFound, VersionNotInstalled
from junie_shim.core.models.launch import USE_VERSION_PREFIX, ResolvedVersion, VersionSource
from junie_shim.core.persistence.version_store import VersionStore

logger = logging.getLogger(__name__)


def find_use_version_flag(args: Sequence[str]) -> str | None:
    """Value of the first ``--use-version=`` argument, or None.

    Scanning covers every argument; the wrapped program's own arguments
    may come before or after the flag.
    """
    for arg in args:
        if arg.startswith(USE_VERSION_PREFIX):
            return arg[len(USE_VERSION_PREFIX):] or None
    return None


def filter_shim_args(args: Sequence[str]) -> list[str]:
    """Drop shim-only flags; keep everything else verbatim and in order."""
    return [arg for arg in args if not arg.startswith(USE_VERSION_PREFIX)]


class VersionResolver:
    """Resolve the effective version against one VersionStore."""

    def __init__(self, store: VersionStore, *, version_env: str = VERSION_ENV) -> None:
        self.store = store
        self.version_env = version_env

    def candidate(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> tuple[str, VersionSource] | None:
        env = os.environ if env is None else env

        flag_value = find_use_version_flag(args)
        if flag_value:
            return flag_value, VersionSource.FLAG

        env_value = env.get(self.version_env, "")
        if env_value:
            return env_value, VersionSource.ENV

        current = self.store.current_version()
        if current:
            return current, VersionSource.CURRENT

        return None

    def resolve(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        *,
        display_name: str = "Junie",
        install_hint: str = "",
    ) -> ResolvedVersion:
        """Pick the version to run.

        Raises:
            NoVersionFound: No flag, env var or ``current`` pointer.
            VersionNotInstalled: The candidate has no ``versions/<v>``
                directory.  Carries the installed versions.
        """
        found = self.candidate(args, env)
        if found is None:
            raise NoVersionFound(display_name, install_hint)

        version, source = found
        if not self.store.has_version(version):
            raise VersionNotInstalled(
                version,
                self.store.versions_dir,
                self.store.list_versions(),
            )

        logger.debug("Resolved version %s from %s", version, source)
        return ResolvedVersion(
            version=version,
            source=source,
            directory=self.store.version_dir(version),
        )
