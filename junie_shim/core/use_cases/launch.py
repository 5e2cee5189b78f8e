"""
Launch use case — everything between argv and the process handoff.

    apply pending update (best effort) → resolve version → locate binary
    → filter shim args → build child environment

Update application always finishes before resolution reads ``current``,
so an update applied by this invocation is the one it runs (unless a
flag or env var pins another version).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence

from junie_shim.core.config.loader import DATA_ENV, WORKDIR_ENV
from junie_shim.core.models.launch import LaunchPlan
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.models.update import UpdateResult
from junie_shim.core.persistence.version_store import VersionStore
from junie_shim.core.services.binary_locator import BinaryLocator
from junie_shim.core.services.update_applier import UpdateApplier
from junie_shim.core.services.version_resolver import VersionResolver, filter_shim_args

logger = logging.getLogger(__name__)


class Launcher:
    """Build a LaunchPlan for one invocation."""

    def __init__(
        self,
        settings: ShimSettings,
        *,
        store: VersionStore | None = None,
        applier: UpdateApplier | None = None,
        resolver: VersionResolver | None = None,
        locator: BinaryLocator | None = None,
    ) -> None:
        self.settings = settings
        self.store = store or VersionStore(settings)
        self.locator = locator or BinaryLocator(settings.product)
        self.applier = applier or UpdateApplier(settings, store=self.store, locator=self.locator)
        self.resolver = resolver or VersionResolver(self.store)

    def apply_update(self) -> UpdateResult:
        """Apply any pending update.  Never raises."""
        try:
            return self.applier.apply()
        except Exception as e:
            logger.exception("Unexpected error while applying pending update")
            return UpdateResult.failed("unexpected", str(e))

    def plan(
        self,
        args: Sequence[str],
        env: Mapping[str, str] | None = None,
        *,
        cwd: str | None = None,
    ) -> LaunchPlan:
        """Resolve what to run.

        Raises:
            LaunchError: No version, version not installed, or no
                runnable binary.  Fatal for the invocation.
        """
        env = os.environ if env is None else env

        update = self.apply_update()

        resolved = self.resolver.resolve(
            args,
            env,
            display_name=self.settings.display_name,
            install_hint=self.settings.install_hint,
        )
        location = self.locator.locate(resolved.directory, resolved.version)

        return LaunchPlan(
            binary=location.path,
            args=filter_shim_args(args),
            env=build_child_env(self.settings, env, cwd=cwd),
            resolved=resolved,
            layout=location.layout,
            update=update,
        )


def build_child_env(
    settings: ShimSettings,
    env: Mapping[str, str],
    *,
    cwd: str | None = None,
) -> dict[str, str]:
    """Inherited environment plus the two variables the program relies on."""
    child = dict(env)
    if not child.get(WORKDIR_ENV):
        child[WORKDIR_ENV] = cwd if cwd is not None else os.getcwd()
    child[DATA_ENV] = str(settings.data_root)
    return child
