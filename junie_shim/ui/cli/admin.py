"""
CLI rendering for the shim's own administrative commands.

Thin wrappers over ``junie_shim.core.use_cases.versions``.  Each returns
the process exit code; nothing here touches the update/resolve path.
"""

from __future__ import annotations

import logging

import click

from junie_shim import SHIM_NAME, __version__
from junie_shim.core.models.launch import AdminCommand, AdminCommandKind
from junie_shim.core.models.settings import ShimSettings

logger = logging.getLogger(__name__)


def run_admin_command(command: AdminCommand, settings: ShimSettings) -> int:
    if command.kind == AdminCommandKind.SHIM_VERSION:
        return shim_version()
    if command.kind == AdminCommandKind.LIST_VERSIONS:
        return list_versions(settings)
    if command.kind == AdminCommandKind.SWITCH_VERSION:
        return switch(settings, command.version or "")
    raise ValueError(f"Unhandled admin command: {command.kind}")


def shim_version() -> int:
    click.echo(f"{SHIM_NAME} {__version__}")
    return 0


def list_versions(settings: ShimSettings) -> int:
    from junie_shim.core.use_cases.versions import list_installed

    listing = list_installed(settings)

    click.echo("Installed versions:")
    if not listing.versions:
        click.echo("  (none)")
        return 0

    for version in listing.versions:
        if version == listing.current:
            click.echo(f"  {version} (current)")
        else:
            click.echo(f"  {version}")
    return 0


def switch(settings: ShimSettings, version: str) -> int:
    from junie_shim.core.use_cases.versions import switch_version

    result = switch_version(settings, version)

    if result.error is not None:
        for line in result.error.diagnostic_lines():
            logger.error(line)
        return 1

    logger.info("Switched to version %s", version)
    return 0
