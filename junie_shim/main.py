"""
Junie shim — CLI entrypoint.

Usage:
    junie [ARGS...]                    run the current version
    junie --use-version=<v> [ARGS...]  run a specific installed version
    junie --shim-version               print the shim version
    junie --list-versions              list installed versions
    junie --switch-version=<v>         make <v> the current version

Everything that is not a shim flag is forwarded untouched to the
wrapped program, including ``--help`` and ``--``.
"""

from __future__ import annotations

import logging
import os
import sys

import click

from junie_shim.core.config.loader import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    LOG_LEVEL_ENV,
    load_settings_or_default,
)
from junie_shim.core.models.errors import LaunchError
from junie_shim.core.models.launch import parse_admin_command
from junie_shim.core.models.settings import ShimSettings
from junie_shim.core.observability.logging_config import DEFAULT_LEVEL, setup_logging

logger = logging.getLogger(__name__)


class PassthroughCommand(click.Command):
    """A command whose argv is opaque: nothing is parsed or consumed.

    click would otherwise claim ``--help`` and swallow ``--``, both of
    which belong to the wrapped program.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.args = list(args)
        return []


@click.command(
    cls=PassthroughCommand,
    context_settings={"help_option_names": []},
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Launch the installed Junie CLI, applying pending updates first."""
    ctx.ensure_object(dict)
    args: list[str] = list(ctx.args)

    # ── Logging setup (once, at process start) ──────────────────
    _configure_logging(None)
    settings = load_settings_or_default()
    if settings.log_level or settings.log_file or settings.product != "junie":
        _configure_logging(settings)

    # ── Admin commands short-circuit everything else ────────────
    command = parse_admin_command(args)
    if command is not None:
        from junie_shim.ui.cli.admin import run_admin_command

        sys.exit(run_admin_command(command, settings))

    # ── Update → resolve → locate ───────────────────────────────
    from junie_shim.core.use_cases.launch import Launcher

    launcher = ctx.obj.get("launcher") or Launcher(settings)
    try:
        plan = launcher.plan(args)
    except LaunchError as e:
        for line in e.diagnostic_lines():
            logger.error(line)
        sys.exit(1)

    # ── Handoff ─────────────────────────────────────────────────
    from junie_shim.adapters.process import ProcessHandoff

    handoff = ctx.obj.get("handoff") or ProcessHandoff()
    try:
        handoff.run(plan)
    except OSError as e:
        logger.error("Error: Cannot execute %s: %s", plan.binary, e)
        sys.exit(1)


def _configure_logging(settings: ShimSettings | None) -> None:
    level = os.environ.get(LOG_LEVEL_ENV) or (settings and settings.log_level) or DEFAULT_LEVEL
    log_file = os.environ.get(LOG_FILE_ENV) or (settings and settings.log_file) or None
    prefix = settings.display_name if settings else "Junie"
    setup_logging(
        level=level,
        prefix=prefix,
        log_file=log_file,
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point."""
    cli.main(
        args=list(sys.argv[1:] if argv is None else argv),
        prog_name="junie",
        obj={},
    )


if __name__ == "__main__":
    main()
