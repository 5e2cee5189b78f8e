"""
Process handoff — transfer control to the wrapped program.

On POSIX the shim process image is replaced (``os.execve``): exit code,
signals and stdio belong to the wrapped program from then on.

Where the process image cannot be replaced (Windows), the program runs
as a child with inherited stdio.  The shim waits, lets Ctrl-C reach the
child instead of dying first, and exits with the child's exit code.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import NoReturn

from junie_shim.core.models.launch import LaunchPlan

logger = logging.getLogger(__name__)


class ProcessHandoff:
    """Replace (or emulate replacing) the current process."""

    def __init__(self, *, replace_process: bool | None = None) -> None:
        if replace_process is None:
            replace_process = os.name == "posix"
        self.replace_process = replace_process

    def run(self, plan: LaunchPlan) -> NoReturn:
        logger.debug("exec %s %s", plan.binary, plan.args)
        sys.stdout.flush()
        sys.stderr.flush()

        if self.replace_process:
            os.execve(str(plan.binary), plan.argv, plan.env)

        sys.exit(self._run_child(plan))

    def _run_child(self, plan: LaunchPlan) -> int:
        proc = subprocess.Popen(plan.argv, env=plan.env)
        while True:
            try:
                return proc.wait()
            except KeyboardInterrupt:
                # The console delivers the interrupt to the child too.
                continue
