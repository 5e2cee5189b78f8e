"""
Post-extraction fixups — executable bits and the macOS quarantine flag.

Both are best effort: a failure here is logged and never fails the
update, matching ``chmod +x ... || true`` / ``xattr -dr ... || true``.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

QUARANTINE_ATTRIBUTE = "com.apple.quarantine"

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def make_executable(path: Path) -> bool:
    """Add exec bits wherever the matching read bit is set (``chmod +x``)."""
    try:
        mode = path.stat().st_mode
        read_bits = mode & (stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH)
        os.chmod(path, mode | (read_bits >> 2) | stat.S_IXUSR)
    except OSError as e:
        logger.debug("chmod +x %s failed: %s", path, e)
        return False
    return True


class QuarantineStripper:
    """Remove the download quarantine attribute where the platform has one.

    Probed once: only active on macOS with the ``xattr`` tool on PATH.
    """

    def __init__(self, xattr_path: str | None = None, *, platform: str | None = None) -> None:
        platform = platform or sys.platform
        if xattr_path is None and platform == "darwin":
            xattr_path = shutil.which("xattr")
        self.xattr_path = xattr_path if platform == "darwin" else None

    @property
    def active(self) -> bool:
        return self.xattr_path is not None

    def strip(self, directory: Path) -> None:
        if not self.active:
            return
        try:
            result = subprocess.run(
                [self.xattr_path, "-dr", QUARANTINE_ATTRIBUTE, str(directory)],
                capture_output=True,
                text=True,
                timeout=60,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("xattr failed on %s: %s", directory, e)
            return
        if result.returncode != 0:
            logger.debug("xattr exited %d: %s", result.returncode, result.stderr.strip())
