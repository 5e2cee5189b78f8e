"""
Binary locator — find the real executable inside a version directory.

Three package layouts are known, checked in this order:

    APP_BUNDLE  <v>/Applications/<p>.app/Contents/MacOS/<p>   (macOS)
    NESTED_BIN  <v>/<p>/bin/<p>                               (Linux)
    FLAT        <v>/<p>                                       (direct binary)

The bundle layout matches on the ``.app`` directory; the other two match
on the executable file itself.  First match wins.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from junie_shim.core.models.errors import BinaryNotExecutable, BinaryNotFound
from junie_shim.core.models.launch import LAYOUT_ORDER, BinaryLayout, BinaryLocation

logger = logging.getLogger(__name__)


class BinaryLocator:
    """Locate the wrapped program for a given product name."""

    def __init__(self, product: str) -> None:
        self.product = product

    def layout_path(self, version_dir: Path, layout: BinaryLayout) -> Path:
        """Executable path a layout implies (whether or not it exists)."""
        p = self.product
        if layout == BinaryLayout.APP_BUNDLE:
            return version_dir / "Applications" / f"{p}.app" / "Contents" / "MacOS" / p
        if layout == BinaryLayout.NESTED_BIN:
            return version_dir / p / "bin" / p
        if layout == BinaryLayout.FLAT:
            return version_dir / p
        raise ValueError(f"Unknown layout: {layout}")

    def _matches(self, version_dir: Path, layout: BinaryLayout) -> bool:
        if layout == BinaryLayout.APP_BUNDLE:
            return (version_dir / "Applications" / f"{self.product}.app").is_dir()
        return self.layout_path(version_dir, layout).is_file()

    def find(self, version_dir: Path) -> BinaryLocation | None:
        """Return the first matching layout, or None."""
        for layout in LAYOUT_ORDER:
            if self._matches(version_dir, layout):
                path = self.layout_path(version_dir, layout)
                logger.debug("Matched %s layout: %s", layout, path)
                return BinaryLocation(path=path, layout=layout)
        return None

    def locate(self, version_dir: Path, version: str) -> BinaryLocation:
        """Find a runnable executable for ``version``.

        Raises:
            BinaryNotFound: No layout matched, or the bundle's inner
                executable is missing.
            BinaryNotExecutable: The executable lacks the exec bit.
        """
        location = self.find(version_dir)
        if location is None or not location.path.is_file():
            raise BinaryNotFound(version, version_dir)
        if not os.access(location.path, os.X_OK):
            raise BinaryNotExecutable(version, version_dir, location.path)
        return location

    def candidates(self, version_dir: Path) -> list[Path]:
        """Every layout path that exists as a file."""
        return [
            path
            for path in (self.layout_path(version_dir, layout) for layout in LAYOUT_ORDER)
            if path.is_file()
        ]
