"""
Pending-update manifest — read and discard ``updates/pending-update.json``.

The file's presence IS the pending state; there is no separate flag.
A missing file is the normal "nothing pending" case and returns None.

Only flat string/number values are looked at.  Numbers are rendered as
text (so ``"version": 108.1`` reads as ``"108.1"``); empty strings, nulls,
booleans and nested values count as absent.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from junie_shim.core.models.errors import InvalidManifest
from junie_shim.core.models.update import UpdateManifest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("version", "zipPath")


def read_manifest(path: Path) -> UpdateManifest | None:
    """Parse the pending-update manifest.

    Args:
        path: Path to ``pending-update.json``.

    Returns:
        UpdateManifest, or None if the file does not exist.

    Raises:
        InvalidManifest: If the file is unreadable, not a JSON object,
            lacks a required field, or names an unusable version.
    """
    if not path.is_file():
        return None

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidManifest(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidManifest(f"Corrupt manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidManifest(f"Expected a JSON object in {path}, got {type(data).__name__}")

    fields = {key: _flat_value(data, key) for key in ("version", "zipPath", "sha256")}

    zip_path = _resolve_zip_path(fields["zipPath"], path.parent)

    missing = [key for key in REQUIRED_FIELDS if not fields[key]]
    if missing:
        raise InvalidManifest(
            f"Manifest missing keys: {', '.join(missing)}",
            zip_path=zip_path,
        )

    try:
        manifest = UpdateManifest(
            version=fields["version"],
            zipPath=zip_path,
            sha256=fields["sha256"],
        )
    except ValidationError as e:
        raise InvalidManifest(f"Invalid manifest {path}: {e}", zip_path=zip_path) from e

    logger.debug("Pending update: version=%s archive=%s", manifest.version, manifest.zip_path)
    return manifest


def discard(*paths: Path | None) -> None:
    """Delete update artifacts, tolerating ones that are already gone."""
    for p in paths:
        if p is None:
            continue
        try:
            p.unlink(missing_ok=True)
        except IsADirectoryError:
            logger.warning("Not removing %s: is a directory", p)
        except OSError as e:
            logger.warning("Could not remove %s: %s", p, e)


def _flat_value(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value or None
    return None


def _resolve_zip_path(raw: str | None, base: Path) -> Path | None:
    if not raw:
        return None
    p = Path(raw).expanduser()
    return p if p.is_absolute() else base / p
