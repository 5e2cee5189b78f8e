"""
ShimSettings — the single configuration value handed to every component.

Holds the data root and the handful of knobs that can be overridden from
``<data root>/shim.yml``. All on-disk locations are derived from the data
root, so components never reach for environment variables themselves.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_PRODUCT = "junie"
DEFAULT_INSTALL_HINT = "Run: curl -fsSL https://junie.jetbrains.com/install.sh | bash"


class ShimSettings(BaseModel):
    """Resolved launcher configuration."""

    data_root: Path
    product: str = DEFAULT_PRODUCT
    install_hint: str = DEFAULT_INSTALL_HINT
    verify_checksums: bool = True

    # ── Logging (env vars take precedence, see main.py) ─────────
    log_level: str | None = None
    log_file: str | None = None

    # ── Provenance ───────────────────────────────────────────────
    config_path: Path | None = Field(default=None, exclude=True)

    @field_validator("product")
    @classmethod
    def _product_is_plain_name(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"product must be a plain file name, got {v!r}")
        return v

    # ── Derived layout ───────────────────────────────────────────

    @property
    def display_name(self) -> str:
        """Product name as shown in diagnostics ("Junie")."""
        return self.product[:1].upper() + self.product[1:]

    @property
    def versions_dir(self) -> Path:
        return self.data_root / "versions"

    @property
    def updates_dir(self) -> Path:
        return self.data_root / "updates"

    @property
    def current_link(self) -> Path:
        return self.data_root / "current"

    @property
    def pending_update_path(self) -> Path:
        return self.updates_dir / "pending-update.json"
