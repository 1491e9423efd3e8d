"""Runtime settings (environment) and license policy (JSON file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ValidationError

from licaudit.exceptions import ConfigError

DEFAULT_OUTPUT = "licenses.csv"


@dataclass(frozen=True)
class Settings:
    output: Path
    config_path: Path | None = None
    log_level: str = "INFO"
    log_format: str = "console"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``LICAUDIT_*`` environment variables."""
        config_path = os.environ.get("LICAUDIT_CONFIG")
        return cls(
            output=Path(os.environ.get("LICAUDIT_OUTPUT", DEFAULT_OUTPUT)),
            config_path=Path(config_path) if config_path else None,
            log_level=os.environ.get("LICAUDIT_LOG_LEVEL", "INFO").upper(),
            log_format=os.environ.get("LICAUDIT_LOG_FORMAT", "console").lower(),
        )


class AuditConfig(BaseModel):
    """Allow / deny lists. Entries match an SPDX identifier or a license name."""

    allow: list[str] = []
    deny: list[str] = []


def load_config(path: Path) -> AuditConfig:
    """Read and validate a JSON policy file."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    try:
        return AuditConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
