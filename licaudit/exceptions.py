"""Custom exceptions for licaudit."""

from __future__ import annotations

from pathlib import Path
from typing import Any


class AuditError(Exception):
    """Base exception for all licaudit errors."""


class InvalidOutcomeKind(AuditError):
    """Raised when a stored outcome is neither a License nor a LookupFailure."""

    def __init__(self, module: Any, outcome: Any):
        self.module = module
        self.outcome = outcome
        super().__init__(
            f"unexpected outcome type {type(outcome).__name__!r} for module "
            f"{module.path}@{module.version}"
        )


class ReportWriteError(AuditError):
    """Raised when the CSV artifact cannot be created, written or flushed."""

    def __init__(self, step: str, path: Path, cause: BaseException):
        self.step = step
        self.path = path
        super().__init__(f"failed to {step}: {path}: {cause}")


class ConfigError(AuditError):
    """Raised when a policy file cannot be read or validated."""
