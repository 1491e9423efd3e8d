"""Allow / deny classification of resolved licenses."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from enum import Enum

from licaudit.core.config import AuditConfig
from licaudit.report.models import License, Module, Outcome


class LicenseState(Enum):
    """Policy verdict for a single license."""

    ALLOWED = "allowed"
    DENIED = "denied"
    UNKNOWN = "unknown"


def license_state(config: AuditConfig, lic: License) -> LicenseState:
    """Check a license against the policy. Deny wins over allow."""
    if lic.is_empty:
        return LicenseState.UNKNOWN
    keys = {k for k in (lic.spdx, lic.name) if k}
    if keys & set(config.deny):
        return LicenseState.DENIED
    if keys & set(config.allow):
        return LicenseState.ALLOWED
    return LicenseState.UNKNOWN


def evaluate(
    config: AuditConfig, snapshot: Mapping[Module, Outcome]
) -> tuple[Counter[LicenseState], list[Module]]:
    """Tally policy states over a snapshot.

    Returns per-state counts and the denied modules sorted by path.
    Lookup failures count as unknown.
    """
    counts: Counter[LicenseState] = Counter()
    denied: list[Module] = []
    for module, outcome in snapshot.items():
        if isinstance(outcome, License):
            state = license_state(config, outcome)
        else:
            state = LicenseState.UNKNOWN
        counts[state] += 1
        if state is LicenseState.DENIED:
            denied.append(module)
    denied.sort(key=lambda m: (m.path, m.version))
    return counts, denied
