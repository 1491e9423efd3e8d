"""ResultStore — thread-safe accumulation of per-module outcomes."""

from __future__ import annotations

import threading

from licaudit.report.models import Module, Outcome


class ResultStore:
    """Map of Module -> Outcome guarded by a single lock.

    Writers call :meth:`report` from any thread; the last completed write for
    a module wins. :meth:`snapshot` returns a copy that can be iterated
    without holding the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: dict[Module, Outcome] = {}

    def report(self, module: Module, outcome: Outcome) -> None:
        with self._lock:
            self._outcomes[module] = outcome

    def snapshot(self) -> dict[Module, Outcome]:
        with self._lock:
            return dict(self._outcomes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._outcomes)
