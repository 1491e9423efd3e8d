"""Output lifecycle — start / update / finish / close per resolved module."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from licaudit.core.config import AuditConfig
from licaudit.report.builder import ReportBuilder
from licaudit.report.models import License, LookupFailure, Module, Outcome, Record
from licaudit.report.policy import evaluate
from licaudit.report.store import ResultStore

log = structlog.get_logger("licaudit.output")


class Status(Enum):
    """Severity of an intermediate progress update."""

    NORMAL = "normal"
    WARNING = "warning"
    ERROR = "error"


@runtime_checkable
class Output(Protocol):
    """Interface every result output must satisfy."""

    def start(self, module: Module) -> None: ...

    def update(self, module: Module, status: Status, message: str) -> None: ...

    def finish(
        self, module: Module, lic: License | None, error: BaseException | None
    ) -> None: ...

    def close(self) -> None: ...


def to_outcome(lic: License | None, error: BaseException | None) -> Outcome:
    """Collapse a resolver result into a stored Outcome. Errors take precedence."""
    if error is not None:
        return LookupFailure()
    return lic if lic is not None else License()


class CSVOutput:
    """Collects finished modules and writes the CSV report on close.

    ``path`` is overwritten if it exists. ``config``, when given, is used to
    flag denied licenses in the log; it never changes the artifact.
    """

    def __init__(self, path: Path | str, config: AuditConfig | None = None) -> None:
        self.path = Path(path)
        self.config = config
        self.records: list[Record] = []
        self._store = ResultStore()

    def start(self, module: Module) -> None:
        pass

    def update(self, module: Module, status: Status, message: str) -> None:
        log.debug("output.update", module=str(module), status=status.value, message=message)

    def finish(
        self, module: Module, lic: License | None, error: BaseException | None
    ) -> None:
        if error is not None:
            log.warning("output.lookup_failed", module=str(module), error=str(error))
        self._store.report(module, to_outcome(lic, error))

    def close(self) -> None:
        snapshot = self._store.snapshot()
        if self.config is not None:
            counts, denied = evaluate(self.config, snapshot)
            for module in denied:
                log.warning("report.denied_license", module=str(module))
            log.info(
                "report.policy_summary",
                **{state.value: count for state, count in counts.items()},
            )
        self.records = ReportBuilder(self.path).build(snapshot)


class MultiOutput:
    """Fans every lifecycle call out to several outputs, in order."""

    def __init__(self, outputs: list[Output]) -> None:
        self.outputs = outputs

    def start(self, module: Module) -> None:
        for out in self.outputs:
            out.start(module)

    def update(self, module: Module, status: Status, message: str) -> None:
        for out in self.outputs:
            out.update(module, status, message)

    def finish(
        self, module: Module, lic: License | None, error: BaseException | None
    ) -> None:
        for out in self.outputs:
            out.finish(module, lic, error)

    def close(self) -> None:
        """Close every output; re-raise the first failure after all have run."""
        errors: list[Exception] = []
        for out in self.outputs:
            try:
                out.close()
            except Exception as e:
                errors.append(e)
        for extra in errors[1:]:
            log.error("output.close_failed", error=str(extra))
        if errors:
            raise errors[0]
