"""ReportBuilder — classify, order and serialize outcomes to CSV."""

from __future__ import annotations

import csv
import io
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

import structlog

from licaudit.exceptions import InvalidOutcomeKind, ReportWriteError
from licaudit.report.models import License, LookupFailure, Module, Outcome, Record

log = structlog.get_logger("licaudit.report")

HEADERS = ["Dependency", "Version", "SPDX", "License"]

NOT_FOUND_SPDX = "NOT-FOUND"
# The two "not found" spellings differ on purpose; downstream consumers
# match on them as-is.
LOOKUP_FAILED_LICENSE = "not found"
UNIDENTIFIED_LICENSE = "not-found"

# Permissions for the finished artifact (mkstemp creates 0600 files).
_ARTIFACT_MODE = 0o644


def classify(module: Module, outcome: Outcome) -> Record:
    """Turn one stored outcome into a Record.

    Raises :class:`InvalidOutcomeKind` for anything that is not a
    :class:`License` or :class:`LookupFailure`.
    """
    if isinstance(outcome, LookupFailure):
        return Record(
            dependency=module.path,
            version=module.version,
            spdx=NOT_FOUND_SPDX,
            license=LOOKUP_FAILED_LICENSE,
        )
    if isinstance(outcome, License):
        if outcome.is_empty:
            return Record(
                dependency=module.path,
                version=module.version,
                spdx=NOT_FOUND_SPDX,
                license=UNIDENTIFIED_LICENSE,
            )
        return Record(
            dependency=module.path,
            version=module.version,
            spdx=outcome.spdx,
            license=outcome.name,
        )
    raise InvalidOutcomeKind(module, outcome)


def build_records(snapshot: Mapping[Module, Outcome]) -> list[Record]:
    """Classify every entry and sort by dependency path.

    Path comparison is plain codepoint order. Version only breaks ties
    between entries that share a path.
    """
    ordered = sorted(snapshot.items(), key=lambda item: (item[0].path, item[0].version))
    return [classify(module, outcome) for module, outcome in ordered]


class _LineWriter:
    """CSV row writer with ``\\n`` row endings.

    csv only quotes fields containing characters of its lineterminator, so
    rows are rendered with ``\\r\\n`` (quoting any field with ``\\r`` or
    ``\\n``) and the terminator is swapped before hitting the file.
    """

    def __init__(self, fh) -> None:
        self._fh = fh
        self._buf = io.StringIO()
        self._writer = csv.writer(self._buf, lineterminator="\r\n")

    def writerow(self, row: list[str]) -> None:
        self._buf.seek(0)
        self._buf.truncate()
        self._writer.writerow(row)
        self._fh.write(self._buf.getvalue().removesuffix("\r\n") + "\n")


def write_csv(path: Path, records: list[Record]) -> None:
    """Write header + records to ``path``, replacing any existing file.

    Rows go to a temporary file in the target directory which is renamed
    over ``path`` only after it has been flushed and closed, so a failure
    never leaves a partial artifact behind.
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise ReportWriteError("create file", path, e) from e
    tmp = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            writer = _LineWriter(fh)
            try:
                writer.writerow(HEADERS)
            except (OSError, ValueError) as e:
                raise ReportWriteError("write headers to csv", path, e) from e
            for record in records:
                try:
                    writer.writerow(record.to_row())
                except (OSError, ValueError) as e:
                    raise ReportWriteError("write to csv", path, e) from e
            try:
                fh.flush()
                os.fsync(fh.fileno())
            except OSError as e:
                raise ReportWriteError("flush csv", path, e) from e
        try:
            os.chmod(tmp, _ARTIFACT_MODE)
            os.replace(tmp, path)
        except OSError as e:
            raise ReportWriteError("replace file", path, e) from e
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class ReportBuilder:
    """Builds the CSV license report at a fixed target path."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def build(self, snapshot: Mapping[Module, Outcome]) -> list[Record]:
        """Classify, order and write ``snapshot``; returns the written records.

        Classification runs before any file is touched, so an invalid
        outcome aborts the build without creating an artifact.
        """
        records = build_records(snapshot)
        write_csv(self.path, records)
        log.info("report.written", path=str(self.path), rows=len(records))
        return records
