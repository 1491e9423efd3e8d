"""License report engine — collect outcomes concurrently, write a CSV audit."""

from licaudit.report.builder import ReportBuilder, build_records, classify, write_csv
from licaudit.report.models import License, LookupFailure, Module, Outcome, Record
from licaudit.report.output import CSVOutput, MultiOutput, Output, Status
from licaudit.report.store import ResultStore

__all__ = [
    "CSVOutput",
    "License",
    "LookupFailure",
    "Module",
    "MultiOutput",
    "Outcome",
    "Output",
    "Record",
    "ReportBuilder",
    "ResultStore",
    "Status",
    "build_records",
    "classify",
    "write_csv",
]
