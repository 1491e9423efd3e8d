"""Data models for the license report engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Module:
    """A dependency identified by path and version.

    Equality and hashing are by value: two Module instances with the same
    ``(path, version)`` are the same entity in a ResultStore.
    """

    path: str
    version: str

    def __str__(self) -> str:
        return f"{self.path}@{self.version}"


@dataclass(frozen=True)
class License:
    """A resolved license. Both fields empty means "present but unidentified"."""

    spdx: str = ""
    name: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.spdx and not self.name


@dataclass(frozen=True)
class LookupFailure:
    """License resolution failed for a module. The cause is logged, not stored."""


Outcome = Union[License, LookupFailure]


@dataclass(frozen=True)
class Record:
    """One classified CSV row."""

    dependency: str
    version: str
    spdx: str
    license: str

    def to_row(self) -> list[str]:
        return [self.dependency, self.version, self.spdx, self.license]
