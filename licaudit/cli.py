"""CLI entry point: licaudit.

Subcommands:
    licaudit render outcomes.json -o licenses.csv    # Replay resolved outcomes into a CSV report

The outcomes file is a JSON array of objects:
    {"path": "github.com/foo/bar", "version": "v1.2.3", "spdx": "MIT", "name": "MIT License"}
    {"path": "example.com/x", "version": "v0.1.0", "error": "no license file"}
"""

from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import click
from pydantic import BaseModel, TypeAdapter, ValidationError

from licaudit.core.config import Settings, load_config
from licaudit.core.logging import setup_logging
from licaudit.exceptions import AuditError
from licaudit.report.models import License, Module
from licaudit.report.output import CSVOutput


class OutcomeEntry(BaseModel):
    """One resolved module as recorded in an outcomes file."""

    path: str
    version: str
    spdx: str = ""
    name: str = ""
    error: str | None = None

    def module(self) -> Module:
        return Module(path=self.path, version=self.version)

    def license(self) -> License:
        return License(spdx=self.spdx, name=self.name)


_ENTRIES = TypeAdapter(list[OutcomeEntry])


def _load_entries(outcomes_file: str) -> list[OutcomeEntry]:
    raw = Path(outcomes_file).read_text(encoding="utf-8")
    return _ENTRIES.validate_json(raw)


def _replay(output: CSVOutput, entry: OutcomeEntry) -> None:
    module = entry.module()
    output.start(module)
    if entry.error is not None:
        output.finish(module, None, LookupError(entry.error))
    else:
        output.finish(module, entry.license(), None)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """licaudit: dependency license audit reports."""
    settings = Settings.from_env()
    setup_logging(level="DEBUG" if verbose else settings.log_level, fmt=settings.log_format)


@main.command()
@click.argument("outcomes_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", default=None, help="CSV path (default: $LICAUDIT_OUTPUT)")
@click.option("--config", "config_file", default=None, help="JSON allow/deny policy file")
@click.option("--workers", default=8, show_default=True, type=click.IntRange(min=1))
def render(outcomes_file: str, output: str | None, config_file: str | None, workers: int) -> None:
    """Write a CSV license report from recorded outcomes."""
    settings = Settings.from_env()
    target = Path(output) if output else settings.output

    try:
        entries = _load_entries(outcomes_file)
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: cannot read outcomes file {outcomes_file}: {e}", err=True)
        sys.exit(1)
    except ValidationError as e:
        click.echo(f"Error: invalid outcomes file {outcomes_file}: {e}", err=True)
        sys.exit(1)

    try:
        config_path = Path(config_file) if config_file else settings.config_path
        config = load_config(config_path) if config_path else None

        csv_output = CSVOutput(target, config=config)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises any worker exception
            list(pool.map(lambda entry: _replay(csv_output, entry), entries))
        csv_output.close()
    except AuditError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Wrote {len(csv_output.records)} rows to {target}")


if __name__ == "__main__":
    main()
