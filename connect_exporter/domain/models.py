"""Shared data models used across exporter modules."""

import json
from dataclasses import dataclass, field
from typing import Any

from connect_exporter.domain.constants import MAX_RESULTS
from connect_exporter.domain.enums import DetailOutcome


@dataclass(frozen=True)
class ExportOptions:
    """Run configuration, built once at startup and never mutated."""

    codepage: str = 'utf-8'
    force: bool = False
    skip_unpublished: bool = False
    bypass_charset_check: bool = False
    profile: str | None = None
    region: str | None = None
    include_prefix: str | None = None
    ignore_prefix: str | None = None
    aws_command: str = 'aws'
    max_results: int = MAX_RESULTS


@dataclass
class CallResult:
    """Outcome of one remote invocation."""

    args: list[str]
    returncode: int
    stdout: bytes = b''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def empty(self) -> bool:
        return not self.stdout.strip()

    def json(self) -> Any:
        """Decode stdout as JSON. Raises ValueError on malformed output."""
        return json.loads(self.stdout.decode('utf-8'))


@dataclass
class FetchResult:
    """Result of fetching one catalog."""

    ok: bool
    entries: list[dict[str, Any]] = field(default_factory=list)
    path: str = ''
    error: str = ''

    @property
    def count(self) -> int:
        return len(self.entries)


@dataclass
class DetailResult:
    """Result of exporting one catalog entry."""

    outcome: DetailOutcome
    entry_id: str
    name: str
    files: list[str] = field(default_factory=list)
    error: str = ''

    @property
    def ok(self) -> bool:
        return self.outcome is DetailOutcome.EXPORTED


@dataclass
class InstanceRecord:
    """The resolved remote instance."""

    id: str
    alias: str
    data: dict[str, Any]


@dataclass
class ExportResult:
    """Result summary of an export run."""

    exit_code: int
    output_dir: str
    counts: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, list[str]] = field(default_factory=dict)
    failed_step: str = ''

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
