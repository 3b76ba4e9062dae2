"""Catalog files: one JSON value per line, rewritten atomically.

A catalog is written once by the catalog fetcher and may afterwards be
patched (one entry gains a field) or lose one entry. Every rewrite goes
through a temporary file in the catalog's own directory that replaces the
original in a single step, so a failure never leaves a truncated catalog.
"""

import json
import os
import tempfile
from typing import Any


class CatalogStoreError(Exception):
    """Error reading or rewriting a catalog file."""
    pass


def _dump_line(entry: dict[str, Any]) -> str:
    return json.dumps(entry, ensure_ascii=False) + '\n'


class CatalogStore:
    """Reads and rewrites catalog files."""

    def write(self, path: str, entries: list[dict[str, Any]]) -> None:
        """Write entries to path, replacing any previous content."""
        self._replace(path, [_dump_line(e) for e in entries])

    def read(self, path: str) -> list[dict[str, Any]]:
        """Read every entry, in file order."""
        try:
            with open(path, encoding='utf-8') as f:
                return [json.loads(line) for line in f if line.strip()]
        except (OSError, ValueError) as e:
            raise CatalogStoreError(f"Failed to read catalog {path}: {e}")

    def patch(self, path: str, entry_id: str, field_name: str, value: Any) -> None:
        """
        Set one field on the entry whose Id matches entry_id.

        Other lines are written back unchanged.

        Raises:
            CatalogStoreError: If the catalog cannot be read or rewritten, or
                no entry carries the given Id.
        """
        lines = self._read_lines(path)
        found = False
        for i, line in enumerate(lines):
            entry = self._parse(path, line)
            if entry.get('Id') == entry_id:
                entry[field_name] = value
                lines[i] = _dump_line(entry)
                found = True
        if not found:
            raise CatalogStoreError(f"No entry with Id {entry_id} in {path}")
        self._replace(path, lines)

    def remove_entry(self, path: str, entry_id: str) -> int:
        """
        Drop the entry whose Id matches entry_id.

        Returns:
            Number of entries left in the catalog.
        """
        lines = self._read_lines(path)
        kept = [line for line in lines if self._parse(path, line).get('Id') != entry_id]
        if len(kept) == len(lines):
            raise CatalogStoreError(f"No entry with Id {entry_id} in {path}")
        self._replace(path, kept)
        return len(kept)

    @staticmethod
    def _read_lines(path: str) -> list[str]:
        try:
            with open(path, encoding='utf-8') as f:
                return [line if line.endswith('\n') else line + '\n' for line in f if line.strip()]
        except OSError as e:
            raise CatalogStoreError(f"Failed to read catalog {path}: {e}")

    @staticmethod
    def _parse(path: str, line: str) -> dict[str, Any]:
        try:
            return json.loads(line)
        except ValueError as e:
            raise CatalogStoreError(f"Malformed catalog line in {path}: {e}")

    @staticmethod
    def _replace(path: str, lines: list[str]) -> None:
        directory = os.path.dirname(os.path.abspath(path))
        fd, tmp_path = tempfile.mkstemp(
            prefix=f'.{os.path.basename(path)}.', suffix='.tmp', dir=directory,
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as f:
                f.writelines(lines)
            os.replace(tmp_path, path)
        except OSError as e:
            raise CatalogStoreError(f"Failed to write catalog {path}: {e}")
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
