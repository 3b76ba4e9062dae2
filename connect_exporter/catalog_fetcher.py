"""Listing, filtering, sorting and persisting of component catalogs."""

import logging
import re

from connect_exporter.domain.constants import DEFAULT_NAME_PREFIX, ComponentType
from connect_exporter.domain.models import ExportOptions, FetchResult
from connect_exporter.normalize import RecordNormalizer
from connect_exporter.output.catalog_store import CatalogStore, CatalogStoreError
from connect_exporter.output.file_writer import FileWriter
from connect_exporter.remote_call import RemoteCallAdapter

logger = logging.getLogger(__name__)


def name_sort_key(entry: dict) -> bytes:
    """Byte-wise ordering, independent of the active locale."""
    return entry.get('Name', '').encode('utf-8')


class CatalogFetcher:
    """
    Builds the catalog file of one component type.

    Args:
        adapter: Instance-bound remote adapter.
        options: Run configuration.
        writer: Output directory writer.
        store: Catalog file access.
    """

    def __init__(
        self,
        adapter: RemoteCallAdapter,
        options: ExportOptions,
        writer: FileWriter,
        store: CatalogStore | None = None,
    ) -> None:
        self._adapter = adapter
        self._options = options
        self._writer = writer
        self._store = store or CatalogStore()
        self._ignore_re = re.compile(options.ignore_prefix) if options.ignore_prefix else None

    def fetch(self, component: ComponentType) -> FetchResult:
        path = self._writer.path(component.catalog_file)
        result = self._adapter.call(component.list_operation, *component.list_args)
        if not result.ok:
            return FetchResult(
                ok=False, path=path,
                error=f"{component.list_operation} failed with status {result.returncode}",
            )
        try:
            records = result.json().get(component.list_key, [])
        except ValueError as e:
            return FetchResult(ok=False, path=path, error=f"Unreadable {component.list_operation} output: {e}")

        entries = RecordNormalizer(component.volatile_fields).strip_all(records)
        if component.name_keyed:
            entries = sorted(self.filter_entries(component, entries), key=name_sort_key)

        try:
            self._store.write(path, entries)
        except CatalogStoreError as e:
            return FetchResult(ok=False, path=path, error=str(e))

        logger.debug("%s: %d listed, %d kept", component.label, len(records), len(entries))
        return FetchResult(ok=True, entries=entries, path=path)

    def filter_entries(self, component: ComponentType, entries: list[dict]) -> list[dict]:
        """Apply the include prefix (flows and modules only) and the ignore pattern."""
        kept = []
        for entry in entries:
            name = entry.get('Name', '')
            if component.prefix_filtered and self._options.include_prefix:
                if not (name.startswith(self._options.include_prefix)
                        or name.startswith(DEFAULT_NAME_PREFIX)):
                    continue
            if self._ignore_re and self._ignore_re.match(name):
                continue
            kept.append(entry)
        return kept

    def describe_filters(self, component: ComponentType) -> str:
        """Human-readable summary of the filters applied to a component type."""
        if not component.name_keyed:
            return 'unfiltered'
        active = []
        if component.prefix_filtered and self._options.include_prefix:
            active.append(f"prefix '{self._options.include_prefix}' or '{DEFAULT_NAME_PREFIX}'")
        if self._ignore_re:
            active.append(f"ignoring '^{self._options.ignore_prefix}'")
        return ', '.join(active) or 'no filter'
