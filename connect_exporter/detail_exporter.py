"""Per-entry detail export."""

import logging
from typing import Any

from connect_exporter.domain.constants import PUBLISHED_STATUS, ComponentType
from connect_exporter.domain.enums import DetailOutcome
from connect_exporter.domain.models import DetailResult
from connect_exporter.name_encoder import NameEncoder
from connect_exporter.normalize import RecordNormalizer
from connect_exporter.output.catalog_store import CatalogStore, CatalogStoreError
from connect_exporter.output.file_writer import FileWriter
from connect_exporter.remote_call import RemoteCallAdapter

logger = logging.getLogger(__name__)


class DetailExporter:
    """
    Fetches the full record of each catalog entry and writes it to its own file.

    Flows and modules only export their ``Content`` payload and only when
    published; their ``Description`` is copied back into the catalog entry.
    An unpublished or empty response is reported as ``UNPUBLISHED`` so the
    skip controller can decide what to do with it. Anything else that goes
    wrong is ``FAILED``.
    """

    def __init__(
        self,
        adapter: RemoteCallAdapter,
        encoder: NameEncoder,
        writer: FileWriter,
        store: CatalogStore | None = None,
    ) -> None:
        self._adapter = adapter
        self._encoder = encoder
        self._writer = writer
        self._store = store or CatalogStore()

    def export_all(self, component: ComponentType, entries: list[dict[str, Any]]):
        """Yield a DetailResult per entry, strictly in catalog order."""
        for entry in entries:
            yield self.export_entry(component, entry)

    def export_entry(self, component: ComponentType, entry: dict[str, Any]) -> DetailResult:
        entry_id = entry['Id']
        name = entry.get('Name', entry_id)
        encoded = self._encoder.encode(name)

        result = self._adapter.call(component.describe_operation, component.describe_id_arg, entry_id)

        if component.content_bearing and result.empty:
            return DetailResult(DetailOutcome.UNPUBLISHED, entry_id, name,
                                error=f"{component.describe_operation} returned no output")
        if not result.ok:
            return DetailResult(DetailOutcome.FAILED, entry_id, name,
                                error=f"{component.describe_operation} failed with status {result.returncode}")

        try:
            record = result.json().get(component.describe_key, {})
        except ValueError as e:
            return DetailResult(DetailOutcome.FAILED, entry_id, name,
                                error=f"Unreadable {component.describe_operation} output: {e}")
        record = RecordNormalizer(component.volatile_fields).strip(record)

        if component.content_bearing:
            return self._export_content(component, entry_id, name, encoded, record)

        try:
            files = [self._writer.write_detail(component.detail_prefix, encoded, record)]
        except OSError as e:
            return DetailResult(DetailOutcome.FAILED, entry_id, name, error=f"Cannot write detail file: {e}")
        if component.queue_list_operation:
            queues = self._adapter.call(component.queue_list_operation, component.describe_id_arg, entry_id)
            if not queues.ok:
                return DetailResult(DetailOutcome.FAILED, entry_id, name, files=files,
                                    error=f"{component.queue_list_operation} failed with status {queues.returncode}")
            try:
                queue_list = queues.json().get(component.queue_list_key, [])
            except ValueError as e:
                return DetailResult(DetailOutcome.FAILED, entry_id, name, files=files,
                                    error=f"Unreadable {component.queue_list_operation} output: {e}")
            try:
                files.append(self._writer.write_detail(component.queue_list_prefix, encoded, queue_list))
            except OSError as e:
                return DetailResult(DetailOutcome.FAILED, entry_id, name, files=files,
                                    error=f"Cannot write queue list file: {e}")

        logger.debug("Exported %s %s -> %s", component.key, name, encoded)
        return DetailResult(DetailOutcome.EXPORTED, entry_id, name, files=files)

    def _export_content(
        self,
        component: ComponentType,
        entry_id: str,
        name: str,
        encoded: str,
        record: dict[str, Any],
    ) -> DetailResult:
        status = str(record.get('Status', ''))
        if status.lower() != PUBLISHED_STATUS:
            return DetailResult(DetailOutcome.UNPUBLISHED, entry_id, name,
                                error=f"status is '{status or 'unknown'}'")
        content = record.get('Content')
        if content is None:
            return DetailResult(DetailOutcome.UNPUBLISHED, entry_id, name, error="no Content in response")

        try:
            path = self._writer.write_content(component.detail_prefix, encoded, content)
        except OSError as e:
            return DetailResult(DetailOutcome.FAILED, entry_id, name, error=f"Cannot write content file: {e}")
        if 'Description' in record:
            try:
                self._store.patch(self._writer.path(component.catalog_file), entry_id,
                                  'Description', record['Description'])
            except CatalogStoreError as e:
                return DetailResult(DetailOutcome.FAILED, entry_id, name, files=[path], error=str(e))

        logger.debug("Exported %s %s -> %s", component.key, name, encoded)
        return DetailResult(DetailOutcome.EXPORTED, entry_id, name, files=[path])
