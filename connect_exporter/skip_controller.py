"""Policy applied when a single entry cannot be exported."""

import logging

from connect_exporter.domain.constants import ComponentType
from connect_exporter.domain.enums import DetailOutcome, SkipDecision
from connect_exporter.domain.models import DetailResult, ExportOptions
from connect_exporter.output.catalog_store import CatalogStore, CatalogStoreError

logger = logging.getLogger(__name__)


class SkipController:
    """
    Decides between aborting the run and dropping the failing entry.

    Only unpublished flows and modules can be skipped, and only in
    skip-tolerant mode. A skipped entry is removed from its catalog so the
    catalog lists exactly what was exported.
    """

    def __init__(self, options: ExportOptions, store: CatalogStore | None = None):
        self._skip = options.skip_unpublished
        self._store = store or CatalogStore()
        self.skipped: dict[str, list[str]] = {}

    def handle(self, component: ComponentType, result: DetailResult, catalog_path: str) -> SkipDecision:
        if result.outcome is DetailOutcome.EXPORTED:
            return SkipDecision.CONTINUE
        if result.outcome is DetailOutcome.FAILED or not self._skip:
            return SkipDecision.ABORT

        try:
            remaining = self._store.remove_entry(catalog_path, result.entry_id)
        except CatalogStoreError as e:
            logger.error("Could not drop %s from %s: %s", result.name, catalog_path, e)
            return SkipDecision.ABORT

        self.skipped.setdefault(component.key, []).append(result.name)
        logger.warning("Skipping %s '%s' (%s); %d left in %s",
                       component.label.lower(), result.name, result.error, remaining,
                       component.catalog_file)
        return SkipDecision.CONTINUE
