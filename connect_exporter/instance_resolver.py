"""Lookup of the remote instance by alias."""

import logging

from connect_exporter.domain.models import InstanceRecord
from connect_exporter.remote_call import RemoteCallAdapter

logger = logging.getLogger(__name__)


class InstanceResolver:
    """Finds the instance whose alias names the output directory."""

    def __init__(self, adapter: RemoteCallAdapter):
        self._adapter = adapter

    def resolve(self, alias: str) -> InstanceRecord | None:
        """Return the matching instance, or None when the lookup fails or finds nothing."""
        result = self._adapter.call('list-instances')
        if not result.ok:
            logger.error("list-instances failed with status %d", result.returncode)
            return None
        try:
            summaries = result.json().get('InstanceSummaryList', [])
        except ValueError as e:
            logger.error("Unreadable list-instances output: %s", e)
            return None

        for summary in summaries:
            if summary.get('InstanceAlias') == alias:
                return InstanceRecord(id=summary['Id'], alias=alias, data=summary)

        logger.error("No instance with alias %s among %d instances", alias, len(summaries))
        return None
