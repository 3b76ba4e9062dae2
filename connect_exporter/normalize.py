"""Removal of server-maintained fields from remote records."""
from typing import Any, Iterable


class RecordNormalizer:
    """Strips volatile fields so exported files only change when configuration does."""

    def __init__(self, volatile_fields: Iterable[str]):
        self.volatile_fields = frozenset(volatile_fields)

    def strip(self, data: Any) -> Any:
        """Return a copy of data without volatile fields, at any depth."""
        if isinstance(data, dict):
            return {
                k: self.strip(v)
                for k, v in data.items()
                if k not in self.volatile_fields
            }
        elif isinstance(data, list):
            return [self.strip(item) for item in data]
        else:
            return data

    def strip_all(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [self.strip(record) for record in records]
