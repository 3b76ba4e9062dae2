"""Per-entry detail files and the instance record.

Output structure:
    <alias>/
    ├── instance.json
    ├── instance.var
    ├── <type>.json                      (catalogs, see catalog_store)
    ├── hour_<EncodedName>.json
    ├── queue_<EncodedName>.json
    ├── routing_<EncodedName>.json
    ├── routingQs_<EncodedName>.json
    ├── quickconnect_<EncodedName>.json
    ├── module_<EncodedName>.json        (Content payload only)
    └── flow_<EncodedName>.json          (Content payload only)
"""

import json
import os
from typing import Any

from connect_exporter.domain.constants import INSTANCE_FILE, INSTANCE_VAR_FILE


def detail_filename(prefix: str, encoded_name: str) -> str:
    return f"{prefix}_{encoded_name}.json"


class FileWriter:
    """
    Writes export files into one output directory.

    Args:
        output_dir: Directory receiving every file of the run.
    """

    def __init__(self, output_dir: str) -> None:
        self._output_dir = output_dir

    @property
    def output_dir(self) -> str:
        return self._output_dir

    def path(self, filename: str) -> str:
        return os.path.join(self._output_dir, filename)

    def write_detail(self, prefix: str, encoded_name: str, data: Any) -> str:
        """Write a stripped detail record. Returns the file path."""
        path = self.path(detail_filename(prefix, encoded_name))
        self._write_json(path, data)
        return path

    def write_content(self, prefix: str, encoded_name: str, content: str) -> str:
        """Write a flow or module definition exactly as the API returned it."""
        path = self.path(detail_filename(prefix, encoded_name))
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        return path

    def write_instance(self, instance: dict[str, Any]) -> None:
        """Write the instance record and its key=value shadow."""
        self._write_json(self.path(INSTANCE_FILE), instance)
        lines = [f"{key}={_var_value(value)}\n" for key, value in instance.items()]
        with open(self.path(INSTANCE_VAR_FILE), 'w', encoding='utf-8', newline='\n') as f:
            f.writelines(lines)

    @staticmethod
    def _write_json(path: str, data: Any) -> None:
        with open(path, 'w', encoding='utf-8', newline='\n') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write('\n')


def _var_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
    return str(value)
