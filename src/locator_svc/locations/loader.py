"""Location loader - loads location catalogs from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import CatalogError
from .types import Location, LocationDescriptor


logger = logging.getLogger(__name__)


class LocationLoader:
    """
    Loads location catalogs from YAML or JSON files.

    File format:
    ```yaml
    locations:
      - type_id: global:api
        environment: production
        residency: US
        uri: https://api.global.alertlogic.com
      - type_id: insight:api
        environment: production
        residency: EMEA
        data_center_id: defender-uk-newport
        uri: https://api.cloudinsight.alertlogic.co.uk

    ui_nodes:
      - type_id: cd17:accounts
        app_code: accounts
        dev_port: 8002
    ```

    A bare list of location records is also accepted.
    """

    def load_file(self, path: str | Path) -> list[LocationDescriptor]:
        """Load locations from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Location catalog not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)

        return self.load_data(data or [])

    def load_data(self, data: list[Any] | dict[str, Any]) -> list[LocationDescriptor]:
        """Load locations from already-parsed data."""
        if isinstance(data, list):
            records, ui_nodes = data, []
        elif isinstance(data, dict):
            records = data.get("locations") or []
            ui_nodes = data.get("ui_nodes") or []
        else:
            raise CatalogError(f"Expected a list or mapping of locations, got {type(data).__name__}")

        nodes: list[LocationDescriptor] = []
        for record in records:
            node = self._parse_node(record)
            nodes.append(node)
            logger.debug(f"Loaded location: {node.type_id} ({node.environment or '*'}/{node.residency or '*'})")

        for entry in ui_nodes:
            try:
                nodes.extend(Location.ui_node(entry["type_id"], entry["app_code"], int(entry["dev_port"])))
            except (KeyError, TypeError, ValueError) as e:
                raise CatalogError(f"Invalid ui_nodes entry {entry!r}: {e}") from e

        logger.info(f"Loaded {len(nodes)} locations")
        return nodes

    def _parse_node(self, record: Any) -> LocationDescriptor:
        """Parse a single location record."""
        if not isinstance(record, dict):
            raise CatalogError(f"Location record must be a mapping, got {record!r}")
        if not record.get("type_id") and not record.get("locTypeId"):
            raise CatalogError(f"Location record is missing 'type_id': {record!r}")

        node = LocationDescriptor.from_dict(record)
        if not isinstance(node.uri, str):
            raise CatalogError(f"Location '{node.type_id}' has a non-string uri: {node.uri!r}")
        return node

    def load_directory(self, directory: str | Path) -> list[LocationDescriptor]:
        """
        Load locations from all YAML/JSON files in a directory.

        Files are loaded in alphabetical order; later files append to (and on
        key collisions, take precedence over) earlier ones.
        """
        directory = Path(directory)

        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = sorted(directory.glob("*.yaml")) + sorted(directory.glob("*.yml")) + sorted(directory.glob("*.json"))

        nodes: list[LocationDescriptor] = []
        for file_path in files:
            logger.info(f"Loading location file: {file_path}")
            nodes.extend(self.load_file(file_path))
        return nodes


def load_locations(source: str | Path | dict | list) -> list[LocationDescriptor]:
    """
    Convenience function to load a location catalog.

    Args:
        source: File path, directory path, mapping, or list of records

    Returns:
        Location descriptors in catalog order
    """
    loader = LocationLoader()

    if isinstance(source, (dict, list)):
        return loader.load_data(source)

    path = Path(source)
    if path.is_dir():
        return loader.load_directory(path)
    return loader.load_file(path)
