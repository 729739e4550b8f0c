"""Topology loader from configuration files."""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from synthtopo.builders.cluster import ClusterBuilder
from synthtopo.builders.collection import CollectionBuilder
from synthtopo.builders.node import NodeBuilder
from synthtopo.core.domain.models import DiskHardwareType, TopologyConfigError
from synthtopo.core.ports.outbound.attributes import NodeMetricRegistry

logger = structlog.get_logger(__name__)


class TopologyConfigLoader:
    """
    Load cluster topologies from YAML or JSON files.

    Usage:
        loader = TopologyConfigLoader()
        builder = loader.load_from_file("topology.yaml")

        cluster = builder.build()
        attributes = builder.build_attribute_values()

    File layout:
        nodes: 3                      # or a list of node mappings
        collections:
          - name: products
            shards: 2
            nrt: 2
            tlog: 0
            pull: 1
            custom_properties:
              routing: hash
    """

    def load_from_file(self, file_path: str | Path) -> ClusterBuilder:
        """
        Load a topology file into a cluster builder.

        Supports YAML (.yaml, .yml) and JSON (.json) formats.

        Args:
            file_path: Path to topology file

        Returns:
            ClusterBuilder configured from the file

        Raises:
            ValueError: If file format is not supported
            FileNotFoundError: If file does not exist
            TopologyConfigError: If the file content is malformed
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Topology file not found: {file_path}")

        if path.suffix in (".yaml", ".yml"):
            data = self._load_yaml(path)
        elif path.suffix == ".json":
            data = self._load_json(path)
        else:
            raise ValueError(
                f"Unsupported file format: {path.suffix}. "
                "Supported formats: .yaml, .yml, .json"
            )

        builder = self.parse_topology(data, source=str(path))
        logger.info(
            "topology_loaded",
            path=str(path),
            node_count=len(builder.node_builders),
            collection_count=len(builder.collection_builders),
        )
        return builder

    def _load_yaml(self, path: Path) -> Any:
        """Load topology from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            try:
                return yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise TopologyConfigError(str(path), str(e)) from e

    def _load_json(self, path: Path) -> Any:
        """Load topology from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise TopologyConfigError(str(path), str(e)) from e

    def parse_nodes(self, nodes_data: Any, source: str = "<data>") -> list[NodeBuilder]:
        """
        Parse node builders from configuration data.

        Args:
            nodes_data: Node count, or list of node dictionaries
            source: Name used in error messages

        Returns:
            List of NodeBuilder objects
        """
        if isinstance(nodes_data, bool):
            raise TopologyConfigError(source, "'nodes' must be a count or a list")

        if isinstance(nodes_data, int):
            if nodes_data < 0:
                raise TopologyConfigError(source, "'nodes' count must not be negative")
            return ClusterBuilder().initialize_nodes(nodes_data).node_builders

        if not isinstance(nodes_data, list):
            raise TopologyConfigError(source, "'nodes' must be a count or a list")

        node_builders = []

        for index, node_data in enumerate(nodes_data):
            if not isinstance(node_data, dict):
                raise TopologyConfigError(source, f"node #{index} must be a mapping")

            try:
                node_builder = (
                    NodeBuilder()
                    .set_name(str(node_data.get("name", f"node_{index}")))
                    .set_core_count(_optional(node_data, "core_count", int))
                    .set_free_disk_gb(_optional(node_data, "free_disk_gb", int))
                    .set_total_disk_gb(_optional(node_data, "total_disk_gb", int))
                    .set_heap_usage(_optional(node_data, "heap_usage", float))
                    .set_system_load_average(
                        _optional(node_data, "system_load_average", float)
                    )
                    .set_disk_type(_optional(node_data, "disk_type", DiskHardwareType))
                )

                for key, value in (node_data.get("sysprops") or {}).items():
                    node_builder.set_sysprop(str(key), str(value))

                for registry, registry_metrics in (node_data.get("metrics") or {}).items():
                    for key, value in (registry_metrics or {}).items():
                        node_builder.set_metric(
                            NodeMetricRegistry(registry), str(key), float(value)
                        )
            except (TypeError, ValueError, AttributeError) as e:
                raise TopologyConfigError(source, f"node #{index}: {e}") from e

            node_builders.append(node_builder)

        return node_builders

    def parse_collections(
        self,
        collections_data: Any,
        node_builders: list[NodeBuilder],
        source: str = "<data>",
    ) -> list[CollectionBuilder]:
        """
        Parse collection builders from configuration data.

        Replicas are distributed round-robin over node_builders.

        Args:
            collections_data: List of collection dictionaries
            node_builders: Candidate nodes for replica placement
            source: Name used in error messages

        Returns:
            List of CollectionBuilder objects
        """
        if not isinstance(collections_data, list):
            raise TopologyConfigError(source, "'collections' must be a list")

        collection_builders = []

        for index, collection_data in enumerate(collections_data):
            if not isinstance(collection_data, dict) or "name" not in collection_data:
                raise TopologyConfigError(
                    source, f"collection #{index} must be a mapping with a 'name'"
                )

            try:
                collection_builder = CollectionBuilder(str(collection_data["name"]))
                collection_builder.initialize_shards_replicas(
                    _count(collection_data, "shards", 1),
                    _count(collection_data, "nrt", 1),
                    _count(collection_data, "tlog", 0),
                    _count(collection_data, "pull", 0),
                    node_builders,
                )
                for name, value in (collection_data.get("custom_properties") or {}).items():
                    collection_builder.add_custom_property(str(name), str(value))
            except (TypeError, ValueError, AttributeError) as e:
                raise TopologyConfigError(source, f"collection #{index}: {e}") from e

            collection_builders.append(collection_builder)

        return collection_builders

    def parse_topology(self, data: Any, source: str = "<data>") -> ClusterBuilder:
        """
        Parse a complete topology.

        Args:
            data: Topology dictionary from file
            source: Name used in error messages

        Returns:
            ClusterBuilder with nodes and collections
        """
        if not isinstance(data, dict):
            raise TopologyConfigError(source, "top level must be a mapping")

        builder = ClusterBuilder()
        for node_builder in self.parse_nodes(data.get("nodes", 0), source):
            builder.add_node(node_builder)

        for collection_builder in self.parse_collections(
            data.get("collections", []), builder.node_builders, source
        ):
            builder.add_collection(collection_builder)

        return builder


def _optional(data: dict[str, Any], key: str, convert: Any) -> Any:
    value = data.get(key)
    return None if value is None else convert(value)


def _count(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be a whole number, got {value!r}")
    return value
