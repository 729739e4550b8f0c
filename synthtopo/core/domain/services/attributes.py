"""Attribute aggregation domain service - folds per-node overrides into a snapshot."""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from synthtopo.core.domain.models import DiskHardwareType, Node

logger = structlog.get_logger(__name__)


@dataclass
class NodeAttributes:
    """Attribute overrides declared for one node. None means not declared."""

    core_count: Optional[int] = None
    free_disk_gb: Optional[int] = None
    total_disk_gb: Optional[int] = None
    heap_usage: Optional[float] = None
    system_load_average: Optional[float] = None
    disk_type: Optional[DiskHardwareType] = None

    # Keyed by normalized tag (system_property_tag / metric_tag)
    system_properties: dict[str, str] = field(default_factory=dict)
    metrics: dict[str, float] = field(default_factory=dict)


@dataclass
class AttributeMaps:
    """Aggregated attribute mappings, ready to back an attribute snapshot."""

    core_counts: dict[Node, int] = field(default_factory=dict)
    free_disk: dict[Node, int] = field(default_factory=dict)
    total_disk: dict[Node, int] = field(default_factory=dict)
    heap_usage: dict[Node, float] = field(default_factory=dict)
    system_load_average: dict[Node, float] = field(default_factory=dict)
    disk_types: dict[Node, DiskHardwareType] = field(default_factory=dict)

    # tag -> node -> value
    system_properties: dict[str, dict[Node, str]] = field(default_factory=dict)
    metrics: dict[str, dict[Node, float]] = field(default_factory=dict)


class AttributeAggregator:
    """
    Accumulates node attribute overrides into the lookup structure a
    placement engine queries.

    Scalars land in one node -> value mapping each. System properties and
    metrics are regrouped by tag first, so a lookup goes tag -> node -> value.
    Adding the same node twice overwrites its earlier values.
    """

    def __init__(self) -> None:
        self._core_counts: dict[Node, int] = {}
        self._free_disk: dict[Node, int] = {}
        self._total_disk: dict[Node, int] = {}
        self._heap_usage: dict[Node, float] = {}
        self._system_load_average: dict[Node, float] = {}
        self._disk_types: dict[Node, DiskHardwareType] = {}
        self._system_properties: dict[str, dict[Node, str]] = {}
        self._metrics: dict[str, dict[Node, float]] = {}
        self._node_count = 0

    def add(self, node: Node, attributes: NodeAttributes) -> "AttributeAggregator":
        """Fold one node's overrides into the accumulated mappings."""
        self._node_count += 1

        if attributes.core_count is not None:
            self._core_counts[node] = attributes.core_count
        if attributes.free_disk_gb is not None:
            self._free_disk[node] = attributes.free_disk_gb
        if attributes.total_disk_gb is not None:
            self._total_disk[node] = attributes.total_disk_gb
        if attributes.heap_usage is not None:
            self._heap_usage[node] = attributes.heap_usage
        if attributes.system_load_average is not None:
            self._system_load_average[node] = attributes.system_load_average
        if attributes.disk_type is not None:
            self._disk_types[node] = attributes.disk_type

        for tag, value in attributes.system_properties.items():
            self._system_properties.setdefault(tag, {})[node] = value
        for tag, metric in attributes.metrics.items():
            self._metrics.setdefault(tag, {})[node] = metric

        return self

    def build(self) -> AttributeMaps:
        """Produce copies of the mappings accumulated so far."""
        maps = AttributeMaps(
            core_counts=dict(self._core_counts),
            free_disk=dict(self._free_disk),
            total_disk=dict(self._total_disk),
            heap_usage=dict(self._heap_usage),
            system_load_average=dict(self._system_load_average),
            disk_types=dict(self._disk_types),
            system_properties={
                tag: dict(per_node) for tag, per_node in self._system_properties.items()
            },
            metrics={tag: dict(per_node) for tag, per_node in self._metrics.items()},
        )

        logger.debug(
            "attribute_maps_built",
            node_count=self._node_count,
            system_property_tags=len(self._system_properties),
            metric_tags=len(self._metrics),
        )

        return maps
