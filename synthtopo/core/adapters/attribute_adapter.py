"""In-memory attribute snapshot and fetcher implementations."""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import structlog

from synthtopo.core.domain.models import DiskHardwareType, Node
from synthtopo.core.domain.services.attributes import AttributeMaps
from synthtopo.core.ports.outbound.attributes import (
    AttributeSelector,
    IAttributeFetcher,
    IAttributeValues,
    NodeMetricRegistry,
    metric_tag,
    system_property_tag,
)

logger = structlog.get_logger(__name__)


class InMemoryAttributeValues(IAttributeValues):
    """
    In-memory implementation of the attribute values port.

    Holds one mapping per scalar attribute (node -> value) and one nested
    mapping per named attribute family (tag -> node -> value). The mappings
    are wrapped read-only; a node missing from a mapping means unknown.
    """

    def __init__(
        self,
        core_counts: Optional[dict[Node, int]] = None,
        free_disk: Optional[dict[Node, int]] = None,
        total_disk: Optional[dict[Node, int]] = None,
        heap_usage: Optional[dict[Node, float]] = None,
        system_load_average: Optional[dict[Node, float]] = None,
        disk_types: Optional[dict[Node, DiskHardwareType]] = None,
        system_properties: Optional[dict[str, dict[Node, str]]] = None,
        metrics: Optional[dict[str, dict[Node, float]]] = None,
    ):
        self._core_counts = MappingProxyType(dict(core_counts or {}))
        self._free_disk = MappingProxyType(dict(free_disk or {}))
        self._total_disk = MappingProxyType(dict(total_disk or {}))
        self._heap_usage = MappingProxyType(dict(heap_usage or {}))
        self._system_load_average = MappingProxyType(dict(system_load_average or {}))
        self._disk_types = MappingProxyType(dict(disk_types or {}))
        self._system_properties = MappingProxyType(
            {tag: MappingProxyType(dict(values)) for tag, values in (system_properties or {}).items()}
        )
        self._metrics = MappingProxyType(
            {tag: MappingProxyType(dict(values)) for tag, values in (metrics or {}).items()}
        )

    @classmethod
    def from_maps(cls, maps: AttributeMaps) -> "InMemoryAttributeValues":
        """Build a snapshot over aggregated attribute mappings."""
        return cls(
            core_counts=maps.core_counts,
            free_disk=maps.free_disk,
            total_disk=maps.total_disk,
            heap_usage=maps.heap_usage,
            system_load_average=maps.system_load_average,
            disk_types=maps.disk_types,
            system_properties=maps.system_properties,
            metrics=maps.metrics,
        )

    # === Scalar attributes ===

    def get_core_count(self, node: Node) -> Optional[int]:
        return self._core_counts.get(node)

    def get_free_disk(self, node: Node) -> Optional[int]:
        return self._free_disk.get(node)

    def get_total_disk(self, node: Node) -> Optional[int]:
        return self._total_disk.get(node)

    def get_heap_usage(self, node: Node) -> Optional[float]:
        return self._heap_usage.get(node)

    def get_system_load_average(self, node: Node) -> Optional[float]:
        return self._system_load_average.get(node)

    def get_disk_type(self, node: Node) -> Optional[DiskHardwareType]:
        return self._disk_types.get(node)

    # === Named attributes ===

    def get_system_property(self, node: Node, name: str) -> Optional[str]:
        values = self._system_properties.get(system_property_tag(name))
        if values is None:
            return None
        return values.get(node)

    def get_metric(
        self, node: Node, name: str, registry: NodeMetricRegistry
    ) -> Optional[float]:
        values = self._metrics.get(metric_tag(name, registry))
        if values is None:
            return None
        return values.get(node)

    # === Raw views ===

    @property
    def core_counts(self) -> Mapping[Node, int]:
        return self._core_counts

    @property
    def free_disk(self) -> Mapping[Node, int]:
        return self._free_disk

    @property
    def system_properties(self) -> Mapping[str, Mapping[Node, str]]:
        """Tag -> node -> value, tags produced by system_property_tag."""
        return self._system_properties

    @property
    def metrics(self) -> Mapping[str, Mapping[Node, float]]:
        """Tag -> node -> value, tags produced by metric_tag."""
        return self._metrics

    def known_nodes(self) -> set[Node]:
        """Get every node with at least one recorded attribute."""
        nodes: set[Node] = set()
        for scalar in (
            self._core_counts,
            self._free_disk,
            self._total_disk,
            self._heap_usage,
            self._system_load_average,
            self._disk_types,
        ):
            nodes.update(scalar.keys())
        for family in (self._system_properties, self._metrics):
            for values in family.values():
                nodes.update(values.keys())
        return nodes


class StaticAttributeFetcher(IAttributeFetcher):
    """
    Attribute fetcher over a pre-built snapshot.

    Requests are recorded so callers can inspect what a placement engine
    asked for, but the full snapshot is always returned: values that were
    never requested are still visible.
    """

    def __init__(self, values: IAttributeValues):
        """
        Initialize fetcher.

        Args:
            values: Snapshot returned by fetch_attributes
        """
        self._values = values
        self._requested: list[AttributeSelector] = []
        self._nodes: Optional[list[Node]] = None

    @property
    def requested(self) -> list[AttributeSelector]:
        """Get selectors requested so far, in request order."""
        return list(self._requested)

    @property
    def nodes(self) -> Optional[list[Node]]:
        """Get nodes the fetch was restricted to, if any."""
        return None if self._nodes is None else list(self._nodes)

    def request(self, selector: AttributeSelector) -> "StaticAttributeFetcher":
        if selector not in self._requested:
            self._requested.append(selector)
        return self

    def fetch_from(self, nodes: Iterable[Node]) -> "StaticAttributeFetcher":
        self._nodes = list(nodes)
        return self

    def fetch_attributes(self) -> IAttributeValues:
        logger.debug(
            "attributes_fetched",
            requested=[s.kind.value for s in self._requested],
            node_count=None if self._nodes is None else len(self._nodes),
        )
        return self._values
