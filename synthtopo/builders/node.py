"""Node builder."""

from typing import Optional

from synthtopo.core.domain.models import DiskHardwareType, Node
from synthtopo.core.domain.services.attributes import NodeAttributes
from synthtopo.core.ports.outbound.attributes import (
    NodeMetricRegistry,
    metric_tag,
    system_property_tag,
)


class NodeBuilder:
    """
    Describes one node plus optional resource and metric overrides.

    System properties and metrics are stored under the same normalized keys
    the attribute lookup API uses, so a value set here is found by a lookup
    with the raw name.

    Usage:
        node = (
            NodeBuilder()
            .set_name("node_0")
            .set_core_count(4)
            .set_sysprop("zone", "east")
            .build()
        )
    """

    def __init__(self, name: Optional[str] = None):
        self._name = name
        self._core_count: Optional[int] = None
        self._free_disk_gb: Optional[int] = None
        self._total_disk_gb: Optional[int] = None
        self._heap_usage: Optional[float] = None
        self._system_load_average: Optional[float] = None
        self._disk_type: Optional[DiskHardwareType] = None
        self._sysprops: Optional[dict[str, str]] = None
        self._metrics: Optional[dict[str, float]] = None

    def set_name(self, name: str) -> "NodeBuilder":
        self._name = name
        return self

    def set_core_count(self, core_count: Optional[int]) -> "NodeBuilder":
        self._core_count = core_count
        return self

    def set_free_disk_gb(self, free_disk_gb: Optional[int]) -> "NodeBuilder":
        self._free_disk_gb = free_disk_gb
        return self

    def set_total_disk_gb(self, total_disk_gb: Optional[int]) -> "NodeBuilder":
        self._total_disk_gb = total_disk_gb
        return self

    def set_heap_usage(self, heap_usage: Optional[float]) -> "NodeBuilder":
        self._heap_usage = heap_usage
        return self

    def set_system_load_average(self, load_average: Optional[float]) -> "NodeBuilder":
        self._system_load_average = load_average
        return self

    def set_disk_type(self, disk_type: Optional[DiskHardwareType]) -> "NodeBuilder":
        self._disk_type = disk_type
        return self

    def set_sysprop(self, key: str, value: str) -> "NodeBuilder":
        """Record a system property. Setting the same key again overwrites it."""
        if self._sysprops is None:
            self._sysprops = {}
        self._sysprops[system_property_tag(key)] = value
        return self

    def set_metric(
        self, registry: NodeMetricRegistry, key: str, value: float
    ) -> "NodeBuilder":
        """Record a metric. Setting the same key again overwrites it."""
        if self._metrics is None:
            self._metrics = {}
        self._metrics[metric_tag(key, registry)] = value
        return self

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def core_count(self) -> Optional[int]:
        return self._core_count

    @property
    def free_disk_gb(self) -> Optional[int]:
        return self._free_disk_gb

    @property
    def sysprops(self) -> Optional[dict[str, str]]:
        """Recorded system properties keyed by normalized tag, None if none set."""
        return self._sysprops

    @property
    def metrics(self) -> Optional[dict[str, float]]:
        """Recorded metrics keyed by normalized tag, None if none set."""
        return self._metrics

    def build_attributes(self) -> NodeAttributes:
        """Copy the declared overrides into a NodeAttributes record."""
        return NodeAttributes(
            core_count=self._core_count,
            free_disk_gb=self._free_disk_gb,
            total_disk_gb=self._total_disk_gb,
            heap_usage=self._heap_usage,
            system_load_average=self._system_load_average,
            disk_type=self._disk_type,
            system_properties=dict(self._sysprops or {}),
            metrics=dict(self._metrics or {}),
        )

    def build(self) -> Node:
        """Build a Node. Nodes built from the same name are interchangeable."""
        if self._name is None:
            raise ValueError("Node name must be set before building")
        return Node(name=self._name)

    def __repr__(self) -> str:
        return f"NodeBuilder(name={self._name!r})"
