"""Node attribute outbound port interface.

Attribute names recorded by node builders and names looked up by a placement
engine go through the same normalization functions below. A name normalized
differently on either side is not an error: the lookup simply returns None.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel

from synthtopo.core.domain.models import DiskHardwareType, Node

SYSPROP_PREFIX = "sysprop."
METRICS_PREFIX = "metrics:"


class NodeMetricRegistry(str, Enum):
    """Metric registry a node metric is read from."""

    SOLR_NODE = "solr.node"
    SOLR_JVM = "solr.jvm"


def system_property_tag(name: str) -> str:
    """Normalize a system property name into its snapshot key."""
    return f"{SYSPROP_PREFIX}{name}"


def metric_tag(name: str, registry: NodeMetricRegistry) -> str:
    """Normalize a metric name within a registry into its snapshot key."""
    return f"{METRICS_PREFIX}{registry.value}:{name}"


class AttributeKind(str, Enum):
    """Kind of node attribute."""

    CORE_COUNT = "core_count"
    FREE_DISK = "free_disk"
    TOTAL_DISK = "total_disk"
    HEAP_USAGE = "heap_usage"
    SYSTEM_LOAD_AVERAGE = "system_load_average"
    DISK_TYPE = "disk_type"
    SYSTEM_PROPERTY = "system_property"
    METRIC = "metric"


class AttributeSelector(BaseModel):
    """Selects one attribute of a node."""

    kind: AttributeKind
    name: Optional[str] = None
    registry: Optional[NodeMetricRegistry] = None

    model_config = {"frozen": True}

    @classmethod
    def core_count(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.CORE_COUNT)

    @classmethod
    def free_disk(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.FREE_DISK)

    @classmethod
    def total_disk(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.TOTAL_DISK)

    @classmethod
    def heap_usage(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.HEAP_USAGE)

    @classmethod
    def system_load_average(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.SYSTEM_LOAD_AVERAGE)

    @classmethod
    def disk_type(cls) -> "AttributeSelector":
        return cls(kind=AttributeKind.DISK_TYPE)

    @classmethod
    def system_property(cls, name: str) -> "AttributeSelector":
        return cls(kind=AttributeKind.SYSTEM_PROPERTY, name=name)

    @classmethod
    def metric(cls, name: str, registry: NodeMetricRegistry) -> "AttributeSelector":
        return cls(kind=AttributeKind.METRIC, name=name, registry=registry)

    @property
    def tag(self) -> Optional[str]:
        """Normalized snapshot key for named attributes, None for scalars."""
        if self.kind == AttributeKind.SYSTEM_PROPERTY and self.name is not None:
            return system_property_tag(self.name)
        if (
            self.kind == AttributeKind.METRIC
            and self.name is not None
            and self.registry is not None
        ):
            return metric_tag(self.name, self.registry)
        return None


class IAttributeValues(ABC):
    """
    Outbound port for reading a point-in-time attribute snapshot.

    Every getter returns None when the value is unknown for the node.
    Unknown is never reported as zero.
    """

    @abstractmethod
    def get_core_count(self, node: Node) -> Optional[int]:
        """Number of cores hosted on the node."""
        pass

    @abstractmethod
    def get_free_disk(self, node: Node) -> Optional[int]:
        """Free disk on the node, in GB."""
        pass

    @abstractmethod
    def get_total_disk(self, node: Node) -> Optional[int]:
        """Total disk on the node, in GB."""
        pass

    @abstractmethod
    def get_heap_usage(self, node: Node) -> Optional[float]:
        """Heap usage of the node process."""
        pass

    @abstractmethod
    def get_system_load_average(self, node: Node) -> Optional[float]:
        """System load average of the node host."""
        pass

    @abstractmethod
    def get_disk_type(self, node: Node) -> Optional[DiskHardwareType]:
        """Disk hardware type of the node."""
        pass

    @abstractmethod
    def get_system_property(self, node: Node, name: str) -> Optional[str]:
        """
        Get a system property of a node.

        Args:
            node: Node to read from
            name: Raw property name, normalized with system_property_tag

        Returns:
            Property value if recorded, None otherwise
        """
        pass

    @abstractmethod
    def get_metric(
        self, node: Node, name: str, registry: NodeMetricRegistry
    ) -> Optional[float]:
        """
        Get a node metric.

        Args:
            node: Node to read from
            name: Raw metric name, normalized with metric_tag
            registry: Registry the metric belongs to

        Returns:
            Metric value if recorded, None otherwise
        """
        pass

    def get(self, node: Node, selector: AttributeSelector) -> Optional[object]:
        """Look up any attribute through a selector."""
        if selector.kind == AttributeKind.CORE_COUNT:
            return self.get_core_count(node)
        if selector.kind == AttributeKind.FREE_DISK:
            return self.get_free_disk(node)
        if selector.kind == AttributeKind.TOTAL_DISK:
            return self.get_total_disk(node)
        if selector.kind == AttributeKind.HEAP_USAGE:
            return self.get_heap_usage(node)
        if selector.kind == AttributeKind.SYSTEM_LOAD_AVERAGE:
            return self.get_system_load_average(node)
        if selector.kind == AttributeKind.DISK_TYPE:
            return self.get_disk_type(node)
        if selector.name is None:
            return None
        if selector.kind == AttributeKind.SYSTEM_PROPERTY:
            return self.get_system_property(node, selector.name)
        if selector.registry is None:
            return None
        return self.get_metric(node, selector.name, selector.registry)


class IAttributeFetcher(ABC):
    """
    Outbound port for requesting and fetching node attributes.

    A placement engine declares the attributes it needs through the
    request methods, then fetches them as one snapshot.
    """

    def request_node_core_count(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.core_count())

    def request_node_free_disk(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.free_disk())

    def request_node_total_disk(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.total_disk())

    def request_node_heap_usage(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.heap_usage())

    def request_node_system_load_average(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.system_load_average())

    def request_node_disk_type(self) -> "IAttributeFetcher":
        return self.request(AttributeSelector.disk_type())

    def request_node_system_property(self, name: str) -> "IAttributeFetcher":
        return self.request(AttributeSelector.system_property(name))

    def request_node_metric(
        self, name: str, registry: NodeMetricRegistry
    ) -> "IAttributeFetcher":
        return self.request(AttributeSelector.metric(name, registry))

    @abstractmethod
    def request(self, selector: AttributeSelector) -> "IAttributeFetcher":
        """Record that an attribute is needed. Returns self for chaining."""
        pass

    @abstractmethod
    def fetch_from(self, nodes: Iterable[Node]) -> "IAttributeFetcher":
        """Restrict the fetch to the given nodes. Returns self for chaining."""
        pass

    @abstractmethod
    def fetch_attributes(self) -> IAttributeValues:
        """Fetch the requested attributes as a snapshot."""
        pass
