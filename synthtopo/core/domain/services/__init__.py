"""Domain services - replica distribution and attribute aggregation."""

from synthtopo.core.domain.services.attributes import (
    AttributeAggregator,
    AttributeMaps,
    NodeAttributes,
)
from synthtopo.core.domain.services.distribution import (
    ReplicaAssignment,
    ShardPlan,
    distribute_replicas,
)

__all__ = [
    "AttributeAggregator",
    "AttributeMaps",
    "NodeAttributes",
    "ReplicaAssignment",
    "ShardPlan",
    "distribute_replicas",
]
