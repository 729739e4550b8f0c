"""Core module - hexagonal architecture ports, domain and adapters."""

# Domain models
from synthtopo.core.domain import (
    Cluster,
    Collection,
    Node,
    Replica,
    ReplicaType,
    Shard,
)

# Ports
from synthtopo.core.ports import IAttributeFetcher, IAttributeValues

# Adapters
from synthtopo.core.adapters import InMemoryAttributeValues, StaticAttributeFetcher

# Domain services
from synthtopo.core.domain.services import AttributeAggregator, distribute_replicas

__all__ = [
    # Domain Models
    "Cluster",
    "Collection",
    "Node",
    "Replica",
    "ReplicaType",
    "Shard",
    # Ports
    "IAttributeFetcher",
    "IAttributeValues",
    # Adapters
    "InMemoryAttributeValues",
    "StaticAttributeFetcher",
    # Domain Services
    "AttributeAggregator",
    "distribute_replicas",
]
