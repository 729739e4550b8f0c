"""Domain layer - topology values and errors."""

from synthtopo.core.domain.models import (
    Cluster,
    Collection,
    DiskHardwareType,
    InvalidLeaderError,
    Node,
    NodeExhaustionError,
    Replica,
    ReplicaState,
    ReplicaType,
    Shard,
    ShardState,
    SynthTopoError,
    TopologyConfigError,
)

__all__ = [
    "Cluster",
    "Collection",
    "Shard",
    "Replica",
    "Node",
    "ReplicaType",
    "ReplicaState",
    "ShardState",
    "DiskHardwareType",
    "SynthTopoError",
    "NodeExhaustionError",
    "InvalidLeaderError",
    "TopologyConfigError",
]
