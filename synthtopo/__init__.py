"""
synthtopo - Synthetic search cluster topologies

Builds in-memory clusters (nodes, collections, shards, replicas) and
per-node attribute snapshots so placement logic can be exercised without
a live cluster.
"""

__version__ = "0.1.0"

from synthtopo.core.domain.models import (
    Cluster,
    Collection,
    DiskHardwareType,
    Node,
    Replica,
    ReplicaState,
    ReplicaType,
    Shard,
    ShardState,
)
from synthtopo.core.domain.models import (
    InvalidLeaderError,
    NodeExhaustionError,
    SynthTopoError,
    TopologyConfigError,
)
from synthtopo.core.ports.outbound.attributes import (
    AttributeSelector,
    IAttributeFetcher,
    IAttributeValues,
    NodeMetricRegistry,
    metric_tag,
    system_property_tag,
)
from synthtopo.builders import (
    ClusterBuilder,
    CollectionBuilder,
    NodeBuilder,
    ReplicaBuilder,
    ShardBuilder,
    new_cluster_builder,
    new_collection_builder,
)
from synthtopo.config.loader import TopologyConfigLoader

__all__ = [
    # Models
    "Cluster",
    "Collection",
    "Shard",
    "Replica",
    "Node",
    "ReplicaType",
    "ReplicaState",
    "ShardState",
    "DiskHardwareType",
    # Errors
    "SynthTopoError",
    "NodeExhaustionError",
    "InvalidLeaderError",
    "TopologyConfigError",
    # Attributes
    "IAttributeValues",
    "IAttributeFetcher",
    "AttributeSelector",
    "NodeMetricRegistry",
    "metric_tag",
    "system_property_tag",
    # Builders
    "ClusterBuilder",
    "CollectionBuilder",
    "NodeBuilder",
    "ReplicaBuilder",
    "ShardBuilder",
    "new_cluster_builder",
    "new_collection_builder",
    # Config
    "TopologyConfigLoader",
]
