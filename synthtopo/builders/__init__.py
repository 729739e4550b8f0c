"""Builders - fluent configuration that produces immutable topology values."""

from synthtopo.builders.cluster import ClusterBuilder
from synthtopo.builders.collection import CollectionBuilder
from synthtopo.builders.node import NodeBuilder
from synthtopo.builders.shard import ReplicaBuilder, ShardBuilder


def new_cluster_builder() -> ClusterBuilder:
    """Create an empty cluster builder."""
    return ClusterBuilder()


def new_collection_builder(collection_name: str) -> CollectionBuilder:
    """Create an empty collection builder."""
    return CollectionBuilder(collection_name)


__all__ = [
    "ClusterBuilder",
    "CollectionBuilder",
    "NodeBuilder",
    "ReplicaBuilder",
    "ShardBuilder",
    "new_cluster_builder",
    "new_collection_builder",
]
