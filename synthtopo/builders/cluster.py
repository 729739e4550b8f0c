"""Cluster builder - assembles nodes and collections into a Cluster."""

import structlog

from synthtopo.builders.collection import CollectionBuilder
from synthtopo.builders.node import NodeBuilder
from synthtopo.core.adapters.attribute_adapter import (
    InMemoryAttributeValues,
    StaticAttributeFetcher,
)
from synthtopo.core.domain.models import Cluster, Collection, Node
from synthtopo.core.domain.services.attributes import AttributeAggregator

logger = structlog.get_logger(__name__)


def default_node_name(index: int) -> str:
    """Default name of the index-th initialized node."""
    return f"node_{index}"


class ClusterBuilder:
    """
    Aggregates NodeBuilders and CollectionBuilders.

    build() produces the Cluster; build_attribute_values() produces the
    attribute snapshot independently, from the same node builders.

    Usage:
        builder = ClusterBuilder().initialize_nodes(3)
        builder.node_builders[0].set_core_count(5)
        builder.add_collection(
            CollectionBuilder("c1").initialize_shards_replicas(
                2, 1, 0, 0, builder.node_builders
            )
        )
        cluster = builder.build()
        attributes = builder.build_attribute_values()
    """

    def __init__(self) -> None:
        self._node_builders: list[NodeBuilder] = []
        self._collection_builders: list[CollectionBuilder] = []

    def initialize_nodes(self, count_nodes: int) -> "ClusterBuilder":
        """
        Replace all node builders with count_nodes default-named ones.

        Nodes are named node_0 .. node_{count_nodes - 1}. Names can be
        changed afterwards through node_builders.
        """
        if count_nodes < 0:
            raise ValueError(f"count_nodes must not be negative, got {count_nodes}")
        self._node_builders = [
            NodeBuilder().set_name(default_node_name(n)) for n in range(count_nodes)
        ]
        return self

    @property
    def node_builders(self) -> list[NodeBuilder]:
        """Mutable node list, for callers customizing individual nodes."""
        return self._node_builders

    @property
    def collection_builders(self) -> list[CollectionBuilder]:
        return self._collection_builders

    def add_node(self, node_builder: NodeBuilder) -> "ClusterBuilder":
        self._node_builders.append(node_builder)
        return self

    def add_collection(self, collection_builder: CollectionBuilder) -> "ClusterBuilder":
        self._collection_builders.append(collection_builder)
        return self

    def build_live_nodes(self) -> list[Node]:
        """Build one Node per node builder, keeping duplicates."""
        return [node_builder.build() for node_builder in self._node_builders]

    def build_collections(self) -> dict[str, Collection]:
        """Build every collection, in insertion order. Duplicate names overwrite."""
        collections: dict[str, Collection] = {}
        for collection_builder in self._collection_builders:
            collection = collection_builder.build()
            collections[collection.name] = collection
        return collections

    def build(self) -> Cluster:
        """
        Build the cluster.

        Node builders sharing a name collapse into one live node.

        Raises:
            InvalidLeaderError: If a shard builder designates an invalid leader
        """
        live_nodes = frozenset(self.build_live_nodes())
        collections = self.build_collections()

        cluster = Cluster(live_nodes=live_nodes, collections=collections)

        logger.info(
            "cluster_built",
            node_count=len(live_nodes),
            collection_count=len(collections),
            replica_count=sum(c.replica_count() for c in collections.values()),
        )

        return cluster

    def build_attribute_values(self) -> InMemoryAttributeValues:
        """
        Build the attribute snapshot from the node builders' overrides.

        Nodes are rebuilt here rather than taken from build(), so the
        snapshot does not depend on a cluster having been built.
        """
        aggregator = AttributeAggregator()
        for node_builder in self._node_builders:
            aggregator.add(node_builder.build(), node_builder.build_attributes())
        values = InMemoryAttributeValues.from_maps(aggregator.build())
        logger.debug("attribute_snapshot_built", node_count=len(self._node_builders))
        return values

    def build_attribute_fetcher(self) -> StaticAttributeFetcher:
        """Build a fetcher serving the attribute snapshot."""
        return StaticAttributeFetcher(self.build_attribute_values())
