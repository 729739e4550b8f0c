"""Collection builder."""

import structlog

from synthtopo.builders.node import NodeBuilder
from synthtopo.builders.shard import ReplicaBuilder, ShardBuilder
from synthtopo.core.domain.models import Collection
from synthtopo.core.domain.services.distribution import distribute_replicas

logger = structlog.get_logger(__name__)


class CollectionBuilder:
    """
    Aggregates ShardBuilders for one collection.

    Usage:
        nodes = cluster_builder.initialize_nodes(3).node_builders
        collection = (
            CollectionBuilder("products")
            .initialize_shards_replicas(2, 2, 0, 1, nodes)
            .add_custom_property("routing", "hash")
        )
    """

    def __init__(self, name: str):
        self._name = name
        self._shard_builders: list[ShardBuilder] = []
        self._custom_properties: dict[str, str] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def shard_builders(self) -> list[ShardBuilder]:
        """Mutable shard list, for callers adjusting the distribution."""
        return self._shard_builders

    @property
    def custom_properties(self) -> dict[str, str]:
        return self._custom_properties

    def add_custom_property(self, name: str, value: str) -> "CollectionBuilder":
        """Set a custom property. Setting the same name again overwrites it."""
        self._custom_properties[name] = value
        return self

    def initialize_shards_replicas(
        self,
        count_shards: int,
        count_nrt: int,
        count_tlog: int,
        count_pull: int,
        nodes: list[NodeBuilder],
    ) -> "CollectionBuilder":
        """
        Replace the shard builders with a round-robin layout over nodes.

        Replicas are created NRT, then TLOG, then PULL within each shard and
        assigned to nodes in turn, wrapping at the end of the list. The leader
        of each shard is its first NRT replica, or first TLOG replica when it
        has no NRT. The resulting builders can still be modified afterwards.

        Args:
            count_shards: Number of shards
            count_nrt: NRT replicas per shard
            count_tlog: TLOG replicas per shard
            count_pull: PULL replicas per shard
            nodes: Ordered candidate nodes

        Returns:
            This builder

        Raises:
            NodeExhaustionError: If replicas are requested and nodes is empty
        """
        plans = distribute_replicas(
            self._name, count_shards, count_nrt, count_tlog, count_pull, len(nodes)
        )

        shard_builders: list[ShardBuilder] = []
        for plan in plans:
            replicas = [
                ReplicaBuilder()
                .set_name(assignment.name)
                .set_core_name(assignment.core_name)
                .set_replica_type(assignment.replica_type)
                .set_state(assignment.state)
                .set_node(nodes[assignment.node_index])
                for assignment in plan.replicas
            ]
            shard_builders.append(
                ShardBuilder(plan.name)
                .set_replica_builders(replicas)
                .set_leader_index(plan.leader_index)
            )

        self._shard_builders = shard_builders
        return self

    def build(self) -> Collection:
        """Build the collection, keeping shard order. Duplicate shard names overwrite."""
        shards = {}
        for shard_builder in self._shard_builders:
            shard = shard_builder.build(self._name)
            shards[shard.name] = shard

        collection = Collection(
            name=self._name,
            shards=shards,
            custom_properties=dict(self._custom_properties),
        )

        logger.debug(
            "collection_built",
            collection=self._name,
            shard_count=len(shards),
            replica_count=collection.replica_count(),
        )

        return collection

    def __repr__(self) -> str:
        return f"CollectionBuilder(name={self._name!r}, shards={len(self._shard_builders)})"
