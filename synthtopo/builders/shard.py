"""Replica and shard builders."""

from typing import Optional

from synthtopo.builders.node import NodeBuilder
from synthtopo.core.domain.models import (
    InvalidLeaderError,
    Replica,
    ReplicaState,
    ReplicaType,
    Shard,
    ShardState,
)


class ReplicaBuilder:
    """Describes one replica bound to the NodeBuilder hosting it."""

    def __init__(self) -> None:
        self._name: Optional[str] = None
        self._core_name: Optional[str] = None
        self._replica_type: ReplicaType = ReplicaType.NRT
        self._state: ReplicaState = ReplicaState.ACTIVE
        self._node: Optional[NodeBuilder] = None

    def set_name(self, name: str) -> "ReplicaBuilder":
        self._name = name
        return self

    def set_core_name(self, core_name: str) -> "ReplicaBuilder":
        self._core_name = core_name
        return self

    def set_replica_type(self, replica_type: ReplicaType) -> "ReplicaBuilder":
        self._replica_type = replica_type
        return self

    def set_state(self, state: ReplicaState) -> "ReplicaBuilder":
        self._state = state
        return self

    def set_node(self, node: NodeBuilder) -> "ReplicaBuilder":
        self._node = node
        return self

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def replica_type(self) -> ReplicaType:
        return self._replica_type

    @property
    def node(self) -> Optional[NodeBuilder]:
        return self._node

    def build(self, shard_name: str, collection_name: str) -> Replica:
        """Build the replica bound to the named shard of the named collection."""
        if self._name is None or self._node is None:
            raise ValueError("Replica name and node must be set before building")
        return Replica(
            name=self._name,
            core_name=self._core_name if self._core_name is not None else self._name,
            replica_type=self._replica_type,
            state=self._state,
            node=self._node.build(),
            shard_name=shard_name,
            collection_name=collection_name,
        )

    def __repr__(self) -> str:
        return f"ReplicaBuilder(name={self._name!r}, type={self._replica_type.value})"


class ShardBuilder:
    """
    Aggregates ReplicaBuilders and designates a leader.

    The leader is recorded as a list position anchored to the builder that
    held it. Edits to the replica list keep the leader with that builder,
    and removing it leaves the shard without a leader.
    """

    def __init__(self, name: Optional[str] = None):
        self._name = name
        self._replica_builders: list[ReplicaBuilder] = []
        self._leader_index: Optional[int] = None
        self._leader_builder: Optional[ReplicaBuilder] = None

    def set_name(self, name: str) -> "ShardBuilder":
        self._name = name
        return self

    def set_replica_builders(self, replica_builders: list[ReplicaBuilder]) -> "ShardBuilder":
        self._replica_builders = replica_builders
        return self

    def add_replica(self, replica_builder: ReplicaBuilder) -> "ShardBuilder":
        self._replica_builders.append(replica_builder)
        return self

    def set_leader_index(self, index: Optional[int]) -> "ShardBuilder":
        """
        Designate the leader by list position.

        A position that holds a replica is anchored to that replica. A
        position outside the list stays unanchored and fails at build().
        """
        self._leader_index = index
        self._leader_builder = None
        if index is not None and 0 <= index < len(self._replica_builders):
            self._leader_builder = self._replica_builders[index]
        return self

    def set_leader(self, replica_builder: Optional[ReplicaBuilder]) -> "ShardBuilder":
        """
        Designate the leader by builder.

        Raises:
            ValueError: If the builder is not one of this shard's replicas
        """
        if replica_builder is None:
            return self.set_leader_index(None)
        for index, candidate in enumerate(self._replica_builders):
            if candidate is replica_builder:
                return self.set_leader_index(index)
        raise ValueError(f"{replica_builder!r} is not a replica of shard {self._name}")

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def replica_builders(self) -> list[ReplicaBuilder]:
        """Mutable replica list, for callers adjusting the distribution."""
        return self._replica_builders

    @property
    def leader_index(self) -> Optional[int]:
        """Current position of the leader, or None once it was removed."""
        if self._leader_builder is None:
            return self._leader_index
        if (
            self._leader_index is not None
            and self._leader_index < len(self._replica_builders)
            and self._replica_builders[self._leader_index] is self._leader_builder
        ):
            return self._leader_index
        for index, candidate in enumerate(self._replica_builders):
            if candidate is self._leader_builder:
                return index
        return None

    def build(self, collection_name: str) -> Shard:
        """
        Build the shard and its replicas, in list order.

        Args:
            collection_name: Name of the owning collection

        Returns:
            Immutable Shard in state ACTIVE

        Raises:
            InvalidLeaderError: If the leader position is out of range or
                designates a replica type that cannot lead
        """
        if self._name is None:
            raise ValueError("Shard name must be set before building")

        built = [rb.build(self._name, collection_name) for rb in self._replica_builders]

        leader: Optional[Replica] = None
        leader_index = self.leader_index
        if leader_index is not None:
            if not 0 <= leader_index < len(built):
                raise InvalidLeaderError(self._name, leader_index, "out of range")
            leader = built[leader_index]
            if not leader.is_leader_eligible():
                raise InvalidLeaderError(
                    self._name,
                    leader_index,
                    f"{leader.replica_type.value} replicas cannot lead",
                )

        return Shard(
            name=self._name,
            collection_name=collection_name,
            replicas={replica.name: replica for replica in built},
            leader=leader,
            state=ShardState.ACTIVE,
        )

    def __repr__(self) -> str:
        return f"ShardBuilder(name={self._name!r}, replicas={len(self._replica_builders)})"
