"""Domain models for synthetic cluster topologies."""

from enum import Enum
from types import MappingProxyType
from typing import Annotated, Iterator, Mapping, Optional, TypeVar, Union

from pydantic import AfterValidator, BaseModel, Field


class ReplicaType(str, Enum):
    """Replica type - decides indexing behaviour and leader eligibility."""

    NRT = "NRT"
    TLOG = "TLOG"
    PULL = "PULL"

    @property
    def suffix_char(self) -> str:
        """Single character used in generated replica names."""
        return self.value[0].lower()

    @property
    def is_leader_eligible(self) -> bool:
        """PULL replicas never become shard leaders."""
        return self != ReplicaType.PULL


class ReplicaState(str, Enum):
    """Replica state."""

    ACTIVE = "active"
    DOWN = "down"
    RECOVERING = "recovering"
    RECOVERY_FAILED = "recovery_failed"


class ShardState(str, Enum):
    """Shard state."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    CONSTRUCTION = "construction"
    RECOVERY = "recovery"
    RECOVERY_FAILED = "recovery_failed"


class DiskHardwareType(str, Enum):
    """Disk hardware type reported for a node."""

    SSD = "ssd"
    ROTATIONAL = "rotational"


K = TypeVar("K")
V = TypeVar("V")


def _read_only(value: Mapping) -> Mapping:
    """Freeze a validated mapping, keeping its insertion order."""
    return MappingProxyType(dict(value))


# Built topology maps reject item assignment and deletion
ReadOnlyMap = Annotated[Mapping[K, V], AfterValidator(_read_only)]


class Node(BaseModel):
    """Cluster node. Identity is the name only."""

    name: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return self.name


class Replica(BaseModel):
    """One physical copy of a shard hosted on a node."""

    name: str
    core_name: str
    replica_type: ReplicaType
    state: ReplicaState = ReplicaState.ACTIVE
    node: Node

    # Owning shard and collection, resolved through the owning container
    shard_name: str
    collection_name: str

    model_config = {"frozen": True}

    def is_leader_eligible(self) -> bool:
        """Check if replica type allows leadership."""
        return self.replica_type.is_leader_eligible


class Shard(BaseModel):
    """Partition of a collection with its ordered replicas."""

    name: str
    collection_name: str

    # Creation order is preserved (replica_name -> replica)
    replicas: ReadOnlyMap[str, Replica] = Field(
        default_factory=dict, validate_default=True
    )
    leader: Optional[Replica] = None
    state: ShardState = ShardState.ACTIVE

    model_config = {"frozen": True}

    def __hash__(self) -> int:
        return hash((self.collection_name, self.name))

    def get_replica(self, replica_name: str) -> Optional[Replica]:
        """Get a replica by name."""
        return self.replicas.get(replica_name)

    def replica_count(self) -> int:
        """Get number of replicas in shard."""
        return len(self.replicas)

    def replicas_of_type(self, replica_type: ReplicaType) -> list[Replica]:
        """Get replicas of the given type, in creation order."""
        return [r for r in self.replicas.values() if r.replica_type == replica_type]


class Collection(BaseModel):
    """Named dataset partitioned into shards."""

    name: str

    # Shard order is preserved (shard_name -> shard)
    shards: ReadOnlyMap[str, Shard] = Field(
        default_factory=dict, validate_default=True
    )
    custom_properties: ReadOnlyMap[str, str] = Field(
        default_factory=dict, validate_default=True
    )

    model_config = {"frozen": True}

    def __hash__(self) -> int:
        return hash(self.name)

    def get_shard(self, shard_name: str) -> Optional[Shard]:
        """Get a shard by name."""
        return self.shards.get(shard_name)

    def shard_of(self, replica: Replica) -> Optional[Shard]:
        """Resolve the shard owning a replica of this collection."""
        if replica.collection_name != self.name:
            return None
        return self.shards.get(replica.shard_name)

    def get_custom_property(self, name: str) -> Optional[str]:
        """Get a custom property value."""
        return self.custom_properties.get(name)

    def iter_replicas(self) -> Iterator[Replica]:
        """Iterate over all replicas, shard by shard in creation order."""
        for shard in self.shards.values():
            yield from shard.replicas.values()

    def replica_count(self) -> int:
        """Get total number of replicas across shards."""
        return sum(shard.replica_count() for shard in self.shards.values())


class Cluster(BaseModel):
    """Live nodes plus the collections they host."""

    live_nodes: frozenset[Node] = Field(default_factory=frozenset)

    # Collection order is preserved (collection_name -> collection)
    collections: ReadOnlyMap[str, Collection] = Field(
        default_factory=dict, validate_default=True
    )

    model_config = {"frozen": True}

    def __hash__(self) -> int:
        return hash((self.live_nodes, tuple(self.collections)))

    def get_collection(self, collection_name: str) -> Optional[Collection]:
        """Get a collection by name."""
        return self.collections.get(collection_name)

    def collection_of(self, item: Union[Shard, Replica]) -> Optional[Collection]:
        """Resolve the collection owning a shard or replica."""
        return self.collections.get(item.collection_name)

    def shard_of(self, replica: Replica) -> Optional[Shard]:
        """Resolve the shard owning a replica."""
        collection = self.collection_of(replica)
        if collection is None:
            return None
        return collection.shard_of(replica)

    def replicas_on(self, node: Node) -> list[Replica]:
        """Get all replicas hosted on a node."""
        return [
            replica
            for collection in self.collections.values()
            for replica in collection.iter_replicas()
            if replica.node == node
        ]

    def node_count(self) -> int:
        """Get number of live nodes."""
        return len(self.live_nodes)


# Exception classes
class SynthTopoError(Exception):
    """Base exception for topology construction errors."""

    pass


class NodeExhaustionError(SynthTopoError):
    """Replicas were requested but no candidate node exists to host them."""

    def __init__(self, collection_name: str, shard_name: str):
        self.collection_name = collection_name
        self.shard_name = shard_name
        super().__init__(
            f"No nodes available to host replicas of {collection_name}/{shard_name}"
        )


class InvalidLeaderError(SynthTopoError):
    """Shard leader designation does not point at an eligible replica."""

    def __init__(self, shard_name: str, index: int, reason: str):
        self.shard_name = shard_name
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid leader {index} for shard {shard_name}: {reason}")


class TopologyConfigError(SynthTopoError):
    """Topology configuration file content is malformed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid topology configuration in {source}: {reason}")
