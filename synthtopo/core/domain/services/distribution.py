"""Replica distribution domain service - expands shard/replica counts into a layout."""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from synthtopo.core.domain.models import NodeExhaustionError, ReplicaState, ReplicaType

logger = structlog.get_logger(__name__)

# Creation order of replica types within every shard
REPLICA_TYPE_ORDER = (ReplicaType.NRT, ReplicaType.TLOG, ReplicaType.PULL)


@dataclass(frozen=True)
class ReplicaAssignment:
    """Planned replica and the index of the candidate node hosting it."""

    name: str
    core_name: str
    replica_type: ReplicaType
    node_index: int
    state: ReplicaState = ReplicaState.ACTIVE


@dataclass
class ShardPlan:
    """Planned shard: ordered replicas plus the position of its leader."""

    name: str
    replicas: list[ReplicaAssignment] = field(default_factory=list)
    leader_index: Optional[int] = None

    @property
    def leader(self) -> Optional[ReplicaAssignment]:
        if self.leader_index is None:
            return None
        return self.replicas[self.leader_index]


def shard_name(shard_number: int) -> str:
    """Name of the 1-based shard number."""
    return f"shard{shard_number}"


def replica_name(
    collection_name: str, shard: str, replica_type: ReplicaType, sequence: int
) -> str:
    """Name of a replica from its collection-wide sequence number."""
    return f"{collection_name}_{shard}_replica_{replica_type.suffix_char}{sequence}"


def core_name(replica: str) -> str:
    """Core name backing a replica."""
    return f"{replica}_c"


def distribute_replicas(
    collection_name: str,
    count_shards: int,
    count_nrt: int,
    count_tlog: int,
    count_pull: int,
    count_nodes: int,
) -> list[ShardPlan]:
    """
    Lay out shards and replicas over an ordered pool of candidate nodes.

    Within each shard replicas are created NRT first, then TLOG, then PULL.
    A single sequence number runs across the whole collection and names the
    replicas. The i-th replica created overall is hosted on node i mod
    count_nodes. The first leader-eligible replica of a shard becomes its
    leader; a PULL-only shard has none.

    Args:
        collection_name: Collection the replicas belong to
        count_shards: Number of shards to create
        count_nrt: NRT replicas per shard
        count_tlog: TLOG replicas per shard
        count_pull: PULL replicas per shard
        count_nodes: Size of the candidate node pool

    Returns:
        One ShardPlan per shard, in shard order

    Raises:
        ValueError: If any count is negative
        NodeExhaustionError: If replicas are requested with no candidate node
    """
    counts = {
        ReplicaType.NRT: count_nrt,
        ReplicaType.TLOG: count_tlog,
        ReplicaType.PULL: count_pull,
    }
    for label, value in (
        ("count_shards", count_shards),
        ("count_nrt", count_nrt),
        ("count_tlog", count_tlog),
        ("count_pull", count_pull),
        ("count_nodes", count_nodes),
    ):
        if value < 0:
            raise ValueError(f"{label} must not be negative, got {value}")

    plans: list[ShardPlan] = []
    sequence = 0

    for shard_number in range(1, count_shards + 1):
        plan = ShardPlan(name=shard_name(shard_number))

        for replica_type in REPLICA_TYPE_ORDER:
            for _ in range(counts[replica_type]):
                if count_nodes == 0:
                    raise NodeExhaustionError(collection_name, plan.name)

                name = replica_name(collection_name, plan.name, replica_type, sequence)
                plan.replicas.append(
                    ReplicaAssignment(
                        name=name,
                        core_name=core_name(name),
                        replica_type=replica_type,
                        node_index=sequence % count_nodes,
                    )
                )

                if plan.leader_index is None and replica_type.is_leader_eligible:
                    plan.leader_index = len(plan.replicas) - 1

                sequence += 1

        plans.append(plan)

    logger.debug(
        "replicas_distributed",
        collection=collection_name,
        shard_count=len(plans),
        replica_count=sequence,
        node_count=count_nodes,
    )

    return plans
