import pytest

from synthtopo.core.domain.models import NodeExhaustionError, ReplicaType
from synthtopo.core.domain.services.distribution import distribute_replicas


def _flatten(plans):
    return [replica for plan in plans for replica in plan.replicas]


def test_one_nrt_per_shard_alternates_nodes() -> None:
    plans = distribute_replicas("c", 2, 1, 0, 0, 2)

    assert [p.name for p in plans] == ["shard1", "shard2"]
    assert plans[0].replicas[0].name == "c_shard1_replica_n0"
    assert plans[0].replicas[0].core_name == "c_shard1_replica_n0_c"
    assert plans[0].replicas[0].node_index == 0
    assert plans[0].leader_index == 0
    assert plans[1].replicas[0].name == "c_shard2_replica_n1"
    assert plans[1].replicas[0].node_index == 1
    assert plans[1].leader_index == 0


def test_pull_only_shard_has_no_leader() -> None:
    plans = distribute_replicas("c", 1, 0, 0, 1, 1)

    assert len(plans) == 1
    assert plans[0].replicas[0].replica_type == ReplicaType.PULL
    assert plans[0].leader_index is None
    assert plans[0].leader is None


@pytest.mark.parametrize(
    "shards,nrt,tlog,pull,nodes",
    [(1, 1, 1, 1, 1), (2, 2, 1, 1, 3), (3, 0, 2, 2, 2), (4, 1, 0, 3, 5)],
)
def test_round_robin_over_whole_collection(shards, nrt, tlog, pull, nodes) -> None:
    plans = distribute_replicas("c", shards, nrt, tlog, pull, nodes)
    replicas = _flatten(plans)

    assert len(plans) == shards
    assert all(len(p.replicas) == nrt + tlog + pull for p in plans)
    assert [r.node_index for r in replicas] == [i % nodes for i in range(len(replicas))]
    assert len({r.name for r in replicas}) == len(replicas)


def test_creation_order_is_nrt_tlog_pull() -> None:
    plans = distribute_replicas("c", 1, 2, 1, 2, 4)

    assert [r.replica_type for r in plans[0].replicas] == [
        ReplicaType.NRT,
        ReplicaType.NRT,
        ReplicaType.TLOG,
        ReplicaType.PULL,
        ReplicaType.PULL,
    ]
    assert [r.name for r in plans[0].replicas] == [
        "c_shard1_replica_n0",
        "c_shard1_replica_n1",
        "c_shard1_replica_t2",
        "c_shard1_replica_p3",
        "c_shard1_replica_p4",
    ]


def test_sequence_continues_across_shards() -> None:
    plans = distribute_replicas("c", 2, 1, 0, 1, 3)

    assert [r.name for r in plans[1].replicas] == [
        "c_shard2_replica_n2",
        "c_shard2_replica_p3",
    ]


def test_leader_is_first_tlog_without_nrt() -> None:
    plans = distribute_replicas("c", 2, 0, 2, 1, 2)

    for plan in plans:
        assert plan.leader is not None
        assert plan.leader.replica_type == ReplicaType.TLOG
        assert plan.leader_index == 0


def test_leader_is_first_nrt_when_present() -> None:
    plans = distribute_replicas("c", 1, 2, 2, 0, 2)

    assert plans[0].leader.name == "c_shard1_replica_n0"


def test_empty_node_pool_fails_when_replicas_requested() -> None:
    with pytest.raises(NodeExhaustionError) as exc_info:
        distribute_replicas("c", 1, 0, 0, 1, 0)

    assert exc_info.value.collection_name == "c"
    assert exc_info.value.shard_name == "shard1"


def test_empty_node_pool_is_fine_without_replicas() -> None:
    plans = distribute_replicas("c", 2, 0, 0, 0, 0)

    assert [p.replicas for p in plans] == [[], []]


def test_negative_counts_are_rejected() -> None:
    with pytest.raises(ValueError):
        distribute_replicas("c", 1, -1, 0, 0, 1)
