import json
from pathlib import Path

import pytest

from synthtopo.config.loader import TopologyConfigLoader
from synthtopo.core.domain.models import (
    DiskHardwareType,
    Node,
    NodeExhaustionError,
    TopologyConfigError,
)
from synthtopo.core.ports.outbound.attributes import NodeMetricRegistry

YAML_TOPOLOGY = """
nodes:
  - name: alpha
    core_count: 2
    free_disk_gb: 100
    disk_type: ssd
    sysprops:
      zone: east
    metrics:
      solr.jvm:
        heap: 0.5
  - name: beta
collections:
  - name: products
    shards: 2
    nrt: 1
    pull: 1
    custom_properties:
      routing: hash
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_load_yaml_topology(tmp_path: Path) -> None:
    builder = TopologyConfigLoader().load_from_file(_write(tmp_path, "t.yaml", YAML_TOPOLOGY))

    cluster = builder.build()
    values = builder.build_attribute_values()
    collection = cluster.get_collection("products")
    alpha = Node(name="alpha")

    assert cluster.live_nodes == frozenset({alpha, Node(name="beta")})
    assert collection.get_custom_property("routing") == "hash"
    assert [r.node.name for r in collection.iter_replicas()] == ["alpha", "beta", "alpha", "beta"]
    assert values.get_core_count(alpha) == 2
    assert values.get_free_disk(alpha) == 100
    assert values.get_disk_type(alpha) == DiskHardwareType.SSD
    assert values.get_system_property(alpha, "zone") == "east"
    assert values.get_metric(alpha, "heap", NodeMetricRegistry.SOLR_JVM) == 0.5
    assert values.get_core_count(Node(name="beta")) is None


def test_load_json_topology_with_node_count(tmp_path: Path) -> None:
    data = {"nodes": 3, "collections": [{"name": "c", "shards": 1, "nrt": 0, "tlog": 3}]}
    path = _write(tmp_path, "t.json", json.dumps(data))

    cluster = TopologyConfigLoader().load_from_file(path).build()
    shard = cluster.get_collection("c").get_shard("shard1")

    assert cluster.node_count() == 3
    assert shard.replica_count() == 3
    assert shard.leader.name == "c_shard1_replica_t0"


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        TopologyConfigLoader().load_from_file(tmp_path / "missing.yaml")


def test_unsupported_suffix_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        TopologyConfigLoader().load_from_file(_write(tmp_path, "t.toml", "nodes = 1"))


def test_malformed_json_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(TopologyConfigError):
        TopologyConfigLoader().load_from_file(_write(tmp_path, "t.json", "{nodes"))


def test_unknown_metric_registry_raises_config_error() -> None:
    data = {"nodes": [{"name": "a", "metrics": {"solr.nope": {"x": 1}}}]}

    with pytest.raises(TopologyConfigError):
        TopologyConfigLoader().parse_topology(data)


def test_collection_without_name_raises_config_error() -> None:
    with pytest.raises(TopologyConfigError):
        TopologyConfigLoader().parse_topology({"nodes": 1, "collections": [{"shards": 1}]})


def test_replicas_without_nodes_fail_fast() -> None:
    with pytest.raises(NodeExhaustionError):
        TopologyConfigLoader().parse_topology({"collections": [{"name": "c"}]})


@pytest.mark.parametrize("key, value", [("shards", 2.7), ("nrt", True), ("pull", "1")])
def test_non_integer_counts_raise_config_error(key: str, value: object) -> None:
    data = {"nodes": 2, "collections": [{"name": "c", key: value}]}

    with pytest.raises(TopologyConfigError) as exc_info:
        TopologyConfigLoader().parse_topology(data, source="topology.yaml")

    assert key in exc_info.value.reason
    assert exc_info.value.source == "topology.yaml"


def test_negative_count_raises_config_error() -> None:
    with pytest.raises(TopologyConfigError):
        TopologyConfigLoader().parse_topology(
            {"nodes": 1, "collections": [{"name": "c", "tlog": -1}]}
        )
