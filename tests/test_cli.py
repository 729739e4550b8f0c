import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from rich.console import Console

from synthtopo import cli
from synthtopo.cli import main


def test_info_shows_version() -> None:
    result = CliRunner().invoke(main, ["info"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_build_json_output() -> None:
    result = CliRunner().invoke(
        main, ["build", "--nodes", "2", "--collection", "c", "--shards", "2", "--format", "json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["live_nodes"] == ["node_0", "node_1"]
    shards = payload["collections"]["c"]["shards"]
    assert shards["shard1"]["leader"] == "c_shard1_replica_n0"
    assert shards["shard2"]["replicas"][0]["node"] == "node_1"


def test_build_table_output() -> None:
    result = CliRunner().invoke(main, ["build", "--nodes", "1"])

    assert result.exit_code == 0
    assert "Cluster Topology" in result.output


def test_build_without_nodes_fails() -> None:
    result = CliRunner().invoke(main, ["build", "--nodes", "0", "--nrt", "1"])

    assert result.exit_code == 1
    assert "No nodes available" in result.output


def test_load_file(tmp_path: Path) -> None:
    path = tmp_path / "topology.json"
    path.write_text(
        json.dumps(
            {
                "nodes": [{"name": "a", "core_count": 4, "sysprops": {"zone": "x"}}],
                "collections": [{"name": "c", "pull": 1}],
            }
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(main, ["load", str(path)])

    assert result.exit_code == 0
    assert "Node Attributes" in result.output


def test_load_missing_file_fails(tmp_path: Path) -> None:
    result = CliRunner().invoke(main, ["load", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_load_shows_every_node_attribute(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "console", Console(width=200))
    path = tmp_path / "topology.json"
    path.write_text(
        json.dumps(
            {
                "nodes": [
                    {
                        "name": "a",
                        "core_count": 4,
                        "free_disk_gb": 120,
                        "total_disk_gb": 480,
                        "heap_usage": 0.25,
                        "system_load_average": 1.75,
                        "disk_type": "rotational",
                    }
                ],
                "collections": [{"name": "c"}],
            }
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(main, ["load", str(path)])

    assert result.exit_code == 0
    for header in ("Total disk (GB)", "Heap", "Load avg", "Disk type"):
        assert header in result.output
    for cell in ("480", "0.25", "1.75", "rotational"):
        assert cell in result.output
