"""synthtopo CLI - build and inspect synthetic cluster topologies."""

import logging
import sys
from typing import Any

import click
import structlog
from rich.console import Console
from rich.table import Table

from synthtopo import __version__
from synthtopo.builders.cluster import ClusterBuilder
from synthtopo.builders.collection import CollectionBuilder
from synthtopo.config.loader import TopologyConfigLoader
from synthtopo.core.adapters.attribute_adapter import InMemoryAttributeValues
from synthtopo.core.domain.models import Cluster, DiskHardwareType, SynthTopoError

console = Console()

LOG_LEVELS = ["debug", "info", "warning", "error"]


def configure_logging(level: str = "warning") -> None:
    """Route structlog output to stderr, dropping events below level."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def cluster_to_dict(cluster: Cluster) -> dict[str, Any]:
    """Convert a cluster into a JSON-friendly dictionary."""
    return {
        "live_nodes": sorted(node.name for node in cluster.live_nodes),
        "collections": {
            collection.name: {
                "custom_properties": dict(collection.custom_properties),
                "shards": {
                    shard.name: {
                        "state": shard.state.value,
                        "leader": shard.leader.name if shard.leader else None,
                        "replicas": [
                            {
                                "name": replica.name,
                                "core": replica.core_name,
                                "type": replica.replica_type.value,
                                "state": replica.state.value,
                                "node": replica.node.name,
                            }
                            for replica in shard.replicas.values()
                        ],
                    }
                    for shard in collection.shards.values()
                },
            }
            for collection in cluster.collections.values()
        },
    }


def _print_cluster(cluster: Cluster) -> None:
    table = Table(title="Cluster Topology")
    table.add_column("Collection", style="cyan")
    table.add_column("Shard", style="cyan")
    table.add_column("Replica", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Node", style="green")
    table.add_column("Leader", style="yellow")

    for collection in cluster.collections.values():
        for shard in collection.shards.values():
            for replica in shard.replicas.values():
                is_leader = shard.leader is not None and shard.leader.name == replica.name
                table.add_row(
                    collection.name,
                    shard.name,
                    replica.name,
                    replica.replica_type.value,
                    replica.node.name,
                    "✓" if is_leader else "",
                )

    console.print(table)
    console.print(
        f"Live nodes: [green]{len(cluster.live_nodes)}[/green]  "
        f"Collections: [cyan]{len(cluster.collections)}[/cyan]"
    )


def _optional_cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, DiskHardwareType):
        return value.value
    return str(value)


def _print_attributes(values: InMemoryAttributeValues, cluster: Cluster) -> None:
    table = Table(title="Node Attributes")
    table.add_column("Node", style="green")
    table.add_column("Cores", style="white")
    table.add_column("Free disk (GB)", style="white")
    table.add_column("Total disk (GB)", style="white")
    table.add_column("Heap", style="white")
    table.add_column("Load avg", style="white")
    table.add_column("Disk type", style="white")
    table.add_column("System properties", style="cyan")
    table.add_column("Metrics", style="magenta")

    for node in sorted(cluster.live_nodes, key=lambda n: n.name):
        sysprops = ", ".join(
            f"{tag}={per_node[node]}"
            for tag, per_node in values.system_properties.items()
            if node in per_node
        )
        metrics = ", ".join(
            f"{tag}={per_node[node]}"
            for tag, per_node in values.metrics.items()
            if node in per_node
        )
        table.add_row(
            node.name,
            _optional_cell(values.get_core_count(node)),
            _optional_cell(values.get_free_disk(node)),
            _optional_cell(values.get_total_disk(node)),
            _optional_cell(values.get_heap_usage(node)),
            _optional_cell(values.get_system_load_average(node)),
            _optional_cell(values.get_disk_type(node)),
            sysprops or "-",
            metrics or "-",
        )

    console.print(table)


def _render(builder: ClusterBuilder, output_format: str, attributes: bool) -> None:
    cluster = builder.build()
    if output_format == "json":
        console.print_json(data=cluster_to_dict(cluster))
        return
    _print_cluster(cluster)
    if attributes:
        _print_attributes(builder.build_attribute_values(), cluster)


@click.group()
@click.version_option(version=__version__, prog_name="synthtopo")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS),
    default="warning",
    help="Minimum log level",
)
def main(log_level: str) -> None:
    """synthtopo - Synthetic search cluster topologies."""
    configure_logging(log_level)


@main.command()
@click.option("--nodes", "-n", default=3, type=click.IntRange(min=0), help="Number of nodes")
@click.option("--collection", "-c", default="collection", help="Collection name")
@click.option("--shards", "-s", default=1, type=click.IntRange(min=0), help="Number of shards")
@click.option("--nrt", default=1, type=click.IntRange(min=0), help="NRT replicas per shard")
@click.option("--tlog", default=0, type=click.IntRange(min=0), help="TLOG replicas per shard")
@click.option("--pull", default=0, type=click.IntRange(min=0), help="PULL replicas per shard")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]), default="table")
def build(
    nodes: int,
    collection: str,
    shards: int,
    nrt: int,
    tlog: int,
    pull: int,
    output_format: str,
) -> None:
    """Build a topology from counts and print it.

    Example:
        synthtopo build --nodes 3 --shards 2 --nrt 2 --pull 1
    """
    builder = ClusterBuilder().initialize_nodes(nodes)
    try:
        builder.add_collection(
            CollectionBuilder(collection).initialize_shards_replicas(
                shards, nrt, tlog, pull, builder.node_builders
            )
        )
        _render(builder, output_format, attributes=False)
    except SynthTopoError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@main.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--attributes/--no-attributes", default=True, help="Show node attributes")
def load(path: str, output_format: str, attributes: bool) -> None:
    """Build a topology from a YAML or JSON file and print it."""
    try:
        builder = TopologyConfigLoader().load_from_file(path)
        _render(builder, output_format, attributes)
    except (SynthTopoError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@main.command()
def info() -> None:
    """Show synthtopo information."""
    table = Table(title="synthtopo Info")
    table.add_column("Component", style="cyan")
    table.add_column("Description", style="white")

    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Distribution", "Round-robin, NRT -> TLOG -> PULL")
    table.add_row("Leader rule", "First NRT, else first TLOG, PULL never")
    table.add_row("Formats", "YAML + JSON topology files")

    console.print(table)


if __name__ == "__main__":
    main()
