"""Topology configuration files."""

from synthtopo.config.loader import TopologyConfigLoader

__all__ = ["TopologyConfigLoader"]
