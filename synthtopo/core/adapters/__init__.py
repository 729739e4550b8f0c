"""Adapters - implementations of port interfaces."""

from synthtopo.core.adapters.attribute_adapter import (
    InMemoryAttributeValues,
    StaticAttributeFetcher,
)

__all__ = [
    "InMemoryAttributeValues",
    "StaticAttributeFetcher",
]
