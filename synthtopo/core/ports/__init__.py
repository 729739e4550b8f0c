"""Port interfaces for hexagonal architecture."""

from synthtopo.core.ports.outbound.attributes import IAttributeFetcher, IAttributeValues

__all__ = [
    "IAttributeValues",
    "IAttributeFetcher",
]
