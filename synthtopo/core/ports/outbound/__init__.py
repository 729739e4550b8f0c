"""Outbound ports - interfaces a placement engine consumes."""

from synthtopo.core.ports.outbound.attributes import (
    AttributeKind,
    AttributeSelector,
    IAttributeFetcher,
    IAttributeValues,
    NodeMetricRegistry,
    metric_tag,
    system_property_tag,
)

__all__ = [
    "IAttributeValues",
    "IAttributeFetcher",
    "AttributeKind",
    "AttributeSelector",
    "NodeMetricRegistry",
    "metric_tag",
    "system_property_tag",
]
