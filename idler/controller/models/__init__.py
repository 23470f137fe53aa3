"""
Data model definitions package.

Aggregates the gateway wire models and the per-cycle value objects.
"""

from .function import Credentials, FunctionDescriptor, GatewayVersion, ScaleCommand
from .metrics import (
    FunctionState,
    MetricOutcome,
    MetricResult,
    MetricSample,
    MetricSeries,
    PrometheusResponse,
    PrometheusSeries,
)

__all__ = [
    "Credentials",
    "FunctionDescriptor",
    "GatewayVersion",
    "ScaleCommand",
    "FunctionState",
    "MetricOutcome",
    "MetricResult",
    "MetricSample",
    "MetricSeries",
    "PrometheusResponse",
    "PrometheusSeries",
]
