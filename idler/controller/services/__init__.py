"""
Services package.

Provides the reconciliation loop and the metrics integration.
"""

from .metrics import MetricsClient, PrometheusQuery
from .reconciler import Reconciler

__all__ = [
    "MetricsClient",
    "PrometheusQuery",
    "Reconciler",
]
