"""
Core logic package.

Provides the idle-detection policy, credentials loading and error types.
"""

from .exceptions import IdlerError, MetricsQueryError, RequestError, StartupError
from .policy import SCALE_LABEL, is_idle, is_scale_candidate

__all__ = [
    "IdlerError",
    "MetricsQueryError",
    "RequestError",
    "StartupError",
    "SCALE_LABEL",
    "is_idle",
    "is_scale_candidate",
]
