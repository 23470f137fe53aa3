"""
Per-cycle metric models.

Everything here is rebuilt on every reconciliation cycle.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class PrometheusSeries(BaseModel):
    """One entry of an instant-vector result: labels and a [timestamp, "value"] pair."""

    metric: Dict[str, str] = Field(default_factory=dict)
    value: Tuple[float, Any]


class PrometheusData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result_type: str = Field(default="", alias="resultType")
    result: List[PrometheusSeries] = Field(default_factory=list)


class PrometheusResponse(BaseModel):
    """Body of `/api/v1/query`."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    data: Optional[PrometheusData] = None
    error_type: Optional[str] = Field(default=None, alias="errorType")
    error: Optional[str] = None


@dataclass
class MetricSeries:
    """One result series of an invocation-rate query."""

    function_name: str
    value: Optional[float] = None
    error: Optional[str] = None  # Set when the sample value could not be parsed


@dataclass
class MetricSample:
    """Invocation rate of a function summed across its series."""

    function_name: str
    value: float = 0.0


class MetricOutcome(str, Enum):
    # No usable data: treat the function as active
    UNKNOWN = "unknown"
    MEASURED = "measured"


@dataclass
class MetricResult:
    function_name: str
    outcome: MetricOutcome
    sample: Optional[MetricSample] = None

    @classmethod
    def unknown(cls, function_name: str) -> "MetricResult":
        return cls(function_name=function_name, outcome=MetricOutcome.UNKNOWN)

    @classmethod
    def measured(cls, sample: MetricSample) -> "MetricResult":
        return cls(
            function_name=sample.function_name, outcome=MetricOutcome.MEASURED, sample=sample
        )


class FunctionState(str, Enum):
    """Where a function ends up after one reconciliation cycle."""

    EXCLUDED = "excluded"
    UNKNOWN_ACTIVE = "unknown-active"
    ACTIVE = "active"
    IDLE_SCALED = "idle-and-scaled"
    IDLE_ALREADY_ZERO = "idle-already-zero"
