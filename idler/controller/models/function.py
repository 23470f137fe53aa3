"""
Function domain models.

Mirrors the gateway control API payloads as Pydantic models.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Credentials:
    """Gateway basic auth pair, loaded once at startup."""

    username: str = ""
    password: str = ""


class FunctionDescriptor(BaseModel):
    """
    A deployed function as reported by `system/functions` and `system/function/{name}`.

    `invocation_count` is the gateway's running total and may be stale.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    image: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    invocation_count: int = Field(default=0, alias="invocationCount")
    replicas: Optional[int] = None
    available_replicas: Optional[int] = Field(default=None, alias="availableReplicas")


class _VersionInfo(BaseModel):
    release: str = ""
    sha: str = ""


class GatewayVersion(BaseModel):
    """Response of `system/info`."""

    model_config = ConfigDict(extra="ignore")

    version: _VersionInfo = Field(default_factory=_VersionInfo)


class ScaleCommand(BaseModel):
    """Body of `system/scale-function/{name}`."""

    model_config = ConfigDict(populate_by_name=True)

    service_name: str = Field(..., alias="serviceName")
    replicas: int = Field(..., ge=0)
