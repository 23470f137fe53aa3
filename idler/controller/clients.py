import httpx
import logging
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from .core.exceptions import RequestError
from .models import Credentials, FunctionDescriptor, GatewayVersion, ScaleCommand

logger = logging.getLogger("idler.clients")

_FUNCTION_LIST = TypeAdapter(List[FunctionDescriptor])


def _basic_auth(credentials: Credentials) -> httpx.BasicAuth:
    return httpx.BasicAuth(credentials.username, credentials.password)


class GatewayClient:
    """Wrapper for the gateway inventory API"""

    def __init__(self, http_client: httpx.Client, gateway_url: str, credentials: Credentials):
        self.client = http_client
        self.gateway_url = gateway_url
        self.auth = _basic_auth(credentials)

    def _get_json(self, operation: str, path: str) -> Any:
        try:
            response = self.client.get(f"{self.gateway_url}{path}", auth=self.auth)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise RequestError(operation, e, e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RequestError(operation, e) from e

    def get_version(self) -> GatewayVersion:
        """Fetch release and SHA of the gateway"""
        data = self._get_json("get version", "system/info")
        try:
            return GatewayVersion.model_validate(data)
        except ValidationError as e:
            raise RequestError("get version", e) from e

    def list_functions(self) -> List[FunctionDescriptor]:
        """List all deployed functions"""
        data = self._get_json("list functions", "system/functions")
        try:
            return _FUNCTION_LIST.validate_python(data)
        except ValidationError as e:
            raise RequestError("list functions", e) from e

    def get_replicas(self, name: str) -> FunctionDescriptor:
        """Fetch the live descriptor of one function, including available replicas"""
        data = self._get_json(f"get replicas for {name}", f"system/function/{name}")
        try:
            return FunctionDescriptor.model_validate(data)
        except ValidationError as e:
            raise RequestError(f"get replicas for {name}", e) from e


class ScaleClient:
    """Wrapper for the gateway scale API"""

    def __init__(
        self,
        http_client: httpx.Client,
        gateway_url: str,
        credentials: Credentials,
        dry_run: bool = False,
    ):
        self.client = http_client
        self.gateway_url = gateway_url
        self.auth = _basic_auth(credentials)
        self.dry_run = dry_run

    def send_scale_event(self, name: str, replicas: int) -> None:
        """
        Ask the gateway to scale a function.

        Failures are logged and not retried; the next cycle re-evaluates the function.
        """
        command = ScaleCommand(service_name=name, replicas=replicas)

        if self.dry_run:
            logger.info(f"dry-run: Scaling {command.service_name} to {command.replicas} replicas")
            return

        try:
            response = self.client.post(
                f"{self.gateway_url}system/scale-function/{command.service_name}",
                json=command.model_dump(by_alias=True),
                auth=self.auth,
            )
        except httpx.HTTPError as e:
            logger.error(f"Scale {command.service_name} failed: {e}")
            return

        logger.info(f"Scale {command.service_name} {response.status_code} {command.replicas}")
