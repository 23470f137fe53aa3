from typing import Callable

import httpx
import pytest
import respx

from gateway_fixtures import CREDENTIALS, GATEWAY_URL
from idler.controller.clients import GatewayClient, ScaleClient
from idler.controller.services.metrics import MetricsClient, PrometheusQuery
from idler.controller.services.reconciler import Reconciler


@pytest.fixture
def mock_router():
    """respx router for the gateway and Prometheus; unused routes are allowed."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def http_client(mock_router):
    with httpx.Client() as client:
        yield client


@pytest.fixture
def gateway_client(http_client) -> GatewayClient:
    return GatewayClient(http_client, GATEWAY_URL, CREDENTIALS)


@pytest.fixture
def make_reconciler(http_client) -> Callable[..., Reconciler]:
    def _make(dry_run: bool = False) -> Reconciler:
        return Reconciler(
            gateway=GatewayClient(http_client, GATEWAY_URL, CREDENTIALS),
            scaler=ScaleClient(http_client, GATEWAY_URL, CREDENTIALS, dry_run=dry_run),
            metrics=MetricsClient(PrometheusQuery("prometheus", 9090, http_client)),
        )

    return _make
