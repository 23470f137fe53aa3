"""
faas-idler - scale-to-zero controller for OpenFaaS-style gateways

Periodically scales functions labelled `com.openfaas.scale.zero=true` down to
zero replicas when Prometheus reports no invocations in the inactivity window.
Scaling back up is left to the gateway.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import httpx
from pydantic import ValidationError

from idler.common.core.http_client import HttpClientFactory

from .clients import GatewayClient, ScaleClient
from .config import IdlerConfig
from .core.credentials import load_credentials
from .core.exceptions import RequestError, StartupError
from .core.logging_config import setup_logging
from .models import Credentials
from .services.metrics import MetricsClient, PrometheusQuery
from .services.reconciler import Reconciler

logger = logging.getLogger("idler.main")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="faas-idler", description="Scale idle functions to zero replicas."
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="use dry-run for scaling events"
    )
    parser.add_argument(
        "--once", action="store_true", help="run a single reconciliation cycle and exit"
    )
    return parser.parse_args(argv)


def load_config(dry_run: bool) -> IdlerConfig:
    overrides = {"DRY_RUN": True} if dry_run else {}
    try:
        return IdlerConfig(**overrides)
    except ValidationError as e:
        raise StartupError(f"Failed to load configuration: {e}") from e


def check_gateway(gateway: GatewayClient) -> None:
    """Confirm the gateway is reachable and log its version."""
    try:
        version = gateway.get_version()
    except RequestError as e:
        raise StartupError(f"Unable to reach gateway at {gateway.gateway_url}: {e}") from e
    logger.info(f"Gateway version: {version.version.release}, SHA: {version.version.sha}")


def create_reconciler(
    config: IdlerConfig, http_client: httpx.Client, credentials: Credentials
) -> Reconciler:
    gateway = GatewayClient(http_client, config.GATEWAY_URL, credentials)
    scaler = ScaleClient(http_client, config.GATEWAY_URL, credentials, dry_run=config.DRY_RUN)
    metrics = MetricsClient(
        PrometheusQuery(config.PROMETHEUS_HOST, config.PROMETHEUS_PORT, http_client)
    )
    return Reconciler(gateway, scaler, metrics, inactivity_duration=config.INACTIVITY_DURATION)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.dry_run)
    except StartupError as e:
        sys.stderr.write(f"{e}\n")
        return 1

    setup_logging(config.WRITE_DEBUG)

    if not config.GATEWAY_URL:
        logger.error("gateway_url (faas-netes/faas-swarm) is required.")
        return 1

    credentials = load_credentials(config)

    factory = HttpClientFactory(config)
    factory.configure_global_settings()

    with factory.create_sync_client() as client:
        reconciler = create_reconciler(config, client, credentials)
        try:
            check_gateway(reconciler.gateway)
        except StartupError as e:
            logger.error(str(e))
            return 1

        logger.info(
            f"dry_run: {config.DRY_RUN}, gateway_url: {config.GATEWAY_URL}, "
            f"inactivity_duration: {config.INACTIVITY_DURATION}"
        )

        if args.once:
            reconciler.reconcile()
            return 0

        reconciler.run_forever(config.RECONCILE_INTERVAL)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
