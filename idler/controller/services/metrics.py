"""
Metrics client for the gateway's Prometheus instance.

Queries the per-function invocation rate and parses each result series once,
at the retrieval boundary. Idleness is decided elsewhere.
"""

import logging
from typing import List

import httpx
from pydantic import ValidationError

from ..core.exceptions import MetricsQueryError
from ..models import MetricSample, MetricSeries, PrometheusResponse, PrometheusSeries

logger = logging.getLogger("idler.metrics")


def build_invocation_rate_query(function_name: str, duration: str) -> str:
    """Rate of gateway invocations for one function over `duration`, across all result codes."""
    return (
        f'sum(rate(gateway_function_invocation_total{{function_name="{function_name}", '
        f'code=~".*"}}[{duration}])) by (code, function_name)'
    )


class PrometheusQuery:
    """Executes instant queries against the Prometheus HTTP API."""

    def __init__(self, host: str, port: int, http_client: httpx.Client):
        self.host = host
        self.port = port
        self.client = http_client

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/api/v1/query"

    def fetch(self, query: str) -> PrometheusResponse:
        """
        Run a query and return the validated response body.

        Raises:
            MetricsQueryError: transport failure, non-2xx status, invalid JSON,
                a body that does not match the instant-query shape, or a
                response whose status is not "success".
        """
        logger.debug(f"Querying Prometheus: {query}")
        try:
            response = self.client.get(self.url, params={"query": query})
            response.raise_for_status()
            body = PrometheusResponse.model_validate_json(response.content)
        except httpx.HTTPStatusError as e:
            raise MetricsQueryError(query, e, e.response.status_code) from e
        except (httpx.HTTPError, ValidationError) as e:
            raise MetricsQueryError(query, e) from e

        if body.status != "success":
            raise MetricsQueryError(query, ValueError(f"unsuccessful response: {body.error}"))
        return body


def _parse_series(entry: PrometheusSeries) -> MetricSeries:
    function_name = entry.metric.get("function_name", "")
    raw_value = entry.value[1]
    try:
        return MetricSeries(function_name=function_name, value=float(raw_value))
    except (TypeError, ValueError) as e:
        logger.warning(f"Unable to convert value for metric {function_name}: {e}")
        return MetricSeries(function_name=function_name, error=str(e))


class MetricsClient:
    """Retrieves invocation-rate series per function."""

    def __init__(self, query: PrometheusQuery):
        self.query = query

    def query_invocation_rate(self, function_name: str, duration: str) -> List[MetricSeries]:
        """
        Return every result series of the invocation-rate query for a function.

        An empty list means the backend has no data for the window.
        """
        body = self.query.fetch(build_invocation_rate_query(function_name, duration))
        result = body.data.result if body.data else []
        return [_parse_series(entry) for entry in result]


def aggregate(function_name: str, series: List[MetricSeries]) -> MetricSample:
    """Sum the parsed values of the series that belong to `function_name`."""
    sample = MetricSample(function_name=function_name)
    for s in series:
        if s.function_name != function_name or s.error is not None:
            continue
        sample.value += s.value
    return sample
