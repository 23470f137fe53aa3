"""
Reconciler - Periodic scale-to-zero of idle functions

One cycle: inventory -> invocation-rate metrics -> idle-detection policy ->
scale commands. Cycles never overlap and carry no state between them.
"""

import logging
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Callable, Dict, List

from ..core.exceptions import RequestError
from ..core.policy import is_idle, is_scale_candidate
from ..models import FunctionDescriptor, FunctionState, MetricOutcome, MetricResult
from .metrics import aggregate

if TYPE_CHECKING:
    from ..clients import GatewayClient, ScaleClient
    from .metrics import MetricsClient

logger = logging.getLogger("idler.reconciler")


def format_window(duration: timedelta) -> str:
    """Whole-minute range selector, e.g. timedelta(minutes=5) -> "5m"."""
    return f"{int(duration.total_seconds() // 60)}m"


class Reconciler:
    """
    Scales opted-in functions to zero once they stop receiving invocations.

    Failure handling per cycle:
    - inventory fetch failure aborts the cycle
    - metric or replica lookup failure skips that function only
    - scale command failure is logged by the scale client
    """

    def __init__(
        self,
        gateway: "GatewayClient",
        scaler: "ScaleClient",
        metrics: "MetricsClient",
        inactivity_duration: timedelta = timedelta(minutes=5),
    ):
        self.gateway = gateway
        self.scaler = scaler
        self.metrics = metrics
        self.inactivity_duration = inactivity_duration

    def build_metrics_map(self, functions: List[FunctionDescriptor]) -> Dict[str, MetricResult]:
        """
        Query the invocation rate of every function.

        A function with no series is only considered measured (at zero) when the
        gateway has never seen an invocation for it. Otherwise a gap in the
        metrics backend would scale down a function that has traffic.
        """
        window = format_window(self.inactivity_duration)
        results: Dict[str, MetricResult] = {}

        for fn in functions:
            try:
                series = self.metrics.query_invocation_rate(fn.name, window)
            except RequestError as e:
                logger.error(f"Metrics query for {fn.name} failed: {e}")
                results[fn.name] = MetricResult.unknown(fn.name)
                continue

            for s in series:
                logger.debug(f"{fn.name}\tseries: {s}")

            if not series and fn.invocation_count != 0:
                results[fn.name] = MetricResult.unknown(fn.name)
                continue

            if series and all(s.error is not None for s in series):
                logger.warning(
                    f"{fn.name}: no series value could be parsed, measuring 0 "
                    f"(invocation count: {fn.invocation_count})"
                )

            results[fn.name] = MetricResult.measured(aggregate(fn.name, series))

        return results

    def evaluate(self, fn: FunctionDescriptor, result: MetricResult) -> FunctionState:
        """Decide, and act on, a single function for this cycle."""
        if not is_scale_candidate(fn.labels):
            logger.debug(f"Skip: {fn.name} due to missing label")
            return FunctionState.EXCLUDED

        if result.outcome is MetricOutcome.UNKNOWN:
            logger.debug(f"Skip: {fn.name} has no metrics for this cycle")
            return FunctionState.UNKNOWN_ACTIVE

        value = result.sample.value
        if not is_idle(value):
            logger.debug(f"{fn.name}\tactive: {value:f}")
            return FunctionState.ACTIVE

        logger.info(f"{fn.name}\tidle")

        # Live lookup so an already scaled-down function gets no new command.
        try:
            live = self.gateway.get_replicas(fn.name)
        except RequestError as e:
            logger.error(f"Replica lookup for {fn.name} failed: {e}")
            return FunctionState.UNKNOWN_ACTIVE

        if not live.available_replicas:
            return FunctionState.IDLE_ALREADY_ZERO

        self.scaler.send_scale_event(fn.name, 0)
        return FunctionState.IDLE_SCALED

    def reconcile(self) -> None:
        """Run exactly one reconciliation cycle."""
        try:
            functions = self.gateway.list_functions()
        except RequestError as e:
            logger.error(f"Reconcile aborted: {e}")
            return

        metrics = self.build_metrics_map(functions)

        for fn in functions:
            result = metrics.get(fn.name, MetricResult.unknown(fn.name))
            self.evaluate(fn, result)

    def run_forever(
        self, interval: timedelta, sleep: Callable[[float], None] = time.sleep
    ) -> None:
        """Reconcile, then sleep for `interval`, until the process is killed."""
        logger.info(f"Reconciler started (interval: {interval.total_seconds()}s)")
        while True:
            try:
                self.reconcile()
            except Exception as e:
                logger.exception(f"Reconcile failed: {e}")
            sleep(interval.total_seconds())
