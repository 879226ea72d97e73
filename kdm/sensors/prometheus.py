"""Prometheus monitoring backend for the driver metadata operator.

PrometheusMonitor collects reconciliation events and exposes them as
Prometheus metrics:

1. Reconciliation pass health - duration, throughput, errors
2. Object sync - create / update / noop counts per kind, API errors
3. Settings writes
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import CollectorRegistry, Counter, Histogram, Gauge, REGISTRY

from kdm.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor.

    Example:
        monitor = PrometheusMonitor()

        state = monitor.on_reconcile_start("timer")
        monitor.on_reconcile_complete("timer", state, True)
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        self.reconcile_duration = Histogram(
            'kdm_reconcile_duration_seconds',
            'Time spent in one reconciliation pass',
            labelnames=['trigger_source', 'result'],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=registry,
        )

        self.reconcile_total = Counter(
            'kdm_reconcile_total',
            'Total number of reconciliation passes',
            labelnames=['trigger_source', 'result'],
            registry=registry,
        )

        self.reconcile_errors = Counter(
            'kdm_reconcile_errors_total',
            'Total number of aborted reconciliation passes',
            labelnames=['trigger_source', 'error_type'],
            registry=registry,
        )

        self.last_success_timestamp = Gauge(
            'kdm_reconcile_last_success_timestamp_seconds',
            'Unix time of the last pass that ran to completion',
            registry=registry,
        )

        self.object_sync_total = Counter(
            'kdm_object_sync_total',
            'Total number of persisted object decisions',
            labelnames=['kind', 'operation'],
            registry=registry,
        )

        self.object_sync_errors = Counter(
            'kdm_object_sync_errors_total',
            'Total number of failed persistence calls',
            labelnames=['kind', 'error_type'],
            registry=registry,
        )

        self.setting_writes = Counter(
            'kdm_setting_writes_total',
            'Total number of settings writes',
            labelnames=['setting', 'result'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def on_reconcile_start(self, trigger_source: str) -> Optional[Dict[str, Any]]:
        return {'start_time': time.monotonic()}

    def on_reconcile_complete(
        self,
        trigger_source: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        result = 'success' if success else 'error'
        if state and 'start_time' in state:
            duration = time.monotonic() - state['start_time']
            self.reconcile_duration.labels(
                trigger_source=trigger_source, result=result
            ).observe(duration)
        self.reconcile_total.labels(trigger_source=trigger_source, result=result).inc()
        if success:
            self.last_success_timestamp.set_to_current_time()
        elif error is not None:
            self.reconcile_errors.labels(
                trigger_source=trigger_source, error_type=type(error).__name__
            ).inc()

    def on_object_sync(self, kind: str, name: str, operation: str) -> None:
        self.object_sync_total.labels(kind=kind, operation=operation).inc()

    def on_object_sync_error(self, kind: str, name: str, error: Exception) -> None:
        self.object_sync_errors.labels(kind=kind, error_type=type(error).__name__).inc()

    def on_setting_write(self, name: str, success: bool) -> None:
        self.setting_writes.labels(
            setting=name, result='success' if success else 'error'
        ).inc()
