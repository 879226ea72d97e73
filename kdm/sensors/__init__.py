"""Driver metadata operator sensor framework.

Non-invasive instrumentation of reconciliation passes through a hook-based
pattern inspired by Faust's sensor architecture.

Key components:
- OperatorSensor: Base class defining lifecycle hooks
- SensorDelegate: Fan-out of events to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter
"""

from kdm.sensors.base import OperatorSensor
from kdm.sensors.delegate import SensorDelegate
from kdm.sensors.prometheus import PrometheusMonitor
from kdm.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
