"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to multiple monitoring backends
simultaneously. Each backend receives the same events and can maintain
independent state. A failing backend never interrupts reconciliation.
"""

from typing import Set, Dict, Optional, Any
import logging

from kdm.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(PrometheusMonitor())

        state = delegate.on_reconcile_start("timer")
        delegate.on_reconcile_complete("timer", state, True)
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def on_reconcile_start(
        self, trigger_source: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        """Delegate reconcile_start to all sensors.

        Returns:
            Dict mapping each sensor to its returned state, or None if no sensors
        """
        if not self._sensors:
            return None

        states = {}
        for sensor in self._sensors:
            try:
                state = sensor.on_reconcile_start(trigger_source)
                if state is not None:
                    states[sensor] = state
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_reconcile_start: {e}",
                    exc_info=True,
                )

        return states if states else None

    def on_reconcile_complete(
        self,
        trigger_source: str,
        state: Optional[Dict[OperatorSensor, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Delegate reconcile_complete to all sensors with their specific state."""
        for sensor in self._sensors:
            try:
                sensor_state = state.get(sensor) if state else None
                sensor.on_reconcile_complete(trigger_source, sensor_state, success, error)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_reconcile_complete: {e}",
                    exc_info=True,
                )

    def on_object_sync(self, kind: str, name: str, operation: str) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_object_sync(kind, name, operation)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_object_sync: {e}",
                    exc_info=True,
                )

    def on_object_sync_error(self, kind: str, name: str, error: Exception) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_object_sync_error(kind, name, error)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_object_sync_error: {e}",
                    exc_info=True,
                )

    def on_setting_write(self, name: str, success: bool) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_setting_write(name, success)
            except Exception as e:
                logger.error(
                    f"Error in {sensor.__class__.__name__}.on_setting_write: {e}",
                    exc_info=True,
                )
