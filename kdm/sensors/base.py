"""Base sensor classes for operator monitoring.

This module defines the base OperatorSensor class that provides lifecycle hooks
for monitoring reconciliation passes. All hooks are no-ops by default, allowing
subclasses to override only the events they care about.

The hook pattern follows Faust's sensor design:
- Start hooks return an optional state dict for tracking the pass
- Complete hooks receive the state dict from their corresponding start hook
- All hooks are optional - sensors only implement what they need
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for driver metadata operator monitoring.

    All methods are no-ops by default. Subclasses override only the hooks
    they need to monitor.

    Example:
        class LoggingSensor(OperatorSensor):
            def on_reconcile_start(self, trigger_source: str) -> Dict:
                return {'start_time': time.time()}

            def on_reconcile_complete(self, trigger_source, state, success, error=None) -> None:
                duration = time.time() - state['start_time']
                logger.info(f"Reconciled metadata in {duration}s")
    """

    def on_reconcile_start(self, trigger_source: str) -> Optional[Dict[str, Any]]:
        """Called when a reconciliation pass begins.

        Args:
            trigger_source: What triggered the pass (timer, setting_change, startup)

        Returns:
            Optional state dict passed to on_reconcile_complete
        """
        pass

    def on_reconcile_complete(
        self,
        trigger_source: str,
        state: Optional[Dict[str, Any]],
        success: bool,
        error: Optional[Exception] = None,
    ) -> None:
        """Called when a reconciliation pass completes or aborts.

        Args:
            trigger_source: What triggered the pass
            state: State dict returned from on_reconcile_start
            success: Whether the pass ran to completion
            error: Exception that aborted the pass
        """
        pass

    def on_object_sync(self, kind: str, name: str, operation: str) -> None:
        """Called after the differ settles one persisted object.

        Args:
            kind: Object kind (RkeK8sSystemImage, RkeAddon, ...)
            name: Object name
            operation: create, update, update_labels, exists or noop
        """
        pass

    def on_object_sync_error(self, kind: str, name: str, error: Exception) -> None:
        """Called when a persistence call fails for one object."""
        pass

    def on_setting_write(self, name: str, success: bool) -> None:
        """Called after a named setting write is attempted."""
        pass
