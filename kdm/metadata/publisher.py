import logging
from kdm.metadata.aggregator import VersionAggregate
from kdm.resources.settings import SettingsSink
from kdm.sensors.base import OperatorSensor
from kdm.utils.errors import SettingsWriteError, StoreError
from kdm.utils.helpers import marshal

logger = logging.getLogger(__name__)

KUBERNETES_VERSION_TO_SYSTEM_IMAGES = "kubernetes-version-to-system-images"
KUBERNETES_VERSIONS_CURRENT = "kubernetes-versions-current"
KUBERNETES_VERSION_TO_SERVICE_OPTIONS = "kubernetes-version-to-service-options"
KUBERNETES_VERSION = "kubernetes-version"
UI_KUBERNETES_SUPPORTED_VERSIONS = "ui-kubernetes-supported-versions"
UI_KUBERNETES_DEFAULT_VERSION = "ui-kubernetes-default-version"


class SettingsPublisher:
    """Writes a version aggregate to its named settings, stopping at the first failure."""

    def __init__(self, sink: SettingsSink, sensor: OperatorSensor = None) -> None:
        self.sink = sink
        self.sensor = sensor or OperatorSensor()

    async def publish(self, aggregate: VersionAggregate) -> None:
        await self._set(
            KUBERNETES_VERSION_TO_SYSTEM_IMAGES, marshal(aggregate.system_images)
        )
        await self._set(
            KUBERNETES_VERSIONS_CURRENT, ",".join(aggregate.current_versions)
        )
        await self._set(
            KUBERNETES_VERSION_TO_SERVICE_OPTIONS, marshal(aggregate.service_options)
        )
        if aggregate.default_version:
            await self._set(KUBERNETES_VERSION, aggregate.default_version)
        if aggregate.supported_range is not None:
            await self._set(UI_KUBERNETES_SUPPORTED_VERSIONS, aggregate.supported_range)
            await self._set(UI_KUBERNETES_DEFAULT_VERSION, aggregate.default_range)

    async def _set(self, name: str, value: str) -> None:
        try:
            await self.sink.set(name, value)
        except SettingsWriteError:
            self.sensor.on_setting_write(name, False)
            raise
        except StoreError as e:
            self.sensor.on_setting_write(name, False)
            raise SettingsWriteError(f"Failed to write setting {name}: {e}", setting=name) from e
        self.sensor.on_setting_write(name, True)
        logger.debug(f"Setting {name}={value}")
