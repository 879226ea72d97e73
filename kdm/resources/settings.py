import logging
from kdm.resources.base import BaseResource
from kdm.utils.errors import NotFoundError, SettingsWriteError, StoreError

logger = logging.getLogger(__name__)


class SettingsSink:
    """Named string settings the aggregate is published to."""

    async def set(self, name: str, value: str) -> None:
        raise NotImplementedError()


class KubernetesSettingsSink(BaseResource, SettingsSink):
    """Writes cluster scoped management.cattle.io/v3 Setting objects."""

    KIND = "Setting"
    PLURAL_NAME = "settings"

    async def set(self, name: str, value: str) -> None:
        try:
            try:
                setting = await self.get_cluster_custom_object(
                    self.PLURAL_NAME, name, kind=self.KIND
                )
            except NotFoundError:
                await self.create_cluster_custom_object(
                    self.PLURAL_NAME,
                    {
                        "apiVersion": f"{self.GROUP_NAME}/{self.GROUP_VERSION}",
                        "kind": self.KIND,
                        "metadata": {"name": name},
                        "value": value,
                    },
                    kind=self.KIND,
                )
                logger.info(f"Created setting {name}")
                return
            if setting.get("value") == value:
                logger.debug(f"Setting {name} unchanged")
                return
            setting["value"] = value
            await self.replace_cluster_custom_object(
                self.PLURAL_NAME, name, setting, kind=self.KIND
            )
            logger.info(f"Updated setting {name}")
        except StoreError as e:
            raise SettingsWriteError(f"Failed to write setting {name}: {e}", setting=name) from e

