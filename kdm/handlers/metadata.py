import kopf
import logging
from kdm.metadata import MetadataController
from kdm.types.settings import KDM_REFRESH_INTERVAL_SECONDS

GROUP = "management.cattle.io"
VERSION = "v3"
PLURAL = "settings"


class TimerLogFilter(logging.Filter):
    def filter(self, record):
        """Timer logs are noisy so we filter them out."""
        return "Timer " not in record.getMessage()


kopf_logger = logging.getLogger("kopf.objects")
kopf_logger.addFilter(TimerLogFilter())


def is_metadata_config(name, memo: kopf.Memo, **kwargs) -> bool:
    return name == memo.conf.config_setting_name


@kopf.on.resume(GROUP, VERSION, PLURAL, when=is_metadata_config, errors=kopf.ErrorsMode.IGNORED)
@kopf.on.create(GROUP, VERSION, PLURAL, when=is_metadata_config, errors=kopf.ErrorsMode.IGNORED)
@kopf.on.update(
    GROUP, VERSION, PLURAL, field="value", when=is_metadata_config, errors=kopf.ErrorsMode.IGNORED
)
async def on_metadata_config_change(name, memo: kopf.Memo, logger, **kwargs):
    """Reconcile driver metadata when its configuration setting changes."""
    controller: MetadataController = memo.controller
    logger.info(f"Setting {name} changed, refreshing driver metadata")
    await controller.refresh(trigger_source="setting_change")


@kopf.timer(
    GROUP,
    VERSION,
    PLURAL,
    when=is_metadata_config,
    interval=KDM_REFRESH_INTERVAL_SECONDS,
    initial_delay=KDM_REFRESH_INTERVAL_SECONDS,
    errors=kopf.ErrorsMode.IGNORED,
)
async def refresh_metadata(memo: kopf.Memo, **kwargs):
    """Periodic pass; a failed pass is retried on the next tick."""
    controller: MetadataController = memo.controller
    await controller.refresh(trigger_source="timer")
