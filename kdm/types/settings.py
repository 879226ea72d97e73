import os
from typing import Any

_TRUE, _FALSE = {"True", "true", "yes", "1"}, {"False", "false", "no", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Version of the running management plane; dev builds resolve to RANCHER_VERSION_DEV
SERVER_VERSION = str(_getenv("SERVER_VERSION", "dev"))

#: Catalog snapshot to reconcile (JSON). Empty means reconcile the vendor defaults.
KDM_DATA_PATH = str(_getenv("KDM_DATA_PATH", ""))

#: Vendor shipped default catalog (JSON), source of the provenance label
KDM_DEFAULT_DATA_PATH = str(_getenv("KDM_DEFAULT_DATA_PATH", ""))

#: Namespace all metadata objects are persisted in
KDM_NAMESPACE = str(_getenv("KDM_NAMESPACE", "cattle-global-data"))

#: Seconds between periodic reconciliation passes
KDM_REFRESH_INTERVAL_SECONDS = float(_getenv("KDM_REFRESH_INTERVAL_SECONDS", 1440 * 60))

#: Setting object whose timer and change events trigger a pass
KDM_CONFIG_SETTING_NAME = str(_getenv("KDM_CONFIG_SETTING_NAME", "rke-metadata-config"))

#: Start the Prometheus metrics endpoint
METRICS_ENABLED = bool(_getenv("METRICS_ENABLED", True))

#: Port of the Prometheus metrics endpoint
METRICS_PORT = int(_getenv("METRICS_PORT", 8000))


class Settings:
    """Operator settings"""

    server_version: str = SERVER_VERSION
    data_path: str = KDM_DATA_PATH
    default_data_path: str = KDM_DEFAULT_DATA_PATH
    namespace: str = KDM_NAMESPACE
    config_setting_name: str = KDM_CONFIG_SETTING_NAME
    metrics_enabled: bool = METRICS_ENABLED
    metrics_port: int = METRICS_PORT

    def __init__(
        self,
        *args,
        server_version: str = None,
        data_path: str = None,
        default_data_path: str = None,
        namespace: str = None,
        config_setting_name: str = None,
        metrics_enabled: bool = None,
        metrics_port: int = None,
        **kwargs,
    ):
        if server_version is not None:
            self.server_version = server_version

        if data_path is not None:
            self.data_path = data_path

        if default_data_path is not None:
            self.default_data_path = default_data_path

        if namespace is not None:
            self.namespace = namespace

        if config_setting_name is not None:
            self.config_setting_name = config_setting_name

        if metrics_enabled is not None:
            self.metrics_enabled = metrics_enabled

        if metrics_port is not None:
            self.metrics_port = metrics_port
