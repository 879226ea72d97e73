import logging
from typing import Optional
from kdm.common.models import version
from kdm.types.models import K8sVersionInfo

logger = logging.getLogger(__name__)

#: Management-plane version assumed for development builds
RANCHER_VERSION_DEV = "2.3"

_DEV_PREFIXES = ("dev", "master")


def normalize_rancher_version(server_version: str) -> str:
    """Resolve the management-plane version used for compatibility checks."""
    server_version = (server_version or "").strip()
    if not server_version or server_version.startswith(_DEV_PREFIXES):
        return RANCHER_VERSION_DEV
    if server_version.startswith("v"):
        return server_version[1:]
    return server_version


class CompatibilityFilter:
    """Decides catalog entry eligibility for the running management-plane version.

    Two independent checks:

    * deprecated: the entry's own record says it must be ignored entirely,
      either because the running version reached ``deprecateRancherVersion``
      or because it is below ``minRancherVersion``. A satisfied min bound wins
      over ``maxRancherVersion`` so already upgraded clusters keep working.
    * excluded from current: the major version's record caps it with
      ``maxRancherVersion`` and the running version is past it.

    Malformed bounds raise `VersionParseError`.
    """

    def __init__(self, rancher_version: str) -> None:
        self.rancher_version = rancher_version

    def is_deprecated(self, info: Optional[K8sVersionInfo]) -> bool:
        if info is None:
            return False
        if info.deprecate_rancher_version and version.gte(
            self.rancher_version, info.deprecate_rancher_version
        ):
            return True
        if info.min_rancher_version and version.lt(
            self.rancher_version, info.min_rancher_version
        ):
            return True
        return False

    def is_excluded_from_current(self, major_info: Optional[K8sVersionInfo]) -> bool:
        if major_info is None:
            return False
        return bool(
            major_info.max_rancher_version
            and version.gt(self.rancher_version, major_info.max_rancher_version)
        )
