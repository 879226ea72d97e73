import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional
from kdm.common.models.version import major_version_of
from kdm.utils.errors import DefaultVersionError

logger = logging.getLogger(__name__)

DEFAULT_VERSION_KEY = "default"


class VersionAggregate:
    """Settings derived from one reconciliation pass."""

    def __init__(
        self,
        max_version_for_major: Dict[str, str],
        service_options: Dict[str, Any],
        default_version: Optional[str],
        supported_range: Optional[str] = None,
        default_range: Optional[str] = None,
    ) -> None:
        self.max_version_for_major = max_version_for_major
        self.service_options = service_options
        self.default_version = default_version
        self.supported_range = supported_range
        self.default_range = default_range

    @property
    def major_versions(self) -> List[str]:
        return sorted(self.max_version_for_major)

    @property
    def current_versions(self) -> List[str]:
        return sorted(self.max_version_for_major.values())

    @property
    def system_images(self) -> Dict[str, None]:
        """Current version -> system images; values are resolved by consumers from the objects."""
        return {version: None for version in self.max_version_for_major.values()}

    def __repr__(self) -> str:
        return (
            f"VersionAggregate<current={self.current_versions} "
            f"default={self.default_version} supported={self.supported_range!r}>"
        )


class VersionAggregator:
    """Computes the current Kubernetes versions and UI ranges.

    The representative of each major version line is the lexicographic
    maximum of its candidates. This is plain string ordering, matching how
    catalog version tags have always been ranked, so ``v1.18.10`` loses to
    ``v1.18.9``.
    """

    def __init__(self, rancher_version: str) -> None:
        self.rancher_version = rancher_version

    def select_current(self, candidates: Iterable[str]) -> Dict[str, str]:
        max_version_for_major: Dict[str, str] = {}
        for version in candidates:
            major = major_version_of(version)
            current = max_version_for_major.get(major)
            if current is None or version > current:
                max_version_for_major[major] = version
        return max_version_for_major

    def resolve_default_version(self, default_k8s_versions: Mapping[str, str]) -> str:
        default_version = default_k8s_versions.get(self.rancher_version)
        if not default_version:
            default_version = default_k8s_versions.get(DEFAULT_VERSION_KEY)
        if not default_version:
            raise DefaultVersionError(
                f"No default Kubernetes version for {self.rancher_version} "
                f"and no {DEFAULT_VERSION_KEY!r} fallback"
            )
        return default_version

    def aggregate(
        self,
        candidates: Iterable[str],
        service_options: Mapping[str, Any],
        default_k8s_versions: Mapping[str, str],
    ) -> VersionAggregate:
        max_version_for_major = self.select_current(candidates)

        # options are keyed by major version line; a missing line publishes null
        current_service_options = {
            version: service_options.get(major)
            for major, version in max_version_for_major.items()
        }

        supported_range = default_range = None
        if max_version_for_major:
            default_version = self.resolve_default_version(default_k8s_versions)
            min_major = sorted(max_version_for_major)[0]
            max_major = major_version_of(default_version)
            supported_range = f">={min_major}.x <={max_major}.x"
            default_range = f"<={max_major}.x"
        else:
            try:
                default_version = self.resolve_default_version(default_k8s_versions)
            except DefaultVersionError:
                logger.warning("No current versions and no default Kubernetes version to publish")
                default_version = None

        aggregate = VersionAggregate(
            max_version_for_major,
            current_service_options,
            default_version,
            supported_range=supported_range,
            default_range=default_range,
        )
        logger.debug(f"Aggregated {aggregate!r}")
        return aggregate
