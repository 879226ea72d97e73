import logging
from collections import Counter
from typing import Iterable, List
from kdm.common.models.version import major_version_of
from kdm.metadata.compat import CompatibilityFilter
from kdm.metadata.differ import CatalogDiffer
from kdm.resources.kinds import (
    MetadataKind,
    RkeAddon,
    RkeK8sServiceOption,
    RkeK8sSystemImage,
    RkeK8sWindowsServiceOption,
    RkeK8sWindowsSystemImage,
)
from kdm.types.models import CatalogSnapshot

logger = logging.getLogger(__name__)


def _by_version(entry):
    return entry[0]


class ReconcileResult:
    """Outcome of reconciling one kind."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.operations: Counter = Counter()

    def __str__(self) -> str:
        ops = ", ".join(f"{op}={n}" for op, n in sorted(self.operations.items()))
        return f"{self.name}({ops or 'empty'})"


class SystemImageResult(ReconcileResult):
    """System image outcome plus the versions eligible to become current."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.candidates: List[str] = []
        self.deprecated: List[str] = []
        self.excluded: List[str] = []


class BaseReconciler:
    """Runs the differ over every catalog entry of its kinds.

    Entries are handled independently in sorted order; the first failure
    aborts the reconciler and propagates.
    """

    NAME: str = None

    def __init__(self, differ: CatalogDiffer, default_catalog: CatalogSnapshot) -> None:
        self.differ = differ
        self.default_catalog = default_catalog

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        raise NotImplementedError()

    def new_result(self) -> ReconcileResult:
        return ReconcileResult(self.NAME)

    async def reconcile(self, catalog: CatalogSnapshot) -> ReconcileResult:
        result = self.new_result()
        for kind in self.kinds(catalog):
            vendor_versions = kind.vendor_versions(self.default_catalog)
            for version, payload in sorted(kind.entries(catalog), key=_by_version):
                operation = await self.differ.upsert(
                    kind, version, payload, version in vendor_versions
                )
                result.operations[operation] += 1
        return result


class ServiceOptionReconciler(BaseReconciler):
    NAME = "service-options"

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        return [RkeK8sServiceOption()]


class AddonReconciler(BaseReconciler):
    NAME = "addons"

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        return [RkeAddon(addon) for addon in sorted(catalog.versioned_templates)]


class WindowsSystemImageReconciler(BaseReconciler):
    NAME = "windows-system-images"

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        return [RkeK8sWindowsSystemImage()]


class WindowsServiceOptionReconciler(BaseReconciler):
    NAME = "windows-service-options"

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        return [RkeK8sWindowsServiceOption()]


class SystemImageReconciler(BaseReconciler):
    """Reconciles system image sets gated by management-plane compatibility.

    Deprecated entries are skipped entirely, existing objects stay as they
    are. Entries whose major version is capped below the running version are
    persisted but never become a current candidate.
    """

    NAME = "system-images"

    def __init__(
        self,
        differ: CatalogDiffer,
        default_catalog: CatalogSnapshot,
        compat: CompatibilityFilter,
    ) -> None:
        super().__init__(differ, default_catalog)
        self.compat = compat

    def kinds(self, catalog: CatalogSnapshot) -> Iterable[MetadataKind]:
        return [RkeK8sSystemImage()]

    def new_result(self) -> SystemImageResult:
        return SystemImageResult(self.NAME)

    async def reconcile(self, catalog: CatalogSnapshot) -> SystemImageResult:
        result = self.new_result()
        kind = RkeK8sSystemImage()
        vendor_versions = kind.vendor_versions(self.default_catalog)
        for version, payload in sorted(kind.entries(catalog), key=_by_version):
            if self.compat.is_deprecated(catalog.version_info.get(version)):
                result.deprecated.append(version)
                continue
            operation = await self.differ.upsert(
                kind, version, payload, version in vendor_versions
            )
            result.operations[operation] += 1
            major = major_version_of(version)
            if self.compat.is_excluded_from_current(catalog.version_info.get(major)):
                result.excluded.append(version)
                continue
            result.candidates.append(version)
        logger.debug(
            f"driverMetadata deprecated {result.deprecated} "
            f"max incompatible versions {result.excluded}"
        )
        return result
