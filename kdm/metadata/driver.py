import asyncio
import logging
import os
from kdm.metadata.aggregator import VersionAggregate, VersionAggregator
from kdm.metadata.catalog import load_catalog, load_optional_catalog
from kdm.metadata.compat import CompatibilityFilter, normalize_rancher_version
from kdm.metadata.differ import CatalogDiffer
from kdm.metadata.publisher import SettingsPublisher
from kdm.metadata.reconcilers import (
    AddonReconciler,
    ServiceOptionReconciler,
    SystemImageReconciler,
    WindowsServiceOptionReconciler,
    WindowsSystemImageReconciler,
)
from kdm.resources.settings import SettingsSink
from kdm.resources.store import ObjectStore
from kdm.sensors.base import OperatorSensor
from kdm.types.models import CatalogSnapshot
from kdm.types.settings import Settings

logger = logging.getLogger(__name__)


class MetadataController:
    """Entry point of a reconciliation pass.

    Runs the system image reconciler first, publishes the version aggregate
    it feeds, then reconciles service options, addons and the Windows
    variants. Passes are serialized; the first error aborts the pass and is
    raised to the caller, which retries on its next trigger.
    """

    def __init__(
        self,
        store: ObjectStore,
        sink: SettingsSink,
        conf: Settings = None,
        default_catalog: CatalogSnapshot = None,
        sensor: OperatorSensor = None,
    ) -> None:
        self.store = store
        self.sink = sink
        self.conf = conf or Settings()
        self.default_catalog = (
            default_catalog
            if default_catalog is not None
            else load_optional_catalog(self.conf.default_data_path)
        )
        self.sensor = sensor or OperatorSensor()
        self.rancher_version = normalize_rancher_version(self.conf.server_version)
        self._lock = asyncio.Lock()

    async def refresh(self, trigger_source: str = "timer") -> VersionAggregate:
        """Reconcile the configured catalog, or the vendor defaults when none is available."""
        path = self.conf.data_path
        if path and os.path.exists(path):
            catalog = load_catalog(path)
        else:
            if path:
                logger.warning(f"Catalog {path} not found, reconciling vendor defaults")
            catalog = self.default_catalog
        return await self.reconcile(catalog, trigger_source=trigger_source)

    async def reconcile(
        self, catalog: CatalogSnapshot, trigger_source: str = "manual"
    ) -> VersionAggregate:
        async with self._lock:
            logger.info(
                f"Reconciling driver metadata for management plane {self.rancher_version} ({trigger_source})"
            )
            state = self.sensor.on_reconcile_start(trigger_source)
            try:
                aggregate = await self._reconcile(catalog)
            except Exception as e:
                logger.error(f"Driver metadata reconciliation failed: {e}")
                self.sensor.on_reconcile_complete(trigger_source, state, False, e)
                raise
            self.sensor.on_reconcile_complete(trigger_source, state, True)
            return aggregate

    async def _reconcile(self, catalog: CatalogSnapshot) -> VersionAggregate:
        differ = CatalogDiffer(self.store, self.conf.namespace, sensor=self.sensor)

        system_images = SystemImageReconciler(
            differ, self.default_catalog, CompatibilityFilter(self.rancher_version)
        )
        result = await system_images.reconcile(catalog)
        aggregate = VersionAggregator(self.rancher_version).aggregate(
            result.candidates, catalog.service_options, catalog.default_k8s_versions
        )
        await SettingsPublisher(self.sink, sensor=self.sensor).publish(aggregate)
        results = [result]

        for reconciler in (
            ServiceOptionReconciler(differ, self.default_catalog),
            AddonReconciler(differ, self.default_catalog),
            WindowsSystemImageReconciler(differ, self.default_catalog),
            WindowsServiceOptionReconciler(differ, self.default_catalog),
        ):
            results.append(await reconciler.reconcile(catalog))

        logger.info(
            f"Driver metadata reconciled: {', '.join(str(r) for r in results)}; "
            f"current versions {aggregate.current_versions}, default {aggregate.default_version}"
        )
        return aggregate
