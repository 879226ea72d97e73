import copy
import logging
from typing import Any
from kdm.resources.kinds import MetadataKind
from kdm.resources.store import ObjectStore
from kdm.sensors.base import OperatorSensor
from kdm.utils.errors import AlreadyExistsError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

CREATE = "create"
EXISTS = "exists"
UPDATE = "update"
UPDATE_LABELS = "update_labels"
NOOP = "noop"


class CatalogDiffer:
    """Create-or-update decision for one catalog entry against persisted state.

    * missing object: create it with the catalog payload and the provenance
      label; losing the create race to another writer is not an error.
    * payload unchanged: only the provenance label is reconciled.
    * payload changed: the payload is replaced and labels are left as they
      are; they converge on the next pass once the payload matches.

    The persisted object is never mutated in place, updates are submitted
    from a private copy carrying the resource version that was read.
    """

    def __init__(
        self, store: ObjectStore, namespace: str, sensor: OperatorSensor = None
    ) -> None:
        self.store = store
        self.namespace = namespace
        self.sensor = sensor or OperatorSensor()

    async def upsert(
        self, kind: MetadataKind, version: str, payload: Any, vendor: bool
    ) -> str:
        """Settle the object for `version` and return the operation performed."""
        name = kind.object_name(version)
        try:
            operation = await self._upsert(kind, name, version, payload, vendor)
        except StoreError as e:
            logger.error(f"Failed to reconcile {kind} {self.namespace}/{name}: {e}")
            self.sensor.on_object_sync_error(kind.KIND, name, e)
            raise
        logger.debug(f"{kind} {name}: {operation}")
        self.sensor.on_object_sync(kind.KIND, name, operation)
        return operation

    async def _upsert(
        self, kind: MetadataKind, name: str, version: str, payload: Any, vendor: bool
    ) -> str:
        try:
            current = await self.store.get(kind, self.namespace, name)
        except NotFoundError:
            obj = kind.new_object(
                version, self.namespace, copy.deepcopy(payload), vendor
            )
            try:
                await self.store.create(kind, obj)
            except AlreadyExistsError:
                logger.debug(f"{kind} {name} created concurrently")
                return EXISTS
            return CREATE

        if kind.payloads_equal(current.payload, payload):
            if current.labels.provenance_matches(vendor):
                return NOOP
            desired = current.copy()
            desired.labels = current.labels.with_vendor_provenance(vendor)
            await self.store.update(kind, desired)
            return UPDATE_LABELS

        desired = current.copy()
        desired.payload = copy.deepcopy(payload)
        await self.store.update(kind, desired)
        return UPDATE
