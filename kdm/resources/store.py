import logging
from kdm.resources.base import BaseResource
from kdm.resources.kinds import MetadataKind
from kdm.types.models import MetadataObject

logger = logging.getLogger(__name__)


class ObjectStore:
    """Keyed object store the reconciliation core persists through.

    Implementations raise `NotFoundError` from `get`, `AlreadyExistsError`
    from `create` and `ConflictError` from `update`; any other failure is a
    `StoreError`.
    """

    async def get(self, kind: MetadataKind, namespace: str, name: str) -> MetadataObject:
        raise NotImplementedError()

    async def create(self, kind: MetadataKind, obj: MetadataObject) -> MetadataObject:
        raise NotImplementedError()

    async def update(self, kind: MetadataKind, obj: MetadataObject) -> MetadataObject:
        raise NotImplementedError()


class KubernetesObjectStore(BaseResource, ObjectStore):
    """Object store over namespaced management.cattle.io custom objects."""

    async def get(self, kind: MetadataKind, namespace: str, name: str) -> MetadataObject:
        body = await self.get_custom_object(
            namespace, kind.PLURAL_NAME, name, kind=kind.KIND
        )
        return MetadataObject.from_body(body, kind.PAYLOAD_FIELD)

    async def create(self, kind: MetadataKind, obj: MetadataObject) -> MetadataObject:
        logger.debug(f"Creating {kind} {obj.namespace}/{obj.name}")
        body = await self.create_custom_object(
            obj.namespace, kind.PLURAL_NAME, obj.as_body(), kind=kind.KIND
        )
        return MetadataObject.from_body(body, kind.PAYLOAD_FIELD)

    async def update(self, kind: MetadataKind, obj: MetadataObject) -> MetadataObject:
        logger.debug(
            f"Replacing {kind} {obj.namespace}/{obj.name} at resourceVersion {obj.resource_version}"
        )
        body = await self.replace_custom_object(
            obj.namespace, kind.PLURAL_NAME, obj.name, obj.as_body(), kind=kind.KIND
        )
        return MetadataObject.from_body(body, kind.PAYLOAD_FIELD)
