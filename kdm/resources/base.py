from typing import Any, Dict
from kubernetes_asyncio.client import ApiClient, ApiException, CustomObjectsApi
from kdm.utils.errors import TRANSPORT_ERRORS, convert_client_error
from kdm.utils.objects import cached_property

CLIENT_ERRORS = (ApiException,) + TRANSPORT_ERRORS


class BaseResource:
    """Base for resources backed by management.cattle.io custom objects."""

    GROUP_NAME = "management.cattle.io"
    GROUP_VERSION = "v3"

    #: Set at operator startup so all resources share one connection pool
    shared_api_client: ApiClient = None

    def __init__(self, api_client: ApiClient = None) -> None:
        self._api_client = api_client

    @property
    def api_client(self) -> ApiClient:
        return self._api_client or self.shared_api_client

    @cached_property
    def custom_objects_api(self) -> CustomObjectsApi:
        return CustomObjectsApi(self.api_client)

    async def get_custom_object(
        self, namespace: str, plural: str, name: str, kind: str = None
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.get_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(ex, kind=kind, name=name) from ex

    async def create_custom_object(
        self, namespace: str, plural: str, body: Dict[str, Any], kind: str = None
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.create_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=namespace,
                plural=plural,
                body=body,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(
                ex, kind=kind, name=body["metadata"]["name"]
            ) from ex

    async def replace_custom_object(
        self,
        namespace: str,
        plural: str,
        name: str,
        body: Dict[str, Any],
        kind: str = None,
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.replace_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=namespace,
                plural=plural,
                name=name,
                body=body,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(ex, kind=kind, name=name) from ex

    async def get_cluster_custom_object(
        self, plural: str, name: str, kind: str = None
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.get_cluster_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                plural=plural,
                name=name,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(ex, kind=kind, name=name) from ex

    async def create_cluster_custom_object(
        self, plural: str, body: Dict[str, Any], kind: str = None
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.create_cluster_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                plural=plural,
                body=body,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(
                ex, kind=kind, name=body["metadata"]["name"]
            ) from ex

    async def replace_cluster_custom_object(
        self, plural: str, name: str, body: Dict[str, Any], kind: str = None
    ) -> Dict[str, Any]:
        try:
            return await self.custom_objects_api.replace_cluster_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                plural=plural,
                name=name,
                body=body,
            )
        except CLIENT_ERRORS as ex:
            raise convert_client_error(ex, kind=kind, name=name) from ex
