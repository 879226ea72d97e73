"""Shared fixtures for driver metadata tests."""

import copy
import pytest
from typing import Dict, List, Tuple

from kdm.metadata.catalog import parse_catalog
from kdm.resources.kinds import MetadataKind
from kdm.resources.settings import SettingsSink
from kdm.resources.store import ObjectStore
from kdm.types.models import MetadataObject
from kdm.types.settings import Settings
from kdm.utils.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    SettingsWriteError,
)

NAMESPACE = "cattle-global-data"


class InMemoryObjectStore(ObjectStore):
    """Object store double that keeps bodies in a dict and records every call."""

    def __init__(self) -> None:
        self.objects: Dict[Tuple[str, str, str], dict] = {}
        self.calls: List[Tuple[str, str, str]] = []
        self.race_on_create = set()
        self.fail_on: Dict[Tuple[str, str], Exception] = {}
        self._resource_version = 0

    def _key(self, kind: MetadataKind, namespace: str, name: str):
        return (kind.PLURAL_NAME, namespace, name)

    def _next_version(self) -> str:
        self._resource_version += 1
        return str(self._resource_version)

    def _check_failure(self, op: str, name: str) -> None:
        error = self.fail_on.get((op, name))
        if error is not None:
            raise error

    def seed(self, kind: MetadataKind, obj: MetadataObject) -> None:
        body = obj.as_body()
        body["metadata"]["resourceVersion"] = self._next_version()
        self.objects[self._key(kind, obj.namespace, obj.name)] = body

    def body(self, kind: MetadataKind, name: str, namespace: str = NAMESPACE) -> dict:
        return self.objects[self._key(kind, namespace, name)]

    def calls_of(self, op: str) -> List[Tuple[str, str, str]]:
        return [call for call in self.calls if call[0] == op]

    async def get(self, kind, namespace, name):
        self.calls.append(("get", kind.KIND, name))
        self._check_failure("get", name)
        body = self.objects.get(self._key(kind, namespace, name))
        if body is None:
            raise NotFoundError(f"{name} not found", kind=kind.KIND, name=name)
        return MetadataObject.from_body(copy.deepcopy(body), kind.PAYLOAD_FIELD)

    async def create(self, kind, obj):
        self.calls.append(("create", kind.KIND, obj.name))
        self._check_failure("create", obj.name)
        key = self._key(kind, obj.namespace, obj.name)
        if obj.name in self.race_on_create:
            self.seed(kind, obj.copy())
            raise AlreadyExistsError(f"{obj.name} exists", kind=kind.KIND, name=obj.name)
        if key in self.objects:
            raise AlreadyExistsError(f"{obj.name} exists", kind=kind.KIND, name=obj.name)
        body = obj.as_body()
        body["metadata"]["resourceVersion"] = self._next_version()
        self.objects[key] = body
        return MetadataObject.from_body(copy.deepcopy(body), kind.PAYLOAD_FIELD)

    async def update(self, kind, obj):
        self.calls.append(("update", kind.KIND, obj.name))
        self._check_failure("update", obj.name)
        key = self._key(kind, obj.namespace, obj.name)
        current = self.objects.get(key)
        if current is None:
            raise NotFoundError(f"{obj.name} not found", kind=kind.KIND, name=obj.name)
        if current["metadata"].get("resourceVersion") != obj.resource_version:
            raise ConflictError(f"{obj.name} modified", kind=kind.KIND, name=obj.name)
        body = obj.as_body()
        body["metadata"]["resourceVersion"] = self._next_version()
        self.objects[key] = body
        return MetadataObject.from_body(copy.deepcopy(body), kind.PAYLOAD_FIELD)


class RecordingSettingsSink(SettingsSink):
    """Settings sink double that records writes in order."""

    def __init__(self, fail_on: str = None) -> None:
        self.values: Dict[str, str] = {}
        self.writes: List[Tuple[str, str]] = []
        self.fail_on = fail_on

    async def set(self, name: str, value: str) -> None:
        self.writes.append((name, value))
        if name == self.fail_on:
            raise SettingsWriteError(f"cannot write {name}", setting=name)
        self.values[name] = value


def build_catalog(**overrides):
    data = {
        "K8sVersionRKESystemImages": {
            "v1.18.1-rancher1-1": {"etcd": "rancher/coreos-etcd:v3.4.3", "kubernetes": "rancher/hyperkube:v1.18.1"},
            "v1.18.9-rancher1-1": {"etcd": "rancher/coreos-etcd:v3.4.3", "kubernetes": "rancher/hyperkube:v1.18.9"},
            "v1.19.3-rancher1-1": {"etcd": "rancher/coreos-etcd:v3.4.13", "kubernetes": "rancher/hyperkube:v1.19.3"},
        },
        "K8sVersionServiceOptions": {
            "v1.18": {"kubeapi": {"tls-cipher-suites": "TLS_ECDHE_RSA"}, "kubelet": {"v": "2"}},
            "v1.19": {"kubeapi": {"tls-cipher-suites": "TLS_ECDHE_ECDSA"}},
        },
        "K8sVersionInfo": {},
        "RancherDefaultK8sVersions": {"2.5": "v1.19.3-rancher1-1", "default": "v1.18.9-rancher1-1"},
        "K8sVersionedTemplates": {
            "Cleanup": {"v1.18.9-rancher1-1": "cleanup-template-118", "v1.19.3-rancher1-1": "cleanup-template-119"},
            "Calico": {"v1.19.3-rancher1-1": "calico-template"},
        },
        "K8sVersionWindowsSystemImages": {
            "v1.18.9-rancher1-1": {"nginxProxy": "rancher/nginx-proxy:v1", "kubernetesBinariesPackage": "rancher/hyperkube:v1.18.9"},
        },
        "K8sVersionWindowsServiceOptions": {
            "v1.18.9-rancher1-1": {"kubelet": {"image-pull-progress-deadline": "30m"}},
        },
    }
    data.update(overrides)
    return parse_catalog(data)


@pytest.fixture
def store():
    return InMemoryObjectStore()


@pytest.fixture
def sink():
    return RecordingSettingsSink()


@pytest.fixture
def catalog():
    return build_catalog()


@pytest.fixture
def conf():
    return Settings(server_version="v2.5.1", namespace=NAMESPACE, data_path="", default_data_path="")
