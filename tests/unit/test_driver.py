"""Unit tests for the reconciliation driver."""

import json
import pytest
from unittest.mock import ANY, Mock

from kdm.metadata.driver import MetadataController
from kdm.resources.kinds import RkeK8sSystemImage
from kdm.sensors.base import OperatorSensor
from kdm.types.models import CatalogSnapshot
from kdm.types.settings import Settings
from kdm.utils.errors import CatalogLoadError, DefaultVersionError, StoreError
from tests.unit.conftest import NAMESPACE, RecordingSettingsSink, build_catalog


class OrderedSettingsSink(RecordingSettingsSink):
    """Logs setting writes into the store call log so ordering can be asserted."""

    def __init__(self, store) -> None:
        super().__init__()
        self.store = store

    async def set(self, name, value):
        self.store.calls.append(("set", "Setting", name))
        await super().set(name, value)


@pytest.fixture
def controller(store, sink, conf, catalog):
    return MetadataController(store, sink, conf=conf, default_catalog=catalog)


class TestReconcile:
    """Full reconciliation passes."""

    async def test_publishes_settings(self, controller, sink, catalog):
        aggregate = await controller.reconcile(catalog)

        assert aggregate.current_versions == ["v1.18.9-rancher1-1", "v1.19.3-rancher1-1"]
        assert sink.values["kubernetes-versions-current"] == "v1.18.9-rancher1-1,v1.19.3-rancher1-1"
        # 2.5.1 has no exact entry in the default table
        assert sink.values["kubernetes-version"] == "v1.18.9-rancher1-1"
        assert sink.values["ui-kubernetes-supported-versions"] == ">=v1.18.x <=v1.18.x"
        assert json.loads(sink.values["kubernetes-version-to-service-options"]) == {
            "v1.18.9-rancher1-1": {
                "kubeapi": {"tls-cipher-suites": "TLS_ECDHE_RSA"},
                "kubelet": {"v": "2"},
            },
            "v1.19.3-rancher1-1": {"kubeapi": {"tls-cipher-suites": "TLS_ECDHE_ECDSA"}},
        }

    async def test_persists_every_kind(self, controller, store, catalog):
        await controller.reconcile(catalog)

        kinds = {kind for _, kind, _ in store.calls_of("create")}
        assert kinds == {"RkeK8sSystemImage", "RkeK8sServiceOption", "RkeAddon", "RkeK8sWindowsSystemImage"}
        names = {name for _, _, name in store.calls_of("create")}
        assert {"wv1.18.9-rancher1-1", "cleanup-v1.18.9-rancher1-1", "v1.18"} <= names
        # windows service options share the kind but not the name
        assert store.calls_of("create")[-1] == ("create", "RkeK8sServiceOption", "wv1.18.9-rancher1-1")

    async def test_system_images_and_settings_come_first(self, store, conf, catalog):
        controller = MetadataController(
            store, OrderedSettingsSink(store), conf=conf, default_catalog=catalog
        )
        await controller.reconcile(catalog)

        writes = [op for op, _, _ in store.calls if op != "get"]
        kinds = [kind for op, kind, _ in store.calls if op != "get"]
        assert writes[:3] == ["create"] * 3
        assert kinds[:3] == ["RkeK8sSystemImage"] * 3
        assert writes[3:9] == ["set"] * 6
        assert "set" not in writes[9:]

    async def test_second_pass_changes_nothing(self, controller, store, catalog):
        await controller.reconcile(catalog)
        creates = len(store.calls_of("create"))

        await controller.reconcile(catalog)
        assert len(store.calls_of("create")) == creates
        assert store.calls_of("update") == []

    async def test_changed_payload_is_updated(self, controller, store, catalog):
        await controller.reconcile(catalog)

        catalog.system_images["v1.19.3-rancher1-1"] = {"etcd": "rancher/coreos-etcd:v3.4.14"}
        await controller.reconcile(catalog)

        assert store.calls_of("update") == [
            ("update", "RkeK8sSystemImage", "v1.19.3-rancher1-1")
        ]
        body = store.body(RkeK8sSystemImage(), "v1.19.3-rancher1-1")
        assert body["systemImages"] == {"etcd": "rancher/coreos-etcd:v3.4.14"}

    async def test_deprecated_object_is_left_alone(self, store, sink, conf, catalog):
        kind = RkeK8sSystemImage()
        store.seed(kind, kind.new_object("v1.18.1-rancher1-1", NAMESPACE, {"etcd": "old"}, vendor=True))
        deprecated = build_catalog(
            K8sVersionInfo={"v1.18.1-rancher1-1": {"deprecateRancherVersion": "2.5"}}
        )
        controller = MetadataController(store, sink, conf=conf, default_catalog=catalog)
        await controller.reconcile(deprecated)

        assert store.body(kind, "v1.18.1-rancher1-1")["systemImages"] == {"etcd": "old"}
        assert ("get", "RkeK8sSystemImage", "v1.18.1-rancher1-1") not in store.calls

    async def test_first_failure_aborts_pass(self, controller, store, sink, catalog):
        store.fail_on[("create", "v1.19.3-rancher1-1")] = StoreError("forbidden")
        with pytest.raises(StoreError):
            await controller.reconcile(catalog)

        assert sink.writes == []
        assert store.calls_of("create")[-1] == ("create", "RkeK8sSystemImage", "v1.19.3-rancher1-1")

    async def test_missing_default_version_aborts_pass(self, controller, sink):
        with pytest.raises(DefaultVersionError):
            await controller.reconcile(build_catalog(RancherDefaultK8sVersions={}))
        assert sink.writes == []

    async def test_empty_catalog(self, controller, store, sink):
        await controller.reconcile(CatalogSnapshot.empty())

        assert store.calls == []
        assert sink.values["kubernetes-versions-current"] == ""
        assert "ui-kubernetes-supported-versions" not in sink.values

    async def test_dev_build_uses_dev_version(self, store, sink, catalog):
        conf = Settings(server_version="master-head", namespace=NAMESPACE)
        controller = MetadataController(store, sink, conf=conf, default_catalog=catalog)
        assert controller.rancher_version == "2.3"


class TestRefresh:
    """Catalog selection for timer and setting triggered passes."""

    async def test_falls_back_to_defaults(self, controller, sink):
        await controller.refresh()
        assert sink.values["kubernetes-versions-current"] == "v1.18.9-rancher1-1,v1.19.3-rancher1-1"

    async def test_missing_file_falls_back_to_defaults(self, controller, conf, sink, tmp_path):
        conf.data_path = str(tmp_path / "missing.json")
        await controller.refresh()
        assert sink.values["kubernetes-version"] == "v1.18.9-rancher1-1"

    async def test_reads_configured_catalog(self, controller, conf, store, sink, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(
            json.dumps(
                {
                    "K8sVersionRKESystemImages": {
                        "v1.20.4-rancher1-1": {"kubernetes": "rancher/hyperkube:v1.20.4"}
                    },
                    "RancherDefaultK8sVersions": {"default": "v1.20.4-rancher1-1"},
                }
            )
        )
        conf.data_path = str(path)
        await controller.refresh()

        assert sink.values["kubernetes-versions-current"] == "v1.20.4-rancher1-1"
        # not shipped in the vendor defaults
        assert "labels" not in store.body(RkeK8sSystemImage(), "v1.20.4-rancher1-1")["metadata"]

    async def test_malformed_catalog(self, controller, conf, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        conf.data_path = str(path)
        with pytest.raises(CatalogLoadError):
            await controller.refresh()


class TestSensor:
    async def test_success(self, store, sink, conf, catalog):
        sensor = Mock(spec=OperatorSensor)
        sensor.on_reconcile_start.return_value = {"start_time": 0}
        controller = MetadataController(store, sink, conf=conf, default_catalog=catalog, sensor=sensor)
        await controller.reconcile(catalog, trigger_source="timer")

        sensor.on_reconcile_start.assert_called_once_with("timer")
        sensor.on_reconcile_complete.assert_called_once_with("timer", {"start_time": 0}, True)

    async def test_failure(self, store, sink, conf, catalog):
        sensor = Mock(spec=OperatorSensor)
        sensor.on_reconcile_start.return_value = None
        store.fail_on[("get", "v1.18.1-rancher1-1")] = StoreError("unavailable")
        controller = MetadataController(store, sink, conf=conf, default_catalog=catalog, sensor=sensor)
        with pytest.raises(StoreError):
            await controller.reconcile(catalog, trigger_source="setting_change")

        sensor.on_reconcile_complete.assert_called_once_with("setting_change", None, False, ANY)
