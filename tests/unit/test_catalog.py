"""Unit tests for catalog loading."""

import json
import pytest

from kdm.metadata.catalog import load_catalog, load_optional_catalog, parse_catalog
from kdm.utils.errors import CatalogLoadError


class TestParseCatalog:
    def test_full_document(self, catalog):
        assert sorted(catalog.system_images) == [
            "v1.18.1-rancher1-1",
            "v1.18.9-rancher1-1",
            "v1.19.3-rancher1-1",
        ]
        assert catalog.service_options["v1.18"]["kubelet"] == {"v": "2"}
        assert catalog.default_k8s_versions["default"] == "v1.18.9-rancher1-1"
        assert catalog.versioned_templates["Calico"] == {"v1.19.3-rancher1-1": "calico-template"}
        assert list(catalog.windows_system_images) == ["v1.18.9-rancher1-1"]
        assert list(catalog.windows_service_options) == ["v1.18.9-rancher1-1"]

    def test_version_info(self):
        catalog = parse_catalog(
            {
                "K8sVersionInfo": {
                    "v1.16": {"maxRancherVersion": "2.4.99"},
                    "v1.19.3-rancher1-1": {"minRancherVersion": "2.5.0", "deprecateRancherVersion": "2.6"},
                }
            }
        )
        assert catalog.version_info["v1.16"].max_rancher_version == "2.4.99"
        assert catalog.version_info["v1.16"].min_rancher_version is None
        info = catalog.version_info["v1.19.3-rancher1-1"]
        assert info.min_rancher_version == "2.5.0"
        assert info.deprecate_rancher_version == "2.6"

    def test_missing_sections_are_empty(self):
        catalog = parse_catalog({"K8sVersionRKESystemImages": {}})
        assert catalog.service_options == {}
        assert catalog.versioned_templates == {}
        assert catalog.version_info == {}

    def test_unknown_sections_are_ignored(self):
        catalog = parse_catalog({"K8sVersionServiceOptionsV2": {"v1.18": {}}, "CisConfigParams": {}})
        assert catalog.service_options == {}

    @pytest.mark.parametrize("data", [[], "catalog", None])
    def test_not_an_object(self, data):
        with pytest.raises(CatalogLoadError):
            parse_catalog(data)

    def test_invalid_section(self):
        with pytest.raises(CatalogLoadError):
            parse_catalog({"K8sVersionRKESystemImages": {"v1.18.9": "rancher/hyperkube"}})


class TestLoadCatalog:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"RancherDefaultK8sVersions": {"default": "v1.18.9"}}))
        assert load_catalog(str(path)).default_k8s_versions == {"default": "v1.18.9"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError):
            load_catalog(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{")
        with pytest.raises(CatalogLoadError):
            load_catalog(str(path))

    def test_optional_catalog(self, tmp_path):
        assert load_optional_catalog("").system_images == {}
        assert load_optional_catalog(str(tmp_path / "missing.json")).system_images == {}
