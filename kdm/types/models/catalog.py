from typing import Dict, Mapping, Optional
from kdm.types.base import BaseModel

#: component name -> image reference
SystemImages = Mapping[str, str]

#: service (etcd, kubeapi, kubelet, ...) -> flag -> value
ServiceOptions = Mapping[str, Mapping[str, str]]


class K8sVersionInfo(BaseModel):
    """Management-plane bounds for a Kubernetes version or major version line."""

    min_rancher_version: Optional[str] = None
    max_rancher_version: Optional[str] = None
    deprecate_rancher_version: Optional[str] = None


class CatalogSnapshot(BaseModel):
    """One immutable catalog refresh."""

    system_images: Dict[str, SystemImages]
    service_options: Dict[str, ServiceOptions]
    version_info: Dict[str, K8sVersionInfo]
    default_k8s_versions: Dict[str, str]
    versioned_templates: Dict[str, Dict[str, str]]
    windows_system_images: Dict[str, SystemImages]
    windows_service_options: Dict[str, ServiceOptions]

    @classmethod
    def empty(cls) -> "CatalogSnapshot":
        return cls(
            system_images={},
            service_options={},
            version_info={},
            default_k8s_versions={},
            versioned_templates={},
            windows_system_images={},
            windows_service_options={},
        )
