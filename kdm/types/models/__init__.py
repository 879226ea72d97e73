from .catalog import (
    K8sVersionInfo,
    CatalogSnapshot,
    SystemImages,
    ServiceOptions,
)
from .metadata_object import MetadataObject

__all__ = [
    "K8sVersionInfo",
    "CatalogSnapshot",
    "SystemImages",
    "ServiceOptions",
    "MetadataObject",
]
