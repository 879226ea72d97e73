from .catalog import K8sVersionInfoSchema, CatalogSnapshotSchema

__all__ = [
    "K8sVersionInfoSchema",
    "CatalogSnapshotSchema",
]
