from .kinds import (
    MetadataKind,
    RkeK8sSystemImage,
    RkeK8sServiceOption,
    RkeAddon,
    RkeK8sWindowsSystemImage,
    RkeK8sWindowsServiceOption,
)
from .store import ObjectStore, KubernetesObjectStore
from .settings import SettingsSink, KubernetesSettingsSink

__all__ = [
    "MetadataKind",
    "RkeK8sSystemImage",
    "RkeK8sServiceOption",
    "RkeAddon",
    "RkeK8sWindowsSystemImage",
    "RkeK8sWindowsServiceOption",
    "ObjectStore",
    "KubernetesObjectStore",
    "SettingsSink",
    "KubernetesSettingsSink",
]
