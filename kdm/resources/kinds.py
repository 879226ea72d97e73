from typing import Any, Iterator, Set, Tuple
from kdm.common.models.labels import Labels
from kdm.types.models import CatalogSnapshot, MetadataObject
from kdm.types.models.metadata_object import API_VERSION
from kdm.utils.helpers import deep_compare_dict, prune_empty


class MetadataKind:
    """One kind of persisted driver metadata.

    Subclasses define the object kind, its plural, the body field holding the
    payload and how a catalog version maps to an object name.
    """

    KIND: str = None
    PLURAL_NAME: str = None
    PAYLOAD_FIELD: str = None

    def object_name(self, version: str) -> str:
        return version

    def normalize_payload(self, payload: Any) -> Any:
        """Canonical payload used for equality; empty values are treated as absent."""
        return prune_empty(payload or {})

    def payloads_equal(self, current: Any, desired: Any) -> bool:
        return deep_compare_dict(
            self.normalize_payload(current), self.normalize_payload(desired)
        )

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        """Yield (version, payload) pairs of this kind in `catalog`."""
        raise NotImplementedError()

    def vendor_versions(self, default_catalog: CatalogSnapshot) -> Set[str]:
        """Versions of this kind shipped in the vendor default catalog."""
        return {version for version, _ in self.entries(default_catalog)}

    def new_object(
        self, version: str, namespace: str, payload: Any, vendor: bool
    ) -> MetadataObject:
        return MetadataObject(
            kind=self.KIND,
            name=self.object_name(version),
            namespace=namespace,
            payload_field=self.PAYLOAD_FIELD,
            payload=payload,
            labels=Labels.for_provenance(vendor),
            api_version=API_VERSION,
        )

    def __str__(self) -> str:
        return self.KIND


class RkeK8sSystemImage(MetadataKind):
    KIND = "RkeK8sSystemImage"
    PLURAL_NAME = "rkek8ssystemimages"
    PAYLOAD_FIELD = "systemImages"

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        return iter(catalog.system_images.items())


class RkeK8sServiceOption(MetadataKind):
    KIND = "RkeK8sServiceOption"
    PLURAL_NAME = "rkek8sserviceoptions"
    PAYLOAD_FIELD = "serviceOptions"

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        return iter(catalog.service_options.items())


class RkeAddon(MetadataKind):
    """Versioned addon template; one kind instance per addon name."""

    KIND = "RkeAddon"
    PLURAL_NAME = "rkeaddons"
    PAYLOAD_FIELD = "template"

    def __init__(self, addon_name: str) -> None:
        self.addon_name = addon_name

    def object_name(self, version: str) -> str:
        return f"{self.addon_name.lower()}-{version}"

    def normalize_payload(self, payload: Any) -> Any:
        return payload or ""

    def payloads_equal(self, current: Any, desired: Any) -> bool:
        return self.normalize_payload(current) == self.normalize_payload(desired)

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        return iter(catalog.versioned_templates.get(self.addon_name, {}).items())

    def __str__(self) -> str:
        return f"{self.KIND}[{self.addon_name}]"


class WindowsNameMixin:
    """Prefixes object names so they never collide with the Linux objects."""

    WINDOWS_PREFIX = "w"

    def object_name(self, version: str) -> str:
        return f"{self.WINDOWS_PREFIX}{version}"


class RkeK8sWindowsSystemImage(WindowsNameMixin, MetadataKind):
    KIND = "RkeK8sWindowsSystemImage"
    PLURAL_NAME = "rkek8swindowssystemimages"
    PAYLOAD_FIELD = "windowsSystemImages"

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        return iter(catalog.windows_system_images.items())


class RkeK8sWindowsServiceOption(WindowsNameMixin, RkeK8sServiceOption):
    """Windows service options share the service option kind and plural."""

    def entries(self, catalog: CatalogSnapshot) -> Iterator[Tuple[str, Any]]:
        return iter(catalog.windows_service_options.items())

    def __str__(self) -> str:
        return f"{self.KIND}[windows]"
