from typing import Dict


class ResourceLabels:
    CATTLE_DOMAIN: str = "io.cattle."

    #: Present with value "false" when the object's Kubernetes version ships
    #: in the vendor default catalog; absent for user supplied versions.
    RKE_STORE_LABEL = CATTLE_DOMAIN + "rke_store"

    RKE_STORE_VENDOR_VALUE = "false"


class Labels(ResourceLabels):
    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = dict(labels) if labels else dict()

    def as_dict(self) -> Dict[str, str]:
        """Return labels as dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self._labels[label] = value
        return self

    def exclude(self, label: str) -> "Labels":
        self._labels.pop(label, None)
        return self

    def include_vendor_provenance(self) -> "Labels":
        return self.include(self.RKE_STORE_LABEL, self.RKE_STORE_VENDOR_VALUE)

    def exclude_vendor_provenance(self) -> "Labels":
        return self.exclude(self.RKE_STORE_LABEL)

    def with_vendor_provenance(self, vendor: bool) -> "Labels":
        """Return a copy whose provenance marker matches `vendor`; other labels are kept."""
        labels = Labels(self._labels)
        if vendor:
            return labels.include_vendor_provenance()
        return labels.exclude_vendor_provenance()

    @property
    def is_vendor_provenance(self) -> bool:
        return self._labels.get(self.RKE_STORE_LABEL) == self.RKE_STORE_VENDOR_VALUE

    def provenance_matches(self, vendor: bool) -> bool:
        if vendor:
            return self.is_vendor_provenance
        return self.RKE_STORE_LABEL not in self._labels

    def __eq__(self, other) -> bool:
        if not isinstance(other, Labels):
            return NotImplemented
        return self._labels == other._labels

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def empty(cls) -> "Labels":
        return Labels({})

    @classmethod
    def for_provenance(cls, vendor: bool) -> "Labels":
        return cls.empty().with_vendor_provenance(vendor)
