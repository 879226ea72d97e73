import copy
from typing import Any, Dict, Optional
from kdm.common.models.labels import Labels

API_VERSION = "management.cattle.io/v3"


class MetadataObject:
    """Persisted driver metadata custom object.

    Carries identity, a provenance label set and a kind specific payload
    stored under `payload_field` in the object body.
    """

    def __init__(
        self,
        kind: str,
        name: str,
        namespace: str,
        payload_field: str,
        payload: Any,
        labels: Optional[Labels] = None,
        api_version: str = API_VERSION,
        resource_version: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.payload_field = payload_field
        self.payload = payload
        self.labels = labels if labels is not None else Labels.empty()
        self.api_version = api_version
        self.resource_version = resource_version
        self._metadata = metadata or {}

    def copy(self) -> "MetadataObject":
        """Return a private deep copy safe to mutate."""
        return MetadataObject(
            kind=self.kind,
            name=self.name,
            namespace=self.namespace,
            payload_field=self.payload_field,
            payload=copy.deepcopy(self.payload),
            labels=Labels(self.labels.as_dict()),
            api_version=self.api_version,
            resource_version=self.resource_version,
            metadata=copy.deepcopy(self._metadata),
        )

    def as_body(self) -> Dict[str, Any]:
        """Render the Kubernetes object body."""
        metadata = copy.deepcopy(self._metadata)
        metadata.update({"name": self.name, "namespace": self.namespace})
        labels = self.labels.as_dict()
        if labels:
            metadata["labels"] = labels
        else:
            metadata.pop("labels", None)
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
            self.payload_field: copy.deepcopy(self.payload),
        }

    @classmethod
    def from_body(cls, body: Dict[str, Any], payload_field: str) -> "MetadataObject":
        """Build from a Kubernetes object body as returned by the API."""
        metadata = dict(body.get("metadata") or {})
        return cls(
            kind=body.get("kind"),
            name=metadata.get("name"),
            namespace=metadata.get("namespace"),
            payload_field=payload_field,
            payload=copy.deepcopy(body.get(payload_field)),
            labels=Labels(metadata.get("labels") or {}),
            api_version=body.get("apiVersion", API_VERSION),
            resource_version=metadata.get("resourceVersion"),
            metadata={
                k: v
                for k, v in metadata.items()
                if k not in ("name", "namespace", "labels", "resourceVersion")
            },
        )

    def __repr__(self) -> str:
        return f"MetadataObject<{self.kind} {self.namespace}/{self.name}>"
