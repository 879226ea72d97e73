import aiohttp
import asyncio
import json
import kubernetes_asyncio

_ALREADY_EXISTS = "alreadyexists"
_NOT_FOUND = "notfound"
_CONFLICT = "conflict"


class MetadataError(Exception):
    """Base class for driver metadata reconciliation errors."""


class StoreError(MetadataError):
    """Persistence call failed."""

    def __init__(self, message: str, kind: str = None, name: str = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.name = name


class NotFoundError(StoreError):
    """Object does not exist yet; triggers the create path."""


class AlreadyExistsError(StoreError):
    """Create lost a race with another writer."""


class ConflictError(StoreError):
    """Update was rejected because the object changed since it was read."""


class VersionParseError(MetadataError):
    """A version string in the catalog or compatibility data is malformed."""


class SerializationError(MetadataError):
    """A payload or setting value could not be marshaled."""


class SettingsWriteError(MetadataError):
    """Writing a named setting failed."""

    def __init__(self, message: str, setting: str = None) -> None:
        super().__init__(message)
        self.setting = setting


class CatalogLoadError(MetadataError):
    """Catalog document is missing or malformed."""


class DefaultVersionError(MetadataError):
    """No default Kubernetes version resolves for the running management-plane version."""


def _reason(ex: kubernetes_asyncio.client.ApiException) -> str:
    try:
        err = json.loads(ex.body)
    except (TypeError, ValueError):
        return ""
    if not isinstance(err, dict):
        return ""
    return err.get("reason", "").lower()


def already_exists_error(ex: kubernetes_asyncio.client.ApiException) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    else:
        return _reason(ex) == _ALREADY_EXISTS


def not_found_error(ex: kubernetes_asyncio.client.ApiException) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    else:
        return ex.status == 404 or _reason(ex) == _NOT_FOUND


def conflict_error(ex: kubernetes_asyncio.client.ApiException) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    else:
        return ex.status == 409 and _reason(ex) != _ALREADY_EXISTS


def convert_api_exception(
    ex: kubernetes_asyncio.client.ApiException, kind: str = None, name: str = None
) -> StoreError:
    """
    Convert kubernetes ApiException to a store error.

    Args:
        ex: The ApiException to convert
        kind: Kind of the object the call targeted
        name: Name of the object the call targeted

    Returns:
        The matching StoreError subclass with serializable error details
    """
    error_msg = f"Kubernetes API error ({ex.status}): {ex.reason}"

    try:
        if ex.body:
            body = json.loads(ex.body)
            if "message" in body:
                error_msg = f"{error_msg} - {body['message']}"
    except (json.JSONDecodeError, AttributeError, TypeError):
        pass

    if not_found_error(ex):
        return NotFoundError(error_msg, kind=kind, name=name)
    if already_exists_error(ex):
        return AlreadyExistsError(error_msg, kind=kind, name=name)
    if conflict_error(ex):
        return ConflictError(error_msg, kind=kind, name=name)
    return StoreError(error_msg, kind=kind, name=name)


#: Failures raised by the API client below the HTTP status level
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def convert_client_error(ex: Exception, kind: str = None, name: str = None) -> StoreError:
    """Convert an API client failure, status or transport, to a store error."""
    if isinstance(ex, kubernetes_asyncio.client.ApiException):
        return convert_api_exception(ex, kind=kind, name=name)
    return StoreError(
        f"Kubernetes API unreachable: {type(ex).__name__}: {ex}", kind=kind, name=name
    )
