import json
import logging
import os
from marshmallow import ValidationError
from kdm.types.models import CatalogSnapshot
from kdm.types.schemas import CatalogSnapshotSchema
from kdm.utils.errors import CatalogLoadError

logger = logging.getLogger(__name__)


def parse_catalog(data) -> CatalogSnapshot:
    """Validate a decoded catalog document."""
    if not isinstance(data, dict):
        raise CatalogLoadError(f"Catalog must be a JSON object, got {type(data).__name__}")
    try:
        return CatalogSnapshotSchema().load(data)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid catalog: {e.messages}") from e


def load_catalog(path: str) -> CatalogSnapshot:
    """Read a catalog snapshot from a JSON file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogLoadError(f"Unable to read catalog {path}: {e}") from e
    except ValueError as e:
        raise CatalogLoadError(f"Catalog {path} is not valid JSON: {e}") from e
    catalog = parse_catalog(data)
    logger.info(
        f"Loaded catalog {path}: {len(catalog.system_images)} system image sets, "
        f"{len(catalog.versioned_templates)} addons"
    )
    return catalog


def load_optional_catalog(path: str) -> CatalogSnapshot:
    """Load `path` if configured and present, otherwise an empty catalog."""
    if not path or not os.path.exists(path):
        if path:
            logger.warning(f"Catalog {path} not found, using empty catalog")
        return CatalogSnapshot.empty()
    return load_catalog(path)
