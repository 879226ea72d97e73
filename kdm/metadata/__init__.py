from .driver import MetadataController
from .catalog import load_catalog, parse_catalog
from .compat import CompatibilityFilter, normalize_rancher_version
from .differ import CatalogDiffer
from .aggregator import VersionAggregate, VersionAggregator
from .publisher import SettingsPublisher

__all__ = [
    "MetadataController",
    "load_catalog",
    "parse_catalog",
    "CompatibilityFilter",
    "normalize_rancher_version",
    "CatalogDiffer",
    "VersionAggregate",
    "VersionAggregator",
    "SettingsPublisher",
]
