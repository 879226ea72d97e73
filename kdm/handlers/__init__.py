from . import metadata, probes

__all__ = ["metadata", "probes"]
