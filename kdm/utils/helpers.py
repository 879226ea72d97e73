import jsonpickle
from typing import Any

from kdm.utils.errors import SerializationError


def sort_dict_keys(d):
    """Recursively sort dictionary keys and handle nested structures.

    Args:
        d: Data structure (dict, list, or primitive type)

    Returns:
        Sorted version of the data structure
    """
    if isinstance(d, dict):
        return {
            key: sort_dict_keys(value)
            for key, value in sorted(d.items())
        }
    elif isinstance(d, list):
        return [sort_dict_keys(item) for item in d]
    else:
        return d


def prune_empty(d):
    """Recursively drop None, empty string and empty mapping values.

    Mirrors how the API server omits empty fields, so a payload read back
    from the cluster compares equal to the catalog payload it was built from.
    """
    if isinstance(d, dict):
        pruned = {}
        for key, value in d.items():
            value = prune_empty(value)
            if value is None or value == "" or value == {}:
                continue
            pruned[key] = value
        return pruned
    elif isinstance(d, list):
        return [prune_empty(item) for item in d]
    else:
        return d


def canonicalize_dict(data):
    """
    Returns a canonical JSON representation of a dictionary.

    The JSON string uses sorted keys, which ensures that the representation of
    the dictionary remains consistent even when key order varies.
    This function works recursively for nested dictionaries and handles lists too.
    """
    return jsonpickle.dumps(sort_dict_keys(data), unpicklable=False)


def marshal(data: Any) -> str:
    """Serialize a setting value to flat JSON text."""
    try:
        return canonicalize_dict(data)
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Unable to marshal {type(data).__name__}: {e}") from e


def deep_compare_dict(data1, data2) -> bool:
    """Compare two data structures deeply, handling nested structures and type normalization.

    Supports comparison of:
    - Dictionaries
    - Lists of dictionaries
    - Nested combinations of both

    Args:
        data1: First data structure (dict, list, or nested combination)
        data2: Second data structure (dict, list, or nested combination)

    Returns:
        True if data structures are equivalent, False otherwise
    """
    if data1 is None and data2 is None:
        return True
    if data1 is None or data2 is None:
        return False

    if not isinstance(data1, type(data2)) and not isinstance(data2, type(data1)):
        return False

    try:
        return canonicalize_dict(data1) == canonicalize_dict(data2)
    except (TypeError, ValueError):
        return data1 == data2
