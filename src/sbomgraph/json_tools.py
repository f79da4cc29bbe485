# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module provides utility functions to read values out of decoded JSON and TOML documents."""
import logging
from collections.abc import Sequence
from typing import TypeVar

JsonType = int | float | str | None | bool | list["JsonType"] | dict[str, "JsonType"]
T = TypeVar("T", bound=JsonType)

logger: logging.Logger = logging.getLogger(__name__)


def json_extract(entry: dict | list, keys: Sequence[str | int], type_: type[T]) -> T | None:
    """Return the value found by following the list of depth-sequential keys inside the passed JSON document.

    The value must be of the passed type.

    Parameters
    ----------
    entry: dict | list
        An entry point into a JSON structure.
    keys: Sequence[str | int]
        The sequence of depth-sequential keys within the JSON. Can be dict keys or list indices.
    type_: type[T]
        The type to check the value against and return it as.

    Returns
    -------
    T | None:
        The found value as the type of the type parameter, or None if any key is missing.

    Examples
    --------
    >>> json_extract({"info": {"version": "1.0"}}, ["info", "version"], str)
    '1.0'
    >>> json_extract({"urls": []}, ["urls", 0], dict) is None
    True
    """
    current: JsonType = entry
    for key in keys:
        if isinstance(current, dict) and isinstance(key, str) and key in current:
            current = current[key]
        elif isinstance(current, list) and isinstance(key, int) and 0 <= key < len(current):
            current = current[key]
        else:
            logger.debug("Cannot follow key '%s' in entry of type %s.", key, type(current).__name__)
            return None

    if isinstance(current, type_):
        return current

    logger.debug("Found value of incorrect type: %s instead of %s.", type(current).__name__, type_.__name__)
    return None


def json_get_str(entry: dict, key: str) -> str:
    """Return the string stored under ``key``, stripped, or an empty string if it is missing or not a string.

    Package managers emit ``null`` for a lot of optional fields, which we treat the same as a missing field.
    """
    value = entry.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def json_get_str_list(entry: dict, key: str) -> list[str]:
    """Return the list of strings stored under ``key``, skipping elements that are not strings."""
    value = entry.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
