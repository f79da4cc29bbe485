# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module derives the canonical name and version of a package from ecosystem-native identifiers."""


def normalize_name(name: str) -> str:
    """Return the canonical short name of a package.

    A namespaced name (``group/artifact``) is reduced to its second segment. Names without ``/`` are returned
    unchanged.

    Parameters
    ----------
    name : str
        The ecosystem-native name.

    Returns
    -------
    str
        The canonical name.

    Examples
    --------
    >>> normalize_name("symfony/console")
    'console'
    >>> normalize_name("serde")
    'serde'
    """
    segments = name.split("/")
    if len(segments) > 1:
        return segments[1]
    return segments[0]


def normalize_version(version: str) -> str:
    """Return the canonical version string.

    The raw string is split on every ``v``. If nothing precedes the first ``v``, the part between the first and
    the second ``v`` is returned. Otherwise the raw string is returned unchanged. Note that a ``v`` later in the
    string truncates the result, e.g., ``v1.0.0-vNext`` becomes ``1.0.0-``.

    Parameters
    ----------
    version : str
        The raw version string.

    Returns
    -------
    str
        The canonical version.

    Examples
    --------
    >>> normalize_version("v1.2.3")
    '1.2.3'
    >>> normalize_version("1.2.3")
    '1.2.3'
    """
    parts = version.split("v")
    if parts[0] != "":
        return version

    if len(parts) > 1:
        return parts[1]

    return parts[0]
