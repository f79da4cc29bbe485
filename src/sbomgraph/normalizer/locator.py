# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module resolves the canonical locator (source or project URL) of a package."""

import logging
import re
import urllib.parse

logger: logging.Logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"


def remove_url_protocol(url: str) -> str:
    """Remove the leading ``scheme://`` of a URL, if any.

    Examples
    --------
    >>> remove_url_protocol("https://github.com/org/pkg")
    'github.com/org/pkg'
    >>> remove_url_protocol("git+ssh://git@example.com/pkg.git")
    'git@example.com/pkg.git'
    """
    return re.sub(r"^[A-Za-z][A-Za-z0-9+.-]*://", "", url)


def synthesize_url(name: str) -> str:
    """Return the fallback location of a package that is assumed to be hosted on GitHub."""
    return f"{GITHUB_HOST}/{name}"


def is_github_url(url: str) -> bool:
    """Return True if the host of a protocol-qualified URL is GitHub."""
    try:
        hostname = urllib.parse.urlparse(url).hostname or ""
    except ValueError:
        logger.debug("Unable to parse the URL %s.", url)
        return False
    return hostname.lower().removeprefix("www.") == GITHUB_HOST


def canonicalize_locator(locator: str) -> str:
    """Return the protocol-qualified form of a locator.

    A locator without the ``http`` token is prefixed with ``https://``. GitHub locators end in ``.git``.

    Examples
    --------
    >>> canonicalize_locator("github.com/org/pkg")
    'https://github.com/org/pkg.git'
    >>> canonicalize_locator("https://example.com/pkg")
    'https://example.com/pkg'
    """
    if not locator:
        return ""

    if "http" not in locator:
        locator = "https://" + locator

    if is_github_url(locator) and not locator.endswith(".git"):
        locator = locator.removesuffix("/") + ".git"

    return locator


def resolve_locator(repository: str = "", homepage: str = "", name: str = "") -> str:
    """Return the canonical locator of a package from the candidate fields, in priority order.

    Parameters
    ----------
    repository : str
        The explicit repository or source URL.
    homepage : str
        The homepage URL.
    name : str
        The name used to synthesize a ``github.com/<name>`` fallback.

    Returns
    -------
    str
        The protocol-qualified locator, or an empty string if every candidate is empty.
    """
    candidates = [repository.strip(), homepage.strip(), synthesize_url(name) if name else ""]
    chosen = next((candidate for candidate in candidates if candidate), "")
    if not chosen:
        logger.debug("No locator candidate is available.")
    return canonicalize_locator(chosen)
