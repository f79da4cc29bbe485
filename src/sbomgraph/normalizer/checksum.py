# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module selects the checksum of a package from the digests reported by its ecosystem."""

import hashlib
import logging
from collections.abc import Mapping

from sbomgraph.config.defaults import defaults
from sbomgraph.errors import ConfigurationError
from sbomgraph.meta.package import Checksum, HashAlgorithm

logger: logging.Logger = logging.getLogger(__name__)

#: The order in which we want to pick the package digest, strongest first.
HASH_ALGORITHM_PICK_ORDER: tuple[HashAlgorithm, ...] = (
    HashAlgorithm.SHA512,
    HashAlgorithm.SHA384,
    HashAlgorithm.SHA256,
    HashAlgorithm.SHA224,
    HashAlgorithm.SHA1,
    HashAlgorithm.MD6,
    HashAlgorithm.MD5,
    HashAlgorithm.MD4,
    HashAlgorithm.MD2,
)

#: The hashlib constructor name of every algorithm we can compute ourselves.
_HASHLIB_NAMES: dict[HashAlgorithm, str] = {
    HashAlgorithm.SHA512: "sha512",
    HashAlgorithm.SHA384: "sha384",
    HashAlgorithm.SHA256: "sha256",
    HashAlgorithm.SHA224: "sha224",
    HashAlgorithm.SHA1: "sha1",
    HashAlgorithm.MD5: "md5",
}


def parse_hash_algorithm(tag: str) -> HashAlgorithm | None:
    """Return the algorithm for a digest tag reported by an ecosystem.

    The tag is matched case-insensitively and ``-`` or ``_`` separators are ignored.

    Examples
    --------
    >>> parse_hash_algorithm("sha256")
    <HashAlgorithm.SHA256: 'SHA256'>
    >>> parse_hash_algorithm("SHA-512")
    <HashAlgorithm.SHA512: 'SHA512'>
    >>> parse_hash_algorithm("blake2b") is None
    True
    """
    key = tag.upper().replace("-", "").replace("_", "")
    try:
        return HashAlgorithm(key)
    except ValueError:
        return None


def select_digest(candidates: Mapping[str, str]) -> tuple[HashAlgorithm, str] | None:
    """Select the digest of the strongest algorithm from the candidates.

    Parameters
    ----------
    candidates : Mapping[str, str]
        The digests keyed by algorithm tag, e.g., ``{"md5": "...", "sha256": "..."}``.

    Returns
    -------
    tuple[HashAlgorithm, str] | None
        The algorithm and the digest value, or None if no candidate with a non-empty value is known.
    """
    digests: dict[HashAlgorithm, str] = {}
    for tag, value in candidates.items():
        algorithm = parse_hash_algorithm(tag)
        if algorithm is None:
            logger.debug("Ignoring the digest with unknown algorithm %s.", tag)
            continue
        if value:
            digests[algorithm] = value

    for algorithm in HASH_ALGORITHM_PICK_ORDER:
        if value := digests.get(algorithm):
            return algorithm, value

    return None


def compute_digest(content: str, algorithm: HashAlgorithm = HashAlgorithm.SHA1) -> str:
    """Compute the hex digest of a string.

    Parameters
    ----------
    content : str
        The content to hash. It is encoded as UTF-8.
    algorithm : HashAlgorithm
        The algorithm to use.

    Returns
    -------
    str
        The hex digest, or an empty string if ``content`` is empty.

    Raises
    ------
    ConfigurationError
        If the algorithm cannot be computed locally.
    """
    hashlib_name = _HASHLIB_NAMES.get(algorithm)
    if hashlib_name is None:
        raise ConfigurationError(f"Unable to compute a digest with the {algorithm.value} algorithm.")

    if not content:
        return ""

    return hashlib.new(hashlib_name, content.encode("utf-8")).hexdigest()


def get_fallback_algorithm() -> HashAlgorithm:
    """Return the algorithm used when no digest is reported, from the ``[checksum]`` section of ``defaults.ini``.

    Raises
    ------
    ConfigurationError
        If the configured algorithm is unknown or cannot be computed locally.
    """
    tag = defaults.get("checksum", "fallback_algorithm", fallback="SHA1")
    algorithm = parse_hash_algorithm(tag)
    if algorithm is None or algorithm not in _HASHLIB_NAMES:
        raise ConfigurationError(f'The "fallback_algorithm" value {tag} in section [checksum] is not supported.')
    return algorithm


def resolve_checksum(candidates: Mapping[str, str], fallback_content: str) -> Checksum:
    """Return the checksum of a package.

    The strongest reported digest is used. If there is none, a digest is computed over ``fallback_content``
    (typically the package locator or name) so that every package ends up with a checksum.

    Parameters
    ----------
    candidates : Mapping[str, str]
        The digests reported by the ecosystem, keyed by algorithm tag.
    fallback_content : str
        The canonical string to hash when no digest is reported.

    Returns
    -------
    Checksum
        The checksum. Its value is empty only if there is no digest and ``fallback_content`` is empty.
    """
    if selected := select_digest(candidates):
        algorithm, value = selected
        return Checksum(algorithm=algorithm, value=value)

    algorithm = get_fallback_algorithm()
    logger.debug("No digest is reported, computing %s over %s.", algorithm.value, fallback_content)
    return Checksum(algorithm=algorithm, value=compute_digest(fallback_content, algorithm))
