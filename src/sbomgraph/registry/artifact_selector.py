# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module selects the distribution artifact of a release that best matches the target environment."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sbomgraph.json_tools import json_get_str

logger: logging.Logger = logging.getLogger(__name__)

#: The interpreter label of artifacts that work with both Python 2 and Python 3.
UNIVERSAL_PYTHON_VERSION = "py2.py3"

SDIST_PACKAGE_TYPE = "sdist"
SDIST_PYTHON_VERSION = "source"


@dataclass(frozen=True)
class DistributionArtifact:
    """A single downloadable file of a release, as listed in the ``urls`` of the PyPI JSON API."""

    filename: str

    #: The format label, e.g., ``bdist_wheel`` or ``sdist``.
    packagetype: str

    #: The interpreter label, e.g., ``cp39``, ``py3`` or ``source``.
    python_version: str

    url: str = ""
    digests: dict[str, str] = field(default_factory=dict)
    md5_digest: str = ""
    requires_python: str = ""
    size: int = -1
    yanked: bool = False

    @classmethod
    def from_json(cls, entry: dict) -> "DistributionArtifact":
        """Build the artifact from one entry of the ``urls`` list."""
        raw_digests = entry.get("digests")
        digests = (
            {str(key): value for key, value in raw_digests.items() if isinstance(value, str)}
            if isinstance(raw_digests, dict)
            else {}
        )
        size = entry.get("size")
        return cls(
            filename=json_get_str(entry, "filename"),
            packagetype=json_get_str(entry, "packagetype"),
            python_version=json_get_str(entry, "python_version"),
            url=json_get_str(entry, "url"),
            digests=digests,
            md5_digest=json_get_str(entry, "md5_digest"),
            requires_python=json_get_str(entry, "requires_python"),
            size=size if isinstance(size, int) else -1,
            yanked=bool(entry.get("yanked", False)),
        )


def is_binary_match(artifact: DistributionArtifact, generator: str, tag: str, python_version: str) -> bool:
    """Return True if the artifact is a binary distribution usable by the target interpreter.

    Universal artifacts are accepted when ``py2.py3`` contains the interpreter label of the artifact, so labels
    such as ``py2``, ``py3`` and ``py2.py3`` (and an empty label) all qualify.

    Parameters
    ----------
    artifact : DistributionArtifact
        The candidate artifact.
    generator : str
        The desired format label, e.g., ``bdist_wheel``.
    tag : str
        A substring the file name must contain, e.g., ``cp39``.
    python_version : str
        The desired interpreter label, e.g., ``cp39``.
    """
    format_matches = artifact.packagetype.lower() == generator.lower()
    tag_matches = tag.lower() in artifact.filename.lower()
    interpreter_matches = artifact.python_version.lower() == python_version.lower()
    universal = artifact.python_version.lower() in UNIVERSAL_PYTHON_VERSION

    return format_matches and tag_matches and (interpreter_matches or universal)


def is_source_match(artifact: DistributionArtifact) -> bool:
    """Return True if the artifact is a source distribution."""
    return (
        artifact.packagetype.lower() == SDIST_PACKAGE_TYPE and artifact.python_version.lower() == SDIST_PYTHON_VERSION
    )


def select_artifact(
    artifacts: Iterable[DistributionArtifact], generator: str, tag: str, python_version: str
) -> DistributionArtifact | None:
    """Select the artifact of a release to describe in the SBOM.

    The first binary artifact matching the target interpreter wins. If there is none, the first source
    distribution is used.

    Parameters
    ----------
    artifacts : Iterable[DistributionArtifact]
        The artifacts of one release.
    generator : str
        The desired format label.
    tag : str
        A substring the file name of a binary artifact must contain.
    python_version : str
        The desired interpreter label.

    Returns
    -------
    DistributionArtifact | None
        The selected artifact, or None if no artifact qualifies.
    """
    candidates = list(artifacts)
    binary = next((item for item in candidates if is_binary_match(item, generator, tag, python_version)), None)
    if binary:
        logger.debug("Selected the binary artifact %s.", binary.filename)
        return binary

    source = next((item for item in candidates if is_source_match(item)), None)
    if source:
        logger.debug("Selected the source artifact %s.", source.filename)
        return source

    logger.debug("No artifact matches %s, %s, %s.", generator, tag, python_version)
    return None
