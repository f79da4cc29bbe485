# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module defines the interface to the license detection collaborator."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from sbomgraph.meta.package import Package

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LicenseInfo:
    """The license found in the sources of a package."""

    #: The SPDX identifier or expression.
    id: str
    extracted_text: str = ""
    comments: str = ""


class LicenseDetector(ABC):
    """This abstract class is used to implement license detectors over package sources on disk."""

    @abstractmethod
    def detect(self, path: str) -> LicenseInfo | None:
        """Detect the license of the package stored at ``path``.

        Parameters
        ----------
        path : str
            The local path of the package sources.

        Returns
        -------
        LicenseInfo | None
            The license, or None if it cannot be detected.
        """


class NoneLicenseDetector(LicenseDetector):
    """A license detector that never finds anything."""

    def detect(self, path: str) -> LicenseInfo | None:
        """Return None for every path."""
        return None


def get_copyright(license_text: str) -> str:
    """Return the copyright notices found in a license text, one per line.

    Examples
    --------
    >>> get_copyright("MIT License\\n\\nCopyright (c) 2020 Foo\\n\\nPermission is hereby granted")
    'Copyright (c) 2020 Foo'
    """
    notices = [line.strip() for line in license_text.splitlines() if line.strip().lower().startswith("copyright")]
    return "\n".join(notices)


def apply_license(package: Package, detector: LicenseDetector, path: str, declared: str = "") -> None:
    """Fill in the license fields of a package that is being built.

    The detected license takes precedence over the license declared in the package metadata.

    Parameters
    ----------
    package : Package
        The package under construction.
    detector : LicenseDetector
        The license detector.
    path : str
        The local path of the package sources. Detection is skipped if it is empty.
    declared : str
        The license declared in the ecosystem metadata.
    """
    license_info = detector.detect(path) if path else None
    if license_info:
        package.license_declared = license_info.id
        package.license_concluded = license_info.id
        package.copyright = get_copyright(license_info.extracted_text)
        package.comments_license = license_info.comments
        return

    if declared:
        logger.debug("Using the declared license %s for %s.", declared, package.name)
        package.license_declared = declared
        package.license_concluded = declared
