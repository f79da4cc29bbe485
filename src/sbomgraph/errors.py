# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for sbomgraph."""


class SBOMGraphError(Exception):
    """The base class for sbomgraph errors."""


class ConfigurationError(SBOMGraphError):
    """Happens when there is an error in the configuration (.ini) file."""


class InvalidHTTPResponseError(SBOMGraphError):
    """Happens when the HTTP response is invalid or unexpected."""


class PackageDataFetchError(InvalidHTTPResponseError):
    """Happens when the package registry does not return the package data.

    The registry is considered to have failed whenever the response status is not 200 (OK).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        #: The status code of the response, if the registry answered.
        self.status_code = status_code


class ParseError(SBOMGraphError):
    """Happens when structured input (JSON, TOML, command output) cannot be decoded."""


class CommandError(SBOMGraphError):
    """Happens when an external package manager command cannot be run or exits with an error."""


class RootProjectError(SBOMGraphError):
    """Happens when the package of the scanned project itself cannot be identified."""
