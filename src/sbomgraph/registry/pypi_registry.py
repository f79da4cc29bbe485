# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""The module provides the client of the PyPI JSON API and the models of its responses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from packaging import tags
from packaging.utils import canonicalize_name

from sbomgraph.config.defaults import defaults
from sbomgraph.errors import ConfigurationError, ParseError
from sbomgraph.json_tools import json_extract, json_get_str, json_get_str_list
from sbomgraph.meta.package import Checksum, Supplier, SupplierType
from sbomgraph.normalizer.checksum import resolve_checksum, select_digest
from sbomgraph.registry.artifact_selector import DistributionArtifact, select_artifact
from sbomgraph.util import send_get_http_json

logger: logging.Logger = logging.getLogger(__name__)


def get_interpreter_tag() -> str:
    """Return the tag of the running interpreter, e.g., ``cp311``."""
    return f"{tags.interpreter_name()}{tags.interpreter_version()}"


@dataclass(frozen=True)
class PyPIPackageInfo:
    """The ``info`` section of the PyPI JSON API response."""

    name: str
    version: str
    author: str = ""
    author_email: str = ""
    maintainer: str = ""
    maintainer_email: str = ""
    license: str = ""
    home_page: str = ""
    download_url: str = ""
    package_url: str = ""
    project_url: str = ""
    project_urls: dict[str, str] = field(default_factory=dict)
    requires_dist: list[str] = field(default_factory=list)
    requires_python: str = ""
    summary: str = ""
    yanked: bool = False
    yanked_reason: str = ""

    @classmethod
    def from_json(cls, info: dict) -> PyPIPackageInfo:
        """Build the info from the decoded ``info`` object."""
        project_urls = info.get("project_urls")
        return cls(
            name=json_get_str(info, "name"),
            version=json_get_str(info, "version"),
            author=json_get_str(info, "author"),
            author_email=json_get_str(info, "author_email"),
            maintainer=json_get_str(info, "maintainer"),
            maintainer_email=json_get_str(info, "maintainer_email"),
            license=json_get_str(info, "license"),
            home_page=json_get_str(info, "home_page"),
            download_url=json_get_str(info, "download_url"),
            package_url=json_get_str(info, "package_url"),
            project_url=json_get_str(info, "project_url"),
            project_urls=(
                {str(key): value for key, value in project_urls.items() if isinstance(value, str)}
                if isinstance(project_urls, dict)
                else {}
            ),
            requires_dist=json_get_str_list(info, "requires_dist"),
            requires_python=json_get_str(info, "requires_python"),
            summary=json_get_str(info, "summary"),
            yanked=bool(info.get("yanked", False)),
            yanked_reason=json_get_str(info, "yanked_reason"),
        )

    def get_source_repository(self) -> str:
        """Return the source repository listed in the project URLs, or an empty string."""
        for label, url in self.project_urls.items():
            if label.strip().lower() in {"source", "source code", "repository", "code"}:
                return url
        return ""


@dataclass(frozen=True)
class PyPIPackageData:
    """The PyPI JSON API response for one release of a package."""

    info: PyPIPackageInfo
    urls: list[DistributionArtifact] = field(default_factory=list)

    @classmethod
    def from_json(cls, content: dict) -> PyPIPackageData:
        """Build the package data from the decoded response.

        Raises
        ------
        ParseError
            If the ``info`` section is missing.
        """
        info = json_extract(content, ["info"], dict)
        if info is None:
            raise ParseError("The PyPI response does not contain the package info.")
        urls = json_extract(content, ["urls"], list) or []
        return cls(
            info=PyPIPackageInfo.from_json(info),
            urls=[DistributionArtifact.from_json(entry) for entry in urls if isinstance(entry, dict)],
        )

    def get_supplier(self) -> Supplier:
        """Return the supplier of the package.

        The author is preferred over the maintainer. A supplier without an email address is an organization.
        """
        name, email = self.info.author, self.info.author_email
        if not name and not email:
            name, email = self.info.maintainer, self.info.maintainer_email
        if not name and not email:
            return Supplier(name=self.info.name, type=SupplierType.ORGANIZATION)

        return Supplier(
            name=name or email,
            email=email,
            type=SupplierType.PERSON if email else SupplierType.ORGANIZATION,
        )


class PyPIRegistry:
    """This class implements the PyPI JSON API client."""

    def __init__(
        self,
        registry_url: str | None = None,
        generator: str | None = None,
        tag: str | None = None,
        python_version: str | None = None,
    ) -> None:
        """Initialize the PyPI registry instance.

        Parameters
        ----------
        registry_url: str | None
            The host and path of the JSON API, e.g., ``pypi.org/pypi``.
        generator: str | None
            The format label of the binary artifacts to look for.
        tag: str | None
            The substring the file name of a binary artifact must contain.
        python_version: str | None
            The interpreter label of the binary artifacts to look for.
        """
        self.registry_url = registry_url or "pypi.org/pypi"
        self.generator = generator or "bdist_wheel"
        self.tag = tag or get_interpreter_tag()
        self.python_version = python_version or get_interpreter_tag()

    def load_defaults(self) -> None:
        """Load the ``[registry.pypi]`` and ``[ecosystem.pip]`` sections of ``defaults.ini``.

        Raises
        ------
        ConfigurationError
            If the registry URL is empty.
        """
        if defaults.has_section("registry.pypi"):
            registry_url = defaults.get("registry.pypi", "registry_url", fallback="")
            if not registry_url:
                raise ConfigurationError(
                    'The "registry_url" key is missing in section [registry.pypi] of the .ini configuration file.'
                )
            self.registry_url = registry_url.removeprefix("https://").rstrip("/")

        if defaults.has_section("ecosystem.pip"):
            section = defaults["ecosystem.pip"]
            self.generator = section.get("generator") or self.generator
            self.tag = section.get("tag") or self.tag
            self.python_version = section.get("python_version") or self.python_version

    def get_package_json_path(self, name: str, version: str = "") -> str:
        """Return the host and path of the JSON document of a package release.

        Examples
        --------
        >>> PyPIRegistry(registry_url="pypi.org/pypi").get_package_json_path("Flask_Login", "0.6.3")
        'pypi.org/pypi/flask-login/0.6.3/json'
        """
        segments = [self.registry_url, canonicalize_name(name)]
        if version:
            segments.append(version)
        segments.append("json")
        return "/".join(segments)

    def fetch_package_data(self, name: str, version: str = "") -> PyPIPackageData:
        """Download and decode the metadata of a package release.

        Parameters
        ----------
        name: str
            The package name.
        version: str
            The release version. The latest release is used if empty.

        Returns
        -------
        PyPIPackageData
            The decoded package data.

        Raises
        ------
        PackageDataFetchError
            If the registry does not answer with 200 (OK).
        ParseError
            If the response cannot be decoded.
        """
        content = send_get_http_json(self.get_package_json_path(name, version))
        return PyPIPackageData.from_json(content)

    def select_artifact(self, package_data: PyPIPackageData) -> DistributionArtifact | None:
        """Select the artifact of the release that matches the configured target environment."""
        return select_artifact(package_data.urls, self.generator, self.tag, self.python_version)

    def get_checksum(self, package_data: PyPIPackageData) -> Checksum:
        """Return the checksum of the selected artifact.

        If no artifact qualifies or it has no digest, a digest is computed over the package name.
        """
        artifact = self.select_artifact(package_data)
        candidates: dict[str, str] = {}
        if artifact:
            candidates = dict(artifact.digests)
            if artifact.md5_digest and not select_digest(candidates):
                candidates["md5"] = artifact.md5_digest
        return resolve_checksum(candidates, package_data.info.name)

    def get_download_location(self, package_data: PyPIPackageData) -> str:
        """Return the URL of the selected artifact, or an empty string if no artifact qualifies."""
        artifact = self.select_artifact(package_data)
        return artifact.url if artifact else ""
