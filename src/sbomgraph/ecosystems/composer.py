# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the Composer (PHP) ecosystem adapter.

The packages are read from ``composer.lock``. The root project and the requirement tree come from
``composer show``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from sbomgraph.config.defaults import defaults
from sbomgraph.ecosystems.base import EcosystemAdapter, file_exists, read_file
from sbomgraph.errors import ParseError, RootProjectError
from sbomgraph.graph.assembler import RequirementNode
from sbomgraph.json_tools import json_extract, json_get_str, json_get_str_list
from sbomgraph.meta.license import LicenseDetector, apply_license
from sbomgraph.meta.package import Checksum, Package, Supplier, SupplierType
from sbomgraph.normalizer.checksum import compute_digest, get_fallback_algorithm, resolve_checksum
from sbomgraph.normalizer.identity import normalize_name, normalize_version
from sbomgraph.normalizer.locator import resolve_locator
from sbomgraph.util import load_json

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Author:
    """An entry of the ``authors`` list of Composer metadata."""

    name: str = ""
    email: str = ""

    @classmethod
    def from_json(cls, entry: dict) -> Author:
        """Build the author from its JSON object."""
        return cls(name=json_get_str(entry, "name"), email=json_get_str(entry, "email"))


def _authors(entry: dict) -> list[Author]:
    authors = entry.get("authors")
    if not isinstance(authors, list):
        return []
    return [Author.from_json(author) for author in authors if isinstance(author, dict)]


@dataclass(frozen=True)
class LockPackage:
    """A resolved package of ``composer.lock``."""

    name: str
    version: str
    source_url: str = ""
    dist_url: str = ""
    dist_shasum: str = ""
    homepage: str = ""
    description: str = ""
    authors: list[Author] = field(default_factory=list)
    license: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, entry: dict) -> LockPackage:
        """Build the package from its JSON object in the lock file.

        Raises
        ------
        ParseError
            If the entry has no name.
        """
        name = json_get_str(entry, "name")
        if not name:
            raise ParseError(f"A package of the lock file has no name: {entry}")
        return cls(
            name=name,
            version=json_get_str(entry, "version"),
            source_url=json_extract(entry, ["source", "url"], str) or "",
            dist_url=json_extract(entry, ["dist", "url"], str) or "",
            dist_shasum=json_extract(entry, ["dist", "shasum"], str) or "",
            homepage=json_get_str(entry, "homepage"),
            description=json_get_str(entry, "description"),
            authors=_authors(entry),
            license=json_get_str_list(entry, "license"),
        )


@dataclass(frozen=True)
class LockFile:
    """The content of ``composer.lock``."""

    packages: list[LockPackage] = field(default_factory=list)
    packages_dev: list[LockPackage] = field(default_factory=list)

    @classmethod
    def from_json(cls, content: dict) -> LockFile:
        """Build the lock file from its decoded content."""
        packages = json_extract(content, ["packages"], list) or []
        packages_dev = json_extract(content, ["packages-dev"], list) or []
        return cls(
            packages=[LockPackage.from_json(entry) for entry in packages if isinstance(entry, dict)],
            packages_dev=[LockPackage.from_json(entry) for entry in packages_dev if isinstance(entry, dict)],
        )


@dataclass(frozen=True)
class ProjectInfo:
    """The root project as reported by ``composer show --self``."""

    name: str
    versions: list[str] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_json(cls, content: dict) -> ProjectInfo:
        """Build the project info from the decoded command output."""
        return cls(
            name=json_get_str(content, "name"),
            versions=json_get_str_list(content, "versions"),
            description=json_get_str(content, "description"),
        )


@dataclass(frozen=True)
class TreeComponent:
    """A node of the ``composer show --tree`` output."""

    name: str
    version: str = ""
    requires: list[TreeComponent] = field(default_factory=list)

    @classmethod
    def from_json(cls, entry: dict) -> TreeComponent:
        """Build the component and its requirements recursively."""
        requires = entry.get("requires")
        return cls(
            name=json_get_str(entry, "name"),
            version=json_get_str(entry, "version"),
            requires=(
                [cls.from_json(child) for child in requires if isinstance(child, dict)]
                if isinstance(requires, list)
                else []
            ),
        )

    def to_requirement_node(self) -> RequirementNode:
        """Convert the component into a requirement tree node."""
        return RequirementNode(name=self.name, requires=[child.to_requirement_node() for child in self.requires])


def _decode_object(content: str, source: str) -> dict:
    data = load_json(content, source)
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object in {source}.")
    return data


class Composer(EcosystemAdapter):
    """This class contains the adapter of the Composer ecosystem."""

    def __init__(self, license_detector: LicenseDetector | None = None) -> None:
        super().__init__(
            name="composer", purl_type="composer", manifest_files=["composer.json"], license_detector=license_detector
        )
        self.lock_file = "composer.lock"
        self.json_file = "composer.json"
        self.package_json_file = "package.json"
        self.vendor_dir = "./vendor/"
        self.project_info_cmd = "composer show -s -f json"
        self.tree_cmd = "composer show -t -f json"

    def load_defaults(self) -> None:
        """Load the default values from defaults.ini."""
        super().load_defaults()
        if not defaults.has_section(self.section_name):
            return
        section = defaults[self.section_name]
        self.lock_file = section.get("lock_file", self.lock_file)
        self.json_file = section.get("json_file", self.json_file)
        self.package_json_file = section.get("package_json_file", self.package_json_file)
        self.vendor_dir = section.get("vendor_dir", self.vendor_dir)
        self.project_info_cmd = section.get("project_info_cmd", self.project_info_cmd)
        self.tree_cmd = section.get("tree_cmd", self.tree_cmd)
        self.manifest_files = [self.json_file]

    def read_lock_file(self, repo_path: str) -> LockFile:
        """Read and decode the lock file.

        Raises
        ------
        OSError
            If the lock file cannot be read.
        ParseError
            If the lock file is malformed.
        """
        return LockFile.from_json(_decode_object(read_file(repo_path, self.lock_file), self.lock_file))

    def read_optional_json(self, repo_path: str, file_name: str) -> dict:
        """Read an optional JSON file of the project, returning an empty object if it does not exist."""
        if not file_exists(repo_path, file_name):
            logger.debug("The file %s does not exist in %s.", file_name, repo_path)
            return {}
        return _decode_object(read_file(repo_path, file_name), file_name)

    def get_project_info(self, repo_path: str) -> ProjectInfo:
        """Return the root project reported by Composer.

        Raises
        ------
        RootProjectError
            If Composer does not report the project name.
        """
        output = self.run(self.project_info_cmd, repo_path)
        project = ProjectInfo.from_json(_decode_object(output, self.project_info_cmd))
        if not project.name:
            raise RootProjectError(f"The root project at {repo_path} has no name.")
        return project

    def collect_packages(self, repo_path: str) -> list[Package]:
        """Discover the root project and the packages of ``composer.lock``."""
        lock_file = self.read_lock_file(repo_path)
        project = self.get_project_info(repo_path)
        composer_json = self.read_optional_json(repo_path, self.json_file)
        package_json = self.read_optional_json(repo_path, self.package_json_file)

        packages = [self.convert_project_info(project, composer_json, package_json, repo_path)]
        for lock_package in lock_file.packages + lock_file.packages_dev:
            packages.append(self.convert_lock_package(lock_package, repo_path))
        return packages

    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        """Return the tree of ``composer show --tree`` below the root project."""
        output = self.run(self.tree_cmd, repo_path)
        return self.build_requirement_tree(packages[0], _decode_object(output, self.tree_cmd))

    @staticmethod
    def build_requirement_tree(root: Package, tree_output: dict) -> RequirementNode:
        """Return the requirement tree whose root is the project and whose children are the installed packages.

        Parameters
        ----------
        root : Package
            The root package.
        tree_output : dict
            The decoded output of ``composer show --tree``.
        """
        installed = json_extract(tree_output, ["installed"], list) or []
        components = [TreeComponent.from_json(entry) for entry in installed if isinstance(entry, dict)]
        return RequirementNode(name=root.name, requires=[component.to_requirement_node() for component in components])

    def convert_project_info(
        self, project: ProjectInfo, composer_json: dict, package_json: dict, repo_path: str
    ) -> Package:
        """Build the root package of the project.

        Parameters
        ----------
        project : ProjectInfo
            The project reported by Composer.
        composer_json : dict
            The decoded ``composer.json``.
        package_json : dict
            The decoded ``package.json``, whose repository is preferred as the project locator.
        repo_path : str
            The path to the project.
        """
        name = normalize_name(project.name)
        version = normalize_version(project.versions[0]) if project.versions else ""
        repository = json_extract(package_json, ["repository", "url"], str) or json_get_str(package_json, "repository")
        locator = resolve_locator(repository, json_get_str(composer_json, "homepage"), project.name)

        authors = _authors(composer_json)
        if authors:
            supplier = Supplier(name=authors[0].name, email=authors[0].email, type=SupplierType.PERSON)
        else:
            supplier = Supplier(name=name)

        algorithm = get_fallback_algorithm()
        package = Package(
            name=name,
            version=version,
            root=True,
            package_url=locator,
            download_location=locator,
            checksum=Checksum(algorithm=algorithm, value=compute_digest(locator, algorithm)),
            supplier=supplier,
            local_path=repo_path,
            purl=self.get_purl(project.name, version),
            homepage=json_get_str(composer_json, "homepage"),
            comment=project.description,
        )
        apply_license(package, self.license_detector, repo_path)
        return package

    def convert_lock_package(self, lock_package: LockPackage, repo_path: str) -> Package:
        """Build the canonical package of an entry of ``composer.lock``."""
        name = normalize_name(lock_package.name)
        version = normalize_version(lock_package.version)
        locator = resolve_locator(lock_package.source_url, lock_package.homepage, lock_package.name)
        local_path = self.get_local_path(lock_package)

        package = Package(
            name=name,
            version=version,
            package_url=locator,
            download_location=lock_package.source_url or lock_package.dist_url,
            checksum=resolve_checksum({"sha1": lock_package.dist_shasum}, locator),
            supplier=self.get_supplier(lock_package),
            local_path=local_path,
            purl=self.get_purl(lock_package.name, version),
            homepage=lock_package.homepage,
            comment=lock_package.description,
        )
        apply_license(
            package,
            self.license_detector,
            os.path.join(repo_path, local_path),
            declared=lock_package.license[0] if lock_package.license else "",
        )
        return package

    def get_local_path(self, lock_package: LockPackage) -> str:
        """Return the vendor directory of a package, e.g., ``./vendor/symfony/console``."""
        return self.vendor_dir + lock_package.name

    @staticmethod
    def get_supplier(lock_package: LockPackage) -> Supplier:
        """Return the supplier of a locked package.

        The first author is the supplier. An author without an email address is an organization, and so is the
        vendor of a package that lists no authors.
        """
        if not lock_package.authors:
            return Supplier(name=normalize_name(lock_package.name), type=SupplierType.ORGANIZATION)

        author = lock_package.authors[0]
        return Supplier(
            name=author.name,
            email=author.email,
            type=SupplierType.PERSON if author.email else SupplierType.ORGANIZATION,
        )

    def get_purl(self, native_name: str, version: str) -> str:
        """Return the Package URL of a Composer package from its ``vendor/name`` identifier."""
        namespace, _, name = native_name.rpartition("/")
        return self.build_purl(name, version, namespace)
