# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the pip (Python) ecosystem adapter.

The root project is read from ``pyproject.toml``, the installed packages from ``pip list`` and the requirement
tree from ``pipdeptree``. The metadata of every installed package is fetched from PyPI.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field

from packaging.utils import canonicalize_name

from sbomgraph.config.defaults import defaults
from sbomgraph.ecosystems.base import EcosystemAdapter, parse_author, read_file
from sbomgraph.errors import PackageDataFetchError, ParseError, RootProjectError
from sbomgraph.graph.assembler import RequirementNode
from sbomgraph.json_tools import json_extract, json_get_str
from sbomgraph.meta.license import LicenseDetector, apply_license
from sbomgraph.meta.package import Package, Supplier, SupplierType
from sbomgraph.normalizer.checksum import resolve_checksum
from sbomgraph.normalizer.identity import normalize_version
from sbomgraph.normalizer.locator import resolve_locator
from sbomgraph.registry.pypi_registry import PyPIPackageData, PyPIRegistry
from sbomgraph.util import load_json

logger: logging.Logger = logging.getLogger(__name__)

REPOSITORY_URL_LABELS = {"repository", "source", "source code", "code"}
HOMEPAGE_URL_LABELS = {"homepage", "home", "home-page"}


def python_package_name(name: str) -> str:
    """Return the canonical name of a Python distribution, e.g., ``flask-login`` for ``Flask_Login``."""
    return str(canonicalize_name(name))


@dataclass(frozen=True)
class RootProject:
    """The project described by ``pyproject.toml``."""

    name: str
    version: str = ""
    description: str = ""
    repository: str = ""
    homepage: str = ""
    license: str = ""
    supplier: Supplier = field(default_factory=Supplier)

    @classmethod
    def from_pyproject(cls, content: dict) -> RootProject | None:
        """Build the project from the ``[project]`` table, or from ``[tool.poetry]`` if there is none.

        Returns
        -------
        RootProject | None
            The project, or None if the file does not declare a project name.
        """
        if project := json_extract(content, ["project"], dict):
            return cls.from_project_table(project)
        if poetry := json_extract(content, ["tool", "poetry"], dict):
            return cls.from_poetry_table(poetry)
        return None

    @classmethod
    def from_project_table(cls, project: dict) -> RootProject | None:
        """Build the project from the standard ``[project]`` table."""
        name = json_get_str(project, "name")
        if not name:
            return None

        urls = json_extract(project, ["urls"], dict) or {}
        labeled = {str(label).strip().lower(): url for label, url in urls.items() if isinstance(url, str)}
        repository = next((url for label, url in labeled.items() if label in REPOSITORY_URL_LABELS), "")
        homepage = next((url for label, url in labeled.items() if label in HOMEPAGE_URL_LABELS), "")

        license_value = project.get("license")
        if isinstance(license_value, dict):
            license_value = json_get_str(license_value, "text")

        supplier = Supplier(name=name, type=SupplierType.ORGANIZATION)
        authors = json_extract(project, ["authors"], list) or []
        if authors and isinstance(authors[0], dict):
            author_name, author_email = json_get_str(authors[0], "name"), json_get_str(authors[0], "email")
            if author_name or author_email:
                supplier = Supplier(name=author_name or author_email, email=author_email, type=SupplierType.PERSON)

        return cls(
            name=name,
            version=json_get_str(project, "version"),
            description=json_get_str(project, "description"),
            repository=repository,
            homepage=homepage,
            license=license_value if isinstance(license_value, str) else "",
            supplier=supplier,
        )

    @classmethod
    def from_poetry_table(cls, poetry: dict) -> RootProject | None:
        """Build the project from the ``[tool.poetry]`` table."""
        name = json_get_str(poetry, "name")
        if not name:
            return None

        authors = json_extract(poetry, ["authors"], list) or []
        supplier = (
            parse_author(authors[0])
            if authors and isinstance(authors[0], str)
            else Supplier(name=name, type=SupplierType.ORGANIZATION)
        )
        return cls(
            name=name,
            version=json_get_str(poetry, "version"),
            description=json_get_str(poetry, "description"),
            repository=json_get_str(poetry, "repository"),
            homepage=json_get_str(poetry, "homepage"),
            license=json_get_str(poetry, "license"),
            supplier=supplier,
        )


@dataclass(frozen=True)
class InstalledPackage:
    """An entry of ``pip list --format json``."""

    name: str
    version: str


@dataclass
class DependencyTreeEntry:
    """An entry of ``pipdeptree --json-tree``."""

    key: str
    package_name: str = ""
    installed_version: str = ""
    required_version: str = ""
    dependencies: list[DependencyTreeEntry] = field(default_factory=list)

    @classmethod
    def from_json(cls, entry: dict) -> DependencyTreeEntry:
        """Build the entry and its dependencies recursively."""
        dependencies = entry.get("dependencies")
        return cls(
            key=json_get_str(entry, "key") or json_get_str(entry, "package_name"),
            package_name=json_get_str(entry, "package_name"),
            installed_version=json_get_str(entry, "installed_version"),
            required_version=json_get_str(entry, "required_version"),
            dependencies=(
                [cls.from_json(dep) for dep in dependencies if isinstance(dep, dict)]
                if isinstance(dependencies, list)
                else []
            ),
        )

    def to_requirement_node(self) -> RequirementNode:
        """Convert the entry into a requirement tree node."""
        return RequirementNode(name=self.key, requires=[dep.to_requirement_node() for dep in self.dependencies])


class Pip(EcosystemAdapter):
    """This class contains the adapter of the pip ecosystem."""

    def __init__(self, license_detector: LicenseDetector | None = None, registry: PyPIRegistry | None = None) -> None:
        super().__init__(
            name="pip",
            purl_type="pypi",
            manifest_files=["pyproject.toml"],
            license_detector=license_detector,
            name_normalizer=python_package_name,
        )
        self.registry = registry or PyPIRegistry()
        self.list_cmd = "pip list --format json"
        self.tree_cmd = "pipdeptree --json-tree"
        self.skip_packages: list[str] = ["pip", "setuptools", "wheel", "pipdeptree"]

    def load_defaults(self) -> None:
        """Load the default values from defaults.ini.

        Raises
        ------
        ConfigurationError
            If the PyPI registry configuration is invalid.
        """
        super().load_defaults()
        self.registry.load_defaults()
        if not defaults.has_section(self.section_name):
            return
        section = defaults[self.section_name]
        self.list_cmd = section.get("list_cmd", self.list_cmd)
        self.tree_cmd = section.get("tree_cmd", self.tree_cmd)
        self.skip_packages = defaults.get_list(self.section_name, "skip_packages", fallback=self.skip_packages)

    def is_skipped(self, name: str) -> bool:
        """Return True if the package is part of the tooling rather than of the project."""
        return python_package_name(name) in {python_package_name(skipped) for skipped in self.skip_packages}

    def get_root_project(self, repo_path: str) -> RootProject:
        """Read the root project from the first manifest file.

        Raises
        ------
        RootProjectError
            If the manifest does not declare a project.
        ParseError
            If the manifest is not valid TOML.
        """
        manifest = self.manifest_files[0]
        try:
            content = tomllib.loads(read_file(repo_path, manifest))
        except tomllib.TOMLDecodeError as error:
            raise ParseError(f"Unable to decode {manifest}: {error}") from error

        project = RootProject.from_pyproject(content)
        if project is None:
            raise RootProjectError(f"The {manifest} file at {repo_path} does not declare a project name.")
        return project

    def get_installed_packages(self, repo_path: str) -> list[InstalledPackage]:
        """Return the installed packages reported by pip, without the skipped ones."""
        content = load_json(self.run(self.list_cmd, repo_path), self.list_cmd)
        if not isinstance(content, list):
            raise ParseError("Expected a JSON array from pip list.")

        installed = []
        for entry in content:
            if not isinstance(entry, dict):
                continue
            name, version = json_get_str(entry, "name"), json_get_str(entry, "version")
            if name and not self.is_skipped(name):
                installed.append(InstalledPackage(name=name, version=version))
        return installed

    def collect_packages(self, repo_path: str) -> list[Package]:
        """Discover the root project and the installed packages."""
        project = self.get_root_project(repo_path)
        root_name = python_package_name(project.name)
        packages = [self.convert_root_project(project, repo_path)]
        for installed in self.get_installed_packages(repo_path):
            if python_package_name(installed.name) == root_name:
                continue
            packages.append(self.convert_installed_package(installed))
        return packages

    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        """Return the requirement tree reported by pipdeptree below the root project."""
        content = load_json(self.run(self.tree_cmd, repo_path), self.tree_cmd)
        if not isinstance(content, list):
            raise ParseError("Expected a JSON array from pipdeptree.")
        entries = [DependencyTreeEntry.from_json(entry) for entry in content if isinstance(entry, dict)]
        return self.build_requirement_tree(packages[0].name, entries)

    def build_requirement_tree(self, root_name: str, entries: list[DependencyTreeEntry]) -> RequirementNode:
        """Attach the top-level pipdeptree entries to the root project.

        If the project itself is installed, its own dependencies are attached instead of the entry. Skipped
        packages are left out.
        """
        root = RequirementNode(name=root_name, requires=[])
        for entry in entries:
            if self.is_skipped(entry.key):
                continue
            node = entry.to_requirement_node()
            if root.requires is None:
                continue
            if python_package_name(entry.key) == root_name:
                root.requires.extend(node.requires or [])
            else:
                root.requires.append(node)
        return root

    def convert_root_project(self, project: RootProject, repo_path: str) -> Package:
        """Build the root package of the project."""
        name = python_package_name(project.name)
        version = normalize_version(project.version)
        locator = resolve_locator(project.repository, project.homepage, project.name)
        package = Package(
            name=name,
            version=version,
            root=True,
            package_url=locator,
            download_location=locator,
            checksum=resolve_checksum({}, locator),
            supplier=project.supplier,
            local_path=repo_path,
            purl=self.get_purl(name, version),
            homepage=project.homepage,
            comment=project.description,
        )
        apply_license(package, self.license_detector, repo_path, declared=project.license)
        return package

    def convert_installed_package(self, installed: InstalledPackage) -> Package:
        """Build the canonical package of an installed distribution from its PyPI metadata.

        A package that PyPI does not know, e.g., a private one, is described from the pip data alone.

        Raises
        ------
        PackageDataFetchError
            If PyPI answers with any error other than 404 (Not Found).
        """
        try:
            package_data = self.registry.fetch_package_data(installed.name, installed.version)
        except PackageDataFetchError as error:
            if error.status_code != 404:
                raise
            logger.warning("Unable to fetch %s %s from PyPI: %s", installed.name, installed.version, error)
            return self.convert_unknown_package(installed)
        return self.convert_package_data(installed, package_data)

    def convert_package_data(self, installed: InstalledPackage, package_data: PyPIPackageData) -> Package:
        """Build the canonical package of a distribution from its PyPI metadata."""
        info = package_data.info
        name = python_package_name(installed.name)
        version = normalize_version(installed.version or info.version)
        locator = resolve_locator(info.get_source_repository(), info.home_page or info.project_url, installed.name)
        download_location = (
            self.registry.get_download_location(package_data) or info.download_url or info.package_url or locator
        )

        package = Package(
            name=name,
            version=version,
            package_url=locator,
            download_location=download_location,
            checksum=self.registry.get_checksum(package_data),
            supplier=package_data.get_supplier(),
            purl=self.get_purl(name, version),
            homepage=info.home_page,
            comment=info.summary,
        )
        apply_license(package, self.license_detector, "", declared=info.license)
        return package

    def convert_unknown_package(self, installed: InstalledPackage) -> Package:
        """Build the canonical package of a distribution that is not on PyPI."""
        name = python_package_name(installed.name)
        version = normalize_version(installed.version)
        locator = resolve_locator(name=installed.name)
        return Package(
            name=name,
            version=version,
            package_url=locator,
            download_location=locator,
            checksum=resolve_checksum({}, installed.name),
            supplier=Supplier(name=installed.name, type=SupplierType.ORGANIZATION),
            purl=self.get_purl(name, version),
        )

    def get_purl(self, name: str, version: str) -> str:
        """Return the Package URL of a Python distribution."""
        return self.build_purl(name, version)
