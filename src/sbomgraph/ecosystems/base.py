# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the base class of the ecosystem adapters."""

import logging
import os
import re
from abc import ABC, abstractmethod
from collections.abc import Callable

from packageurl import PackageURL

from sbomgraph.config.defaults import defaults
from sbomgraph.errors import ParseError, RootProjectError
from sbomgraph.graph.assembler import RequirementNode, assemble_graph, find_unreachable
from sbomgraph.meta.license import LicenseDetector, NoneLicenseDetector
from sbomgraph.meta.package import Package, Supplier, SupplierType
from sbomgraph.normalizer.identity import normalize_name
from sbomgraph.util import run_command

logger: logging.Logger = logging.getLogger(__name__)

AUTHOR_PATTERN = re.compile(r"^\s*(?P<name>[^<]*?)\s*(?:<(?P<email>[^>]*)>)?\s*$")


def file_exists(path: str, file_name: str) -> bool:
    """Return True if ``file_name`` exists directly under the directory ``path``."""
    return os.path.isfile(os.path.join(path, file_name))


def read_file(path: str, file_name: str) -> str:
    """Return the content of a file under ``path``.

    Raises
    ------
    OSError
        If the file cannot be read.
    ParseError
        If the file is not UTF-8 encoded.
    """
    try:
        with open(os.path.join(path, file_name), encoding="utf-8") as file:
            return file.read()
    except UnicodeDecodeError as error:
        raise ParseError(f"Unable to decode {file_name}: {error}") from error


def parse_author(author: str) -> Supplier:
    """Return the supplier described by an ``Name <email>`` author string.

    Examples
    --------
    >>> parse_author("Jane Doe <jane@example.com>")
    Supplier(name='Jane Doe', email='jane@example.com', type=<SupplierType.PERSON: 'Person'>)
    >>> parse_author("The Rust Project Developers").type
    <SupplierType.ORGANIZATION: 'Organization'>
    """
    match = AUTHOR_PATTERN.match(author)
    name = match.group("name") if match else author.strip()
    email = (match.group("email") or "").strip() if match else ""
    return Supplier(name=name or email, email=email, type=SupplierType.PERSON if email else SupplierType.ORGANIZATION)


class EcosystemAdapter(ABC):
    """This abstract class is used to implement the adapters of package-manager ecosystems.

    An adapter produces a flat collection of canonical packages, whose first element is the scanned project
    itself, and optionally a requirement tree. The graph assembler turns both into the dependency graph.
    """

    def __init__(
        self,
        name: str,
        purl_type: str,
        manifest_files: list[str],
        license_detector: LicenseDetector | None = None,
        name_normalizer: Callable[[str], str] = normalize_name,
    ) -> None:
        """Initialize the adapter.

        Parameters
        ----------
        name : str
            The name of the ecosystem.
        purl_type : str
            The Package URL type of the packages of this ecosystem.
        manifest_files : list[str]
            The files whose presence shows that a project uses this ecosystem.
        license_detector : LicenseDetector | None
            The detector used to find licenses in package sources on disk.
        name_normalizer : Callable[[str], str]
            The function that turns ecosystem-native names into package names.
        """
        self.name = name
        self.purl_type = purl_type
        self.manifest_files = manifest_files
        self.license_detector: LicenseDetector = license_detector or NoneLicenseDetector()
        self.name_normalizer = name_normalizer

    @property
    def section_name(self) -> str:
        """Return the section of ``defaults.ini`` for this ecosystem."""
        return f"ecosystem.{self.name}"

    def load_defaults(self) -> None:
        """Load the manifest files of this ecosystem from ``defaults.ini``.

        Subclasses load their own options on top of this.
        """
        if not defaults.has_section(self.section_name):
            return
        manifest_files = defaults.get_list(self.section_name, "manifest_file", fallback=[])
        if manifest_files:
            self.manifest_files = manifest_files

    def is_detected(self, repo_path: str) -> bool:
        """Return True if the project at ``repo_path`` uses this ecosystem."""
        return any(file_exists(repo_path, file_name) for file_name in self.manifest_files)

    def run(self, command: str, repo_path: str) -> str:
        """Run a package manager command in the project directory and return its output.

        Raises
        ------
        CommandError
            If the command fails.
        """
        logger.info("Running %s for the %s ecosystem.", command, self.name)
        return run_command(command, cwd=repo_path)

    def build_purl(self, name: str, version: str = "", namespace: str = "") -> str:
        """Return the Package URL of a package of this ecosystem.

        Raises
        ------
        ParseError
            If the name is empty or the components do not form a valid Package URL.
        """
        try:
            return PackageURL(
                type=self.purl_type, namespace=namespace or None, name=name, version=version or None
            ).to_string()
        except ValueError as error:
            raise ParseError(f"Invalid Package URL for {namespace}/{name}@{version}: {error}") from error

    @abstractmethod
    def collect_packages(self, repo_path: str) -> list[Package]:
        """Discover the packages of the project.

        Parameters
        ----------
        repo_path : str
            The path to the project.

        Returns
        -------
        list[Package]
            The packages. The first one is the root package of the project itself.
        """

    @abstractmethod
    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        """Return the requirement tree of the project, or None if the ecosystem does not expose one.

        Parameters
        ----------
        repo_path : str
            The path to the project.
        packages : list[Package]
            The packages returned by ``collect_packages``.
        """

    def build_graph(self, repo_path: str) -> Package:
        """Discover the packages of the project and assemble its dependency graph.

        When there is no requirement tree, every discovered package is attached directly to the root package.

        Parameters
        ----------
        repo_path : str
            The path to the project.

        Returns
        -------
        Package
            The root package of the graph.

        Raises
        ------
        RootProjectError
            If the root package is not discovered.
        """
        packages = self.collect_packages(repo_path)
        if not packages or not packages[0].root:
            raise RootProjectError(f"Unable to find the root project of the {self.name} ecosystem at {repo_path}.")
        root_package = packages[0]
        logger.info("Discovered %s packages for %s.", len(packages), root_package.name)

        tree = self.get_requirement_tree(repo_path, packages)
        if tree is None:
            logger.debug("No requirement tree for %s, attaching all packages to the root.", root_package.name)
            tree = RequirementNode(
                name=root_package.name,
                requires=[RequirementNode(name=package.name) for package in packages[1:]],
            )

        root = assemble_graph(packages, tree, name_normalizer=self.name_normalizer)
        if root is None:
            logger.warning("The requirement tree does not start at %s.", root_package.name)
            root = root_package.copy_for_attach()

        for package in find_unreachable(packages, root):
            logger.debug("The package %s %s is not required by %s.", package.name, package.version, root.name)

        return root
