# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the Cargo (Rust) ecosystem adapter.

The packages and the resolved dependency graph come from ``cargo metadata``. The sha256 checksums of the
registry packages are read from ``Cargo.lock``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum

from sbomgraph.config.defaults import defaults
from sbomgraph.ecosystems.base import EcosystemAdapter, file_exists, parse_author, read_file
from sbomgraph.errors import ParseError, RootProjectError
from sbomgraph.graph.assembler import RequirementNode
from sbomgraph.json_tools import json_extract, json_get_str, json_get_str_list
from sbomgraph.meta.license import LicenseDetector, apply_license
from sbomgraph.meta.package import Package, Supplier, SupplierType
from sbomgraph.normalizer.checksum import resolve_checksum
from sbomgraph.normalizer.identity import normalize_name, normalize_version
from sbomgraph.normalizer.locator import resolve_locator
from sbomgraph.util import load_json

logger: logging.Logger = logging.getLogger(__name__)

CRATES_IO_DOWNLOAD_URL = "https://crates.io/api/v1/crates/{name}/{version}/download"


class DependencyKind(str, Enum):
    """The kinds of Cargo dependencies."""

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"

    @classmethod
    def from_json(cls, value: object) -> DependencyKind | None:
        """Return the kind of a dependency. Cargo reports normal dependencies with a null kind."""
        if value is None:
            return cls.NORMAL
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown dependency kind %s.", value)
            return None


def _optional_str(entry: dict, key: str) -> str | None:
    value = entry.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class PackageDependency:
    """A dependency declared in the manifest of a package."""

    name: str
    source: str = ""
    req: str = ""
    kind: DependencyKind | None = DependencyKind.NORMAL
    rename: str | None = None
    optional: bool = False
    uses_default_features: bool = True
    features: list[str] = field(default_factory=list)
    target: str | None = None
    registry: str | None = None

    @classmethod
    def from_json(cls, entry: dict) -> PackageDependency:
        """Build the dependency from its JSON object."""
        return cls(
            name=json_get_str(entry, "name"),
            source=json_get_str(entry, "source"),
            req=json_get_str(entry, "req"),
            kind=DependencyKind.from_json(entry.get("kind")),
            rename=_optional_str(entry, "rename"),
            optional=bool(entry.get("optional", False)),
            uses_default_features=bool(entry.get("uses_default_features", True)),
            features=json_get_str_list(entry, "features"),
            target=_optional_str(entry, "target"),
            registry=_optional_str(entry, "registry"),
        )


@dataclass(frozen=True)
class SubPackage:
    """A package of the ``cargo metadata`` output."""

    name: str
    version: str
    id: str
    description: str = ""
    source: str = ""
    dependencies: list[PackageDependency] = field(default_factory=list)
    manifest_path: str = ""
    authors: list[str] = field(default_factory=list)
    repository: str = ""
    homepage: str = ""
    license: str = ""

    @classmethod
    def from_json(cls, entry: dict) -> SubPackage:
        """Build the package from its JSON object."""
        dependencies = entry.get("dependencies")
        return cls(
            name=json_get_str(entry, "name"),
            version=json_get_str(entry, "version"),
            id=json_get_str(entry, "id"),
            description=json_get_str(entry, "description"),
            source=json_get_str(entry, "source"),
            dependencies=(
                [PackageDependency.from_json(dep) for dep in dependencies if isinstance(dep, dict)]
                if isinstance(dependencies, list)
                else []
            ),
            manifest_path=json_get_str(entry, "manifest_path"),
            authors=json_get_str_list(entry, "authors"),
            repository=json_get_str(entry, "repository"),
            homepage=json_get_str(entry, "homepage"),
            license=json_get_str(entry, "license"),
        )


@dataclass(frozen=True)
class NodeDependency:
    """A resolved dependency edge of the ``resolve`` section."""

    name: str
    pkg: str
    kinds: list[DependencyKind | None] = field(default_factory=list)

    @classmethod
    def from_json(cls, entry: dict) -> NodeDependency:
        """Build the edge from its JSON object."""
        dep_kinds = entry.get("dep_kinds")
        return cls(
            name=json_get_str(entry, "name"),
            pkg=json_get_str(entry, "pkg"),
            kinds=(
                [DependencyKind.from_json(kind.get("kind")) for kind in dep_kinds if isinstance(kind, dict)]
                if isinstance(dep_kinds, list)
                else []
            ),
        )

    def is_dev_only(self) -> bool:
        """Return True if the edge only exists for tests, examples and benchmarks."""
        return bool(self.kinds) and all(kind == DependencyKind.DEV for kind in self.kinds)


@dataclass(frozen=True)
class ResolveNode:
    """A node of the ``resolve`` section."""

    id: str
    deps: list[NodeDependency] = field(default_factory=list)

    @classmethod
    def from_json(cls, entry: dict) -> ResolveNode:
        """Build the node from its JSON object."""
        deps = entry.get("deps")
        return cls(
            id=json_get_str(entry, "id"),
            deps=(
                [NodeDependency.from_json(dep) for dep in deps if isinstance(dep, dict)]
                if isinstance(deps, list)
                else []
            ),
        )


@dataclass(frozen=True)
class Metadata:
    """The output of ``cargo metadata``."""

    workspace_root: str = ""
    version: int = 1
    target_directory: str = ""
    workspace_members: list[str] = field(default_factory=list)
    packages: list[SubPackage] = field(default_factory=list)
    resolve_root: str = ""
    resolve_nodes: list[ResolveNode] = field(default_factory=list)

    @classmethod
    def from_json(cls, content: dict) -> Metadata:
        """Build the metadata from the decoded command output."""
        packages = json_extract(content, ["packages"], list) or []
        nodes = json_extract(content, ["resolve", "nodes"], list) or []
        version = content.get("version")
        return cls(
            workspace_root=json_get_str(content, "workspace_root"),
            version=version if isinstance(version, int) else 1,
            target_directory=json_get_str(content, "target_directory"),
            workspace_members=json_get_str_list(content, "workspace_members"),
            packages=[SubPackage.from_json(entry) for entry in packages if isinstance(entry, dict)],
            resolve_root=json_extract(content, ["resolve", "root"], str) or "",
            resolve_nodes=[ResolveNode.from_json(entry) for entry in nodes if isinstance(entry, dict)],
        )

    def get_root_package(self) -> SubPackage | None:
        """Return the package of the project itself.

        The resolved root is preferred, then the first workspace member, then the package whose manifest sits at
        the workspace root.
        """
        by_id = {package.id: package for package in self.packages}
        for package_id in [self.resolve_root] + self.workspace_members:
            if package_id in by_id:
                return by_id[package_id]

        root_manifest = os.path.join(self.workspace_root, "Cargo.toml")
        return next((package for package in self.packages if package.manifest_path == root_manifest), None)


def get_download_location(package: SubPackage, locator: str) -> str:
    """Return the download location of a crate from its source.

    Registry crates are downloaded from crates.io, git crates from their repository. Path crates have no
    source, and the locator is used instead.
    """
    if package.source.startswith("registry+"):
        return CRATES_IO_DOWNLOAD_URL.format(name=package.name, version=package.version)
    if package.source.startswith("git+"):
        return package.source.removeprefix("git+").split("#")[0].split("?")[0]
    return locator


class Cargo(EcosystemAdapter):
    """This class contains the adapter of the Cargo ecosystem."""

    def __init__(self, license_detector: LicenseDetector | None = None) -> None:
        super().__init__(
            name="cargo", purl_type="cargo", manifest_files=["Cargo.toml"], license_detector=license_detector
        )
        self.lock_file = "Cargo.lock"
        self.metadata_cmd = "cargo metadata --format-version 1"
        self.include_dev = False
        self._metadata: Metadata | None = None

    def load_defaults(self) -> None:
        """Load the default values from defaults.ini."""
        super().load_defaults()
        if not defaults.has_section(self.section_name):
            return
        section = defaults[self.section_name]
        self.lock_file = section.get("lock_file", self.lock_file)
        self.metadata_cmd = section.get("metadata_cmd", self.metadata_cmd)
        self.include_dev = section.getboolean("include_dev", fallback=self.include_dev)

    def get_metadata(self, repo_path: str) -> Metadata:
        """Run ``cargo metadata`` and decode its output.

        Raises
        ------
        CommandError
            If Cargo fails.
        ParseError
            If the output is not a JSON object.
        """
        content = load_json(self.run(self.metadata_cmd, repo_path), self.metadata_cmd)
        if not isinstance(content, dict):
            raise ParseError("Expected a JSON object from cargo metadata.")
        return Metadata.from_json(content)

    def read_lock_checksums(self, repo_path: str) -> dict[tuple[str, str], str]:
        """Return the sha256 checksums of ``Cargo.lock``, keyed by crate name and version.

        Raises
        ------
        ParseError
            If the lock file is not valid TOML.
        """
        if not file_exists(repo_path, self.lock_file):
            logger.debug("No %s in %s.", self.lock_file, repo_path)
            return {}

        try:
            content = tomllib.loads(read_file(repo_path, self.lock_file))
        except tomllib.TOMLDecodeError as error:
            raise ParseError(f"Unable to decode {self.lock_file}: {error}") from error

        checksums: dict[tuple[str, str], str] = {}
        for entry in content.get("package", []):
            if isinstance(entry, dict) and isinstance(entry.get("checksum"), str):
                checksums[(str(entry.get("name", "")), str(entry.get("version", "")))] = entry["checksum"]
        return checksums

    def collect_packages(self, repo_path: str) -> list[Package]:
        """Discover the root crate and every crate of the resolved dependency graph."""
        metadata = self.get_metadata(repo_path)
        self._metadata = metadata
        root_package = metadata.get_root_package()
        if root_package is None:
            raise RootProjectError(f"Unable to find the root crate at {repo_path}.")

        checksums = self.read_lock_checksums(repo_path)
        packages = [self.convert_package(root_package, checksums, root=True)]
        for sub_package in metadata.packages:
            if sub_package.id != root_package.id:
                packages.append(self.convert_package(sub_package, checksums))
        return packages

    def get_requirement_tree(self, repo_path: str, packages: list[Package]) -> RequirementNode | None:
        """Return the resolved dependency graph of the root crate.

        Nodes are shared between their parents, so the tree may contain cycles.
        """
        metadata = self._metadata or self.get_metadata(repo_path)
        root_package = metadata.get_root_package()
        if root_package is None or not metadata.resolve_nodes:
            return None
        return self.build_requirement_tree(metadata, root_package.id, self.include_dev)

    @staticmethod
    def build_requirement_tree(metadata: Metadata, root_id: str, include_dev: bool = False) -> RequirementNode | None:
        """Build the requirement tree of a crate from the ``resolve`` section.

        Parameters
        ----------
        metadata : Metadata
            The decoded ``cargo metadata`` output.
        root_id : str
            The package id of the root crate.
        include_dev : bool
            Whether dev-dependencies are part of the tree.
        """
        names = {package.id: package.name for package in metadata.packages}
        requirement_nodes = {
            node.id: RequirementNode(name=names[node.id], requires=[])
            for node in metadata.resolve_nodes
            if node.id in names
        }
        for resolve_node in metadata.resolve_nodes:
            parent = requirement_nodes.get(resolve_node.id)
            if parent is None or parent.requires is None:
                continue
            for dep in resolve_node.deps:
                if dep.is_dev_only() and not include_dev:
                    continue
                if child := requirement_nodes.get(dep.pkg):
                    parent.requires.append(child)

        return requirement_nodes.get(root_id)

    def convert_package(
        self, sub_package: SubPackage, checksums: dict[tuple[str, str], str], root: bool = False
    ) -> Package:
        """Build the canonical package of a crate."""
        version = normalize_version(sub_package.version)
        locator = resolve_locator(sub_package.repository, sub_package.homepage, sub_package.name)
        local_path = os.path.dirname(sub_package.manifest_path)

        package = Package(
            name=normalize_name(sub_package.name),
            version=version,
            root=root,
            package_url=locator,
            download_location=get_download_location(sub_package, locator),
            checksum=resolve_checksum(
                {"sha256": checksums.get((sub_package.name, sub_package.version), "")}, locator
            ),
            supplier=(
                parse_author(sub_package.authors[0])
                if sub_package.authors
                else Supplier(name=sub_package.name, type=SupplierType.ORGANIZATION)
            ),
            local_path=local_path,
            purl=self.build_purl(sub_package.name, version),
            homepage=sub_package.homepage,
            comment=sub_package.description,
        )
        apply_license(package, self.license_detector, local_path, declared=sub_package.license)
        return package
